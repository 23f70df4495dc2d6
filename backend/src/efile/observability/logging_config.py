"""Structured JSON logging for the lifecycle engine.

Embedding applications call configure_logging() once at startup. Every
record is stamped with the active correlation id, and the lifecycle extras
(document, actor, statuses, receipt, storage key) are lifted into the JSON
payload so one document's trail can be filtered out of a mixed log stream.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from ..config import get_settings
from .correlation import get_correlation_id

# Extra attributes copied into the JSON payload when present on a record
EXTRA_FIELDS = (
    "document_id",
    "actor_id",
    "from_status",
    "to_status",
    "receipt_number",
    "department",
    "storage_key",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"

NOISY_LOGGERS = ("sqlalchemy.engine", "botocore", "boto3", "urllib3")


class CorrelationIDFilter(logging.Filter):
    """Stamp records with the correlation id of the running operation."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, keyed for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None) or get_correlation_id(),
        }
        payload.update(
            {name: str(getattr(record, name)) for name in EXTRA_FIELDS if hasattr(record, name)}
        )

        if record.exc_info:
            payload["error"] = str(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload)


def configure_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> logging.Handler:
    """Install a single stdout handler on the root logger.

    Arguments left as None fall back to LOG_LEVEL and LOG_JSON from the
    settings. Returns the installed handler.
    """
    if level is None or json_format is None:
        settings = get_settings()
        level = level or settings.LOG_LEVEL
        json_format = settings.LOG_JSON if json_format is None else json_format

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    handler.addFilter(CorrelationIDFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
