"""Receipt number generation.

Receipt numbers are the external reference key handed to uploaders, e.g.
``EF1767225600000-3FA85F64``. A candidate that already exists is not an
error: the generator appends a counter suffix (``-1``, ``-2``, ...) until it
finds a free value or runs out of attempts.
"""

import logging
import time
import uuid
from typing import Callable, Optional

from .errors import ReceiptNumberExhaustedError

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def _random_token() -> str:
    return uuid.uuid4().hex[:8].upper()


class ReceiptNumberGenerator:
    """Produce receipt numbers unique against an ``exists`` lookup.

    The clock and token sources are injectable so collisions can be forced
    in tests.
    """

    def __init__(
        self,
        prefix: str = "EF",
        max_attempts: int = 100,
        clock: Optional[Callable[[], int]] = None,
        token_factory: Optional[Callable[[], str]] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.prefix = prefix
        self.max_attempts = max_attempts
        self._clock = clock or _epoch_millis
        self._token_factory = token_factory or _random_token

    def candidate(self) -> str:
        return f"{self.prefix}{self._clock()}-{self._token_factory()}"

    def generate(self, exists: Callable[[str], bool]) -> str:
        """Return a receipt number for which ``exists`` is False.

        Raises:
            ReceiptNumberExhaustedError: After max_attempts taken candidates
        """
        base = self.candidate()
        candidate = base
        for attempt in range(1, self.max_attempts + 1):
            if not exists(candidate):
                if attempt > 1:
                    logger.info(
                        f"Receipt number collision resolved after {attempt - 1} retries",
                        extra={"receipt_number": candidate},
                    )
                return candidate
            candidate = f"{base}-{attempt}"

        logger.error(
            f"Receipt number generation exhausted after {self.max_attempts} attempts",
            extra={"receipt_number": base},
        )
        raise ReceiptNumberExhaustedError(
            f"Could not allocate a unique receipt number after {self.max_attempts} attempts"
        )
