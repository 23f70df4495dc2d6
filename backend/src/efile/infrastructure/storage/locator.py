"""Storage locator layout shared by blob store adapters."""

import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Optional


def generate_locator(group_key: str, extension: str, now: Optional[datetime] = None) -> str:
    """Build a fresh locator: ``{year}/{month}/{group_key}/{uuid}.{ext}``.

    Example:
        >>> generate_locator("42", "pdf").endswith(".pdf")
        True
    """
    now = now or datetime.now(timezone.utc)
    group = str(group_key).strip() or "general"
    return f"{now.year}/{now.month:02d}/{group}/{uuid.uuid4()}.{extension}"


def is_safe_locator(locator: str) -> bool:
    """Reject absolute locators and any that climb out of the store root."""
    if not locator or "\x00" in locator:
        return False
    path = PurePosixPath(locator.replace("\\", "/"))
    return not path.is_absolute() and ".." not in path.parts
