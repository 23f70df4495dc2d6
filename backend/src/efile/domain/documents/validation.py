"""Input validation for document uploads and review decisions."""

import os
import re
from typing import Iterable, Optional, Tuple

from .errors import ValidationError

# Defaults mirror Settings; callers normally pass the configured values
DEFAULT_ALLOWED_EXTENSIONS = frozenset({"pdf", "docx", "xlsx", "png"})
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_TITLE_LENGTH = 191
MAX_FILENAME_LENGTH = 255


def extract_extension(filename: str) -> Optional[str]:
    """Return the lower-cased extension, or None if the name has none.

    Example:
        >>> extract_extension('Budget.XLSX')
        'xlsx'
        >>> extract_extension('.bashrc') is None
        True
    """
    name = os.path.basename(filename or "")
    dot_index = name.rfind(".")
    if dot_index <= 0 or dot_index == len(name) - 1:
        return None
    return name[dot_index + 1:].lower()


def validate_file_size(size_bytes: int, max_size: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Example:
        >>> validate_file_size(1024)
        (True, None)
        >>> validate_file_size(0)
        (False, 'File is empty (0 bytes)')
    """
    if max_size is None:
        max_size = DEFAULT_MAX_FILE_SIZE

    if size_bytes <= 0:
        return False, "File is empty (0 bytes)"

    if size_bytes > max_size:
        return False, f"File exceeds maximum size of {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def validate_filename(filename: str) -> Tuple[bool, Optional[str]]:
    """Validate a client-supplied filename.

    Validation rules:
    - Not empty
    - Max 255 characters
    - No path traversal (../, ..\\) or directory separators
    - No null bytes or control characters
    """
    if not filename or len(filename.strip()) == 0:
        return False, "Filename cannot be empty"

    if len(filename) > MAX_FILENAME_LENGTH:
        return False, f"Filename exceeds {MAX_FILENAME_LENGTH} characters (got {len(filename)})"

    if ".." in filename or "/" in filename or "\\" in filename:
        return False, "Filename contains path traversal or directory separators"

    if any(ord(c) < 32 for c in filename):
        return False, "Filename contains control characters"

    return True, None


def validate_extension(
    filename: str,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> Tuple[bool, Optional[str]]:
    allowed = {ext.lower() for ext in (allowed_extensions or DEFAULT_ALLOWED_EXTENSIONS)}
    extension = extract_extension(filename)
    if extension is None:
        return False, "File must have a valid extension"
    if extension not in allowed:
        return False, f"Unsupported file type '.{extension}'. Allowed: {', '.join(sorted(allowed))}"
    return True, None


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage

    Example:
        >>> sanitize_filename('../../filing.pdf')
        'filing.pdf'
        >>> sanitize_filename('filing (copy).pdf')
        'filing_copy_.pdf'
    """
    filename = os.path.basename(filename)
    filename = re.sub(r"[^\w\s.-]", "_", filename)
    filename = re.sub(r"[\s_]+", "_", filename)

    if len(filename) > MAX_FILENAME_LENGTH:
        name, ext = os.path.splitext(filename)
        filename = name[:MAX_FILENAME_LENGTH - len(ext)] + ext

    return filename


def ensure_valid_upload(
    filename: str,
    size_bytes: int,
    max_size: Optional[int] = None,
    allowed_extensions: Optional[Iterable[str]] = None,
) -> str:
    """Run every file check and return the normalized extension.

    Raises:
        ValidationError: With the first failing rule's message
    """
    for is_valid, error in (
        validate_filename(filename),
        validate_extension(filename, allowed_extensions),
        validate_file_size(size_bytes, max_size),
    ):
        if not is_valid:
            raise ValidationError(error)
    return extract_extension(filename)


def ensure_valid_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise ValidationError("Title is required")
    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title exceeds {MAX_TITLE_LENGTH} characters (got {len(title)})")
    return title


def ensure_valid_rejection_reason(reason: Optional[str], min_length: int = 10) -> str:
    """Return the trimmed reason, requiring at least min_length characters.

    Surrounding whitespace does not count toward the minimum.
    """
    if reason is None or not reason.strip() or len(reason.strip()) < min_length:
        raise ValidationError(f"Rejection reason must be at least {min_length} characters")
    return reason.strip()
