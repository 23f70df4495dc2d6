"""Unit tests for upload, title and rejection reason validation"""

import pytest

from efile.domain.documents import ValidationError
from efile.domain.documents.validation import (
    DEFAULT_MAX_FILE_SIZE,
    ensure_valid_rejection_reason,
    ensure_valid_title,
    ensure_valid_upload,
    extract_extension,
    sanitize_filename,
    validate_extension,
    validate_file_size,
    validate_filename,
)


class TestFileSizeValidation:
    """Test file size validation"""

    def test_valid_file_size(self):
        assert validate_file_size(1024) == (True, None)

    def test_max_file_size_boundary(self):
        """Test file exactly at max size is valid"""
        assert validate_file_size(DEFAULT_MAX_FILE_SIZE) == (True, None)

    def test_file_size_exceeds_max(self):
        is_valid, error = validate_file_size(DEFAULT_MAX_FILE_SIZE + 1)
        assert is_valid is False
        assert "exceeds maximum size" in error

    def test_empty_file(self):
        is_valid, error = validate_file_size(0)
        assert is_valid is False
        assert "empty" in error

    def test_custom_max_size(self):
        assert validate_file_size(200, max_size=100)[0] is False
        assert validate_file_size(100, max_size=100)[0] is True


class TestFilenameValidation:
    """Test filename validation"""

    def test_valid_filename(self):
        assert validate_filename("quarterly-report.pdf") == (True, None)

    @pytest.mark.parametrize(
        "filename",
        ["", "   ", "../etc/passwd.pdf", "dir/file.pdf", "dir\\file.pdf", "bad\x00name.pdf"],
    )
    def test_invalid_filenames(self, filename):
        is_valid, error = validate_filename(filename)
        assert is_valid is False
        assert error

    def test_filename_too_long(self):
        is_valid, error = validate_filename("a" * 252 + ".pdf")
        assert is_valid is False
        assert "255" in error


class TestExtensionValidation:
    """Test the extension allow-list"""

    @pytest.mark.parametrize("filename", ["a.pdf", "b.DOCX", "c.xlsx", "d.png"])
    def test_default_allowed_extensions(self, filename):
        assert validate_extension(filename) == (True, None)

    @pytest.mark.parametrize("filename", ["a.exe", "b.csv", "noextension", ".hidden"])
    def test_rejected_extensions(self, filename):
        assert validate_extension(filename)[0] is False

    def test_custom_allow_list(self):
        assert validate_extension("notes.txt", allowed_extensions={"txt"}) == (True, None)
        assert validate_extension("notes.pdf", allowed_extensions={"txt"})[0] is False

    def test_extract_extension_lowercases(self):
        assert extract_extension("Budget.XLSX") == "xlsx"
        assert extract_extension("archive.tar.gz") == "gz"
        assert extract_extension("README") is None


class TestSanitizeFilename:
    """Test filename sanitization"""

    def test_strips_directories(self):
        assert sanitize_filename("../../filing.pdf") == "filing.pdf"

    def test_replaces_special_characters(self):
        assert sanitize_filename("filing (copy).pdf") == "filing_copy_.pdf"

    def test_truncates_keeping_extension(self):
        result = sanitize_filename("a" * 300 + ".pdf")
        assert len(result) == 255
        assert result.endswith(".pdf")


class TestEnsureValidUpload:
    """Test the combined upload check"""

    def test_returns_extension(self):
        assert ensure_valid_upload("Scan.PNG", 10) == "png"

    def test_oversized_upload_raises(self):
        with pytest.raises(ValidationError, match="exceeds maximum size"):
            ensure_valid_upload("big.pdf", 11, max_size=10)

    def test_unsupported_extension_raises(self):
        with pytest.raises(ValidationError, match="Unsupported file type"):
            ensure_valid_upload("virus.exe", 10)

    def test_empty_upload_raises(self):
        with pytest.raises(ValidationError, match="empty"):
            ensure_valid_upload("empty.pdf", 0)


class TestTitleAndReasonValidation:
    """Test title and rejection reason rules"""

    def test_title_is_stripped(self):
        assert ensure_valid_title("  Q1 Review  ") == "Q1 Review"

    @pytest.mark.parametrize("title", [None, "", "   \t"])
    def test_blank_title_raises(self, title):
        with pytest.raises(ValidationError, match="Title is required"):
            ensure_valid_title(title)

    def test_title_too_long_raises(self):
        with pytest.raises(ValidationError):
            ensure_valid_title("x" * 192)

    def test_reason_at_minimum_length_is_accepted(self):
        assert ensure_valid_rejection_reason("0123456789") == "0123456789"

    def test_reason_length_ignores_surrounding_whitespace(self):
        assert ensure_valid_rejection_reason("  0123456789  ") == "0123456789"
        with pytest.raises(ValidationError):
            ensure_valid_rejection_reason("  abcdefg   ")

    @pytest.mark.parametrize("reason", [None, "", "short", "123456789", "   abc     "])
    def test_short_reason_raises(self, reason):
        with pytest.raises(ValidationError, match="at least 10 characters"):
            ensure_valid_rejection_reason(reason)

    def test_custom_minimum_length(self):
        with pytest.raises(ValidationError):
            ensure_valid_rejection_reason("four", min_length=5)
        assert ensure_valid_rejection_reason("fives", min_length=5) == "fives"
