"""Integration tests for history, receipts and downloads"""

from uuid import uuid4

import pytest

from efile.documents import format_file_size
from efile.domain.documents import DocumentStatus, NotFoundError

S = DocumentStatus


class TestHistory:
    """Test the chronological history view"""

    def test_history_of_missing_document(self, reporting):
        with pytest.raises(NotFoundError):
            reporting.get_history(uuid4())

    def test_history_includes_routing_notes(self, lifecycle, reporting, upload, people):
        document = upload(document_type="INVESTMENT_REPORT")
        lifecycle.submit(document.id, people.accountant)

        history = reporting.get_history(document.id)

        assert [h.status for h in history] == [S.DRAFT, S.SUBMITTED, S.SUBMITTED]
        assert "routed to Finance department" in history[-1].comment


class TestReceipt:
    """Test the fixed-layout receipt"""

    def test_receipt_for_draft(self, reporting, upload):
        document = upload(title="Q1 Review", content=b"x" * 2048)

        receipt = reporting.generate_receipt(document.id)

        assert f"Receipt Number: {document.receipt_number}" in receipt
        assert f"Document ID: {document.id}" in receipt
        assert "Document Title: Q1 Review" in receipt
        assert "Document Type: LEGAL_DOCUMENT" in receipt
        assert "File Size: 2.0 KB" in receipt
        assert "Status: DRAFT" in receipt
        assert "Uploaded By: Alex Ledger" in receipt
        assert "Email: accountant@efile.test" in receipt
        assert "Upload Date: 2026-01-05 09:00:00 UTC" in receipt
        assert "Case Title: Annual Filing 2026" in receipt
        assert "Review Decision:" not in receipt
        assert "Rejection Reason" not in receipt

    def test_receipt_after_rejection(self, lifecycle, reporting, upload, people):
        document = upload()
        lifecycle.submit(document.id, people.accountant)
        lifecycle.start_review(document.id, people.cfo)
        lifecycle.reject(document.id, people.cfo, "Missing signature page")

        receipt = reporting.generate_receipt(document.id)

        assert "Status: REJECTED" in receipt
        assert "Reviewed By: Frank Finance" in receipt
        assert "Rejection Reason: Missing signature page" in receipt

    def test_receipt_is_stable(self, reporting, upload):
        document = upload()
        assert reporting.generate_receipt(document.id) == reporting.generate_receipt(document.id)

    def test_receipt_for_missing_document(self, reporting):
        with pytest.raises(NotFoundError):
            reporting.generate_receipt(uuid4())

    @pytest.mark.parametrize(
        "size,expected",
        [(None, "Unknown"), (0, "0 B"), (1023, "1023 B"), (1536, "1.5 KB"), (3 * 1024 * 1024, "3.0 MB")],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected


class TestDownload:
    """Test content download"""

    def test_download_returns_original_name_and_bytes(self, reporting, upload):
        document = upload(filename="Q1 review.pdf", content=b"%PDF-1.4 body")

        download = reporting.download(document.id)

        assert download.filename == "Q1_review.pdf"
        assert download.content == b"%PDF-1.4 body"
        assert download.size_bytes == len(b"%PDF-1.4 body")

    def test_download_missing_document(self, reporting):
        with pytest.raises(NotFoundError):
            reporting.download(uuid4())

    def test_download_with_missing_content(self, reporting, upload, blob_store):
        document = upload()
        blob_store.delete(document.file_path)
        with pytest.raises(NotFoundError):
            reporting.download(document.id)
