"""Integration tests for document search and listing"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from efile.documents import DocumentSearchCriteria
from efile.domain.documents import DocumentStatus, DocumentType, NotFoundError, ValidationError

S = DocumentStatus


@pytest.fixture
def catalog(lifecycle, upload, people):
    """Six documents in mixed states, uploaded one minute apart.

    Returns the DocumentResponses in upload order.
    """
    legal_approved = upload(title="Supplier Contract", document_type="LEGAL_DOCUMENT")
    legal_draft = upload(title="NDA Draft", document_type="LEGAL_DOCUMENT")
    finance_approved = upload(title="Q1 Balance Sheet", document_type="FINANCIAL_REPORT")
    audit_submitted = upload(title="Internal Audit 2025", document_type="AUDIT_REPORT")
    general_other_case = upload(
        title="Meeting Notes", document_type="GENERAL", case_id=people.other_case_id
    )
    legal_rejected = upload(title="Lease contract renewal", document_type="LEGAL_DOCUMENT")

    for document in (legal_approved, finance_approved, legal_rejected):
        lifecycle.submit(document.id, people.accountant)
        lifecycle.start_review(document.id, people.cfo)
    lifecycle.approve(legal_approved.id, people.cfo)
    lifecycle.approve(finance_approved.id, people.cfo)
    lifecycle.reject(legal_rejected.id, people.cfo, "Wrong counterparty named")
    lifecycle.submit(audit_submitted.id, people.accountant)

    return [legal_approved, legal_draft, finance_approved, audit_submitted, general_other_case, legal_rejected]


def ids(page_or_list):
    items = page_or_list.items if hasattr(page_or_list, "items") else page_or_list
    return [item.id for item in items]


class TestSearch:
    """Test criteria composition, ordering and paging"""

    def test_no_criteria_returns_everything_newest_first(self, lifecycle, catalog):
        page = lifecycle.search()

        assert page.total == 6
        assert ids(page) == [d.id for d in reversed(catalog)]
        stamps = [item.uploaded_at for item in page.items]
        assert stamps == sorted(stamps, reverse=True)

    def test_status_and_type_is_the_intersection(self, lifecycle, catalog):
        legal_approved = catalog[0]

        page = lifecycle.search(status=S.APPROVED, type=DocumentType.LEGAL_DOCUMENT)

        assert ids(page) == [legal_approved.id]
        assert page.total == 1

    def test_criteria_object_and_keywords_agree(self, lifecycle, catalog):
        criteria = DocumentSearchCriteria(type=DocumentType.LEGAL_DOCUMENT, status=S.DRAFT)
        assert ids(lifecycle.search(criteria)) == ids(lifecycle.search(status="DRAFT", type="LEGAL_DOCUMENT"))

    def test_title_keyword_is_case_insensitive_substring(self, lifecycle, catalog):
        page = lifecycle.search(title_keyword="CONTRACT")
        assert set(ids(page)) == {catalog[0].id, catalog[5].id}

    def test_title_keyword_wildcards_are_literal(self, lifecycle, catalog):
        assert lifecycle.search(title_keyword="%").total == 0

    @pytest.mark.parametrize("keyword", ["école", "ÉCOLE", "ÉcOlE cOnTrAcT"])
    def test_title_keyword_folds_non_ascii_letters(self, lifecycle, upload, keyword):
        accented = upload(title="École Contract")
        upload(title="Ecole Contract")

        page = lifecycle.search(title_keyword=keyword)

        assert ids(page) == [accented.id]

    def test_blank_keyword_is_ignored(self, lifecycle, catalog):
        assert lifecycle.search(title_keyword="   ").total == 6

    def test_case_filter(self, lifecycle, catalog, people):
        page = lifecycle.search(case_id=people.other_case_id)
        assert ids(page) == [catalog[4].id]

    def test_upload_time_bounds_are_inclusive(self, lifecycle, catalog):
        start = catalog[1].uploaded_at
        end = catalog[3].uploaded_at

        page = lifecycle.search(uploaded_after=start, uploaded_before=end)

        assert ids(page) == [catalog[3].id, catalog[2].id, catalog[1].id]

    def test_lower_bound_only(self, lifecycle, catalog):
        page = lifecycle.search(uploaded_after=catalog[5].uploaded_at + timedelta(seconds=1))
        assert page.total == 0

    def test_all_filters_combined(self, lifecycle, catalog, people):
        page = lifecycle.search(
            status=S.REJECTED,
            type=DocumentType.LEGAL_DOCUMENT,
            case_id=people.case_id,
            title_keyword="lease",
            uploaded_after=catalog[0].uploaded_at,
            uploaded_before=catalog[5].uploaded_at,
        )
        assert ids(page) == [catalog[5].id]

    def test_pagination(self, lifecycle, catalog):
        first = lifecycle.search(page=1, per_page=4)
        second = lifecycle.search(page=2, per_page=4)

        assert first.total == second.total == 6
        assert len(first.items) == 4
        assert len(second.items) == 2
        assert first.pages == 2
        assert not set(ids(first)) & set(ids(second))

    @pytest.mark.parametrize("page,per_page", [(0, 10), (1, 0), (1, 101)])
    def test_bad_paging_arguments(self, lifecycle, page, per_page):
        with pytest.raises(ValidationError):
            lifecycle.search(page=page, per_page=per_page)

    def test_unknown_filter_is_rejected(self, lifecycle):
        with pytest.raises(ValidationError):
            lifecycle.search(colour="red")

    def test_inverted_date_range_is_rejected(self, lifecycle, catalog):
        with pytest.raises(ValidationError):
            lifecycle.search(uploaded_after=catalog[5].uploaded_at, uploaded_before=catalog[0].uploaded_at)

    def test_naive_bound_is_read_as_utc(self, lifecycle, catalog):
        naive_start = catalog[1].uploaded_at.astimezone(timezone.utc).replace(tzinfo=None)

        page = lifecycle.search(uploaded_after=naive_start, uploaded_before=catalog[3].uploaded_at)

        assert ids(page) == [catalog[3].id, catalog[2].id, catalog[1].id]

    def test_inverted_mixed_bounds_are_rejected(self, lifecycle):
        with pytest.raises(ValidationError):
            lifecycle.search(
                uploaded_after=datetime(2026, 12, 1),
                uploaded_before=datetime(2026, 1, 1, tzinfo=timezone.utc),
            )

    def test_offset_bounds_compare_in_utc(self):
        criteria = DocumentSearchCriteria(
            uploaded_after=datetime(2026, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2))),
            uploaded_before=datetime(2026, 1, 1, 9, 0),
        )
        assert criteria.uploaded_after == datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert criteria.uploaded_before.tzinfo == timezone.utc


class TestListingAndLookup:
    """Test listing by case, counting and receipt lookup"""

    def test_list_by_case(self, lifecycle, catalog, people):
        listed = lifecycle.list_by_case(people.case_id)
        assert len(listed) == 5
        assert catalog[4].id not in ids(listed)

    def test_list_by_missing_case(self, lifecycle, people):
        with pytest.raises(NotFoundError):
            lifecycle.list_by_case(uuid4())

    def test_count_by_status(self, lifecycle, catalog):
        counts = lifecycle.count_by_status()
        assert counts == {
            S.DRAFT: 2,
            S.SUBMITTED: 1,
            S.UNDER_REVIEW: 0,
            S.APPROVED: 2,
            S.REJECTED: 1,
            S.WITHDRAWN: 0,
        }

    def test_get_by_receipt(self, lifecycle, catalog):
        found = lifecycle.get_by_receipt(catalog[2].receipt_number)
        assert found.id == catalog[2].id
        assert found.status == S.APPROVED

    def test_get_by_unknown_receipt(self, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.get_by_receipt("EF0-00000000")

    def test_allowed_transitions(self, lifecycle, catalog):
        assert lifecycle.allowed_transitions(catalog[5].id) == [S.DRAFT, S.WITHDRAWN]
        assert lifecycle.allowed_transitions(catalog[0].id) == []
