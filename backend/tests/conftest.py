"""Pytest fixtures for the document lifecycle engine.

Provides reusable test fixtures for:
- In-memory SQLite database, recreated for every test
- Departments, users (one per role) and cases
- Actors for each role, as handed in by an authentication layer
- Local blob store on a temporary directory
- Lifecycle and reporting services with a deterministic clock

Usage:
    def test_submit(lifecycle, people, upload):
        draft = upload()
        submitted = lifecycle.submit(draft.id, people.accountant)
        assert submitted.status == DocumentStatus.SUBMITTED
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Generator

import pytest
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from efile.auth import Actor
from efile.config import Settings
from efile.database import create_db_engine, make_session_factory
from efile.documents import DocumentLifecycleService, DocumentReportingService
from efile.infrastructure.storage import LocalBlobStore
from efile.models import Base, Case, Department, User

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n%%EOF\n"


class TickingClock:
    """Clock that advances one minute on every call.

    Makes upload order (and therefore search order) deterministic.
    """

    def __init__(self, start: datetime = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database per test.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    engine = create_db_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> sessionmaker:
    return make_session_factory(engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Plain session for arranging and inspecting rows directly."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        STORAGE_BACKEND="local",
        STORAGE_BASE_PATH=str(tmp_path / "blobs"),
        LOG_JSON=False,
    )


@pytest.fixture(scope="function")
def blob_store(settings) -> LocalBlobStore:
    return LocalBlobStore(
        settings.STORAGE_BASE_PATH,
        max_size_bytes=settings.MAX_UPLOAD_SIZE_BYTES,
        allowed_extensions=settings.ALLOWED_EXTENSIONS,
    )


@pytest.fixture(scope="function")
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture(scope="function")
def people(db_session: Session) -> SimpleNamespace:
    """Create departments, one user per role and two cases.

    Finance is headed by the CFO, Audit by the auditor; Legal has no head.

    Returns:
        Namespace with an Actor per role (admin, ceo, cfo, procurement,
        accountant, auditor, it, investor), second_accountant, the
        departments and case ids (case_id, other_case_id).
    """
    finance = Department(name="Finance")
    legal = Department(name="Legal")
    audit = Department(name="Audit")
    operations = Department(name="Operations")
    db_session.add_all([finance, legal, audit, operations])
    db_session.flush()

    def make_user(name, email, role, department=None):
        user = User(
            name=name,
            email=email,
            role=role,
            department_id=department.id if department is not None else None,
            status="ACTIVE",
        )
        db_session.add(user)
        return user

    users = {
        "admin": make_user("Ada Admin", "admin@efile.test", "ADMIN"),
        "ceo": make_user("Cleo Chief", "ceo@efile.test", "CEO"),
        "cfo": make_user("Frank Finance", "cfo@efile.test", "CFO", finance),
        "procurement": make_user("Pat Procure", "procurement@efile.test", "PROCUREMENT", operations),
        "accountant": make_user("Alex Ledger", "accountant@efile.test", "ACCOUNTANT", finance),
        "second_accountant": make_user("Sam Ledger", "accountant2@efile.test", "ACCOUNTANT", finance),
        "auditor": make_user("Aud Itor", "auditor@efile.test", "AUDITOR", audit),
        "it": make_user("Ian Tech", "it@efile.test", "IT"),
        "investor": make_user("Ivy Investor", "investor@efile.test", "INVESTOR"),
    }
    db_session.flush()

    finance.head_id = users["cfo"].id
    audit.head_id = users["auditor"].id

    case = Case(title="Annual Filing 2026", description="Statutory filings")
    other_case = Case(title="Vendor Dispute")
    db_session.add_all([case, other_case])
    db_session.commit()

    department_names = {
        finance.id: "Finance",
        legal.id: "Legal",
        audit.id: "Audit",
        operations.id: "Operations",
    }
    actors = {
        key: Actor(
            id=user.id,
            role=user.role,
            name=user.name,
            department=department_names.get(user.department_id),
        )
        for key, user in users.items()
    }
    return SimpleNamespace(
        **actors,
        users=users,
        finance=finance,
        legal=legal,
        audit=audit,
        operations=operations,
        case_id=case.id,
        other_case_id=other_case.id,
    )


@pytest.fixture(scope="function")
def lifecycle(session_factory, blob_store, settings, clock) -> DocumentLifecycleService:
    return DocumentLifecycleService(
        blob_store=blob_store,
        session_factory=session_factory,
        settings=settings,
        clock=clock,
    )


@pytest.fixture(scope="function")
def reporting(session_factory, blob_store) -> DocumentReportingService:
    return DocumentReportingService(blob_store=blob_store, session_factory=session_factory)


@pytest.fixture(scope="function")
def upload(lifecycle, people):
    """Factory uploading a document; every argument has a usable default."""

    def _upload(
        title="Q1 Review",
        document_type="LEGAL_DOCUMENT",
        actor=None,
        case_id=None,
        filename="q1-review.pdf",
        content=PDF_BYTES,
    ):
        return lifecycle.upload(
            title=title,
            document_type=document_type,
            case_id=case_id or people.case_id,
            filename=filename,
            content=content,
            actor=actor or people.accountant,
        )

    return _upload
