"""Document lifecycle service.

Runs every mutating document operation as one unit of work:

    load (row lock) -> check transition -> authorize -> mutate -> commit

The document row and its new history entry are flushed and committed
together. A concurrent writer that got there first is detected by the
version column and reported as ConflictError; an operation that lost the
race before loading sees the new state and fails with InvalidTransitionError.

Submission routing is split in two. Picking the target department is a pure
decision made inside the submit transaction. Looking up that department's
head and recording the assignment runs afterwards in its own transaction and
never fails the submission.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from ..auth.policy import Operation, authorize
from ..auth.principal import Actor
from ..config import Settings, get_settings
from ..database import session_scope
from ..domain.documents.document_status import DocumentStatus, get_allowed_transitions, validate_transition
from ..domain.documents.document_type import DocumentType, parse_document_type
from ..domain.documents.errors import ConflictError, DocumentError, NotFoundError, ValidationError
from ..domain.documents.ports.directory_port import CaseDirectoryPort, DepartmentDirectoryPort
from ..domain.documents.ports.object_storage_port import BlobStorePort, StoredBlob
from ..domain.documents.receipt_numbers import ReceiptNumberGenerator
from ..domain.documents.routing import resolve_routing_target, submission_comment
from ..domain.documents.validation import ensure_valid_rejection_reason, ensure_valid_title, sanitize_filename
from ..infrastructure.directory import SqlCaseDirectory, SqlDepartmentDirectory
from ..models import Document, User, utcnow
from ..observability.correlation import correlation_scope
from ..observability.metrics import observe_blob_call, outcome_label, record_transition, record_upload
from .registry import DocumentRegistry
from .schemas import DocumentPage, DocumentResponse, DocumentSearchCriteria

logger = logging.getLogger(__name__)

UPLOAD_COMMENT = "Document uploaded as draft"

# Inserts tried per upload when a concurrent upload takes the receipt number
RECEIPT_INSERT_ATTEMPTS = 2


class DocumentLifecycleService:
    """Entry point for creating, transitioning, deleting and finding documents.

    Example:
        service = DocumentLifecycleService(blob_store=build_blob_store(settings))
        draft = service.upload(
            title="Q1 Review",
            document_type="LEGAL_DOCUMENT",
            case_id=case_id,
            filename="q1-review.pdf",
            content=pdf_bytes,
            actor=actor,
        )
        service.submit(draft.id, actor)
    """

    def __init__(
        self,
        blob_store: BlobStorePort,
        session_factory: Optional[sessionmaker] = None,
        settings: Optional[Settings] = None,
        receipt_generator: Optional[ReceiptNumberGenerator] = None,
        case_directory_factory: Callable[[Session], CaseDirectoryPort] = SqlCaseDirectory,
        department_directory_factory: Callable[[Session], DepartmentDirectoryPort] = SqlDepartmentDirectory,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.blob_store = blob_store
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        self.receipt_generator = receipt_generator or ReceiptNumberGenerator(
            prefix=self.settings.RECEIPT_PREFIX,
            max_attempts=self.settings.RECEIPT_MAX_ATTEMPTS,
        )
        self.case_directory_factory = case_directory_factory
        self.department_directory_factory = department_directory_factory
        self._clock = clock or utcnow

    # ------------------------------------------------------------------
    # Create / delete
    # ------------------------------------------------------------------

    def upload(
        self,
        title: str,
        document_type,
        case_id: UUID,
        filename: str,
        content: bytes,
        actor: Actor,
    ) -> DocumentResponse:
        """Store the content and create the document in DRAFT.

        Raises:
            ValidationError: Blank title, unknown type, or rejected file
            AuthorizationError: The actor's role may not upload
            NotFoundError: The case or the uploading user does not exist
            StorageError: The blob store failed; no document is created
            ReceiptNumberExhaustedError: No free receipt number was found
        """
        with correlation_scope():
            try:
                title = ensure_valid_title(title)
                document_type = parse_document_type(document_type)
                authorize(Operation.UPLOAD, actor)
                response = self._create_document(title, document_type, case_id, filename, content, actor)
            except Exception as e:
                record_upload(document_type, outcome_label(e))
                raise

            record_upload(response.type, "success")
            logger.info(
                f"Document uploaded: {response.receipt_number}",
                extra={
                    "document_id": str(response.id),
                    "actor_id": str(actor.id),
                    "to_status": response.status.value,
                    "receipt_number": response.receipt_number,
                    "storage_key": response.file_path,
                },
            )
        return response

    def delete(self, document_id: UUID, actor: Actor) -> None:
        """Delete a document, its history and its stored content.

        Allowed from any status. The row and history go in one transaction;
        the blob is removed after commit and a failure there is only logged.

        Raises:
            NotFoundError: The document does not exist
            AuthorizationError: The actor is not an administrator
        """
        with correlation_scope():
            status: Optional[DocumentStatus] = None
            try:
                with session_scope(self.session_factory) as session:
                    registry = DocumentRegistry(session)
                    document = registry.get_for_update(document_id)
                    status = document.status
                    authorize(Operation.DELETE, actor, owner_id=document.uploaded_by_id)
                    locator = document.file_path
                    registry.delete(document)
            except DocumentError as e:
                record_transition(Operation.DELETE, status, None, outcome_label(e))
                raise

            record_transition(Operation.DELETE, status, None, "success")
            logger.info(
                "Document deleted",
                extra={
                    "document_id": str(document_id),
                    "actor_id": str(actor.id),
                    "from_status": status.value,
                    "storage_key": locator,
                },
            )
            self._delete_blob_after_commit(locator, document_id)

    def _create_document(
        self,
        title: str,
        document_type: DocumentType,
        case_id: UUID,
        filename: str,
        content: bytes,
        actor: Actor,
    ) -> DocumentResponse:
        """Store the content once, then insert the draft.

        A receipt number taken by a concurrent upload between the existence
        check and the insert surfaces as IntegrityError; the insert is retried
        with a fresh number in a new transaction. Stored content is removed
        when no attempt commits.
        """
        blob: Optional[StoredBlob] = None
        try:
            for attempt in range(1, RECEIPT_INSERT_ATTEMPTS + 1):
                try:
                    with session_scope(self.session_factory) as session:
                        case = self.case_directory_factory(session).get(case_id)
                        self._require_user(session, actor.id)

                        if blob is None:
                            with observe_blob_call("store"):
                                blob = self.blob_store.store(content, filename, group_key=str(case.id))

                        registry = DocumentRegistry(session)
                        receipt_number = self.receipt_generator.generate(registry.receipt_number_exists)
                        document = Document.create_draft(
                            UPLOAD_COMMENT,
                            at=self._clock(),
                            title=title,
                            type=document_type,
                            file_path=blob.locator,
                            file_size=blob.size_bytes,
                            original_filename=sanitize_filename(filename),
                            case_id=case.id,
                            uploaded_by_id=actor.id,
                            receipt_number=receipt_number,
                        )
                        registry.add(document)
                        session.flush()
                        response = DocumentResponse.from_document(document)
                    return response
                except IntegrityError as e:
                    if attempt == RECEIPT_INSERT_ATTEMPTS:
                        raise ConflictError(
                            "Document could not be saved because of a concurrent upload; retry the upload"
                        ) from e
                    logger.warning(
                        "Receipt number taken by a concurrent upload; retrying with a new one",
                        extra={"actor_id": str(actor.id), "storage_key": blob.locator if blob else None},
                    )
        except Exception:
            self._discard_blob(blob)
            raise

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def submit(self, document_id: UUID, actor: Actor) -> DocumentResponse:
        """DRAFT -> SUBMITTED, routed by document type.

        The uploader or an administrator may submit.
        """
        with correlation_scope():
            target: Dict[str, Optional[str]] = {}

            def route(session: Session, document: Document, now: datetime) -> str:
                uploader = document.uploaded_by
                uploader_department = (
                    uploader.department.name
                    if uploader is not None and uploader.department is not None
                    else None
                )
                target["department"] = resolve_routing_target(document.type, uploader_department)
                return submission_comment(target["department"])

            response = self._transition(
                Operation.SUBMIT, document_id, actor, DocumentStatus.SUBMITTED, route
            )
            self._record_routing(document_id, target.get("department"))
        return response

    def start_review(self, document_id: UUID, actor: Actor) -> DocumentResponse:
        """SUBMITTED -> UNDER_REVIEW. Requires a reviewer-eligible role."""
        with correlation_scope():
            return self._transition(
                Operation.START_REVIEW,
                document_id,
                actor,
                DocumentStatus.UNDER_REVIEW,
                lambda session, document, now: f"Review started by {actor.display_name}",
            )

    def approve(self, document_id: UUID, actor: Actor) -> DocumentResponse:
        """UNDER_REVIEW -> APPROVED. Requires an approver-eligible role.

        Approving an already approved document returns it unchanged without
        writing history.
        """
        with correlation_scope():
            def decide(session: Session, document: Document, now: datetime) -> str:
                document.approved_by = self._require_user(session, actor.id)
                document.processed_at = now
                document.rejection_reason = None
                return f"Approved by {actor.display_name}"

            return self._transition(
                Operation.APPROVE,
                document_id,
                actor,
                DocumentStatus.APPROVED,
                decide,
                idempotent=True,
            )

    def reject(self, document_id: UUID, actor: Actor, reason: str) -> DocumentResponse:
        """UNDER_REVIEW -> REJECTED. Requires an approver-eligible role.

        The reason is checked before anything else, so a short reason fails
        with ValidationError whatever the actor's role or the document state.
        """
        reason = ensure_valid_rejection_reason(reason, self.settings.REJECTION_REASON_MIN_LENGTH)

        with correlation_scope():
            def decide(session: Session, document: Document, now: datetime) -> str:
                document.approved_by = self._require_user(session, actor.id)
                document.processed_at = now
                document.rejection_reason = reason
                return reason

            return self._transition(
                Operation.REJECT, document_id, actor, DocumentStatus.REJECTED, decide
            )

    def revise(self, document_id: UUID, actor: Actor) -> DocumentResponse:
        """REJECTED -> DRAFT so the uploader can rework and resubmit.

        The rejection reason is kept until the document is approved.
        """
        with correlation_scope():
            return self._transition(
                Operation.REVISE,
                document_id,
                actor,
                DocumentStatus.DRAFT,
                lambda session, document, now: (
                    f"Document returned to draft for revision by {actor.display_name}"
                ),
            )

    def withdraw(self, document_id: UUID, actor: Actor) -> DocumentResponse:
        """DRAFT, SUBMITTED or REJECTED -> WITHDRAWN. Uploader or administrator."""
        with correlation_scope():
            def close(session: Session, document: Document, now: datetime) -> str:
                document.processed_at = now
                return f"Document withdrawn by {actor.display_name}"

            return self._transition(
                Operation.WITHDRAW, document_id, actor, DocumentStatus.WITHDRAWN, close
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, document_id: UUID) -> DocumentResponse:
        with session_scope(self.session_factory) as session:
            return DocumentResponse.from_document(DocumentRegistry(session).get(document_id))

    def get_by_receipt(self, receipt_number: str) -> DocumentResponse:
        with session_scope(self.session_factory) as session:
            document = DocumentRegistry(session).find_by_receipt_number(receipt_number)
            if document is None:
                raise NotFoundError("Document with receipt number", receipt_number)
            return DocumentResponse.from_document(document)

    def list_by_case(self, case_id: UUID) -> List[DocumentResponse]:
        """Documents of a case, newest upload first.

        Raises:
            NotFoundError: The case does not exist
        """
        with session_scope(self.session_factory) as session:
            self.case_directory_factory(session).get(case_id)
            documents = DocumentRegistry(session).list_by_case(case_id)
            return [DocumentResponse.from_document(d) for d in documents]

    def count_by_status(self) -> Dict[DocumentStatus, int]:
        with session_scope(self.session_factory) as session:
            return DocumentRegistry(session).count_by_status()

    def allowed_transitions(self, document_id: UUID) -> List[DocumentStatus]:
        """Statuses the document may move to next (empty when terminal)."""
        with session_scope(self.session_factory) as session:
            document = DocumentRegistry(session).get(document_id)
            return get_allowed_transitions(document.status)

    def search(
        self,
        criteria: Optional[DocumentSearchCriteria] = None,
        page: int = 1,
        per_page: Optional[int] = None,
        **filters,
    ) -> DocumentPage:
        """Find documents matching every supplied criterion.

        Criteria can be passed as a DocumentSearchCriteria or as keyword
        filters (status, type, case_id, title_keyword, uploaded_after,
        uploaded_before). Results are newest upload first.

        Raises:
            ValidationError: Bad criteria or paging arguments
        """
        if criteria is None:
            try:
                criteria = DocumentSearchCriteria(**filters)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid search criteria: {e}") from e
        elif filters:
            raise ValidationError("Pass either a criteria object or keyword filters, not both")

        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if per_page is None:
            per_page = self.settings.DEFAULT_PAGE_SIZE
        if per_page < 1 or per_page > self.settings.MAX_PAGE_SIZE:
            raise ValidationError(f"per_page must be between 1 and {self.settings.MAX_PAGE_SIZE}")

        with session_scope(self.session_factory) as session:
            documents, total = DocumentRegistry(session).search(criteria, page, per_page)
            return DocumentPage(
                items=[DocumentResponse.from_document(d) for d in documents],
                total=total,
                page=page,
                per_page=per_page,
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(
        self,
        operation: Operation,
        document_id: UUID,
        actor: Actor,
        new_status: DocumentStatus,
        apply: Callable[[Session, Document, datetime], str],
        idempotent: bool = False,
    ) -> DocumentResponse:
        """Run one status change as a single unit of work.

        ``apply`` sets any extra fields and returns the history comment.
        Nothing is written when loading, the transition check or the
        authorization check fails. With ``idempotent`` a document already in
        ``new_status`` is returned as is.
        """
        from_status: Optional[DocumentStatus] = None
        try:
            with session_scope(self.session_factory) as session:
                document = DocumentRegistry(session).get_for_update(document_id)
                from_status = document.status
                if idempotent and from_status == new_status:
                    logger.info(
                        f"Document already {new_status.value}; nothing to do",
                        extra={"document_id": str(document_id), "actor_id": str(actor.id)},
                    )
                    record_transition(operation, from_status, new_status, "unchanged")
                    return DocumentResponse.from_document(document)

                validate_transition(from_status, new_status)
                authorize(operation, actor, owner_id=document.uploaded_by_id)

                now = self._clock()
                comment = apply(session, document, now)
                document.apply_transition(new_status, comment, at=now)
                session.flush()
                response = DocumentResponse.from_document(document)
        except StaleDataError as e:
            record_transition(operation, from_status, new_status, "conflict")
            logger.warning(
                "Concurrent modification detected",
                extra={"document_id": str(document_id), "actor_id": str(actor.id)},
            )
            raise ConflictError(
                f"Document {document_id} was modified concurrently; re-read it and retry"
            ) from e
        except DocumentError as e:
            record_transition(operation, from_status, new_status, outcome_label(e))
            raise

        record_transition(operation, from_status, new_status, "success")
        logger.info(
            f"Document transitioned: {from_status.value} -> {new_status.value}",
            extra={
                "document_id": str(document_id),
                "actor_id": str(actor.id),
                "from_status": from_status.value,
                "to_status": new_status.value,
            },
        )
        return response

    def _record_routing(self, document_id: UUID, department_name: Optional[str]) -> None:
        """Note the routed reviewer in the history of a submitted document.

        Runs after the submission committed. A missing department, a
        department without head, or a failing lookup only logs; the note is
        skipped if the document has left SUBMITTED in the meantime.
        """
        if department_name is None:
            return

        try:
            with session_scope(self.session_factory) as session:
                department = self.department_directory_factory(session).find_by_name(department_name)
                if department is None:
                    logger.warning(
                        f"Routing department not found: {department_name}",
                        extra={"document_id": str(document_id), "department": department_name},
                    )
                    return
                if not department.has_reviewer:
                    logger.info(
                        f"Department {department.name} has no head; document routed without reviewer",
                        extra={"document_id": str(document_id), "department": department.name},
                    )
                    return

                document = DocumentRegistry(session).get_for_update(document_id)
                if document.status != DocumentStatus.SUBMITTED:
                    logger.info(
                        "Document left SUBMITTED before routing note; skipping",
                        extra={"document_id": str(document_id), "department": department.name},
                    )
                    return

                document.record_note(
                    f"Document routed to {department.name} department for review by {department.head_name}",
                    at=self._clock(),
                )
        except (DocumentError, SQLAlchemyError) as e:
            logger.warning(
                f"Could not record routing for document: {e}",
                extra={"document_id": str(document_id), "department": department_name},
            )
            return

        logger.info(
            f"Document routed to {department.name}",
            extra={"document_id": str(document_id), "department": department.name},
        )

    def _require_user(self, session: Session, user_id: UUID) -> User:
        user = session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def _discard_blob(self, blob: Optional[StoredBlob]) -> None:
        """Remove content stored for an upload that did not commit."""
        if blob is None:
            return
        try:
            with observe_blob_call("delete"):
                self.blob_store.delete(blob.locator)
        except DocumentError as e:
            logger.error(
                f"Could not remove orphaned blob after failed upload: {e}",
                extra={"storage_key": blob.locator},
            )

    def _delete_blob_after_commit(self, locator: str, document_id: UUID) -> None:
        try:
            with observe_blob_call("delete"):
                self.blob_store.delete(locator)
        except DocumentError as e:
            logger.error(
                f"Document deleted but its content could not be removed: {e}",
                extra={"document_id": str(document_id), "storage_key": locator},
            )
