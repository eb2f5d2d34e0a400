"""Use case recording a new income or expense transaction.

The flow is: check the signed-in user, validate the draft locally, reserve a
record id, upload the optional receipt, then persist the record carrying the
receipt URL. Validation and authentication failures happen before any I/O.
Store calls run on a worker thread with a bounded wait; a timeout only
abandons the wait, the call itself keeps running to completion.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, replace
from datetime import tzinfo

from src.application.ports.blob_store import BlobStorePort
from src.application.ports.identity import IdentityPort
from src.application.ports.transaction_repository import (
    TransactionRepositoryPort,
)
from src.application.use_cases.auth import require_user_id
from src.domain.constants import DEFAULT_TIMEZONE
from src.domain.errors import (
    BlobUploadFailed,
    FinanceError,
    PersistenceFailed,
)
from src.domain.models import TransactionDraft, TransactionRecord
from src.domain.services.validation import check_draft, validate_draft
from src.infrastructure.logging.logger import get_app_logger

DEFAULT_SUBMIT_TIMEOUT = 15.0


@dataclass(frozen=True)
class SubmitTransactionResult:
    """Outcome of a successful submission.

    Attributes:
        transaction_id: Identifier of the persisted record.
        record: The record as persisted.
    """

    transaction_id: str
    record: TransactionRecord

    @property
    def attachment_url(self) -> str | None:
        return self.record.attachment_url


class SubmitTransactionUseCase:
    """Validate and persist a transaction with an optional receipt."""

    def __init__(
        self,
        repository: TransactionRepositoryPort,
        blob_store: BlobStorePort,
        identity: IdentityPort,
        logger=None,
        timeout_seconds: float = DEFAULT_SUBMIT_TIMEOUT,
        tz: tzinfo = DEFAULT_TIMEZONE,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Port persisting transaction records.
            blob_store: Port storing receipt attachments.
            identity: Port providing the signed-in user.
            logger: Optional logger compatible with logging.Logger-like API.
            timeout_seconds: Bound on each store call.
            tz: Canonical timezone attached to naive dates.
            executor: Optional executor running store calls.
        """
        self._repository = repository
        self._blob_store = blob_store
        self._identity = identity
        self._logger = logger or get_app_logger()
        self._timeout = timeout_seconds
        self._tz = tz
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2,
            thread_name_prefix="submit-transaction",
        )

    def submit(self, draft: TransactionDraft) -> SubmitTransactionResult:
        """Persist ``draft`` as a new record.

        Args:
            draft: User input for the new transaction.

        Returns:
            SubmitTransactionResult: Identifier and persisted record.

        Raises:
            NotAuthenticated: When nobody is signed in.
            InvalidInput: When the draft fails validation.
            BlobUploadFailed: When the receipt upload fails or times out; no
                record is created.
            PersistenceFailed: When the write fails or times out.
        """
        user_id = require_user_id(self._identity)
        check_draft(draft)

        record_id = self._repository.new_id()
        record = validate_draft(
            draft,
            user_id=user_id,
            record_id=record_id,
            tz=self._tz,
        )

        if draft.attachment:
            url = self._upload_attachment(record, draft)
            record = replace(record, attachment_url=url)

        transaction_id = self._persist(record)
        self._logger.info(
            f"Stored {record.kind.value} transaction {transaction_id} "
            f"for user {user_id}"
        )
        return SubmitTransactionResult(
            transaction_id=transaction_id,
            record=replace(record, id=transaction_id),
        )

    def shutdown(self) -> None:
        """Release worker threads once pending store calls finish."""
        self._executor.shutdown(wait=False)

    def _upload_attachment(
        self,
        record: TransactionRecord,
        draft: TransactionDraft,
    ) -> str:
        future = self._executor.submit(
            self._blob_store.upload,
            record.user_id,
            record.id,
            draft.attachment,
            draft.attachment_content_type,
        )
        try:
            return self._await(future, "attachment upload")
        except FinanceError as exc:
            self._logger.error(
                f"Receipt upload failed for record {record.id}: {exc}"
            )
            if isinstance(exc, BlobUploadFailed):
                raise
            raise BlobUploadFailed(str(exc)) from exc
        except FutureTimeoutError as exc:
            self._logger.error(
                f"Receipt upload timed out after {self._timeout}s "
                f"for record {record.id}"
            )
            raise BlobUploadFailed(
                f"Receipt upload timed out after {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise BlobUploadFailed(str(exc)) from exc

    def _persist(self, record: TransactionRecord) -> str:
        future = self._executor.submit(self._repository.create, record)
        try:
            return self._await(future, "record write")
        except FutureTimeoutError as exc:
            self._report_orphan(record)
            raise PersistenceFailed(
                f"Saving the transaction timed out after {self._timeout}s"
            ) from exc
        except PersistenceFailed:
            self._report_orphan(record)
            raise

    def _await(self, future: Future, label: str):
        self._logger.debug(f"Waiting up to {self._timeout}s for {label}")
        return future.result(timeout=self._timeout)

    def _report_orphan(self, record: TransactionRecord) -> None:
        if record.attachment_url:
            self._logger.warning(
                f"Receipt {record.attachment_url} is orphaned: record "
                f"{record.id} was not saved"
            )


__all__ = [
    "SubmitTransactionUseCase",
    "SubmitTransactionResult",
    "DEFAULT_SUBMIT_TIMEOUT",
]
