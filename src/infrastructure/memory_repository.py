"""In-memory transaction repository."""

import threading
import uuid

from src.application.ports.transaction_repository import (
    ErrorCallback,
    SnapshotCallback,
    SubscriptionHandle,
    TransactionRepositoryPort,
)
from src.domain.errors import PersistenceFailed
from src.domain.models import DateRange, TransactionRecord
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.subscriptions import SubscriptionRegistry


class InMemoryTransactionRepository(TransactionRepositoryPort):
    """Repository keeping records in a list, for local runs and tests."""

    def __init__(
        self,
        records: list[TransactionRecord] | None = None,
        logger=None,
    ) -> None:
        self._logger = logger or get_app_logger()
        self._lock = threading.Lock()
        self._records: list[TransactionRecord] = list(records or [])
        self._subscriptions = SubscriptionRegistry(
            self.query,
            logger=self._logger,
        )

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def create(self, record: TransactionRecord) -> str:
        with self._lock:
            if any(existing.id == record.id for existing in self._records):
                raise PersistenceFailed(
                    f"Transaction {record.id} already exists"
                )
            self._records.append(record)
        self._subscriptions.notify(record.user_id)
        return record.id

    def query(
        self,
        user_id: str,
        date_range: DateRange | None = None,
    ) -> list[TransactionRecord]:
        with self._lock:
            matching = [
                record
                for record in self._records
                if record.user_id == user_id
                and (
                    date_range is None
                    or date_range.contains(record.occurred_at)
                )
            ]
        return sorted(
            matching,
            key=lambda record: record.occurred_at,
            reverse=True,
        )

    def subscribe(
        self,
        user_id: str,
        date_range: DateRange | None,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> SubscriptionHandle:
        return self._subscriptions.open(
            user_id,
            date_range,
            on_snapshot,
            on_error,
        )


__all__ = ["InMemoryTransactionRepository"]
