"""Application port for transaction storage and live queries."""

from dataclasses import dataclass
from typing import Callable, Protocol

from src.domain.errors import SubscriptionFailed
from src.domain.models import DateRange, TransactionRecord


@dataclass(frozen=True)
class Snapshot:
    """Full set of matching records pushed by a subscription.

    Attributes:
        sequence: Per-subscription counter, strictly increasing in the order
            the store produced the snapshots.
        records: Every record currently matching the subscription.
    """

    sequence: int
    records: tuple[TransactionRecord, ...]


SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[SubscriptionFailed], None]


class SubscriptionHandle(Protocol):
    """Handle returned by ``subscribe``."""

    def cancel(self) -> None:
        """Stop delivery. Calling it again is a no-op."""


class TransactionRepositoryPort(Protocol):
    """Port exposing persistence and change notification for records."""

    def new_id(self) -> str:
        """Reserve a fresh unique record identifier."""

    def create(self, record: TransactionRecord) -> str:
        """Persist a record and return its identifier.

        Raises:
            PersistenceFailed: When the store rejects the write.
        """

    def query(
        self,
        user_id: str,
        date_range: DateRange | None = None,
    ) -> list[TransactionRecord]:
        """Return the user's records, newest first.

        Raises:
            PersistenceFailed: When the read fails or a row is malformed.
        """

    def subscribe(
        self,
        user_id: str,
        date_range: DateRange | None,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> SubscriptionHandle:
        """Push a full snapshot now and after every relevant change.

        Raises:
            SubscriptionFailed: When the subscription cannot be set up.
        """


__all__ = [
    "Snapshot",
    "SnapshotCallback",
    "ErrorCallback",
    "SubscriptionHandle",
    "TransactionRepositoryPort",
]
