"""In-process change notification for transaction stores.

Stores without a native push channel keep their live subscriptions in a
``SubscriptionRegistry``. After each committed write the store calls
``notify``, and every subscription of that user re-reads its full snapshot.
"""

from collections.abc import Callable
import itertools
import threading

from src.application.ports.transaction_repository import (
    ErrorCallback,
    Snapshot,
    SnapshotCallback,
)
from src.domain.errors import SubscriptionFailed
from src.domain.models import DateRange, TransactionRecord
from src.infrastructure.logging.logger import get_app_logger

FetchSnapshot = Callable[[str, DateRange | None], list[TransactionRecord]]


class LocalSubscription:
    """Subscription handle delivering snapshots from a fetch function."""

    def __init__(
        self,
        registry: "SubscriptionRegistry",
        user_id: str,
        date_range: DateRange | None,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None,
    ) -> None:
        self.user_id = user_id
        self.date_range = date_range
        self._registry = registry
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._sequence = itertools.count(1)
        self._delivery_lock = threading.RLock()
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop delivery and wait for an in-flight delivery to finish."""
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        self._registry.remove(self)
        with self._delivery_lock:
            pass

    def deliver(self, fetch: FetchSnapshot, *, raise_errors: bool = False):
        """Read the current snapshot and hand it to the subscriber.

        Args:
            fetch: Function reading the user's records.
            raise_errors: Raise SubscriptionFailed instead of reporting it
                through the error callback.
        """
        with self._delivery_lock:
            if self._cancelled.is_set():
                return
            try:
                records = fetch(self.user_id, self.date_range)
            except Exception as exc:
                failure = SubscriptionFailed(f"Could not read snapshot: {exc}")
                if raise_errors:
                    raise failure from exc
                self._report(failure)
                return
            snapshot = Snapshot(
                sequence=next(self._sequence),
                records=tuple(records),
            )
            self._on_snapshot(snapshot)

    def _report(self, failure: SubscriptionFailed) -> None:
        self._registry.logger.error(
            f"Live query for user {self.user_id} failed: {failure}"
        )
        if self._on_error is not None:
            self._on_error(failure)


class SubscriptionRegistry:
    """Live subscriptions of one store."""

    def __init__(self, fetch: FetchSnapshot, logger=None) -> None:
        """Initialize the registry.

        Args:
            fetch: Function reading a user's records for a window.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._fetch = fetch
        self.logger = logger or get_app_logger()
        self._lock = threading.Lock()
        self._subscriptions: list[LocalSubscription] = []

    def open(
        self,
        user_id: str,
        date_range: DateRange | None,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> LocalSubscription:
        """Register a subscription and push its first snapshot.

        Raises:
            SubscriptionFailed: When the first snapshot cannot be read.
        """
        subscription = LocalSubscription(
            self,
            user_id,
            date_range,
            on_snapshot,
            on_error,
        )
        with self._lock:
            self._subscriptions.append(subscription)
        try:
            subscription.deliver(self._fetch, raise_errors=True)
        except Exception:
            subscription.cancel()
            raise
        return subscription

    def notify(self, user_id: str) -> None:
        """Push a fresh snapshot to every subscription of ``user_id``."""
        with self._lock:
            targets = [
                subscription
                for subscription in self._subscriptions
                if subscription.user_id == user_id
            ]
        for subscription in targets:
            try:
                subscription.deliver(self._fetch)
            except Exception as exc:
                # the write has already committed
                self.logger.error(
                    f"Snapshot delivery to user {user_id} failed: {exc}"
                )

    def remove(self, subscription: LocalSubscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)


__all__ = ["LocalSubscription", "SubscriptionRegistry", "FetchSnapshot"]
