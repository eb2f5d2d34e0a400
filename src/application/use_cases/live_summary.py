"""Live summaries kept current by a store subscription.

A ``LiveSummaryController`` owns at most one subscription at a time. Each
snapshot the store pushes is a full record set, so the controller recomputes
the whole summary and replaces the previous one instead of merging.

Two locks keep the controller consistent:

* the lifecycle lock serializes ``attach``/``detach``/``refresh_identity``,
  so the old subscription is fully cancelled before a new one is issued;
* the state lock serializes snapshot handling and publication, so observers
  never see two updates interleaved.

Every subscription gets a generation number. Snapshots tagged with an older
generation, or with a sequence lower than the last applied one, are dropped.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from functools import partial
import threading

from src.application.ports.identity import IdentityPort
from src.application.ports.transaction_repository import (
    Snapshot,
    SubscriptionHandle,
    TransactionRepositoryPort,
)
from src.domain.constants import DEFAULT_TIMEZONE
from src.domain.errors import NotAuthenticated, SubscriptionFailed
from src.domain.models import (
    DateRange,
    MonthlySummary,
    TransactionRecord,
    YearlySeries,
)
from src.domain.services.aggregation import (
    current_month_range,
    month_range,
    summarize_month,
    summarize_year,
    year_range,
)
from src.infrastructure.logging.logger import get_app_logger


class SubscriptionState(str, Enum):
    """Lifecycle of a controller subscription."""

    IDLE = "idle"
    SUBSCRIBING = "subscribing"
    ACTIVE = "active"


@dataclass(frozen=True)
class CurrentMonthScope:
    """The calendar month containing the moment of attachment."""


@dataclass(frozen=True)
class MonthScope:
    """A specific calendar month."""

    year: int
    month: int


@dataclass(frozen=True)
class YearScope:
    """A calendar year, summarized as twelve monthly points."""

    year: int


SummaryScope = CurrentMonthScope | MonthScope | YearScope
Summary = MonthlySummary | YearlySeries


@dataclass(frozen=True)
class SummaryUpdate:
    """Value published to observers.

    Attributes:
        scope: Scope the summary belongs to, None before any attach.
        state: Subscription state when the update was published.
        summary: Summary for the scope; empty while idle, subscribing, or
            after a failure.
        sequence: Sequence of the snapshot the summary was computed from.
        error: Description of a subscription failure, if any.
    """

    scope: SummaryScope | None
    state: SubscriptionState
    summary: Summary | None
    sequence: int = 0
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


Observer = Callable[[SummaryUpdate], None]


class LiveSummaryController:
    """Keep one scope's summary in sync with the transaction store."""

    def __init__(
        self,
        repository: TransactionRepositoryPort,
        identity: IdentityPort,
        logger=None,
        tz: tzinfo = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            repository: Port providing live record snapshots.
            identity: Port providing the signed-in user.
            logger: Optional logger compatible with logging.Logger-like API.
            tz: Canonical timezone for month and year boundaries.
            clock: Optional source of "now", used by CurrentMonthScope.
        """
        self._repository = repository
        self._identity = identity
        self._logger = logger or get_app_logger()
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(tz))

        self._lifecycle_lock = threading.Lock()
        self._state_lock = threading.RLock()
        self._observers: list[Observer] = []

        self._requested_scope: SummaryScope | None = None
        self._active_scope: SummaryScope | None = None
        self._date_range: DateRange | None = None
        self._user_id: str | None = None
        self._handle: SubscriptionHandle | None = None
        self._generation = 0
        self._last_sequence = 0
        self._state = SubscriptionState.IDLE
        self._latest = SummaryUpdate(
            scope=None,
            state=SubscriptionState.IDLE,
            summary=None,
        )

    @property
    def state(self) -> SubscriptionState:
        with self._state_lock:
            return self._state

    @property
    def scope(self) -> SummaryScope | None:
        with self._state_lock:
            return self._active_scope

    @property
    def latest(self) -> SummaryUpdate:
        """Return the most recently published update."""
        with self._state_lock:
            return self._latest

    def add_observer(self, observer: Observer) -> None:
        with self._state_lock:
            self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        with self._state_lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def attach(self, scope: SummaryScope) -> None:
        """Subscribe to ``scope``, replacing any current subscription.

        A store failure does not raise: it publishes an empty summary with
        ``error`` set and leaves the controller idle, so a later ``attach``
        or ``refresh_identity`` retries the scope.

        Args:
            scope: Time window to summarize.

        Raises:
            NotAuthenticated: When nobody is signed in. Any previous
                subscription is released first.
        """
        with self._lifecycle_lock:
            self._release()
            self._requested_scope = scope
            user_id = self._identity.current_user_id()
            if not user_id:
                raise NotAuthenticated()
            self._subscribe(scope, user_id)

    def detach(self) -> None:
        """Cancel the current subscription; a no-op when already idle."""
        with self._lifecycle_lock:
            self._requested_scope = None
            self._release()

    def refresh_identity(self) -> None:
        """Follow a sign-in, sign-out or account switch.

        The requested scope is re-attached for the new user. When nobody is
        signed in the controller stays idle until the next refresh.
        """
        with self._lifecycle_lock:
            scope = self._requested_scope
            if scope is None:
                return
            user_id = self._identity.current_user_id()
            if user_id and user_id == self._user_id and self._handle:
                return
            self._release()
            if not user_id:
                self._logger.info("Signed out; live summary detached")
                return
            self._subscribe(scope, user_id)

    def _release(self) -> None:
        with self._state_lock:
            handle = self._handle
            scope = self._active_scope
            was_idle = (
                self._state is SubscriptionState.IDLE and handle is None
            )
            self._generation += 1
            self._handle = None
            self._active_scope = None
            self._date_range = None
            self._user_id = None
            self._state = SubscriptionState.IDLE
        if handle is not None:
            # Outside the state lock: a slow cancel may wait on a delivery
            # that needs the lock to drop its stale snapshot.
            handle.cancel()
        if was_idle:
            return
        with self._state_lock:
            self._publish(
                SummaryUpdate(
                    scope=scope,
                    state=SubscriptionState.IDLE,
                    summary=self._empty_summary(scope),
                )
            )

    def _subscribe(self, scope: SummaryScope, user_id: str) -> None:
        date_range = self._resolve_range(scope)
        with self._state_lock:
            self._generation += 1
            generation = self._generation
            self._last_sequence = 0
            self._active_scope = scope
            self._date_range = date_range
            self._user_id = user_id
            self._state = SubscriptionState.SUBSCRIBING
            self._publish(
                SummaryUpdate(
                    scope=scope,
                    state=SubscriptionState.SUBSCRIBING,
                    summary=self._empty_summary(scope),
                )
            )

        self._logger.info(
            f"Subscribing to {scope} for user {user_id} "
            f"({date_range.start.isoformat()} - {date_range.end.isoformat()})"
        )
        try:
            handle = self._repository.subscribe(
                user_id,
                date_range,
                partial(self._on_snapshot, generation),
                partial(self._on_error, generation),
            )
        except Exception as exc:
            self._logger.error(f"Subscription to {scope} failed: {exc}")
            with self._state_lock:
                self._generation += 1
                self._active_scope = None
                self._date_range = None
                self._user_id = None
                self._state = SubscriptionState.IDLE
                self._publish(
                    SummaryUpdate(
                        scope=scope,
                        state=SubscriptionState.IDLE,
                        summary=self._empty_summary(scope),
                        error=str(exc),
                    )
                )
            return
        with self._state_lock:
            self._handle = handle

    def _on_snapshot(self, generation: int, snapshot: Snapshot) -> None:
        with self._state_lock:
            if generation != self._generation:
                self._logger.debug(
                    f"Dropped snapshot {snapshot.sequence} from a "
                    "superseded subscription"
                )
                return
            if snapshot.sequence < self._last_sequence:
                self._logger.warning(
                    f"Dropped out-of-order snapshot {snapshot.sequence}; "
                    f"already applied {self._last_sequence}"
                )
                return
            self._last_sequence = snapshot.sequence
            summary = self._summarize(self._active_scope, snapshot.records)
            self._state = SubscriptionState.ACTIVE
            self._publish(
                SummaryUpdate(
                    scope=self._active_scope,
                    state=SubscriptionState.ACTIVE,
                    summary=summary,
                    sequence=snapshot.sequence,
                )
            )

    def _on_error(self, generation: int, error: SubscriptionFailed) -> None:
        with self._state_lock:
            if generation != self._generation:
                return
            self._logger.error(
                f"Live updates for {self._active_scope} failed: {error}"
            )
            self._publish(
                SummaryUpdate(
                    scope=self._active_scope,
                    state=self._state,
                    summary=self._empty_summary(self._active_scope),
                    sequence=self._last_sequence,
                    error=str(error),
                )
            )

    def _publish(self, update: SummaryUpdate) -> None:
        self._latest = update
        for observer in list(self._observers):
            try:
                observer(update)
            except Exception as exc:
                self._logger.error(
                    f"Summary observer {observer!r} failed: {exc}"
                )

    def _resolve_range(self, scope: SummaryScope) -> DateRange:
        if isinstance(scope, CurrentMonthScope):
            return current_month_range(self._clock(), self._tz)
        if isinstance(scope, MonthScope):
            return month_range(scope.year, scope.month, self._tz)
        if isinstance(scope, YearScope):
            return year_range(scope.year, self._tz)
        raise TypeError(f"Unsupported summary scope: {scope!r}")

    def _summarize(
        self,
        scope: SummaryScope | None,
        records: Iterable[TransactionRecord],
    ) -> Summary:
        if isinstance(scope, YearScope):
            return summarize_year(records, scope.year, tz=self._tz)
        return summarize_month(
            records,
            self._date_range.start,
            self._date_range.end,
            tz=self._tz,
        )

    def _empty_summary(self, scope: SummaryScope | None) -> Summary | None:
        if scope is None:
            return None
        if isinstance(scope, YearScope):
            return YearlySeries.empty(scope.year)
        return MonthlySummary.empty()


__all__ = [
    "LiveSummaryController",
    "SubscriptionState",
    "SummaryUpdate",
    "SummaryScope",
    "CurrentMonthScope",
    "MonthScope",
    "YearScope",
]
