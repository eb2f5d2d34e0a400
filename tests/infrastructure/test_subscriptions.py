"""Tests for the in-process subscription registry."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.live_summary import (
    LiveSummaryController,
    MonthScope,
    SubscriptionState,
)
from src.domain.errors import PersistenceFailed, SubscriptionFailed
from src.domain.models import (
    MonthlySummary,
    TransactionKind,
    TransactionRecord,
)
from src.infrastructure.identity import SessionIdentityProvider
from src.infrastructure.subscriptions import SubscriptionRegistry


class FakeStore:
    """Fetch function double returning canned records."""

    def __init__(self) -> None:
        self.records = {"user-1": ["a"], "user-2": ["b"]}
        self.fail = False
        self.calls = []

    def fetch(self, user_id, date_range):
        self.calls.append((user_id, date_range))
        if self.fail:
            raise PersistenceFailed("store offline")
        return list(self.records.get(user_id, []))


def test_open_delivers_initial_snapshot() -> None:
    store = FakeStore()
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())
    snapshots = []

    registry.open("user-1", None, snapshots.append)

    assert [(s.sequence, s.records) for s in snapshots] == [(1, ("a",))]
    assert len(registry) == 1


def test_notify_only_targets_matching_user() -> None:
    store = FakeStore()
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())
    first, second = [], []
    registry.open("user-1", None, first.append)
    registry.open("user-2", None, second.append)

    store.records["user-1"].append("c")
    registry.notify("user-1")

    assert [s.sequence for s in first] == [1, 2]
    assert first[-1].records == ("a", "c")
    assert len(second) == 1


def test_cancel_stops_delivery_and_is_idempotent() -> None:
    store = FakeStore()
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())
    snapshots = []
    subscription = registry.open("user-1", None, snapshots.append)

    subscription.cancel()
    subscription.cancel()
    registry.notify("user-1")
    subscription.deliver(store.fetch)

    assert subscription.cancelled
    assert len(snapshots) == 1
    assert len(registry) == 0


def test_open_raises_when_first_read_fails() -> None:
    store = FakeStore()
    store.fail = True
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())

    with pytest.raises(SubscriptionFailed):
        registry.open("user-1", None, MagicMock())

    assert len(registry) == 0


def test_later_read_failure_goes_to_error_callback() -> None:
    store = FakeStore()
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())
    errors = []
    registry.open("user-1", None, MagicMock(), errors.append)

    store.fail = True
    registry.notify("user-1")

    assert len(errors) == 1
    assert isinstance(errors[0], SubscriptionFailed)


def test_failing_subscriber_does_not_break_notify() -> None:
    store = FakeStore()
    logger = MagicMock()
    registry = SubscriptionRegistry(store.fetch, logger=logger)
    received = []
    calls = {"count": 0}

    def flaky(snapshot):
        calls["count"] += 1
        if calls["count"] > 1:
            raise RuntimeError("boom")

    registry.open("user-1", None, flaky)
    registry.open("user-1", None, received.append)

    registry.notify("user-1")

    assert len(received) == 2
    logger.error.assert_called_once()


class BrokenStore(FakeStore):
    """Fetch double failing with a driver-level error."""

    def fetch(self, user_id, date_range):
        if self.fail:
            raise TypeError("unexpected column type")
        return super().fetch(user_id, date_range)


def test_unexpected_error_on_open_is_wrapped_and_unregistered() -> None:
    store = BrokenStore()
    store.fail = True
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())

    with pytest.raises(SubscriptionFailed):
        registry.open("user-1", None, MagicMock())

    assert len(registry) == 0


def test_unexpected_error_on_push_reaches_error_callback() -> None:
    store = BrokenStore()
    registry = SubscriptionRegistry(store.fetch, logger=MagicMock())
    errors = []
    registry.open("user-1", None, MagicMock(), errors.append)

    store.fail = True
    registry.notify("user-1")

    assert len(errors) == 1
    assert isinstance(errors[0], SubscriptionFailed)
    assert "unexpected column type" in str(errors[0])


class RegistryRepository:
    """Repository double wiring a registry to a breakable store."""

    def __init__(self, store) -> None:
        self.registry = SubscriptionRegistry(store.fetch, logger=MagicMock())

    def subscribe(self, user_id, date_range, on_snapshot, on_error=None):
        return self.registry.open(user_id, date_range, on_snapshot, on_error)


def test_controller_drops_stale_summary_when_push_read_fails() -> None:
    store = BrokenStore()
    store.records = {"user-1": [_expense("10")]}
    repository = RegistryRepository(store)
    controller = LiveSummaryController(
        repository=repository,
        identity=SessionIdentityProvider("user-1"),
        logger=MagicMock(),
    )
    controller.attach(MonthScope(2024, 3))
    assert controller.latest.summary.total_expense == Decimal("10")

    store.fail = True
    repository.registry.notify("user-1")

    assert controller.latest.failed
    assert controller.latest.summary == MonthlySummary.empty()


def test_controller_stays_idle_when_first_read_fails() -> None:
    store = BrokenStore()
    store.fail = True
    repository = RegistryRepository(store)
    controller = LiveSummaryController(
        repository=repository,
        identity=SessionIdentityProvider("user-1"),
        logger=MagicMock(),
    )

    controller.attach(MonthScope(2024, 3))

    assert controller.state is SubscriptionState.IDLE
    assert controller.latest.failed
    assert len(repository.registry) == 0


def _expense(amount):
    return TransactionRecord(
        id=f"rec-{amount}",
        user_id="user-1",
        kind=TransactionKind.EXPENSE,
        amount=Decimal(amount),
        category="Food",
        account="Cash",
        occurred_at=datetime(2024, 3, 5, tzinfo=timezone.utc),
    )
