"""End-to-end flow: submit transactions and watch live summaries update."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from src.application.use_cases.live_summary import (
    LiveSummaryController,
    MonthScope,
    SubscriptionState,
    YearScope,
)
from src.application.use_cases.submit_transaction import (
    SubmitTransactionUseCase,
)
from src.domain.models import MonthlySummary, TransactionDraft, TransactionKind
from src.infrastructure.blob_store import LocalBlobStore
from src.infrastructure.identity import SessionIdentityProvider
from src.infrastructure.memory_repository import (
    InMemoryTransactionRepository,
)

UTC = timezone.utc


def _draft(kind, amount, category, day):
    return TransactionDraft(
        kind=kind,
        amount=amount,
        category=category,
        account="Cash",
        occurred_at=datetime(2024, 3, day, 10, 0, tzinfo=UTC),
    )


def _wire(tmp_path):
    logger = MagicMock()
    repository = InMemoryTransactionRepository(logger=logger)
    identity = SessionIdentityProvider("user-1")
    submit = SubmitTransactionUseCase(
        repository=repository,
        blob_store=LocalBlobStore(tmp_path, logger=logger),
        identity=identity,
        logger=logger,
        tz=UTC,
    )
    controller = LiveSummaryController(
        repository=repository,
        identity=identity,
        logger=logger,
        tz=UTC,
    )
    return repository, identity, submit, controller


def test_submitted_records_flow_into_live_month_summary(tmp_path) -> None:
    _, _, submit, controller = _wire(tmp_path)
    controller.attach(MonthScope(2024, 3))

    assert controller.state is SubscriptionState.ACTIVE
    assert controller.latest.summary == MonthlySummary.empty()

    submit.submit(_draft(TransactionKind.INCOME, "1000", "Salary", 5))
    submit.submit(_draft(TransactionKind.EXPENSE, "300", "Food", 10))
    submit.submit(_draft(TransactionKind.EXPENSE, "150", "Transport", 12))
    submit.submit(_draft(TransactionKind.EXPENSE, "50", "Food", 20))
    submit.shutdown()

    summary = controller.latest.summary
    assert summary.total_income == Decimal("1000")
    assert summary.total_expense == Decimal("500")
    assert summary.balance == Decimal("500")
    assert [
        (item.category, item.total_magnitude)
        for item in summary.category_breakdown
    ] == [("Food", Decimal("350")), ("Transport", Decimal("150"))]
    assert controller.latest.sequence == 5


def test_other_month_stays_empty(tmp_path) -> None:
    _, _, submit, controller = _wire(tmp_path)
    submit.submit(_draft(TransactionKind.INCOME, "1000", "Salary", 5))

    controller.attach(MonthScope(2024, 2))

    assert controller.latest.summary == MonthlySummary.empty()


def test_year_scope_and_receipt_upload(tmp_path) -> None:
    repository, _, submit, controller = _wire(tmp_path)
    controller.attach(YearScope(2024))

    draft = TransactionDraft(
        kind=TransactionKind.EXPENSE,
        amount="42,50",
        category="Food",
        account="Cash",
        occurred_at=datetime(2024, 3, 3, tzinfo=UTC),
        attachment=b"\xff\xd8receipt",
    )
    result = submit.submit(draft)

    assert result.attachment_url.startswith("file://")
    assert repository.query("user-1")[0].attachment_url == (
        result.attachment_url
    )
    series = controller.latest.summary
    assert series.points[2].total_expense == Decimal("42.50")


def test_other_users_records_are_not_visible(tmp_path) -> None:
    _, identity, submit, controller = _wire(tmp_path)
    submit.submit(_draft(TransactionKind.INCOME, "1000", "Salary", 5))

    identity.sign_in("user-2")
    controller.attach(MonthScope(2024, 3))

    assert controller.latest.summary == MonthlySummary.empty()
