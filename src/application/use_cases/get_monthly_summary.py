"""Use case computing a one-off monthly summary."""

from datetime import tzinfo

from src.application.ports.identity import IdentityPort
from src.application.ports.transaction_repository import (
    TransactionRepositoryPort,
)
from src.application.use_cases.auth import require_user_id
from src.domain.constants import DEFAULT_TIMEZONE
from src.domain.models import MonthlySummary
from src.domain.services.aggregation import month_range, summarize_month
from src.infrastructure.logging.logger import get_app_logger


class GetMonthlySummaryUseCase:
    """Summarize one calendar month of the signed-in user's records."""

    def __init__(
        self,
        repository: TransactionRepositoryPort,
        identity: IdentityPort,
        logger=None,
        tz: tzinfo = DEFAULT_TIMEZONE,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Port providing transaction records.
            identity: Port providing the signed-in user.
            logger: Optional logger compatible with logging.Logger-like API.
            tz: Canonical timezone for month boundaries.
        """
        self._repository = repository
        self._identity = identity
        self._logger = logger or get_app_logger()
        self._tz = tz

    def execute(self, year: int, month: int) -> MonthlySummary:
        """Return the summary of ``year``-``month``.

        Args:
            year: Calendar year.
            month: Calendar month, 1 to 12.

        Returns:
            MonthlySummary: Totals and category breakdown for the month.
        """
        user_id = require_user_id(self._identity)
        window = month_range(year, month, self._tz)
        records = self._repository.query(user_id, window)
        self._logger.info(
            f"Fetched {len(records)} transactions for {year}-{month:02d}"
        )
        summary = summarize_month(
            records,
            window.start,
            window.end,
            tz=self._tz,
        )
        self._logger.info(
            f"Monthly totals computed: income={summary.total_income}, "
            f"expense={summary.total_expense}, balance={summary.balance}"
        )
        return summary


__all__ = ["GetMonthlySummaryUseCase", "MonthlySummary"]
