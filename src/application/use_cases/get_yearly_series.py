"""Use case computing a one-off yearly series."""

from datetime import tzinfo

from src.application.ports.identity import IdentityPort
from src.application.ports.transaction_repository import (
    TransactionRepositoryPort,
)
from src.application.use_cases.auth import require_user_id
from src.domain.constants import DEFAULT_TIMEZONE
from src.domain.models import YearlySeries
from src.domain.services.aggregation import summarize_year, year_range
from src.infrastructure.logging.logger import get_app_logger


class GetYearlySeriesUseCase:
    """Bucket the signed-in user's records for one year."""

    def __init__(
        self,
        repository: TransactionRepositoryPort,
        identity: IdentityPort,
        logger=None,
        tz: tzinfo = DEFAULT_TIMEZONE,
    ) -> None:
        self._repository = repository
        self._identity = identity
        self._logger = logger or get_app_logger()
        self._tz = tz

    def execute(self, year: int) -> YearlySeries:
        """Return the twelve monthly points of ``year``."""
        user_id = require_user_id(self._identity)
        records = self._repository.query(user_id, year_range(year, self._tz))
        self._logger.info(f"Fetched {len(records)} transactions for {year}")
        return summarize_year(records, year, tz=self._tz)


__all__ = ["GetYearlySeriesUseCase", "YearlySeries"]
