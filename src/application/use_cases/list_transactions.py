"""Use case listing the signed-in user's transactions."""

from datetime import tzinfo

from src.application.ports.identity import IdentityPort
from src.application.ports.transaction_repository import (
    TransactionRepositoryPort,
)
from src.application.use_cases.auth import require_user_id
from src.domain.constants import DEFAULT_TIMEZONE
from src.domain.models import DateRange, TransactionKind, TransactionRecord
from src.domain.services.aggregation import list_transactions
from src.infrastructure.logging.logger import get_app_logger


class ListTransactionsUseCase:
    """Return records newest first, optionally filtered by window and kind."""

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

    def execute(
        self,
        date_range: DateRange | None = None,
        kind: TransactionKind | None = None,
    ) -> list[TransactionRecord]:
        """List matching transactions.

        Args:
            date_range: Optional half-open window.
            kind: Optional income/expense filter.

        Returns:
            list[TransactionRecord]: Records sorted by occurred_at descending.
        """
        user_id = require_user_id(self._identity)
        records = self._repository.query(user_id, date_range)
        selected = list_transactions(records, date_range, kind, tz=self._tz)
        self._logger.debug(
            f"Listed {len(selected)} of {len(records)} transactions"
        )
        return selected


__all__ = ["ListTransactionsUseCase"]
