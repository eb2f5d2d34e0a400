"""Composition root for wiring infrastructure adapters."""

from src.application.ports.blob_store import BlobStorePort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.identity import IdentityPort
from src.application.ports.transaction_repository import (
    TransactionRepositoryPort,
)
from src.application.use_cases.get_monthly_summary import (
    GetMonthlySummaryUseCase,
)
from src.application.use_cases.get_yearly_series import (
    GetYearlySeriesUseCase,
)
from src.application.use_cases.list_transactions import (
    ListTransactionsUseCase,
)
from src.application.use_cases.live_summary import LiveSummaryController
from src.application.use_cases.submit_transaction import (
    SubmitTransactionUseCase,
)
from src.infrastructure.blob_store import LocalBlobStore
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.identity import SessionIdentityProvider
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.memory_repository import (
    InMemoryTransactionRepository,
)
from src.infrastructure.settings import FinanceSettings
from src.infrastructure.transaction_repository import (
    SqlAlchemyTransactionRepository,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_transaction_repository(
    settings: FinanceSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> TransactionRepositoryPort:
    """Return the configured transaction repository."""
    resolved = settings or FinanceSettings.from_env()
    if resolved.backend == "memory":
        return InMemoryTransactionRepository(logger=get_app_logger())
    repository = SqlAlchemyTransactionRepository(
        db_port or build_database_adapter(),
        logger=get_app_logger(),
    )
    repository.ensure_schema()
    return repository


def build_blob_store(settings: FinanceSettings | None = None) -> BlobStorePort:
    """Return the receipt store."""
    resolved = settings or FinanceSettings.from_env()
    return LocalBlobStore(resolved.blob_dir, logger=get_app_logger())


def build_identity(
    settings: FinanceSettings | None = None,
) -> SessionIdentityProvider:
    """Return an identity provider seeded from FINANCE_USER_ID."""
    resolved = settings or FinanceSettings.from_env()
    return SessionIdentityProvider(resolved.user_id)


def build_submit_transaction_use_case(
    repository: TransactionRepositoryPort,
    identity: IdentityPort,
    settings: FinanceSettings | None = None,
) -> SubmitTransactionUseCase:
    """Return the write service wired to the configured blob store."""
    resolved = settings or FinanceSettings.from_env()
    return SubmitTransactionUseCase(
        repository=repository,
        blob_store=build_blob_store(resolved),
        identity=identity,
        logger=get_app_logger(),
        timeout_seconds=resolved.submit_timeout,
        tz=resolved.timezone,
    )


def build_live_summary_controller(
    repository: TransactionRepositoryPort,
    identity: IdentityPort,
    settings: FinanceSettings | None = None,
) -> LiveSummaryController:
    """Return a new controller; build one per scope shown at once."""
    resolved = settings or FinanceSettings.from_env()
    return LiveSummaryController(
        repository=repository,
        identity=identity,
        logger=get_app_logger(),
        tz=resolved.timezone,
    )


def build_monthly_summary_use_case(
    repository: TransactionRepositoryPort,
    identity: IdentityPort,
    settings: FinanceSettings | None = None,
) -> GetMonthlySummaryUseCase:
    resolved = settings or FinanceSettings.from_env()
    return GetMonthlySummaryUseCase(
        repository,
        identity,
        logger=get_app_logger(),
        tz=resolved.timezone,
    )


def build_yearly_series_use_case(
    repository: TransactionRepositoryPort,
    identity: IdentityPort,
    settings: FinanceSettings | None = None,
) -> GetYearlySeriesUseCase:
    resolved = settings or FinanceSettings.from_env()
    return GetYearlySeriesUseCase(
        repository,
        identity,
        logger=get_app_logger(),
        tz=resolved.timezone,
    )


def build_list_transactions_use_case(
    repository: TransactionRepositoryPort,
    identity: IdentityPort,
    settings: FinanceSettings | None = None,
) -> ListTransactionsUseCase:
    resolved = settings or FinanceSettings.from_env()
    return ListTransactionsUseCase(
        repository,
        identity,
        logger=get_app_logger(),
        tz=resolved.timezone,
    )


__all__ = [
    "build_database_adapter",
    "build_transaction_repository",
    "build_blob_store",
    "build_identity",
    "build_submit_transaction_use_case",
    "build_live_summary_controller",
    "build_monthly_summary_use_case",
    "build_yearly_series_use_case",
    "build_list_transactions_use_case",
]
