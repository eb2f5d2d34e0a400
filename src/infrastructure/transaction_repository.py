"""SQLAlchemy-backed repository for transaction records."""

import uuid

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.transaction_repository import (
    ErrorCallback,
    SnapshotCallback,
    SubscriptionHandle,
    TransactionRepositoryPort,
)
from src.domain.errors import PersistenceFailed, SubscriptionFailed
from src.domain.models import DateRange, TransactionRecord
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.record_codec import (
    decode_record,
    encode_record,
    encode_timestamp,
)
from src.infrastructure.subscriptions import SubscriptionRegistry

CREATE_TRANSACTIONS_SQL = """
CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    kind TEXT NOT NULL,
    amount TEXT NOT NULL,
    category TEXT NOT NULL,
    account TEXT NOT NULL,
    note TEXT,
    occurred_at TEXT NOT NULL,
    attachment_url TEXT
)
"""

CREATE_TRANSACTIONS_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS ix_transactions_user_occurred
ON transactions (user_id, occurred_at)
"""

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO transactions (
        id,
        user_id,
        kind,
        amount,
        category,
        account,
        note,
        occurred_at,
        attachment_url
    )
    VALUES (
        :id,
        :user_id,
        :kind,
        :amount,
        :category,
        :account,
        :note,
        :occurred_at,
        :attachment_url
    )
    """
)

SELECT_TRANSACTIONS_SQL = """
SELECT id, user_id, kind, amount, category, account, note,
       occurred_at, attachment_url
FROM transactions
WHERE user_id = :user_id
"""


class SqlAlchemyTransactionRepository(TransactionRepositoryPort):
    """Repository storing transactions in a SQL table.

    Amounts are stored as decimal strings and timestamps as fixed-width UTC
    ISO-8601 strings, so range filters and ordering work on plain text
    comparison in every SQL backend.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the store engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._subscriptions = SubscriptionRegistry(
            self.query,
            logger=self._logger,
        )

    def ensure_schema(self) -> None:
        """Create the transactions table if it does not exist."""
        engine = self._db_port.get_engine()
        try:
            with engine.begin() as conn:
                conn.exec_driver_sql(CREATE_TRANSACTIONS_SQL)
                conn.exec_driver_sql(CREATE_TRANSACTIONS_INDEX_SQL)
        except SQLAlchemyError as exc:
            raise PersistenceFailed(
                f"Could not prepare the transactions table: {exc}"
            ) from exc

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def create(self, record: TransactionRecord) -> str:
        engine = self._db_port.get_engine()
        try:
            with engine.begin() as conn:
                conn.execute(INSERT_TRANSACTION_SQL, encode_record(record))
        except SQLAlchemyError as exc:
            self._logger.error(f"Insert of transaction {record.id} failed")
            raise PersistenceFailed(
                f"Could not save transaction {record.id}: {exc}"
            ) from exc
        self._logger.info(f"Inserted transaction {record.id}")
        self._subscriptions.notify(record.user_id)
        return record.id

    def query(
        self,
        user_id: str,
        date_range: DateRange | None = None,
    ) -> list[TransactionRecord]:
        sql = SELECT_TRANSACTIONS_SQL
        params = {"user_id": user_id}
        if date_range is not None:
            sql += " AND occurred_at >= :start AND occurred_at < :end"
            params["start"] = encode_timestamp(date_range.start)
            params["end"] = encode_timestamp(date_range.end)
        sql += " ORDER BY occurred_at DESC, id"
        engine = self._db_port.get_engine()
        try:
            with engine.connect() as conn:
                rows = conn.execute(text(sql), params).all()
        except SQLAlchemyError as exc:
            raise PersistenceFailed(
                f"Could not read transactions for user {user_id}: {exc}"
            ) from exc
        return [
            decode_record(row._mapping, logger=self._logger)
            for row in rows
        ]

    def subscribe(
        self,
        user_id: str,
        date_range: DateRange | None,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> SubscriptionHandle:
        try:
            return self._subscriptions.open(
                user_id,
                date_range,
                on_snapshot,
                on_error,
            )
        except SubscriptionFailed:
            self._logger.error(f"Subscription for user {user_id} failed")
            raise

    def refresh(self, user_id: str) -> None:
        """Re-push snapshots after writes made outside this repository."""
        self._subscriptions.notify(user_id)


__all__ = ["SqlAlchemyTransactionRepository"]
