"""Strict conversion between transaction records and storage rows.

Rows that do not match the schema raise ``RecordDecodeError``; they are never
skipped, so corrupted data surfaces instead of silently shrinking totals.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from src.domain.errors import FinanceError, RecordDecodeError
from src.domain.models import TransactionKind, TransactionRecord
from src.infrastructure.logging.logger import get_app_logger

REQUIRED_COLUMNS = (
    "id",
    "user_id",
    "kind",
    "amount",
    "category",
    "account",
    "occurred_at",
)


def encode_timestamp(moment: datetime) -> str:
    """Return a fixed-width UTC ISO-8601 string that sorts chronologically.

    Raises:
        ValueError: When ``moment`` is naive.
    """
    if moment.tzinfo is None:
        raise ValueError(f"Cannot store a naive timestamp: {moment!r}")
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def decode_timestamp(raw) -> datetime:
    """Read a stored timestamp; stored values without an offset are UTC."""
    if isinstance(raw, datetime):
        moment = raw
    else:
        moment = datetime.fromisoformat(str(raw))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def encode_record(record: TransactionRecord) -> dict[str, Any]:
    """Convert a record into bind parameters for the transactions table."""
    return {
        "id": record.id,
        "user_id": record.user_id,
        "kind": record.kind.value,
        "amount": str(record.amount),
        "category": record.category,
        "account": record.account,
        "note": record.note,
        "occurred_at": encode_timestamp(record.occurred_at),
        "attachment_url": record.attachment_url,
    }


def decode_record(row: Mapping[str, Any], logger=None) -> TransactionRecord:
    """Convert a storage row into a record.

    Expense rows written with a negative amount by older clients are read
    as their magnitude. Any other mismatch is an error.

    Args:
        row: Column mapping of one stored transaction.
        logger: Optional logger compatible with logging.Logger-like API.

    Returns:
        TransactionRecord: Decoded record.

    Raises:
        RecordDecodeError: When a column is missing or holds a bad value.
    """
    row_id = row.get("id", "<unknown>")
    missing = [
        column for column in REQUIRED_COLUMNS if row.get(column) is None
    ]
    if missing:
        raise RecordDecodeError(
            f"Transaction {row_id} is missing columns: {', '.join(missing)}"
        )
    try:
        kind = TransactionKind(row["kind"])
        amount = Decimal(str(row["amount"]))
        occurred_at = decode_timestamp(row["occurred_at"])
    except (ValueError, InvalidOperation) as exc:
        raise RecordDecodeError(
            f"Transaction {row_id} has an invalid value: {exc}"
        ) from exc

    if kind is TransactionKind.EXPENSE and amount < 0:
        (logger or get_app_logger()).warning(
            f"Transaction {row_id} stores a negative expense amount; "
            "reading its magnitude"
        )
        amount = -amount

    try:
        return TransactionRecord(
            id=str(row_id),
            user_id=str(row["user_id"]),
            kind=kind,
            amount=amount,
            category=str(row["category"]),
            account=str(row["account"]),
            occurred_at=occurred_at,
            note=row.get("note") or None,
            attachment_url=row.get("attachment_url") or None,
        )
    except FinanceError as exc:
        raise RecordDecodeError(
            f"Transaction {row_id} violates the record schema: {exc}"
        ) from exc


__all__ = [
    "encode_timestamp",
    "decode_timestamp",
    "encode_record",
    "decode_record",
]
