"""Validation of transaction drafts."""

from datetime import datetime, tzinfo
from decimal import Decimal, InvalidOperation

from src.domain.constants import DEFAULT_TIMEZONE
from src.domain.errors import InvalidAmount, InvalidInput, MissingField
from src.domain.models import (
    TransactionDraft,
    TransactionKind,
    TransactionRecord,
)


def parse_amount(raw) -> Decimal:
    """Parse user input into a strictly positive Decimal.

    Strings may use a comma as decimal separator. Floats go through ``str``
    so ``0.1`` stays ``0.1``.

    Args:
        raw: Amount as str, int, float or Decimal.

    Returns:
        Decimal: Parsed magnitude.

    Raises:
        InvalidAmount: When the value is empty, malformed, not finite, or
            not greater than zero.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidAmount("Enter a valid amount.")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        cleaned = raw.strip().replace(",", ".")
        if not cleaned:
            raise InvalidAmount("Enter a valid amount.")
        try:
            value = Decimal(cleaned)
        except InvalidOperation as exc:
            raise InvalidAmount(f"Enter a valid amount: {raw!r}") from exc
    else:
        raise InvalidAmount(f"Unsupported amount type: {type(raw).__name__}")
    if not value.is_finite() or value <= 0:
        raise InvalidAmount(f"Amount must be greater than zero: {raw!r}")
    return value


def validate_draft(
    draft: TransactionDraft,
    *,
    user_id: str,
    record_id: str,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> TransactionRecord:
    """Turn a draft into a record ready to persist.

    Args:
        draft: Raw user input.
        user_id: Owner of the new record.
        record_id: Identifier reserved in the store.
        tz: Canonical timezone attached to naive timestamps.

    Returns:
        TransactionRecord: Validated record without attachment URL.
    """
    check_draft(draft)
    occurred_at = draft.occurred_at
    if occurred_at.tzinfo is None:
        occurred_at = occurred_at.replace(tzinfo=tz)
    note = draft.note.strip() if draft.note else None
    return TransactionRecord(
        id=record_id,
        user_id=user_id,
        kind=TransactionKind(draft.kind),
        amount=parse_amount(draft.amount),
        category=draft.category.strip(),
        account=draft.account.strip(),
        occurred_at=occurred_at,
        note=note or None,
    )


def check_draft(draft: TransactionDraft) -> None:
    """Run every draft check that does not need an identifier.

    Raises:
        InvalidAmount: For a bad amount.
        MissingField: For a blank category or account.
        InvalidInput: For an unknown kind or a non-datetime date.
    """
    parse_amount(draft.amount)
    for field in ("category", "account"):
        value = getattr(draft, field)
        if not isinstance(value, str) or not value.strip():
            raise MissingField(field)
    try:
        TransactionKind(draft.kind)
    except ValueError as exc:
        raise InvalidInput(
            f"Unknown transaction kind: {draft.kind!r}"
        ) from exc
    if not isinstance(draft.occurred_at, datetime):
        raise InvalidInput(
            f"occurred_at must be a datetime: {draft.occurred_at!r}"
        )


__all__ = ["parse_amount", "validate_draft", "check_draft"]
