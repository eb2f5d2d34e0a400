"""Domain models for transaction records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from src.domain.constants import DEFAULT_ATTACHMENT_CONTENT_TYPE
from src.domain.errors import InvalidAmount, InvalidInput, MissingField


class TransactionKind(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class DateRange:
    """Half-open time window ``[start, end)``.

    Attributes:
        start: First instant inside the window.
        end: First instant after the window.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        for bound in (self.start, self.end):
            if not isinstance(bound, datetime) or bound.tzinfo is None:
                raise InvalidInput(
                    f"Date range bounds must be timezone-aware: {bound!r}"
                )
        if self.end < self.start:
            raise InvalidInput(
                f"Date range ends before it starts: {self.start} > {self.end}"
            )

    def contains(self, moment: datetime) -> bool:
        """Return whether ``moment`` falls inside the window."""
        return self.start <= moment < self.end


@dataclass(frozen=True)
class TransactionRecord:
    """One persisted income or expense event.

    ``amount`` is always the magnitude; the direction lives in ``kind``.

    Attributes:
        id: Store-assigned identifier.
        user_id: Owner of the record.
        kind: Income or expense.
        amount: Strictly positive magnitude.
        category: Free-text category label.
        account: Free-text account label (e.g. Cash, Bank).
        occurred_at: Timezone-aware moment used for every time bucket.
        note: Optional free text.
        attachment_url: Receipt URL once the upload completed.
    """

    id: str
    user_id: str
    kind: TransactionKind
    amount: Decimal
    category: str
    account: str
    occurred_at: datetime
    note: str | None = None
    attachment_url: str | None = None

    def __post_init__(self) -> None:
        for field in ("id", "user_id", "category", "account"):
            if not getattr(self, field):
                raise MissingField(field)
        if not isinstance(self.kind, TransactionKind):
            raise InvalidInput(f"Unknown transaction kind: {self.kind!r}")
        if not isinstance(self.amount, Decimal):
            raise InvalidAmount(f"Amount must be a Decimal: {self.amount!r}")
        if not self.amount.is_finite() or self.amount <= 0:
            raise InvalidAmount(f"Amount must be positive: {self.amount}")
        if not isinstance(self.occurred_at, datetime):
            raise InvalidInput(
                f"occurred_at must be a datetime: {self.occurred_at!r}"
            )
        if self.occurred_at.tzinfo is None:
            raise InvalidInput(
                f"occurred_at must be timezone-aware: {self.occurred_at!r}"
            )

    @property
    def signed_amount(self) -> Decimal:
        """Return the amount with expenses negated, for display only."""
        if self.kind is TransactionKind.EXPENSE:
            return -self.amount
        return self.amount


@dataclass(frozen=True)
class TransactionDraft:
    """Unvalidated input for a new transaction."""

    kind: TransactionKind
    amount: object
    category: str
    account: str
    occurred_at: datetime
    note: str | None = None
    attachment: bytes | None = None
    attachment_content_type: str = DEFAULT_ATTACHMENT_CONTENT_TYPE


__all__ = [
    "TransactionKind",
    "DateRange",
    "TransactionRecord",
    "TransactionDraft",
]
