"""Domain models package."""

from .finance import (
    CategorySlice,
    CategoryTotal,
    MonthlyPoint,
    MonthlySummary,
    YearlySeries,
)
from .transactions import (
    DateRange,
    TransactionDraft,
    TransactionKind,
    TransactionRecord,
)

__all__ = [
    "TransactionKind",
    "TransactionRecord",
    "TransactionDraft",
    "DateRange",
    "CategoryTotal",
    "CategorySlice",
    "MonthlySummary",
    "MonthlyPoint",
    "YearlySeries",
]
