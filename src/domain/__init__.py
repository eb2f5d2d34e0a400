"""Domain package for transaction models and summary rules."""

from .constants import CATEGORY_PALETTE, DEFAULT_TIMEZONE, DISPLAY_PRECISION
from .errors import (
    BlobUploadFailed,
    FinanceError,
    InvalidAmount,
    InvalidInput,
    MissingField,
    NotAuthenticated,
    PersistenceFailed,
    RecordDecodeError,
    SubscriptionFailed,
)
from .models import (
    CategorySlice,
    CategoryTotal,
    DateRange,
    MonthlyPoint,
    MonthlySummary,
    TransactionDraft,
    TransactionKind,
    TransactionRecord,
    YearlySeries,
)
from .services import (
    build_category_slices,
    summarize_month,
    summarize_year,
)

__all__ = [
    "CATEGORY_PALETTE",
    "DEFAULT_TIMEZONE",
    "DISPLAY_PRECISION",
    "FinanceError",
    "InvalidInput",
    "InvalidAmount",
    "MissingField",
    "NotAuthenticated",
    "BlobUploadFailed",
    "PersistenceFailed",
    "RecordDecodeError",
    "SubscriptionFailed",
    "TransactionKind",
    "TransactionRecord",
    "TransactionDraft",
    "DateRange",
    "CategoryTotal",
    "CategorySlice",
    "MonthlySummary",
    "MonthlyPoint",
    "YearlySeries",
    "build_category_slices",
    "summarize_month",
    "summarize_year",
]
