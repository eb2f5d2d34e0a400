"""Domain services package."""

from .aggregation import (
    current_month_range,
    list_transactions,
    month_range,
    summarize_month,
    summarize_year,
    to_local,
    total_by_kind,
    year_range,
)
from .presentation import (
    amounts_equal,
    build_category_slices,
    format_currency,
    round_for_display,
)
from .validation import check_draft, parse_amount, validate_draft

__all__ = [
    "current_month_range",
    "list_transactions",
    "month_range",
    "summarize_month",
    "summarize_year",
    "to_local",
    "total_by_kind",
    "year_range",
    "amounts_equal",
    "build_category_slices",
    "format_currency",
    "round_for_display",
    "check_draft",
    "parse_amount",
    "validate_draft",
]
