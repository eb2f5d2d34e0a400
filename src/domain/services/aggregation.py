"""Aggregation of transaction records into summaries.

Every function here is pure: it takes a snapshot of records and returns a
new value. Month and year boundaries are evaluated in one canonical timezone
passed as ``tz``. Aware timestamps are converted into it and naive ones are
read as already being in it, so a record is always bucketed by the local
calendar date a user in that zone would see.
"""

from collections.abc import Iterable
from datetime import datetime, tzinfo
from decimal import Decimal

from src.domain.constants import DEFAULT_TIMEZONE, MONTHS_PER_YEAR
from src.domain.models import (
    CategoryTotal,
    DateRange,
    MonthlyPoint,
    MonthlySummary,
    TransactionKind,
    TransactionRecord,
    YearlySeries,
)


def to_local(moment: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> datetime:
    """Express ``moment`` in the canonical timezone.

    Args:
        moment: Aware or naive timestamp.
        tz: Canonical timezone.

    Returns:
        datetime: Aware timestamp in ``tz``.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def month_range(
    year: int,
    month: int,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> DateRange:
    """Return ``[first instant of month, first instant of next month)``."""
    if not 1 <= month <= MONTHS_PER_YEAR:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1, tzinfo=tz)
    if month == MONTHS_PER_YEAR:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month + 1, 1, tzinfo=tz)
    return DateRange(start=start, end=end)


def year_range(year: int, tz: tzinfo = DEFAULT_TIMEZONE) -> DateRange:
    """Return ``[Jan 1 of year, Jan 1 of next year)`` in ``tz``."""
    return DateRange(
        start=datetime(year, 1, 1, tzinfo=tz),
        end=datetime(year + 1, 1, 1, tzinfo=tz),
    )


def current_month_range(
    now: datetime,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> DateRange:
    """Return the month window containing ``now``."""
    local_now = to_local(now, tz)
    return month_range(local_now.year, local_now.month, tz)


def summarize_month(
    records: Iterable[TransactionRecord],
    month_start: datetime,
    month_end: datetime,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> MonthlySummary:
    """Fold records into the totals of one month.

    Args:
        records: Snapshot of records, in any order.
        month_start: Inclusive lower bound.
        month_end: Exclusive upper bound.
        tz: Canonical timezone for naive timestamps.

    Returns:
        MonthlySummary: Income, expense and per-category expense totals.
            Categories are ordered by total descending; equal totals keep
            the order in which the category first appeared.
    """
    window = DateRange(
        start=to_local(month_start, tz),
        end=to_local(month_end, tz),
    )
    total_income = Decimal("0")
    total_expense = Decimal("0")
    category_totals: dict[str, Decimal] = {}
    for record in records:
        if not window.contains(to_local(record.occurred_at, tz)):
            continue
        if record.kind is TransactionKind.INCOME:
            total_income += record.amount
            continue
        total_expense += record.amount
        # dicts keep insertion order, which is the first-seen order
        category_totals[record.category] = (
            category_totals.get(record.category, Decimal("0")) + record.amount
        )

    breakdown = sorted(
        (
            CategoryTotal(category=category, total_magnitude=amount)
            for category, amount in category_totals.items()
        ),
        key=lambda item: item.total_magnitude,
        reverse=True,
    )
    return MonthlySummary(
        total_income=total_income,
        total_expense=total_expense,
        category_breakdown=tuple(breakdown),
    )


def summarize_year(
    records: Iterable[TransactionRecord],
    year: int,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> YearlySeries:
    """Bucket records into the twelve months of ``year``.

    The year and month of each record are read from its local calendar date
    in ``tz``, not from a UTC-normalized date. A record at 23:30 on
    December 31 in ``tz`` belongs to December even when that instant is
    already January 1 in UTC.

    Args:
        records: Snapshot of records, in any order.
        year: Calendar year to bucket.
        tz: Canonical timezone.

    Returns:
        YearlySeries: Exactly twelve points, empty months at zero.
    """
    incomes = [Decimal("0")] * MONTHS_PER_YEAR
    expenses = [Decimal("0")] * MONTHS_PER_YEAR
    for record in records:
        local = to_local(record.occurred_at, tz)
        if local.year != year:
            continue
        index = local.month - 1
        if record.kind is TransactionKind.INCOME:
            incomes[index] += record.amount
        else:
            expenses[index] += record.amount

    return YearlySeries(
        year=year,
        points=tuple(
            MonthlyPoint(
                month_index=index,
                total_income=incomes[index],
                total_expense=expenses[index],
            )
            for index in range(MONTHS_PER_YEAR)
        ),
    )


def total_by_kind(
    records: Iterable[TransactionRecord],
    kind: TransactionKind,
) -> Decimal:
    """Return the summed magnitude of records of one kind."""
    total = Decimal("0")
    for record in records:
        if record.kind is kind:
            total += record.amount
    return total


def list_transactions(
    records: Iterable[TransactionRecord],
    date_range: DateRange | None = None,
    kind: TransactionKind | None = None,
    *,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> list[TransactionRecord]:
    """Return matching records, newest first.

    Args:
        records: Snapshot of records.
        date_range: Optional half-open window.
        kind: Optional kind filter.
        tz: Canonical timezone for naive timestamps.

    Returns:
        list[TransactionRecord]: Filtered records sorted by occurred_at
            descending.
    """
    selected = []
    for record in records:
        if kind is not None and record.kind is not kind:
            continue
        local = to_local(record.occurred_at, tz)
        if date_range is not None and not _contains(date_range, local, tz):
            continue
        selected.append((local, record))
    selected.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in selected]


def _contains(date_range: DateRange, moment: datetime, tz: tzinfo) -> bool:
    start = to_local(date_range.start, tz)
    end = to_local(date_range.end, tz)
    return start <= moment < end


__all__ = [
    "to_local",
    "month_range",
    "year_range",
    "current_month_range",
    "summarize_month",
    "summarize_year",
    "total_by_kind",
    "list_transactions",
]
