"""Domain models for derived transaction summaries."""

from dataclasses import dataclass
from decimal import Decimal

from src.domain.constants import MONTHS_PER_YEAR


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category."""

    category: str
    total_magnitude: Decimal


@dataclass(frozen=True)
class MonthlySummary:
    """Totals for one user and one calendar month.

    Attributes:
        total_income: Sum of income magnitudes.
        total_expense: Sum of expense magnitudes.
        category_breakdown: Expense totals per category, largest first.
    """

    total_income: Decimal
    total_expense: Decimal
    category_breakdown: tuple[CategoryTotal, ...] = ()

    @property
    def balance(self) -> Decimal:
        """Return total_income minus total_expense."""
        return self.total_income - self.total_expense

    @classmethod
    def empty(cls) -> "MonthlySummary":
        return cls(total_income=Decimal("0"), total_expense=Decimal("0"))


@dataclass(frozen=True)
class MonthlyPoint:
    """Income and expense totals for one month of a yearly series."""

    month_index: int
    total_income: Decimal
    total_expense: Decimal


@dataclass(frozen=True)
class YearlySeries:
    """Twelve monthly points for one calendar year."""

    year: int
    points: tuple[MonthlyPoint, ...]

    def __post_init__(self) -> None:
        if len(self.points) != MONTHS_PER_YEAR:
            raise ValueError(
                f"A yearly series needs {MONTHS_PER_YEAR} points, "
                f"got {len(self.points)}"
            )

    @classmethod
    def empty(cls, year: int) -> "YearlySeries":
        return cls(
            year=year,
            points=tuple(
                MonthlyPoint(
                    month_index=index,
                    total_income=Decimal("0"),
                    total_expense=Decimal("0"),
                )
                for index in range(MONTHS_PER_YEAR)
            ),
        )


@dataclass(frozen=True)
class CategorySlice:
    """Chart-ready category row with its assigned color."""

    category: str
    total_magnitude: Decimal
    color: str
    share: Decimal


__all__ = [
    "CategoryTotal",
    "MonthlySummary",
    "MonthlyPoint",
    "YearlySeries",
    "CategorySlice",
]
