"""Presentation-side derivations of summaries.

Aggregation keeps full Decimal precision; rounding only happens here.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_EVEN, Decimal

from src.domain.constants import CATEGORY_PALETTE, DISPLAY_PRECISION
from src.domain.models import CategorySlice, CategoryTotal


def round_for_display(
    amount: Decimal,
    places: int = DISPLAY_PRECISION,
) -> Decimal:
    """Round an amount to the display precision (banker's rounding)."""
    quantum = Decimal(1).scaleb(-places)
    return amount.quantize(quantum, rounding=ROUND_HALF_EVEN)


def amounts_equal(
    left: Decimal,
    right: Decimal,
    places: int = DISPLAY_PRECISION,
) -> bool:
    """Return whether two amounts look the same once rounded for display."""
    return round_for_display(left, places) == round_for_display(right, places)


def format_currency(
    amount: Decimal,
    places: int = DISPLAY_PRECISION,
) -> str:
    """Format an amount with thousands separators and no currency symbol.

    Args:
        amount: Amount to format; the sign is kept.
        places: Fractional digits to show.

    Returns:
        str: Formatted amount, e.g. ``-1,500``.
    """
    rounded = round_for_display(amount, places)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:,.{places}f}"


def build_category_slices(
    breakdown: Sequence[CategoryTotal],
    palette: Sequence[str] = CATEGORY_PALETTE,
) -> list[CategorySlice]:
    """Attach a color and a share of the total to each category.

    Colors follow the position in ``breakdown``, wrapping around the palette,
    so the same breakdown always yields the same colors.

    Args:
        breakdown: Category totals, already sorted by the aggregation engine.
        palette: Colors assigned in order.

    Returns:
        list[CategorySlice]: One slice per category, in breakdown order.
    """
    if not palette:
        raise ValueError("Category palette must not be empty")
    total = sum((item.total_magnitude for item in breakdown), Decimal("0"))
    slices = []
    for position, item in enumerate(breakdown):
        share = item.total_magnitude / total if total else Decimal("0")
        slices.append(
            CategorySlice(
                category=item.category,
                total_magnitude=item.total_magnitude,
                color=palette[position % len(palette)],
                share=share,
            )
        )
    return slices


__all__ = [
    "round_for_display",
    "amounts_equal",
    "format_currency",
    "build_category_slices",
]
