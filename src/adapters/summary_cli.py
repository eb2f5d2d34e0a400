"""CLI adapter printing the monthly summary and yearly series.

The month defaults to the current one in the configured timezone. Set
SUMMARY_YEAR and SUMMARY_MONTH to pick another, and FINANCE_USER_ID to
choose whose records are read.
"""

from datetime import datetime
import os

from src.domain.errors import FinanceError
from src.domain.services.presentation import (
    build_category_slices,
    format_currency,
)
from src.infrastructure.container import (
    build_identity,
    build_monthly_summary_use_case,
    build_transaction_repository,
    build_yearly_series_use_case,
)
from src.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from src.infrastructure.settings import FinanceSettings

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _parse_int(
    value: str | None,
    default: int,
    logger,
    name: str,
    minimum: int = 1,
    maximum: int = 9999,
) -> int:
    """Parse an integer setting.

    Args:
        value: Raw environment value.
        default: Value used when missing or invalid.
        logger: Logger used for warnings.
        name: Setting name for messages.
        minimum: Smallest accepted value.
        maximum: Largest accepted value.

    Returns:
        int: Parsed value or the default.
    """
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid {name} '{value}'. Expected an integer.")
        return default
    if not minimum <= parsed <= maximum:
        logger.warning(f"{name} {parsed} is out of range; using {default}.")
        return default
    return parsed


def main() -> None:
    """Print the summaries for the configured user and period."""
    logger = get_app_logger()
    settings = FinanceSettings.from_env()
    now = datetime.now(settings.timezone)
    year = _parse_int(
        os.getenv("SUMMARY_YEAR"),
        now.year,
        logger,
        "SUMMARY_YEAR",
    )
    month = _parse_int(
        os.getenv("SUMMARY_MONTH"),
        now.month,
        logger,
        "SUMMARY_MONTH",
        maximum=12,
    )

    repository = build_transaction_repository(settings)
    identity = build_identity(settings)
    monthly = build_monthly_summary_use_case(repository, identity, settings)
    yearly = build_yearly_series_use_case(repository, identity, settings)
    try:
        summary = monthly.execute(year, month)
        series = yearly.execute(year)
    except FinanceError as exc:
        logger.error(str(exc))
        print(f"Error: {exc}")
        return
    get_usage_logger().info(
        f"summary_cli user={identity.current_user_id()} "
        f"period={year}-{month:02d}"
    )

    print(f"Summary {year}-{month:02d} (timezone={settings.timezone_name})")
    print(
        f"Income: {format_currency(summary.total_income)}  "
        f"Spending: {format_currency(-summary.total_expense)}  "
        f"Balance: {format_currency(summary.balance)}"
    )
    for item in build_category_slices(summary.category_breakdown):
        print(
            f"  [{item.color}] {item.category}: "
            f"{format_currency(-item.total_magnitude)} "
            f"({item.share:.0%})"
        )
    print(f"Year {year}")
    for point in series.points:
        print(
            f"  {MONTH_LABELS[point.month_index]}: "
            f"in={format_currency(point.total_income)} "
            f"out={format_currency(point.total_expense)}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
