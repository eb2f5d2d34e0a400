"""Domain constants for transaction summaries."""

from datetime import timezone

DEFAULT_TIMEZONE = timezone.utc

# Currency amounts are shown without fractional digits.
DISPLAY_PRECISION = 0

MONTHS_PER_YEAR = 12

CATEGORY_PALETTE = (
    "teal",
    "orange",
    "pink",
    "purple",
    "cyan",
    "indigo",
    "mint",
    "brown",
    "red",
    "blue",
)

DEFAULT_ATTACHMENT_CONTENT_TYPE = "image/jpeg"


__all__ = [
    "DEFAULT_TIMEZONE",
    "DISPLAY_PRECISION",
    "MONTHS_PER_YEAR",
    "CATEGORY_PALETTE",
    "DEFAULT_ATTACHMENT_CONTENT_TYPE",
]
