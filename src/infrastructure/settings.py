"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
from datetime import timezone, tzinfo
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dotenv

from src.application.use_cases.submit_transaction import (
    DEFAULT_SUBMIT_TIMEOUT,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

SUPPORTED_BACKENDS = ("sqlalchemy", "memory")


@dataclass(frozen=True)
class FinanceSettings:
    """Runtime settings for the finance core.

    Attributes:
        backend: Transaction store backend (sqlalchemy or memory).
        timezone_name: IANA name of the canonical timezone.
        submit_timeout: Seconds allowed for each store call in a submission.
        blob_dir: Directory receiving receipt attachments.
        user_id: Signed-in user for command-line sessions.
    """

    backend: str = "sqlalchemy"
    timezone_name: str = "UTC"
    submit_timeout: float = DEFAULT_SUBMIT_TIMEOUT
    blob_dir: Path = field(
        default_factory=lambda: get_project_root() / "data" / "receipts"
    )
    user_id: str | None = None

    @property
    def timezone(self) -> tzinfo:
        """Return the canonical timezone used for month and year buckets."""
        if self.timezone_name.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone_name)

    @classmethod
    def from_env(cls) -> "FinanceSettings":
        """Build settings from environment variables.

        Returns:
            FinanceSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("FINANCE_BACKEND", "sqlalchemy").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(
                f"Unknown FINANCE_BACKEND '{backend}', using sqlalchemy"
            )
            backend = "sqlalchemy"
        blob_dir = os.getenv("FINANCE_BLOB_DIR")
        return cls(
            backend=backend,
            timezone_name=cls._normalize_timezone(
                os.getenv("FINANCE_TIMEZONE", "UTC"),
                logger=logger,
            ),
            submit_timeout=cls._parse_timeout(
                os.getenv("FINANCE_SUBMIT_TIMEOUT"),
                logger=logger,
            ),
            blob_dir=(
                Path(blob_dir).expanduser().resolve()
                if blob_dir
                else get_project_root() / "data" / "receipts"
            ),
            user_id=os.getenv("FINANCE_USER_ID") or None,
        )

    @staticmethod
    def _normalize_timezone(raw: str, logger) -> str:
        """Validate a timezone name, falling back to UTC.

        Args:
            raw: IANA timezone name.
            logger: Logger used for warnings.

        Returns:
            str: A loadable timezone name.
        """
        name = raw.strip() or "UTC"
        if name.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown FINANCE_TIMEZONE '{name}', using UTC")
            return "UTC"
        return name

    @staticmethod
    def _parse_timeout(raw: str | None, logger) -> float:
        if not raw:
            return DEFAULT_SUBMIT_TIMEOUT
        try:
            value = float(raw)
        except ValueError:
            value = 0.0
        if value <= 0:
            logger.warning(
                f"Invalid FINANCE_SUBMIT_TIMEOUT '{raw}', "
                f"using {DEFAULT_SUBMIT_TIMEOUT}"
            )
            return DEFAULT_SUBMIT_TIMEOUT
        return value


__all__ = ["FinanceSettings", "SUPPORTED_BACKENDS"]
