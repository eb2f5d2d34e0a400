"""Tests for infrastructure settings."""

from datetime import timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.submit_transaction import (
    DEFAULT_SUBMIT_TIMEOUT,
)
from src.infrastructure import settings as settings_module
from src.infrastructure.settings import FinanceSettings

ENV_VARS = (
    "FINANCE_BACKEND",
    "FINANCE_TIMEZONE",
    "FINANCE_SUBMIT_TIMEOUT",
    "FINANCE_BLOB_DIR",
    "FINANCE_USER_ID",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(settings_module, "get_app_logger", MagicMock)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults() -> None:
    """Without configuration the store is SQL-backed and UTC."""
    settings = FinanceSettings.from_env()

    assert settings.backend == "sqlalchemy"
    assert settings.timezone_name == "UTC"
    assert settings.timezone is timezone.utc
    assert settings.submit_timeout == DEFAULT_SUBMIT_TIMEOUT
    assert settings.user_id is None


def test_from_env_reads_values(monkeypatch, tmp_path: Path) -> None:
    """Configured values should be parsed and normalized."""
    monkeypatch.setenv("FINANCE_BACKEND", " Memory ")
    monkeypatch.setenv("FINANCE_SUBMIT_TIMEOUT", "2.5")
    monkeypatch.setenv("FINANCE_BLOB_DIR", str(tmp_path))
    monkeypatch.setenv("FINANCE_USER_ID", "user-1")

    settings = FinanceSettings.from_env()

    assert settings.backend == "memory"
    assert settings.submit_timeout == 2.5
    assert settings.blob_dir == tmp_path.resolve()
    assert settings.user_id == "user-1"


def test_unknown_backend_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("FINANCE_BACKEND", "firestore")

    assert FinanceSettings.from_env().backend == "sqlalchemy"


def test_unknown_timezone_falls_back_to_utc(monkeypatch) -> None:
    monkeypatch.setenv("FINANCE_TIMEZONE", "Not/AZone")

    settings = FinanceSettings.from_env()

    assert settings.timezone_name == "UTC"
    assert settings.timezone is timezone.utc


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout_uses_default(monkeypatch, raw) -> None:
    monkeypatch.setenv("FINANCE_SUBMIT_TIMEOUT", raw)

    assert FinanceSettings.from_env().submit_timeout == DEFAULT_SUBMIT_TIMEOUT
