"""Mini README: Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from expenseledger.configuration import ExpenseLedgerSettings, get_settings


def test_defaults_use_in_memory_storage() -> None:
    settings = ExpenseLedgerSettings()

    assert settings.storage_backend == "memory"
    assert settings.api_path == "/api/expenses"
    assert settings.interface_port == 8000


def test_environment_variables_override_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """EXPENSELEDGER_* variables are read case-insensitively and cached."""

    monkeypatch.setenv("EXPENSELEDGER_INTERFACE_PORT", "9001")
    monkeypatch.setenv("expenseledger_storage_backend", "json")
    monkeypatch.setenv("EXPENSELEDGER_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.interface_port == 9001
    assert settings.storage_backend == "json"
    assert settings.log_level == "DEBUG"
    assert get_settings() is settings


def test_data_directory_expands_user_without_creating_it(tmp_path: Path) -> None:
    target = tmp_path / "ledger-data"

    settings = ExpenseLedgerSettings(data_directory=str(target))

    assert settings.data_directory == target
    assert not target.exists()


@pytest.mark.parametrize(
    "overrides",
    [
        {"api_path": "expenses"},
        {"storage_backend": "sqlite"},
        {"interface_port": 0},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        ExpenseLedgerSettings(**overrides)
