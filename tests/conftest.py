"""Pytest configuration shared by the expense ledger tests.

Settings are cached per process through ``get_settings``; tests that patch
``EXPENSELEDGER_*`` variables need a fresh read, so the cache is cleared
around every test. ``TickingClock`` gives handlers strictly increasing,
predictable timestamps.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from expenseledger.configuration import get_settings


class TickingClock:
    """Return a timestamp one millisecond later on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(milliseconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        moment = self.current
        self.current = self.current + self.step
        return moment


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "EXPENSELEDGER_STORAGE_BACKEND",
        "EXPENSELEDGER_API_PATH",
        "EXPENSELEDGER_DATA_DIRECTORY",
        "EXPENSELEDGER_INTERFACE_HOST",
        "EXPENSELEDGER_INTERFACE_PORT",
        "EXPENSELEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc))
