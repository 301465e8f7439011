"""Mini README: Centralised configuration for the expense ledger service.

Structure:
    * ExpenseLedgerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``EXPENSELEDGER_*`` environment variables
    (or a local ``.env`` file), pick the storage backend, and specify the
    service port. The configuration is cached so validation runs once per
    process; call ``get_settings.cache_clear()`` in tests after patching the
    environment.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class ExpenseLedgerSettings(BaseSettings):
    """Runtime configuration for the expense ledger service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    api_path: str = Field(
        "/api/expenses",
        description="Resource path serving the expense collection.",
    )
    storage_backend: Literal["memory", "json"] = Field(
        "memory",
        description=(
            "Where expenses live. 'memory' resets on every restart; 'json' keeps"
            " a file under the data directory."
        ),
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding expenses.json when the json backend is selected.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level name (DEBUG, INFO, WARNING, ...).",
    )

    class Config:
        env_prefix = "EXPENSELEDGER_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Expand user directories; creation is left to the json backend."""

        return Path(value).expanduser()

    @validator("api_path")
    def _check_api_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_path must start with '/'")
        return value.rstrip("/") or "/"

    @validator("log_level")
    def _check_log_level(cls, value: str) -> str:
        normalised = value.strip().upper()
        if not isinstance(logging.getLevelName(normalised), int):
            raise ValueError(f"Unknown log level: {value}")
        return normalised


@lru_cache()
def get_settings() -> ExpenseLedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return ExpenseLedgerSettings()
