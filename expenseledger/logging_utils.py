"""Mini README: Logging set-up for the expense ledger service.

Structure:
    * configure_root_logger - installs the single stream handler, optionally
      setting the root level.
    * configure_logging - applies ``ExpenseLedgerSettings.log_level``.
    * get_logger - module logger factory; never touches the root level.

Modules only call ``get_logger``. Entry points (the FastAPI factory and the
CLI) call ``configure_logging`` once they have settings, so a level chosen
through ``EXPENSELEDGER_LOG_LEVEL`` or by a host application stays in effect
however many modules are imported afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .configuration import ExpenseLedgerSettings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER: Optional[logging.Handler] = None


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Attach the ledger handler to the root logger once; set ``level`` if given."""

    global _HANDLER
    root_logger = logging.getLogger()
    if _HANDLER is None:
        _HANDLER = logging.StreamHandler()
        _HANDLER.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(_HANDLER)
        if level is None and root_logger.level == logging.WARNING:
            level = logging.INFO
    if level is not None:
        root_logger.setLevel(level)


def configure_logging(settings: "ExpenseLedgerSettings") -> None:
    """Apply the configured log level to the root logger."""

    configure_root_logger(settings.log_level)
    logging.getLogger(__name__).debug(
        "Logging configured at %s for the %s environment",
        settings.log_level,
        settings.environment,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger, installing the handler on first use."""

    configure_root_logger()
    return logging.getLogger(name)
