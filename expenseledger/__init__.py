"""Mini README: Core package initializer for the expense ledger service.

Exposes the logging factory so scripts can grab a logger without knowing the
module layout. Subpackages:

    * ``ledger`` - expense records, chronological view and storage backends.
    * ``interface`` - framework-agnostic handler plus the FastAPI adapter.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
