"""Mini README: HTTP-facing interfaces for the expense ledger.

Exports the framework-agnostic ``ExpenseHandler`` with its request/response
contract, and the FastAPI application factory that serves it.
"""

from .handler import ALLOW_HEADER, ExpenseHandler, LedgerRequest, LedgerResponse
from .web_app import create_application

__all__ = [
    "ALLOW_HEADER",
    "ExpenseHandler",
    "LedgerRequest",
    "LedgerResponse",
    "create_application",
]
