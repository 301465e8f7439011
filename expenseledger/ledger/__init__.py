"""Mini README: Expense records and the stores that hold them.

``records`` defines the data model and the chronological view, ``store``
provides lock-guarded backends, and ``registry`` picks a backend from the
runtime settings. The default backend is in-memory: its contents vanish on
every cold start unless the json backend is configured.
"""

from .records import (
    ExpenseRecord,
    format_timestamp,
    new_expense_id,
    parse_amount,
    round_amount,
    sort_chronological,
)
from .registry import REGISTRY, ExpenseStoreRegistry, create_store
from .store import ExpenseStore, InMemoryExpenseStore, JsonFileExpenseStore

__all__ = [
    "ExpenseRecord",
    "ExpenseStore",
    "ExpenseStoreRegistry",
    "InMemoryExpenseStore",
    "JsonFileExpenseStore",
    "REGISTRY",
    "create_store",
    "format_timestamp",
    "new_expense_id",
    "parse_amount",
    "round_amount",
    "sort_chronological",
]
