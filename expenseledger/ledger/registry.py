"""Mini README: Backend registry for expense stores.

Structure:
    * ExpenseStoreRegistry - maps backend names to ``ExpenseStore`` classes.
    * REGISTRY - module-level registry holding the built-in backends.
    * create_store - builds the backend selected in the settings.

Additional backends register with ``REGISTRY.register`` and become
selectable through ``EXPENSELEDGER_STORAGE_BACKEND``.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Type

from ..configuration import ExpenseLedgerSettings, get_settings
from ..logging_utils import get_logger
from .store import ExpenseStore, InMemoryExpenseStore, JsonFileExpenseStore

LOGGER = get_logger(__name__)


class ExpenseStoreRegistry:
    """Simple registry for mapping backend identifiers to store classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[ExpenseStore]] = {}

    def register(self, backend: Type[ExpenseStore]) -> None:
        """Register a new store class with the registry."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering storage backend '%s'", identifier)
        self._backends[identifier] = backend

    def available_backends(self) -> Iterable[str]:
        return sorted(self._backends.keys())

    def create(self, identifier: str, settings: ExpenseLedgerSettings) -> ExpenseStore:
        """Instantiate the store matching the identifier."""

        backend_cls = self._backends.get(identifier.lower())
        if not backend_cls:
            raise KeyError(f"Unknown storage backend '{identifier}'")
        LOGGER.info("Creating '%s' expense store", identifier)
        return backend_cls.from_settings(settings)


REGISTRY = ExpenseStoreRegistry()
REGISTRY.register(InMemoryExpenseStore)
REGISTRY.register(JsonFileExpenseStore)


def create_store(settings: Optional[ExpenseLedgerSettings] = None) -> ExpenseStore:
    """Build the configured store, reading cached settings when none are given."""

    settings = settings or get_settings()
    return REGISTRY.create(settings.storage_backend, settings)
