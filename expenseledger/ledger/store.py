"""Mini README: Storage backends for expense records.

Structure:
    * ExpenseStore - abstract, lock-guarded collection kept in insertion order.
    * InMemoryExpenseStore - process-local list that resets on every restart.
    * JsonFileExpenseStore - same collection mirrored to ``expenses.json``.

Every read-modify-write sequence runs under the store lock, and a mutation is
only committed to memory after the backend has persisted it, so a failing
request leaves the visible collection untouched. Identifier resolution lives
here as well because it must observe the collection under the same lock as
the mutation that follows it.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Tuple

from ..errors import RecordNotFoundError
from ..logging_utils import get_logger
from .records import ExpenseRecord

if TYPE_CHECKING:
    from ..configuration import ExpenseLedgerSettings

LOGGER = get_logger(__name__)

_POSITION_PATTERN = re.compile(r"\s*([0-9]+)\s*")

Reviser = Callable[[ExpenseRecord], ExpenseRecord]


class ExpenseStore(ABC):
    """Base class for expense collections addressed by position or id."""

    backend_name: str = "generic"

    def __init__(self, records: Optional[Iterable[ExpenseRecord]] = None) -> None:
        self._lock = threading.Lock()
        self._records: List[ExpenseRecord] = []
        initial = list(records) if records is not None else self._load()
        for record in initial:
            self._check_unique(self._records, record)
            self._records.append(record)
        LOGGER.debug(
            "%s store initialised with %s expenses", self.backend_name, len(self._records)
        )

    @classmethod
    def from_settings(cls, settings: "ExpenseLedgerSettings") -> "ExpenseStore":
        """Build the store from runtime configuration."""

        return cls()

    @abstractmethod
    def _load(self) -> List[ExpenseRecord]:
        """Return the records the backend starts with."""

    @abstractmethod
    def _persist(self, records: List[ExpenseRecord]) -> None:
        """Write ``records`` to the backend before they become visible."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def list_records(self) -> List[ExpenseRecord]:
        """Return a snapshot in insertion order."""

        with self._lock:
            return list(self._records)

    def append(self, record: ExpenseRecord) -> List[ExpenseRecord]:
        """Add ``record`` at the end and return the resulting snapshot."""

        with self._lock:
            updated = list(self._records)
            self._check_unique(updated, record)
            updated.append(record)
            self._commit(updated)
            return list(updated)

    def append_new(
        self, build: Callable[[], ExpenseRecord], attempts: int = 8
    ) -> Tuple[ExpenseRecord, List[ExpenseRecord]]:
        """Append the first record from ``build()`` whose id is not taken yet.

        ``build`` is called again on an id collision, so generated identifiers
        never turn a valid create into an error.
        """

        with self._lock:
            for _ in range(attempts):
                record = build()
                if not any(existing.expense_id == record.expense_id for existing in self._records):
                    updated = self._records + [record]
                    self._commit(updated)
                    return record, list(updated)
                LOGGER.warning("Expense id %s already taken, generating another", record.expense_id)
            raise ValueError(f"Could not generate a unique expense id in {attempts} attempts")

    def update(
        self, identifier: str, reviser: Reviser
    ) -> Tuple[ExpenseRecord, List[ExpenseRecord]]:
        """Replace the record ``identifier`` resolves to with ``reviser(record)``.

        The record keeps its position. Errors raised by ``reviser`` abort the
        update without touching the collection.
        """

        with self._lock:
            position = self._locate(identifier)
            existing = self._records[position]
            revised = reviser(existing)
            if revised.expense_id != existing.expense_id:
                raise ValueError("Expense identifiers are immutable")
            if revised.created_at != existing.created_at:
                raise ValueError("Expense creation timestamps are immutable")
            updated = list(self._records)
            updated[position] = revised
            self._commit(updated)
            return revised, list(updated)

    def remove(self, identifier: str) -> ExpenseRecord:
        """Delete the record ``identifier`` resolves to and return it."""

        with self._lock:
            position = self._locate(identifier)
            updated = list(self._records)
            removed = updated.pop(position)
            self._commit(updated)
            return removed

    def resolve(self, identifier: str) -> ExpenseRecord:
        """Return the record ``identifier`` resolves to."""

        with self._lock:
            return self._records[self._locate(identifier)]

    def _locate(self, identifier: str) -> int:
        """Resolve an identifier to a position; caller must hold the lock.

        A plain non-negative integer inside the current bounds is a positional
        index into insertion order. Anything else, including out-of-range
        integers, is compared against stored ids.
        """

        text = str(identifier)
        match = _POSITION_PATTERN.fullmatch(text)
        if match:
            digits = match.group(1).lstrip("0") or "0"
            # More digits than len(records) has is out of range.
            if len(digits) <= len(str(len(self._records))):
                position = int(digits)
                if position < len(self._records):
                    return position
        for position, record in enumerate(self._records):
            if record.expense_id == text:
                return position
        raise RecordNotFoundError("Expense not found for given id")

    def _commit(self, records: List[ExpenseRecord]) -> None:
        self._persist(records)
        self._records = records

    @staticmethod
    def _check_unique(records: List[ExpenseRecord], record: ExpenseRecord) -> None:
        if any(existing.expense_id == record.expense_id for existing in records):
            raise ValueError(f"Expense {record.expense_id} already exists.")


class InMemoryExpenseStore(ExpenseStore):
    """Keep expenses in process memory; a restart empties the ledger."""

    backend_name = "memory"

    def _load(self) -> List[ExpenseRecord]:
        return []

    def _persist(self, records: List[ExpenseRecord]) -> None:
        return None


class JsonFileExpenseStore(ExpenseStore):
    """Mirror the collection to a JSON file so it survives restarts."""

    backend_name = "json"
    file_name = "expenses.json"

    def __init__(
        self, path: Path, records: Optional[Iterable[ExpenseRecord]] = None
    ) -> None:
        self.path = Path(path)
        super().__init__(records)

    @classmethod
    def from_settings(cls, settings: "ExpenseLedgerSettings") -> "JsonFileExpenseStore":
        return cls(settings.data_directory / cls.file_name)

    def _load(self) -> List[ExpenseRecord]:
        if not self.path.exists():
            LOGGER.info("No expense file at %s, starting empty", self.path)
            return []
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"{self.path} must contain a JSON list of expenses")
        return [ExpenseRecord.from_dict(entry) for entry in payload]

    def _persist(self, records: List[ExpenseRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps([record.as_dict() for record in records], indent=2)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f"{self.path.name}-",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(content)
            temp_name = handle.name
        try:
            os.replace(temp_name, self.path)
        except OSError:
            os.unlink(temp_name)
            raise
        LOGGER.debug("Wrote %s expenses to %s", len(records), self.path)
