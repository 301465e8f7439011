"""Mini README: Expense records and the helpers that shape them.

Structure:
    * ExpenseRecord - dataclass storing one expense plus its timestamps.
    * parse_amount / round_amount - normalise user supplied currency values.
    * new_expense_id - base-36 timestamp identifiers with a random suffix.
    * format_timestamp - ISO-8601 UTC strings with millisecond precision.
    * sort_chronological - derived oldest-first view of a record sequence.

Records serialise to camelCase dictionaries because that is the shape the
HTTP clients consume; ``ExpenseRecord.from_dict`` reads the same shape back
so file backed stores can reload what they wrote.
"""

from __future__ import annotations

import math
import random
import re
import string
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional

from ..errors import InvalidAmountError

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 7
_AMOUNT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(slots=True)
class ExpenseRecord:
    """Represent a single expense entry."""

    expense_id: str
    description: str
    amount: float
    category: str
    date: str
    created_at: str
    updated_at: Optional[str] = None

    def revise(
        self,
        *,
        description: str,
        amount: float,
        category: str,
        date: str,
        updated_at: str,
    ) -> "ExpenseRecord":
        """Return a copy with new editable fields; id and created_at are kept."""

        return replace(
            self,
            description=description,
            amount=amount,
            category=category,
            date=date,
            updated_at=updated_at,
        )

    def as_dict(self) -> Dict[str, object]:
        """Export the record with the keys clients expect."""

        payload: Dict[str, object] = {
            "id": self.expense_id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
            "createdAt": self.created_at,
        }
        if self.updated_at is not None:
            payload["updatedAt"] = self.updated_at
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "ExpenseRecord":
        """Rebuild a record from ``as_dict`` output."""

        try:
            updated_at = payload.get("updatedAt")
            return cls(
                expense_id=str(payload["id"]),
                description=str(payload["description"]),
                amount=round_amount(float(payload["amount"])),
                category=str(payload["category"]),
                date=str(payload["date"]),
                created_at=str(payload["createdAt"]),
                updated_at=None if updated_at is None else str(updated_at),
            )
        except (KeyError, TypeError, ValueError) as error:
            raise ValueError(f"Malformed expense record: {payload!r}") from error


def parse_amount(value: object) -> float:
    """Coerce numbers or ``"3,50"`` / ``"3.50"`` style strings into a finite float.

    Values whose cent amount would overflow a float are rejected too, so a
    parsed amount can always be passed to ``round_amount``.
    """

    if isinstance(value, bool):
        raise InvalidAmountError("Invalid amount")
    try:
        if isinstance(value, (int, float)):
            amount = float(value)
        elif isinstance(value, str):
            text = value.strip().replace(",", ".", 1)
            if not _AMOUNT_PATTERN.fullmatch(text):
                raise InvalidAmountError("Invalid amount")
            amount = float(text)
        else:
            raise InvalidAmountError("Invalid amount")
    except OverflowError as error:
        raise InvalidAmountError("Invalid amount") from error
    if not math.isfinite(amount * 100 + 0.5):
        raise InvalidAmountError("Invalid amount")
    return amount


def round_amount(amount: float) -> float:
    """Round to two decimals with halves rounded up, like ``round(amount * 100) / 100``."""

    return math.floor(amount * 100 + 0.5) / 100


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def new_expense_id(now: Optional[datetime] = None) -> str:
    """Generate ``<base36 millis>-<random base36 suffix>`` identifiers."""

    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=_ID_SUFFIX_LENGTH))
    return f"{_to_base36(millis)}-{suffix}"


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sort_chronological(records: Iterable[ExpenseRecord]) -> List[ExpenseRecord]:
    """Return a new list ordered oldest first.

    Records sort by ``date`` (falling back to ``created_at`` when the date is
    blank) and then by ``created_at``. ``sorted`` is stable, so records that
    tie on both keep their insertion order.
    """

    return sorted(
        records,
        key=lambda record: (record.date or record.created_at, record.created_at),
    )
