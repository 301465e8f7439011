"""Mini README: Framework-agnostic handler for the expense resource.

Structure:
    * LedgerRequest / LedgerResponse - explicit request and response contract.
    * ExpenseHandler - method dispatch, body parsing, validation and shaping.

The handler never imports a web framework. Adapters (see ``web_app``) turn
their native request into a ``LedgerRequest`` and render the returned
``LedgerResponse``; tests drive the handler directly. All failures are
converted here into ``{"success": false, "error": ...}`` payloads.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional

from ..errors import LedgerError, MalformedBodyError, MethodNotAllowedError, MissingFieldError
from ..ledger import (
    ExpenseRecord,
    ExpenseStore,
    format_timestamp,
    new_expense_id,
    parse_amount,
    round_amount,
    sort_chronological,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
ALLOW_HEADER = ",".join(ALLOWED_METHODS)
REQUIRED_FIELDS = ("description", "amount", "category", "date")

Clock = Callable[[], datetime]


@dataclass(slots=True)
class LedgerRequest:
    """Everything the handler needs from an incoming HTTP request."""

    method: str
    path: str = "/"
    query: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


@dataclass(slots=True)
class LedgerResponse:
    """Status, optional JSON payload and extra headers to send back."""

    status_code: int
    payload: Optional[Dict[str, object]] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class _ExpenseFields:
    description: str
    amount: object
    category: str
    date: str


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_body(body: bytes) -> Dict[str, object]:
    """Decode a JSON body; empty bodies and non-object JSON read as ``{}``."""

    if not body or not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, ValueError) as error:
        raise MalformedBodyError("Invalid JSON body") from error
    if not isinstance(payload, dict):
        return {}
    return payload


def _require_fields(body: Mapping[str, object]) -> _ExpenseFields:
    description = body.get("description")
    amount = body.get("amount")
    category = body.get("category")
    date = body.get("date")
    if not description or amount is None or not category or not date:
        raise MissingFieldError(
            "Missing required fields: " + ", ".join(REQUIRED_FIELDS)
        )
    return _ExpenseFields(
        description=str(description),
        amount=amount,
        category=str(category),
        date=str(date),
    )


def _serialise(records: List[ExpenseRecord]) -> List[Dict[str, object]]:
    return [record.as_dict() for record in sort_chronological(records)]


class ExpenseHandler:
    """Serve list, create, update and delete against an injected store."""

    def __init__(
        self,
        store: ExpenseStore,
        clock: Optional[Clock] = None,
        id_factory: Callable[[datetime], str] = new_expense_id,
    ) -> None:
        self.store = store
        self._clock = clock or _utc_now
        self._id_factory = id_factory
        self._routes: Dict[str, Callable[[LedgerRequest], LedgerResponse]] = {
            "GET": self.list_expenses,
            "POST": self.create_expense,
            "PUT": self.update_expense,
            "DELETE": self.delete_expense,
            "OPTIONS": self.preflight,
        }

    def handle(self, request: LedgerRequest) -> LedgerResponse:
        """Dispatch ``request`` and map every failure to a JSON error response."""

        method = (request.method or "").upper()
        try:
            route = self._routes.get(method)
            if route is None:
                raise MethodNotAllowedError(f"Method {method} not allowed")
            return route(request)
        except LedgerError as error:
            LOGGER.warning(
                "Rejected %s %s with %s: %s",
                method,
                request.path,
                error.status_code,
                error.message,
            )
            headers = {"Allow": ALLOW_HEADER} if isinstance(error, MethodNotAllowedError) else {}
            return self._failure(error.status_code, error.message, headers)
        except Exception:
            LOGGER.exception("Unexpected failure handling %s %s", method, request.path)
            return self._failure(500, "Internal server error")

    def list_expenses(self, request: LedgerRequest) -> LedgerResponse:
        """Return every expense, oldest first."""

        records = self.store.list_records()
        LOGGER.debug("Listing %s expenses", len(records))
        return LedgerResponse(200, {"success": True, "expenses": _serialise(records)})

    def create_expense(self, request: LedgerRequest) -> LedgerResponse:
        fields = _require_fields(_parse_body(request.body))
        amount = round_amount(parse_amount(fields.amount))
        now = self._clock()

        def build() -> ExpenseRecord:
            return ExpenseRecord(
                expense_id=self._id_factory(now),
                description=fields.description,
                amount=amount,
                category=fields.category,
                date=fields.date,
                created_at=format_timestamp(now),
            )

        record, records = self.store.append_new(build)
        LOGGER.info("Added expense %s (%s, %.2f)", record.expense_id, record.category, amount)
        return LedgerResponse(
            201,
            {
                "success": True,
                "message": "Expense added",
                "expense": record.as_dict(),
                "expenses": _serialise(records),
            },
        )

    def update_expense(self, request: LedgerRequest) -> LedgerResponse:
        """Replace the editable fields of the expense named by ``?id=``.

        The identifier is checked first, then the body, then the required
        fields. Resolution happens before the amount is parsed, so an unknown
        identifier reports 404 even when the amount is also invalid.
        """

        identifier = request.query.get("id")
        if not identifier:
            raise MissingFieldError("Missing 'id' query parameter")
        fields = _require_fields(_parse_body(request.body))

        def revise(existing: ExpenseRecord) -> ExpenseRecord:
            return existing.revise(
                description=fields.description,
                amount=round_amount(parse_amount(fields.amount)),
                category=fields.category,
                date=fields.date,
                updated_at=format_timestamp(self._clock()),
            )

        updated, records = self.store.update(identifier, revise)
        LOGGER.info("Updated expense %s via identifier '%s'", updated.expense_id, identifier)
        return LedgerResponse(
            200,
            {
                "success": True,
                "message": "Expense updated",
                "expense": updated.as_dict(),
                "expenses": _serialise(records),
            },
        )

    def delete_expense(self, request: LedgerRequest) -> LedgerResponse:
        """Remove the expense named by the body's ``id`` field."""

        identifier = _parse_body(request.body).get("id")
        if identifier is None or identifier == "":
            raise MissingFieldError("Missing required field: id")
        removed = self.store.remove(str(identifier))
        LOGGER.info("Deleted expense %s", removed.expense_id)
        return LedgerResponse(
            200,
            {"success": True, "message": "Expense deleted", "expense": removed.as_dict()},
        )

    def preflight(self, request: LedgerRequest) -> LedgerResponse:
        return LedgerResponse(204, None, {"Allow": ALLOW_HEADER})

    @staticmethod
    def _failure(
        status_code: int, message: str, headers: Optional[Dict[str, str]] = None
    ) -> LedgerResponse:
        return LedgerResponse(
            status_code, {"success": False, "error": message}, dict(headers or {})
        )
