"""Mini README: Tests for expense records and their helper functions.

Structure:
    * amount parsing and rounding - decimal separators, rejection of junk.
    * identifiers and timestamps - shape of generated values.
    * chronological view - ordering, tie-breaks and copy semantics.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone

import pytest

from expenseledger.errors import InvalidAmountError
from expenseledger.ledger import (
    ExpenseRecord,
    format_timestamp,
    new_expense_id,
    parse_amount,
    round_amount,
    sort_chronological,
)


def _record(expense_id: str, date: str, created_at: str) -> ExpenseRecord:
    return ExpenseRecord(
        expense_id=expense_id,
        description="Lunch",
        amount=12.5,
        category="Food",
        date=date,
        created_at=created_at,
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(7, 7.0), (3.25, 3.25), ("3,50", 3.5), (" 12.75 ", 12.75), ("-4", -4.0), (".5", 0.5)],
)
def test_parse_amount_accepts_numbers_and_decimal_strings(raw: object, expected: float) -> None:
    """Numbers pass through and strings may use either decimal separator."""

    assert parse_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    "raw",
    ["", "abc", "12abc", "inf", "nan", math.inf, math.nan, True, [1], None, 1e308, "1e308", 10**400],
)
def test_parse_amount_rejects_non_finite_or_garbage(raw: object) -> None:
    """Non-numbers, non-finite values and amounts too large to round are rejected."""

    with pytest.raises(InvalidAmountError):
        parse_amount(raw)


def test_round_amount_rounds_halves_up() -> None:
    """Rounding follows round(amount * 100) / 100 with halves going up."""

    assert round_amount(3.456) == pytest.approx(3.46)
    assert round_amount(0.125) == pytest.approx(0.13)
    assert round_amount(-0.125) == pytest.approx(-0.12)
    assert round_amount(10) == pytest.approx(10.0)


def test_new_expense_id_has_base36_timestamp_and_suffix() -> None:
    moment = datetime(2024, 1, 5, tzinfo=timezone.utc)
    expense_id = new_expense_id(moment)

    prefix, suffix = expense_id.split("-")
    assert int(prefix, 36) == int(moment.timestamp() * 1000)
    assert re.fullmatch(r"[0-9a-z]{7}", suffix)


def test_format_timestamp_uses_utc_milliseconds() -> None:
    moment = datetime(2024, 1, 5, 10, 0, 0, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(moment) == "2024-01-05T08:00:00.123Z"


def test_sort_chronological_orders_by_date_then_created_at() -> None:
    """Records sharing a date fall back to creation time."""

    records = [
        _record("b", "2024-01-02", "2024-01-01T00:00:00.002Z"),
        _record("c", "2024-01-01", "2024-01-01T00:00:00.003Z"),
        _record("a", "2024-01-02", "2024-01-01T00:00:00.001Z"),
    ]

    ordered = sort_chronological(records)

    assert [record.expense_id for record in ordered] == ["c", "a", "b"]
    assert [record.expense_id for record in records] == ["b", "c", "a"]


def test_sort_chronological_is_stable_for_full_ties() -> None:
    created = "2024-01-01T00:00:00.000Z"
    records = [_record(name, "2024-03-01", created) for name in ("x", "y", "z")]

    assert [record.expense_id for record in sort_chronological(records)] == ["x", "y", "z"]


def test_as_dict_only_includes_updated_at_after_an_update() -> None:
    """Fresh records omit updatedAt; revised ones carry it and keep the id."""

    original = _record("abc", "2024-01-01", "2024-01-01T00:00:00.000Z")
    assert "updatedAt" not in original.as_dict()

    revised = original.revise(
        description="Dinner",
        amount=20.0,
        category="Food",
        date="2024-01-02",
        updated_at="2024-01-03T00:00:00.000Z",
    )
    payload = revised.as_dict()
    assert payload["id"] == "abc"
    assert payload["createdAt"] == "2024-01-01T00:00:00.000Z"
    assert payload["updatedAt"] == "2024-01-03T00:00:00.000Z"
    assert ExpenseRecord.from_dict(payload) == revised


def test_from_dict_rejects_incomplete_payloads() -> None:
    with pytest.raises(ValueError):
        ExpenseRecord.from_dict({"id": "abc", "description": "Lunch"})
