# tests/test_dates.py

from __future__ import annotations

from datetime import date

import pytest

from tickoff.dates import NO_DEADLINE, Deadline, add_months, parse_date
from tickoff.errors import ValidationError


def test_parse_blank_is_no_deadline() -> None:
    assert Deadline.parse(None) == NO_DEADLINE
    assert Deadline.parse("   ") == NO_DEADLINE
    assert not NO_DEADLINE.is_set
    assert str(NO_DEADLINE) == "No deadline"


def test_parse_keeps_raw_text() -> None:
    valid = Deadline.parse(" 2024-02-29 ")
    assert valid.raw == "2024-02-29"
    assert valid.as_date == date(2024, 2, 29)
    assert valid.is_valid

    garbage = Deadline.parse("next friday")
    assert garbage.is_set
    assert garbage.as_date is None
    assert not garbage.is_valid


@pytest.mark.parametrize("value", ["2023-02-29", "2024-13-01", "24-01-01", "2024/01/01", "2024-1-1"])
def test_invalid_dates_have_no_date(value: str) -> None:
    assert Deadline(value).as_date is None


def test_sort_key_orders_dates_then_invalid_then_unset() -> None:
    deadlines = [
        NO_DEADLINE,
        Deadline("soon"),
        Deadline("2024-05-01"),
        Deadline("2023-12-31"),
    ]
    ordered = sorted(deadlines, key=Deadline.sort_key)
    assert [d.raw for d in ordered] == ["2023-12-31", "2024-05-01", "soon", "No deadline"]


def test_is_overdue_and_on_or_before() -> None:
    day = date(2024, 3, 15)
    assert Deadline("2024-03-14").is_overdue(day)
    assert Deadline("2024-03-15").is_overdue(day)
    assert not Deadline("2024-03-16").is_overdue(day)
    assert Deadline("2024-03-15").is_on_or_before(day)
    assert not NO_DEADLINE.is_on_or_before(day)
    assert not NO_DEADLINE.is_overdue(day)
    assert not Deadline("whenever").is_overdue(day)


def test_shifted_by_repeat_kind() -> None:
    start = Deadline("2024-01-01")
    assert start.shifted("daily") == Deadline("2024-01-02")
    assert start.shifted("weekly") == Deadline("2024-01-08")
    assert start.shifted("monthly") == Deadline("2024-02-01")


def test_shifted_without_date_or_kind_is_none() -> None:
    assert NO_DEADLINE.shifted("weekly") is None
    assert Deadline("tomorrow").shifted("daily") is None
    assert Deadline("2024-01-01").shifted("yearly") is None
    assert Deadline("2024-01-01").shifted(None) is None


def test_add_months_clamps_to_month_end() -> None:
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 3, 31), 13) == date(2025, 4, 30)


def test_parse_date() -> None:
    assert parse_date("2024-03-01") == date(2024, 3, 1)
    with pytest.raises(ValidationError):
        parse_date("March 1st")
    with pytest.raises(ValidationError):
        parse_date("")
    # still a ValueError for callers that only know the builtin
    with pytest.raises(ValueError):
        parse_date("2024-02-30")


def test_shifted_accepts_any_case() -> None:
    assert Deadline("2024-01-01").shifted(" Weekly ") == Deadline("2024-01-08")
