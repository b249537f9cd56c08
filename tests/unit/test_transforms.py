from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from ledger_import.services.transforms import (
    DUE_DATE_DAYS,
    TRANSFORMS,
    get_transform,
    parse_leading_number,
    to_amount,
    to_date_or_today,
    to_due_date,
    to_invoice_status,
    to_number,
    to_percent,
    to_product_type,
    to_quantity,
    to_upper_text,
    to_yes_no,
)

# Inputs every transform must accept without raising
ODD_INPUTS = [None, "", "   ", "abc", 0, -1, 3.5, float("nan"), float("inf"), True, False, "1e400", "₹", "--5"]


@pytest.mark.parametrize("name", sorted(TRANSFORMS))
@pytest.mark.parametrize("value", ODD_INPUTS)
def test_transforms_never_raise(name, value):
    TRANSFORMS[name](value)


@pytest.mark.parametrize("value,expected", [
    ("12.5kg", 12.5),
    ("  -3", -3.0),
    (".5", 0.5),
    ("1e3", 1000.0),
    (7, 7.0),
    ("abc", None),
    (True, None),
    ("1e400", None),
])
def test_parse_leading_number(value, expected):
    assert parse_leading_number(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("₹1,234.50", 1234.5),
    ("$99", 99.0),
    ("€ 12", 12.0),
    ("£3,000", 3000.0),
    (250, 250.0),
    ("n/a", 0.0),
    ("", 0.0),
])
def test_to_amount(value, expected):
    assert to_amount(value) == expected


def test_to_number_fallback():
    assert to_number("x") == 0.0
    assert to_number("42") == 42.0


@pytest.mark.parametrize("value,expected", [("3", 3.0), ("0", 1.0), ("lots", 1.0), (2.5, 2.5)])
def test_to_quantity_defaults_to_one(value, expected):
    assert to_quantity(value) == expected


def test_to_percent_strips_sign():
    assert to_percent("18%") == 18.0
    assert to_percent(5) == 5.0


@pytest.mark.parametrize("value,expected", [
    ("Service", "service"),
    (" service ", "service"),
    ("goods", "goods"),
    ("anything", "goods"),
])
def test_to_product_type(value, expected):
    assert to_product_type(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("Yes", True), ("true", True), (True, True), ("no", False), ("", False), (1, False),
])
def test_to_yes_no(value, expected):
    assert to_yes_no(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("2024-03-15", "2024-03-15"),
    ("03/15/2024", "2024-03-15"),
    ("15-03-2024", "2024-03-15"),
    ("2024/03/15", "2024-03-15"),
    ("15 Mar 2024", "2024-03-15"),
    (datetime(2024, 3, 15, 10, 30), "2024-03-15"),
    (date(2024, 3, 15), "2024-03-15"),
])
def test_to_date_or_today_parses_known_formats(value, expected):
    assert to_date_or_today(value) == expected


def test_to_date_or_today_fallback_is_today():
    assert to_date_or_today("someday") == date.today().isoformat()


def test_to_due_date_fallback_is_thirty_days_out():
    expected = (date.today() + timedelta(days=DUE_DATE_DAYS)).isoformat()
    assert to_due_date("") == expected
    assert to_due_date("2024-01-31") == "2024-01-31"


@pytest.mark.parametrize("value,expected", [
    ("Paid", "PAID"),
    ("partially paid", "PAID"),
    ("Overdue by 3 days", "OVERDUE"),
    ("draft", "DRAFT"),
    ("Sent", "PENDING"),
    (None, "PENDING"),
])
def test_to_invoice_status(value, expected):
    assert to_invoice_status(value) == expected


def test_to_upper_text():
    assert to_upper_text(" 27aabcu9603r1zm ") == "27AABCU9603R1ZM"


def test_get_transform_unknown_name():
    assert get_transform("amount") is to_amount
    with pytest.raises(KeyError):
        get_transform("nope")
