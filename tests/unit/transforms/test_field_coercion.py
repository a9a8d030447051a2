"""Unit tests for feed cell coercion."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from transforms.field_coercion import coerce_date, coerce_decimal, coerce_int


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        ("374", 374),
        (" 42 ", 42),
        ("-3", -3),
        ("", 0),
        (None, 0),
        ("12.5", 0),
        ("1_000", 0),
        ("n/a", 0),
    ],
)
def test_coerce_int_defaults_to_zero(raw_value, expected) -> None:
    """Integer coercion should parse digits and default malformed cells to zero."""
    assert coerce_int(raw_value) == expected


def test_coerce_decimal_parses_rating() -> None:
    """Decimal coercion should keep exact decimal digits."""
    assert coerce_decimal("4.33") == Decimal("4.33")


@pytest.mark.parametrize("raw_value", ["N/A", "", "   ", None, "abc", "NaN", "Infinity", "1_0"])
def test_coerce_decimal_defaults_to_zero(raw_value) -> None:
    """Malformed, blank, and non-finite decimals should become zero."""
    assert coerce_decimal(raw_value) == Decimal(0)


def test_coerce_date_reads_iso_dates() -> None:
    """ISO dates should parse into calendar dates."""
    assert coerce_date("2008-09-14") == date(2008, 9, 14)


def test_coerce_date_reads_us_dates() -> None:
    """Short and long US dates from catalog exports should parse."""
    assert (coerce_date("09/14/08"), coerce_date("01/28/1813")) == (
        date(2008, 9, 14),
        date(1813, 1, 28),
    )


@pytest.mark.parametrize("raw_value", ["", None, "2008-13-40", "soon", "14.09.2008"])
def test_coerce_date_returns_none_for_bad_input(raw_value) -> None:
    """Unparseable dates should be absent rather than failing."""
    assert coerce_date(raw_value) is None


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        ("2147483647", 2147483647),
        ("2147483648", 0),
        ("-2147483649", 0),
        ("9" * 5000, 0),
    ],
)
def test_coerce_int_defaults_out_of_range_values(raw_value, expected) -> None:
    """Integers outside the column range should fall back to zero."""
    assert coerce_int(raw_value, minimum=-(2**31), maximum=2**31 - 1) == expected


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        ("99.99", Decimal("99.99")),
        ("-99.99", Decimal("-99.99")),
        ("0.001", Decimal("0.001")),
        ("123.5", Decimal(0)),
        ("99.995", Decimal(0)),
        ("1E+20", Decimal(0)),
    ],
)
def test_coerce_decimal_respects_numeric_precision(raw_value, expected) -> None:
    """Values that would overflow NUMERIC(4, 2) after rounding should become zero."""
    assert coerce_decimal(raw_value, numeric=(4, 2)) == expected


def test_coerce_date_reads_two_digit_years_in_strptime_window() -> None:
    """Two-digit years pivot at 1969 while four-digit years are kept."""
    assert (coerce_date("01/28/13"), coerce_date("01/28/69"), coerce_date("01/28/1813")) == (
        date(2013, 1, 28),
        date(1969, 1, 28),
        date(1813, 1, 28),
    )
