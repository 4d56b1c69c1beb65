"""Tests for number, currency and interval formatting."""

import pytest

from ffi_backend.utils.formatting import format_currency, format_interval, format_number, round_half_up


def test_round_half_up_ties_away_from_zero():
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(2.5) == 3
    assert round_half_up(1.005, 2) == 1.01


@pytest.mark.parametrize(
    "value,expected",
    [
        (2, "2"),
        (1234.5, "1,234.5"),
        (1234567.891, "1,234,567.89"),
        (0.125, "0.13"),
        (0.001, "0"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_number_decimal_separator_replaces_first_point_only():
    assert format_number(3.14, ",") == "3,14"
    # grouping commas stay as they are
    assert format_number(1234.5, ",") == "1,234,5"


def test_format_currency():
    assert format_currency(1234.5, "EUR") == "€1,234.50"
    assert format_currency(10000, "USD") == "$10,000.00"
    assert format_currency(99.999, "GBP") == "£100.00"
    assert format_currency(-5, "JPY") == "-¥5.00"


@pytest.mark.parametrize(
    "years,expected",
    [
        (0.5 / 365, "12 hours"),
        (0.02, "7 days"),
        (0.5, "183 days"),
        (1.0, "1 year"),
        (1.5, "1 year and 182 days"),
        (2.0, "2 years"),
        (3.25, "3 years and 91 days"),
    ],
)
def test_format_interval(years, expected):
    assert format_interval(years) == expected


def test_format_interval_large_values_are_grouped():
    assert format_interval(1500.0) == "1,500 years"
