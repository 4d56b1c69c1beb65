"""
Number, currency and interval formatting for calculator results.

Numbers use en-US grouping with at most two fraction digits; the first '.'
is then swapped for the user's decimal separator. Rounding is half-up to
match what the calculators show on screen.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "JPY": "¥"}

HOURS_PER_DAY = 24
DAYS_PER_YEAR = 365


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the browser's Math.round / Intl (ties away from zero)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float, decimal_separator: str = ".") -> str:
    """Format with thousands grouping and up to two fraction digits."""
    text = f"{round_half_up(value, 2):,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text.replace(".", decimal_separator, 1)


def format_currency(amount: float, currency: str = "EUR") -> str:
    """Format a cost with two fraction digits and the currency symbol."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    rounded = round_half_up(abs(amount), 2)
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}{symbol}{rounded:,.2f}"


def _plural(count: int, unit: str) -> str:
    return unit + ("s" if count > 1 else "")


def format_interval(years: float, decimal_separator: str = ".") -> str:
    """
    Turn an interval in years into text.

    Under a day -> whole hours; under a year -> whole days; otherwise
    "N year(s)" with " and D day(s)" appended when D > 0.
    """
    total_days = years * DAYS_PER_YEAR
    whole_years = math.floor(years)
    remaining_days = math.floor(total_days % DAYS_PER_YEAR)
    total_hours = total_days * HOURS_PER_DAY

    if total_days < 1:
        hours = int(round_half_up(total_hours))
        return f"{format_number(hours, decimal_separator)} hours"
    if whole_years == 0:
        days = int(round_half_up(total_days))
        return f"{format_number(days, decimal_separator)} days"
    result = f"{format_number(whole_years, decimal_separator)} {_plural(whole_years, 'year')}"
    if remaining_days > 0:
        result += f" and {format_number(remaining_days, decimal_separator)} {_plural(remaining_days, 'day')}"
    return result
