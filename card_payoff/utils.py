"""Utility functions for the payoff calculator.

This module provides helpers for parsing user input into Python data types and
for date arithmetic, including adding calendar months and projecting the
debt-free date from a number of months to payoff.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
import calendar
from typing import Optional


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def debt_free_date(months_to_payoff: int, start: Optional[date] = None) -> date:
    """Project the date the balance is cleared, ``months_to_payoff`` from ``start``.

    ``start`` defaults to today.
    """
    if months_to_payoff < 0:
        raise ValueError("months_to_payoff must not be negative")
    return add_months(start or date.today(), months_to_payoff)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips commas, a leading ``$`` and surrounding whitespace. It
    raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.strip().replace(",", "").lstrip("$")
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a money amount with an optional ``k`` or ``m`` suffix.

    ``"1.5k"`` is 1500 and ``"$2,000"`` is 2000.
    """
    text = value.strip().lower()
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    return decimal_from_str(text) * factor


def parse_percent(value: str) -> Decimal:
    """Parse a percentage such as ``"18"`` or ``"18%"``.

    Values are always taken as percent: ``"0.5"`` means half a percent.
    """
    text = value.strip()
    if text.endswith("%"):
        text = text[:-1]
    return decimal_from_str(text)
