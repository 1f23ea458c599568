"""Tests for parsing helpers, date helpers and the text formatter."""

from datetime import date
from decimal import Decimal

import pytest

from card_payoff.engine import compare_scenarios, compute_schedule
from card_payoff.formatter import (
    NOT_PAID_OFF_MESSAGE,
    format_currency,
    print_comparison,
    print_summary,
    schedule_to_rows,
    summary_to_dict,
)
from card_payoff.utils import add_months, debt_free_date, decimal_from_str, parse_amount, parse_percent


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 11, 15), 2, date(2025, 1, 15)),
        (date(2024, 5, 10), 0, date(2024, 5, 10)),
        (date(2024, 5, 10), 600, date(2074, 5, 10)),
    ],
)
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected


def test_debt_free_date_from_start():
    assert debt_free_date(40, date(2026, 10, 19)) == date(2030, 2, 19)


def test_debt_free_date_defaults_to_today():
    assert debt_free_date(0) == date.today()


def test_debt_free_date_rejects_negative():
    with pytest.raises(ValueError):
        debt_free_date(-1, date(2026, 1, 1))


def test_parse_amount():
    assert parse_amount("1.5k") == Decimal("1500")
    assert parse_amount("$2,000") == Decimal("2000")
    assert parse_amount(" 250 ") == Decimal("250")
    assert parse_amount("1m") == Decimal("1000000")


def test_parse_percent():
    assert parse_percent("18%") == Decimal("18")
    assert parse_percent("0.5") == Decimal("0.5")


@pytest.mark.parametrize("value", ["abc", "", "nan", "12..5"])
def test_decimal_from_str_rejects_garbage(value):
    with pytest.raises(ValueError):
        decimal_from_str(value)


def test_format_currency():
    assert format_currency(Decimal("1234.565")) == "$1,234.57"
    assert format_currency(Decimal("-5")) == "-$5.00"
    assert format_currency(0) == "$0.00"


def test_schedule_rows_are_rounded(card):
    schedule, _ = compute_schedule(card)
    rows = schedule_to_rows(schedule)
    assert rows[0]["ending_balance"] == 990.0
    assert rows[0]["interest"] == 15.0
    assert rows[1]["interest"] == 14.85
    assert len(rows) == len(schedule)


def test_summary_dict_includes_debt_free_date_only_when_paid_off(card, stuck_card):
    _, summary = compute_schedule(card)
    data = summary_to_dict(summary, date(2026, 1, 1))
    assert data["paid_off"] is True
    assert data["debt_free_date"] == "2026-01-01"

    _, stuck = compute_schedule(stuck_card)
    data = summary_to_dict(stuck, date(2026, 1, 1))
    assert data["paid_off"] is False
    assert "debt_free_date" not in data


def test_print_summary_warns_when_not_paid_off(stuck_card, capsys):
    _, summary = compute_schedule(stuck_card)
    print_summary(summary)
    out = capsys.readouterr().out
    assert NOT_PAID_OFF_MESSAGE in out
    assert "600 months" in out


def test_print_summary_shows_debt_free_date(card, capsys):
    _, summary = compute_schedule(card)
    print_summary(summary, date(2030, 2, 19))
    out = capsys.readouterr().out
    assert "February 19, 2030" in out
    assert NOT_PAID_OFF_MESSAGE not in out


def test_print_comparison_marks_missing_savings(stuck_card, capsys):
    print_comparison([compare_scenarios(stuck_card, 100)])
    out = capsys.readouterr().out
    assert "n/a" in out
    assert "$100.00" in out
