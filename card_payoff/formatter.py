"""Output helpers for the payoff calculator.

This module renders schedules, summaries and scenario comparisons as plain
text tables, and converts them into JSON-ready dictionaries for the CLI
exporters and the web API. Values are rounded to cents here and nowhere
else; the engine's numbers are never modified.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from .data_models import PayoffSummary, ScenarioComparison, ScheduleEntry, quantize_cents

NOT_PAID_OFF_MESSAGE = "This payment plan will not pay off your balance"


def format_currency(value: Decimal) -> str:
    """Format a money value as US dollars, e.g. ``$1,234.56``."""
    amount = quantize_cents(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: date) -> str:
    return value.strftime("%B %d, %Y")


def schedule_to_rows(schedule: Iterable[ScheduleEntry]) -> List[Dict[str, Any]]:
    """Convert schedule entries into JSON-serialisable dictionaries."""
    rows = []
    for entry in schedule:
        e = entry.rounded()
        rows.append(
            {
                "month": e.month,
                "starting_balance": float(e.starting_balance),
                "interest": float(e.interest),
                "required_payment": float(e.required_payment),
                "payment": float(e.payment),
                "principal": float(e.principal),
                "ending_balance": float(e.ending_balance),
                "cumulative_principal": float(e.cumulative_principal),
                "cumulative_interest": float(e.cumulative_interest),
            }
        )
    return rows


def summary_to_dict(summary: PayoffSummary, debt_free: Optional[date] = None) -> Dict[str, Any]:
    s = summary.rounded()
    data: Dict[str, Any] = {
        "total_interest_paid": float(s.total_interest_paid),
        "total_principal_paid": float(s.total_principal_paid),
        "total_paid": float(s.total_paid),
        "months_to_payoff": s.months_to_payoff,
        "years_to_payoff": float(s.years_to_payoff),
        "final_balance": float(s.final_balance),
        "last_payment": float(s.last_payment),
        "paid_off": s.paid_off,
    }
    if debt_free is not None and summary.paid_off:
        data["debt_free_date"] = debt_free.isoformat()
    return data


def comparison_to_dict(comparison: ScenarioComparison) -> Dict[str, Any]:
    saved = comparison.interest_saved
    return {
        "extra_payment": float(quantize_cents(comparison.extra_payment)),
        "new_months_to_payoff": comparison.new_months_to_payoff,
        "months_saved": comparison.months_saved,
        "interest_saved": float(quantize_cents(saved)) if saved is not None else None,
        "converged": comparison.converged,
        "baseline": summary_to_dict(comparison.baseline),
        "scenario": summary_to_dict(comparison.scenario),
    }


def print_summary(summary: PayoffSummary, debt_free: Optional[date] = None) -> None:
    """Print a summary of payoff metrics in a human-readable format."""
    s = summary.rounded()
    print("Summary")
    print("-" * 72)
    print(f"Total interest     : {format_currency(s.total_interest_paid)}")
    print(f"Total principal    : {format_currency(s.total_principal_paid)}")
    print(f"Total paid         : {format_currency(s.total_paid)}")
    print(f"Time to payoff     : {s.years_to_payoff:.1f} years ({s.months_to_payoff} months)")
    if s.paid_off:
        if debt_free is not None:
            print(f"Debt-free date     : {format_date(debt_free)}")
    else:
        print(f"Balance remaining  : {format_currency(s.final_balance)}")
        print(NOT_PAID_OFF_MESSAGE)
    print("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry]) -> None:
    """Print the payoff schedule as a simple table."""
    headers = [
        "Month",
        "StartBal",
        "Required",
        "Payment",
        "Principal",
        "Interest",
        "EndBal",
    ]
    print("\t".join(headers))
    for entry in schedule:
        e = entry.rounded()
        row = [
            str(e.month),
            f"{e.starting_balance:.2f}",
            f"{e.required_payment:.2f}",
            f"{e.payment:.2f}",
            f"{e.principal:.2f}",
            f"{e.interest:.2f}",
            f"{e.ending_balance:.2f}",
        ]
        print("\t".join(row))


def print_comparison(comparisons: Iterable[ScenarioComparison]) -> None:
    """Print scenario comparisons, one row per extra payment.

    Rows whose baseline never pays off show ``n/a`` for the savings.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'Extra/month':>12s} {'Months':>8s} {'Saved months':>13s} {'Interest':>15s} {'Saved':>15s}")
    for c in comparisons:
        scenario = c.scenario.rounded()
        saved = format_currency(c.interest_saved) if c.interest_saved is not None else "n/a"
        months_saved = str(c.months_saved) if c.months_saved is not None else "n/a"
        print(
            f"{format_currency(c.extra_payment):>12s} {scenario.months_to_payoff:>8d} "
            f"{months_saved:>13s} {format_currency(scenario.total_interest_paid):>15s} {saved:>15s}"
        )
        if not c.scenario.paid_off:
            print(f"  {NOT_PAID_OFF_MESSAGE}")
    print("=" * 72)
