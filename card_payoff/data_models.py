"""Data models for the credit-card payoff calculator.

This module defines dataclasses representing the entities used by the
calculator: the payoff parameters entered by the user, individual schedule
entries, the aggregate summary of a run and the comparison of two runs. All
money values are ``Decimal``; entries and summaries keep full precision and
expose ``rounded()`` for presentation.
"""

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")


def quantize_cents(value: Decimal) -> Decimal:
    """Round a money value to cents using half-up rounding."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class PayoffParameters:
    """Inputs of a single payoff simulation.

    Attributes
    ----------
    principal: Decimal
        Starting balance owed on the card.
    apr: Decimal
        Annual percentage rate, in percent (``18`` means 18 %).
    minimum_payment: Decimal
        Contractual floor; the required payment is never lower than this.
    required_principal_percentage: Decimal
        Percentage of the outstanding balance that must be repaid as
        principal each month, on top of that month's interest.
    additional_payment: Decimal
        Extra amount paid every month on top of the required payment.
    """

    principal: Decimal
    apr: Decimal
    minimum_payment: Decimal
    required_principal_percentage: Decimal = Decimal("0")
    additional_payment: Decimal = Decimal("0")

    def with_additional_payment(self, amount) -> "PayoffParameters":
        return replace(self, additional_payment=amount)


@dataclass
class ScheduleEntry:
    """One month of the payoff schedule.

    ``required_payment`` is the issuer minimum for the month (the larger of
    the floor and interest plus required principal) before any additional
    payment is added. ``principal`` is zero in months where the required
    payment only covers the interest.
    """

    month: int
    starting_balance: Decimal
    interest: Decimal
    required_payment: Decimal
    payment: Decimal
    principal: Decimal
    ending_balance: Decimal
    cumulative_principal: Decimal
    cumulative_interest: Decimal

    def rounded(self) -> "ScheduleEntry":
        return ScheduleEntry(
            month=self.month,
            starting_balance=quantize_cents(self.starting_balance),
            interest=quantize_cents(self.interest),
            required_payment=quantize_cents(self.required_payment),
            payment=quantize_cents(self.payment),
            principal=quantize_cents(self.principal),
            ending_balance=quantize_cents(self.ending_balance),
            cumulative_principal=quantize_cents(self.cumulative_principal),
            cumulative_interest=quantize_cents(self.cumulative_interest),
        )


@dataclass
class PayoffSummary:
    """Aggregate metrics of a payoff run.

    ``paid_off`` is False when the run stopped at the month cap with a
    balance still owed; in that case ``months_to_payoff`` equals the cap and
    ``final_balance`` is positive.
    """

    total_interest_paid: Decimal
    total_principal_paid: Decimal
    total_paid: Decimal
    months_to_payoff: int
    years_to_payoff: Decimal
    final_balance: Decimal
    last_payment: Decimal
    paid_off: bool

    def rounded(self) -> "PayoffSummary":
        return PayoffSummary(
            total_interest_paid=quantize_cents(self.total_interest_paid),
            total_principal_paid=quantize_cents(self.total_principal_paid),
            total_paid=quantize_cents(self.total_paid),
            months_to_payoff=self.months_to_payoff,
            years_to_payoff=quantize_cents(self.years_to_payoff),
            final_balance=quantize_cents(self.final_balance),
            last_payment=quantize_cents(self.last_payment),
            paid_off=self.paid_off,
        )


@dataclass
class ScenarioComparison:
    """Result of comparing a baseline plan against a plan with extra payments.

    ``interest_saved`` and ``months_saved`` are None when the baseline does
    not pay off within the month cap, since no meaningful saving exists.
    """

    extra_payment: Decimal
    baseline: PayoffSummary
    scenario: PayoffSummary
    interest_saved: Optional[Decimal]
    months_saved: Optional[int]

    @property
    def new_months_to_payoff(self) -> int:
        return self.scenario.months_to_payoff

    @property
    def converged(self) -> bool:
        return self.baseline.paid_off and self.scenario.paid_off
