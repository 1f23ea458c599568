"""Core calculation engine for the credit-card payoff calculator.

This module simulates paying down a revolving balance month by month under
an issuer-style minimum payment rule: each month the required payment is
the larger of a flat floor and the month's interest plus a percentage of
the balance, and any additional payment is added on top. Results are
returned as a list of ``ScheduleEntry`` objects along with a
``PayoffSummary``. Scenario helpers compare a plan against the same plan
with extra monthly payments.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from decimal import Decimal, InvalidOperation, getcontext
from typing import Iterable, List, Tuple

from .data_models import PayoffParameters, PayoffSummary, ScenarioComparison, ScheduleEntry

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Hard stop for plans that never pay off (50 years).
MAX_MONTHS = 600

# Extra monthly amounts shown in the "what if you paid more" report.
SCENARIO_INCREMENTS = (10, 25, 50)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWELVE = Decimal("12")


class InvalidParameterError(ValueError):
    """Raised when payoff parameters are outside their allowed ranges."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


def _to_decimal(value, name: str) -> Decimal:
    if value is None:
        raise InvalidParameterError(name, f"{name} is required")
    if isinstance(value, bool):
        raise InvalidParameterError(name, f"{name} must be a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidParameterError(name, f"{name} must be a number; got {value!r}") from exc
    if not result.is_finite():
        raise InvalidParameterError(name, f"{name} must be a finite number")
    return result


def _check_range(value: Decimal, name: str, low: Decimal, high: Decimal) -> None:
    if value < low or value > high:
        raise InvalidParameterError(name, f"{name} must be between {low} and {high}; got {value}")


def validate_parameters(params: PayoffParameters) -> PayoffParameters:
    """Validate ``params`` and return a copy with every field as ``Decimal``.

    Raises
    ------
    InvalidParameterError
        If any value is missing, not numeric, or outside its range:
        ``principal > 0``, ``0 <= apr <= 100``, ``minimum_payment > 0``,
        ``0 <= required_principal_percentage <= 100`` and
        ``additional_payment >= 0``.
    """
    values = {f.name: _to_decimal(getattr(params, f.name), f.name) for f in fields(params)}

    if values["principal"] <= 0:
        raise InvalidParameterError("principal", "principal must be greater than 0")
    _check_range(values["apr"], "apr", ZERO, HUNDRED)
    if values["minimum_payment"] <= 0:
        raise InvalidParameterError("minimum_payment", "minimum_payment must be greater than 0")
    _check_range(
        values["required_principal_percentage"], "required_principal_percentage", ZERO, HUNDRED
    )
    if values["additional_payment"] < 0:
        raise InvalidParameterError("additional_payment", "additional_payment must be 0 or greater")

    return PayoffParameters(**values)


def compute_schedule(params: PayoffParameters) -> Tuple[List[ScheduleEntry], PayoffSummary]:
    """Compute the payoff schedule and summary for a card balance.

    Parameters
    ----------
    params: PayoffParameters
        The balance, rate and payment rule. Validated before any month is
        simulated.

    Returns
    -------
    schedule: List[ScheduleEntry]
        One entry per month, at most ``MAX_MONTHS`` entries. Values are kept
        at full precision; use ``ScheduleEntry.rounded()`` for display.
    summary: PayoffSummary
        Totals over the schedule. ``paid_off`` is False when the balance was
        still positive after ``MAX_MONTHS`` months.
    """
    params = validate_parameters(params)

    rate_per_month = params.apr / HUNDRED / TWELVE
    principal_share = params.required_principal_percentage / HUNDRED

    schedule: List[ScheduleEntry] = []
    balance = params.principal
    month = 0
    total_interest = ZERO
    total_principal = ZERO
    payment = ZERO

    while balance > 0 and month < MAX_MONTHS:
        month += 1
        starting_balance = balance
        interest = starting_balance * rate_per_month
        required_principal = starting_balance * principal_share
        required_payment = max(params.minimum_payment, interest + required_principal)
        payment = required_payment + params.additional_payment

        # Never pay more than it takes to clear the balance
        payoff_amount = starting_balance + interest
        if payment >= payoff_amount:
            payment = payoff_amount
            principal = payment - interest
            balance = ZERO
        else:
            principal = payment - interest
            balance = starting_balance - principal

        total_interest += interest
        total_principal += principal

        schedule.append(
            ScheduleEntry(
                month=month,
                starting_balance=starting_balance,
                interest=interest,
                required_payment=required_payment,
                payment=payment,
                principal=principal,
                ending_balance=balance,
                cumulative_principal=total_principal,
                cumulative_interest=total_interest,
            )
        )

    paid_off = balance <= 0
    if not paid_off:
        logger.debug(
            "Balance %s not paid off after %d months (apr=%s, minimum=%s)",
            balance,
            month,
            params.apr,
            params.minimum_payment,
        )

    summary = PayoffSummary(
        total_interest_paid=total_interest,
        total_principal_paid=total_principal,
        total_paid=total_interest + total_principal,
        months_to_payoff=month,
        years_to_payoff=Decimal(month) / TWELVE,
        final_balance=balance,
        last_payment=payment,
        paid_off=paid_off,
    )
    return schedule, summary


def _compare(baseline: PayoffParameters, scenario: PayoffParameters, extra: Decimal) -> ScenarioComparison:
    _, baseline_summary = compute_schedule(baseline)
    _, scenario_summary = compute_schedule(scenario)

    interest_saved = None
    months_saved = None
    if baseline_summary.paid_off:
        interest_saved = baseline_summary.total_interest_paid - scenario_summary.total_interest_paid
        months_saved = baseline_summary.months_to_payoff - scenario_summary.months_to_payoff
    else:
        logger.debug("Baseline plan does not pay off; interest saved is not reported")

    return ScenarioComparison(
        extra_payment=extra,
        baseline=baseline_summary,
        scenario=scenario_summary,
        interest_saved=interest_saved,
        months_saved=months_saved,
    )


def compare_scenarios(params: PayoffParameters, extra_payment) -> ScenarioComparison:
    """Compare the no-extra-payment plan against paying ``extra_payment`` more.

    Both runs share the balance, rate and minimum payment rule of ``params``;
    the baseline ignores ``params.additional_payment`` and uses zero.
    """
    extra = _to_decimal(extra_payment, "extra_payment")
    if extra < 0:
        raise InvalidParameterError("extra_payment", "extra_payment must be 0 or greater")
    return _compare(
        params.with_additional_payment(ZERO),
        params.with_additional_payment(extra),
        extra,
    )


def payment_scenarios(
    params: PayoffParameters, increments: Iterable = SCENARIO_INCREMENTS
) -> List[ScenarioComparison]:
    """Compare the plan in ``params`` against paying each increment more.

    Unlike ``compare_scenarios`` the baseline keeps the user's own additional
    payment, and every scenario pays that amount plus the increment.
    """
    params = validate_parameters(params)
    comparisons = []
    for increment in increments:
        step = _to_decimal(increment, "increment")
        if step < 0:
            raise InvalidParameterError("increment", "increment must be 0 or greater")
        comparisons.append(
            _compare(params, params.with_additional_payment(params.additional_payment + step), step)
        )
    return comparisons
