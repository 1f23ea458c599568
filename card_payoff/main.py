"""Command-line interface for the payoff calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full payoff schedules, view summaries, compare
the baseline plan against extra monthly payments, or print the standard
"pay a little more" scenarios. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import functools
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .data_models import PayoffParameters, PayoffSummary, ScheduleEntry
from .engine import (
    InvalidParameterError,
    compare_scenarios,
    compute_schedule,
    payment_scenarios,
    validate_parameters,
)
from .formatter import (
    comparison_to_dict,
    print_comparison,
    print_schedule,
    print_summary,
    schedule_to_rows,
    summary_to_dict,
)
from .utils import debt_free_date, parse_amount, parse_percent

logger = logging.getLogger(__name__)

MAX_SCREEN_ROWS = 120


def _amount(value: str, name: str):
    try:
        return parse_amount(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def _percent(value: str, name: str):
    try:
        return parse_percent(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def build_params_from_options(
    principal: str,
    apr: str,
    minimum_payment: str,
    required_principal: str = "0",
    additional: str = "0",
) -> PayoffParameters:
    """Parse raw option strings and return validated ``PayoffParameters``."""
    params = PayoffParameters(
        principal=_amount(principal, "--principal"),
        apr=_percent(apr, "--apr"),
        minimum_payment=_amount(minimum_payment, "--minimum-payment"),
        required_principal_percentage=_percent(required_principal, "--required-principal"),
        additional_payment=_amount(additional, "--additional"),
    )
    try:
        return validate_parameters(params)
    except InvalidParameterError as exc:
        raise click.BadParameter(str(exc), param_hint=f"--{exc.field.replace('_', '-')}")


def export_to_json(path: Path, schedule: List[ScheduleEntry], summary: PayoffSummary) -> None:
    """Export schedule and summary to a JSON file."""
    data = {
        "summary": summary_to_dict(summary, debt_free_date(summary.months_to_payoff)),
        "schedule": schedule_to_rows(schedule),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[ScheduleEntry]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Starting_Balance",
        "Interest",
        "Required_Payment",
        "Payment",
        "Principal",
        "Ending_Balance",
        "Cumulative_Principal",
        "Cumulative_Interest",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in schedule_to_rows(schedule):
            writer.writerow(
                [
                    row["month"],
                    row["starting_balance"],
                    row["interest"],
                    row["required_payment"],
                    row["payment"],
                    row["principal"],
                    row["ending_balance"],
                    row["cumulative_principal"],
                    row["cumulative_interest"],
                ]
            )


def payoff_options(func):
    """Attach the options shared by every command that runs a simulation."""

    @click.option("--principal", "-p", "principal", required=True, help="Current card balance")
    @click.option("--apr", "-r", "apr", required=True, help="Annual percentage rate (percent)")
    @click.option("--minimum-payment", "-m", "minimum_payment", default="25", show_default=True, help="Minimum payment floor")
    @click.option(
        "--required-principal",
        "-q",
        "required_principal",
        default="0",
        show_default=True,
        help="Percent of the balance that must be repaid as principal each month",
    )
    @click.option("--additional", "-a", "additional", default="0", show_default=True, help="Extra payment every month")
    @functools.wraps(func)
    def wrapper(principal, apr, minimum_payment, required_principal, additional, **kwargs):
        params = build_params_from_options(principal, apr, minimum_payment, required_principal, additional)
        return func(params, **kwargs)

    return wrapper


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line credit-card payoff calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@payoff_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(params: PayoffParameters, output: Optional[str]) -> None:
    """Compute and print the full payoff schedule."""
    schedule_entries, summary = compute_schedule(params)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, schedule_entries, summary)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule_entries)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        logger.info("Exported %d rows to %s", len(schedule_entries), path)
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(summary, debt_free_date(summary.months_to_payoff))
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule_entries) > MAX_SCREEN_ROWS:
        click.echo(
            f"Schedule has {len(schedule_entries)} rows; showing first {MAX_SCREEN_ROWS} rows."
        )
        print_schedule(schedule_entries[:MAX_SCREEN_ROWS])
    else:
        print_schedule(schedule_entries)


@cli.command()
@payoff_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(params: PayoffParameters, output: Optional[str]) -> None:
    """Compute and print only the summary metrics."""
    _, summary_data = compute_schedule(params)
    debt_free = debt_free_date(summary_data.months_to_payoff)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_to_dict(summary_data, debt_free)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data, debt_free)


@cli.command()
@payoff_options
@click.option("--extra", "-e", "extra", multiple=True, required=True, help="Extra monthly payment to compare (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Print the comparison as JSON")
def compare(params: PayoffParameters, extra: Tuple[str, ...], as_json: bool) -> None:
    """Compare the minimum-payment plan against paying extra each month.

    Example:

        card-payoff compare -p 5000 -r 22.9 -m 35 --extra 50 --extra 100
    """
    comparisons = []
    for value in extra:
        try:
            comparisons.append(compare_scenarios(params, _amount(value, "--extra")))
        except InvalidParameterError as exc:
            raise click.BadParameter(str(exc), param_hint="--extra")
    _emit_comparisons(comparisons, as_json)


@cli.command()
@payoff_options
@click.option("--json", "as_json", is_flag=True, help="Print the scenarios as JSON")
def scenarios(params: PayoffParameters, as_json: bool) -> None:
    """Show how much paying $10, $25 or $50 more each month would save."""
    _emit_comparisons(payment_scenarios(params), as_json)


def _emit_comparisons(comparisons, as_json: bool) -> None:
    if as_json:
        payload: Dict[str, Any] = {"comparisons": [comparison_to_dict(c) for c in comparisons]}
        click.echo(json.dumps(payload, indent=2))
    else:
        print_comparison(comparisons)


if __name__ == "__main__":
    cli()
