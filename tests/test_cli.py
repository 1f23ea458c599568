"""Tests for the click command-line interface."""

import csv
import json

from click.testing import CliRunner

from card_payoff.main import cli

CARD = ["-p", "1000", "-r", "18", "-m", "25"]


def run(*args):
    return CliRunner().invoke(cli, list(args))


def test_summary_prints_metrics():
    result = run("summary", *CARD)
    assert result.exit_code == 0, result.output
    assert "Total interest" in result.output
    assert "Debt-free date" in result.output


def test_schedule_prints_table():
    result = run("schedule", *CARD)
    assert result.exit_code == 0, result.output
    assert "Month\tStartBal" in result.output
    assert "1\t1000.00\t25.00\t25.00\t10.00\t15.00\t990.00" in result.output


def test_schedule_truncates_long_output():
    result = run("schedule", "-p", "1000", "-r", "30", "-m", "1")
    assert result.exit_code == 0, result.output
    assert "showing first 120 rows" in result.output
    assert "will not pay off" in result.output


def test_schedule_json_export(tmp_path):
    path = tmp_path / "plan.json"
    result = run("schedule", *CARD, "-a", "50", "--output", str(path))
    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text())
    assert data["schedule"][0]["payment"] == 75.0
    assert data["schedule"][0]["ending_balance"] == 940.0
    assert data["summary"]["months_to_payoff"] == len(data["schedule"])
    assert data["summary"]["paid_off"] is True
    assert "debt_free_date" in data["summary"]


def test_schedule_csv_export(tmp_path):
    path = tmp_path / "plan.csv"
    result = run("schedule", *CARD, "--output", str(path))
    assert result.exit_code == 0, result.output
    with path.open(newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Month"
    assert rows[1][0] == "1"
    assert float(rows[1][6]) == 990.0


def test_schedule_rejects_unknown_export(tmp_path):
    result = run("schedule", *CARD, "--output", str(tmp_path / "plan.txt"))
    assert result.exit_code == 2
    assert "Unsupported output format" in result.output


def test_summary_json_export(tmp_path):
    path = tmp_path / "summary.json"
    result = run("summary", *CARD, "--output", str(path))
    assert result.exit_code == 0, result.output
    assert json.loads(path.read_text())["summary"]["paid_off"] is True


def test_compare_json():
    result = run("compare", *CARD, "--extra", "50", "--extra", "100", "--json")
    assert result.exit_code == 0, result.output
    comparisons = json.loads(result.output)["comparisons"]
    assert [c["extra_payment"] for c in comparisons] == [50.0, 100.0]
    assert comparisons[0]["interest_saved"] > 0
    assert comparisons[1]["interest_saved"] > comparisons[0]["interest_saved"]
    assert comparisons[1]["new_months_to_payoff"] < comparisons[0]["new_months_to_payoff"]


def test_compare_table():
    result = run("compare", *CARD, "--extra", "50")
    assert result.exit_code == 0, result.output
    assert "Comparison" in result.output
    assert "$50.00" in result.output


def test_compare_rejects_negative_extra():
    result = run("compare", *CARD, "--extra", "-5")
    assert result.exit_code == 2
    assert "extra_payment" in result.output


def test_scenarios_json():
    result = run("scenarios", *CARD, "-q", "1.5", "--json")
    assert result.exit_code == 0, result.output
    comparisons = json.loads(result.output)["comparisons"]
    assert [c["extra_payment"] for c in comparisons] == [10.0, 25.0, 50.0]
    assert all(c["converged"] for c in comparisons)


def test_invalid_principal_is_usage_error():
    result = run("summary", "-p", "0", "-r", "18")
    assert result.exit_code == 2
    assert "principal must be greater than 0" in result.output


def test_unparseable_amount_is_usage_error():
    result = run("summary", "-p", "lots", "-r", "18")
    assert result.exit_code == 2
    assert "--principal" in result.output


def test_amount_shorthand_accepted():
    result = run("summary", "-p", "1.5k", "-r", "18%")
    assert result.exit_code == 0, result.output


def test_verbose_flag():
    result = run("-v", "summary", "-p", "1000", "-r", "30", "-m", "1")
    assert result.exit_code == 0, result.output
