import logging
import os
from uuid import uuid4

from flask import Flask, jsonify, redirect, render_template, request, session, url_for
from werkzeug.exceptions import HTTPException

from card_payoff.data_models import PayoffParameters
from card_payoff.engine import (
    InvalidParameterError,
    compare_scenarios,
    compute_schedule,
    payment_scenarios,
)
from card_payoff.formatter import (
    NOT_PAID_OFF_MESSAGE,
    comparison_to_dict,
    format_currency,
    format_date,
    schedule_to_rows,
    summary_to_dict,
)
from card_payoff.utils import debt_free_date, decimal_from_str
from card_payoff_web.debt_store import DEBT_TYPES, create_store_from_env

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
debt_store = create_store_from_env(os.environ.get("DEBT_DATABASE_URL"))

PREVIEW_ROWS = 120
CHART_WIDTH = 600
CHART_HEIGHT = 200

# Values the calculator page opens with.
FORM_DEFAULTS = {
    "principal": "1000",
    "apr": "18",
    "minimum_payment": "25",
    "required_principal_percentage": "1.5",
    "additional_payment": "0",
}

# Applied when a request leaves an optional field blank.
OPTIONAL_DEFAULTS = {
    "minimum_payment": "25",
    "required_principal_percentage": "1.5",
    "additional_payment": "0",
}


def _ensure_user_token() -> str:
    token = session.get("user_token")
    if not token:
        token = uuid4().hex
        session["user_token"] = token
        session.modified = True
    return token


def _field(data, name: str):
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        return OPTIONAL_DEFAULTS.get(name)
    if isinstance(value, str):
        try:
            return decimal_from_str(value)
        except ValueError as exc:
            raise InvalidParameterError(name, str(exc)) from exc
    return value


def _params_from_data(data) -> PayoffParameters:
    """Build parameters from a form or JSON body; the engine validates ranges."""
    return PayoffParameters(
        principal=_field(data, "principal"),
        apr=_field(data, "apr"),
        minimum_payment=_field(data, "minimum_payment"),
        required_principal_percentage=_field(data, "required_principal_percentage"),
        additional_payment=_field(data, "additional_payment"),
    )


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidParameterError("body", "request body must be a JSON object")
    return data


def _balance_chart(rows) -> dict:
    """Scale the balance at the end of each month into SVG polyline points."""
    peak = max([rows[0]["starting_balance"]] + [row["ending_balance"] for row in rows]) or 1.0
    months = len(rows)
    points = [(0.0, rows[0]["starting_balance"])] + [(row["month"], row["ending_balance"]) for row in rows]
    return {
        "width": CHART_WIDTH,
        "height": CHART_HEIGHT,
        "months": months,
        "peak": peak,
        "points": " ".join(
            f"{month / months * CHART_WIDTH:.1f},{CHART_HEIGHT - balance / peak * CHART_HEIGHT:.1f}"
            for month, balance in points
        ),
    }


def _payoff_payload(params: PayoffParameters, full_schedule: bool = True, with_chart: bool = False) -> dict:
    schedule, summary = compute_schedule(params)
    debt_free = debt_free_date(summary.months_to_payoff)
    rows = schedule_to_rows(schedule)
    payload = {
        "summary": summary_to_dict(summary, debt_free),
        "schedule": rows if full_schedule else rows[:PREVIEW_ROWS],
    }
    if with_chart:
        payload["chart"] = _balance_chart(rows)
    if not full_schedule and len(rows) > PREVIEW_ROWS:
        payload["truncated"] = len(rows) - PREVIEW_ROWS
    if not summary.paid_off:
        payload["warning"] = NOT_PAID_OFF_MESSAGE
    return payload


def _invalid(exc: InvalidParameterError):
    return jsonify({"error": str(exc), "field": exc.field}), 422


@app.errorhandler(Exception)
def _unexpected_error(exc):
    if isinstance(exc, HTTPException):
        return exc
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"error": "Internal server error"}), 500


@app.route("/", methods=["GET", "POST"])
def index():
    result = None
    scenarios = []
    error = None
    form_values = dict(FORM_DEFAULTS)

    user_token = _ensure_user_token()

    if request.method == "POST":
        form_values.update({k: request.form.get(k, "") for k in FORM_DEFAULTS})
        show_full_schedule = request.form.get("show_full_schedule") == "1"
        try:
            params = _params_from_data(request.form)
            result = _payoff_payload(params, full_schedule=show_full_schedule, with_chart=True)
            scenarios = [comparison_to_dict(c) for c in payment_scenarios(params)]
        except InvalidParameterError as exc:
            error = str(exc)

    debt_free_text = None
    if result and result["summary"].get("debt_free_date"):
        debt_free_text = format_date(debt_free_date(result["summary"]["months_to_payoff"]))

    return render_template(
        "index.html",
        result=result,
        scenarios=scenarios,
        error=error,
        form_values=form_values,
        debt_free_text=debt_free_text,
        format_currency=format_currency,
        debts=debt_store.list_debts(user_token),
        debt_types=DEBT_TYPES,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.post("/api/payoff")
def api_payoff():
    try:
        data = _json_body()
        params = _params_from_data(data)
        return jsonify(_payoff_payload(params))
    except InvalidParameterError as exc:
        return _invalid(exc)


@app.post("/api/compare")
def api_compare():
    try:
        data = _json_body()
        params = _params_from_data(data)
        extra = data.get("extra_payment")
        if extra is None:
            comparisons = payment_scenarios(params)
        else:
            comparisons = [compare_scenarios(params, extra)]
    except InvalidParameterError as exc:
        return _invalid(exc)
    return jsonify({"comparisons": [comparison_to_dict(c) for c in comparisons]})


@app.get("/api/debts")
def list_debts():
    user_token = _ensure_user_token()
    return jsonify({"debts": debt_store.list_debts(user_token)})


@app.post("/api/debts")
def add_debt():
    user_token = _ensure_user_token()
    if request.is_json:
        try:
            data = _json_body()
        except InvalidParameterError as exc:
            return _invalid(exc)
    else:
        data = request.form
    creditor_name = str(data.get("creditor_name") or "").strip()
    debt_type = str(data.get("debt_type") or "").strip().lower()
    if not creditor_name:
        return jsonify({"error": "creditor_name is required", "field": "creditor_name"}), 422
    if debt_type not in DEBT_TYPES:
        return jsonify({"error": f"debt_type must be one of {', '.join(DEBT_TYPES)}", "field": "debt_type"}), 422
    try:
        balance = decimal_from_str(str(data.get("balance", "")))
        interest_rate = decimal_from_str(str(data.get("interest_rate", "")))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 422
    if balance <= 0 or not 0 <= interest_rate <= 100:
        return jsonify({"error": "balance must be positive and interest_rate between 0 and 100"}), 422

    debt_id = uuid4().hex
    try:
        debt_store.add_debt(user_token, debt_id, creditor_name, debt_type, balance, interest_rate)
    except Exception:
        logger.exception("Error saving debt information")
        return jsonify({"message": "Error saving debt information"}), 500

    if request.is_json:
        return jsonify({"message": "Debt information saved successfully", "id": debt_id}), 201
    return redirect(url_for("index"))


@app.post("/api/debts/<debt_id>/delete")
def remove_debt(debt_id):
    user_token = session.get("user_token")
    removed = debt_store.remove_debt(user_token, debt_id)
    if request.is_json:
        return jsonify({"removed": removed}), 200 if removed else 404
    return redirect(url_for("index"))


@app.post("/api/debts/clear")
def clear_debts():
    user_token = session.get("user_token")
    debt_store.clear_debts(user_token)
    return redirect(url_for("index"))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting card payoff web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
