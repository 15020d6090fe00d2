import logging
import os
from datetime import date

from flask import Flask, Response, jsonify, render_template, request

from loan_sim.engine import calculate
from loan_sim.formatter import (
    CSV_CONTENT_TYPE,
    CSV_HEADERS,
    CSV_FILENAME,
    PLACEHOLDER_MESSAGE,
    estimate_line,
    format_currency,
    schedule_to_csv,
    summary_line,
)
from loan_sim.utils import check_separators, parse_currency_number, parse_rate, parse_term

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["GROUPING_SEPARATOR"] = os.environ.get("LOAN_SIM_GROUPING_SEPARATOR", ",")
app.config["DECIMAL_SEPARATOR"] = os.environ.get("LOAN_SIM_DECIMAL_SEPARATOR", ".")
app.config["CSV_LABELS"] = os.environ.get("LOAN_SIM_CSV_LABELS", "es")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")


def validate_config(config) -> None:
    """Reject separator and CSV label settings the app cannot work with."""
    check_separators(config["GROUPING_SEPARATOR"], config["DECIMAL_SEPARATOR"])
    if config["CSV_LABELS"] not in CSV_HEADERS:
        raise ValueError(
            f"Unknown LOAN_SIM_CSV_LABELS {config['CSV_LABELS']!r}; use one of {sorted(CSV_HEADERS)}"
        )


validate_config(app.config)

app.logger.setLevel(os.environ.get("LOAN_SIM_LOG_LEVEL", "INFO").upper())
logging.getLogger("loan_sim").setLevel(app.logger.level)

TABLE_PLACEHOLDER = "Calcula para ver tu plan."
SUMMARY_PLACEHOLDER = "—"

# Field ids of each simulator: price, down payment, term, rate.
QUICK_FIELDS = ("precio", "enganche", "plazo", "tasa")
DETAILED_FIELDS = ("precio2", "enganche2", "plazo2", "tasa2")


def _form_to_result(form, fields):
    """Parse one simulator's fields and run the engine (``None`` if incomplete)."""
    price_field, down_field, term_field, rate_field = fields
    grouping = app.config["GROUPING_SEPARATOR"]
    decimal = app.config["DECIMAL_SEPARATOR"]
    result = calculate(
        parse_currency_number(form.get(price_field), grouping, decimal),
        parse_currency_number(form.get(down_field), grouping, decimal),
        parse_term(form.get(term_field)),
        parse_rate(form.get(rate_field)),
    )
    if result is None:
        app.logger.info("Insufficient input for %s simulator", price_field)
    return result


def _serialize_schedule(schedule):
    """Convert schedule rows into JSON-serialisable dictionaries."""
    return [
        {
            "period": row.period,
            "payment": row.payment,
            "interest": row.interest,
            "principal": row.principal,
            "balance": row.balance,
        }
        for row in schedule
    ]


def _quick_view(result):
    if result is None:
        return {"message": PLACEHOLDER_MESSAGE}
    return {"message": estimate_line(result, with_total=True)}


def _detailed_view(result):
    if result is None:
        return {
            "message": PLACEHOLDER_MESSAGE,
            "summary": SUMMARY_PLACEHOLDER,
            "rows": [],
        }
    return {
        "message": estimate_line(result, with_total=False),
        "summary": summary_line(result),
        "rows": result.schedule,
    }


@app.template_filter("currency")
def currency_filter(value):
    return format_currency(value)


@app.route("/", methods=["GET", "POST"])
def index():
    quick = None
    detailed = None
    values = {}

    if request.method == "POST":
        values = request.form.to_dict()
        which = request.form.get("form", "quick")
        if which == "detailed":
            detailed = _detailed_view(_form_to_result(request.form, DETAILED_FIELDS))
        else:
            quick = _quick_view(_form_to_result(request.form, QUICK_FIELDS))

    return render_template(
        "index.html",
        quick=quick,
        detailed=detailed,
        values=values,
        table_placeholder=TABLE_PLACEHOLDER,
        summary_placeholder=SUMMARY_PLACEHOLDER,
        asset_version=app.config["ASSET_VERSION"],
        current_year=date.today().year,
    )


@app.post("/export.csv")
def export_csv():
    result = _form_to_result(request.form, DETAILED_FIELDS)
    if result is None:
        return Response(status=204)
    content = schedule_to_csv(result, labels=app.config["CSV_LABELS"])
    return Response(
        content.encode("utf-8"),
        content_type=CSV_CONTENT_TYPE,
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )


@app.post("/api/calculate")
def api_calculate():
    form = request.get_json(silent=True) or request.form
    result = _form_to_result(form, ("price", "down_payment", "term", "rate"))
    if result is None:
        return jsonify({"error": PLACEHOLDER_MESSAGE}), 422
    return jsonify(
        {
            "monthly_payment": result.monthly_payment,
            "total_paid": result.total_paid,
            "principal": result.principal,
            "negative_amortization": result.negative_amortization,
            "schedule": _serialize_schedule(result.schedule),
        }
    )


if __name__ == "__main__":
    print("Starting Loan Simulator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
