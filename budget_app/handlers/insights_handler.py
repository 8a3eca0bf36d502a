# handlers/insights_handler.py
import datetime
from io import BytesIO

import matplotlib

matplotlib.use('Agg')  # Use non-GUI backend for image generation
import matplotlib.pyplot as plt
from flask import Blueprint, current_app, request, jsonify, send_file
from flask_login import login_required, current_user

from budget_app import insights
from budget_app.errors import ValidationError
from budget_app.ledger import budget_snapshot
from budget_app.utils.db import get_session
from budget_app.utils.parsing import parse_int_arg, parse_month_index, parse_bool_arg

insights_bp = Blueprint("insights", __name__, url_prefix="/api/insights")

ALL_WITHIN_LIMITS = "All budgets are within limits. Great job!"


def current_snapshot():
    return budget_snapshot(get_session(), current_user.id)


@insights_bp.route("/usage", methods=["GET"])
@login_required
def usage():
    budgets, transactions = current_snapshot()
    report = insights.budget_usage_report(budgets, transactions)
    return jsonify([
        dict(usage.to_dict(), id=budget.id)
        for budget, usage in zip(budgets, report)
    ])


@insights_bp.route("/overspent", methods=["GET"])
@login_required
def overspent():
    limit = parse_int_arg(request.args.get("limit"), "limit", current_app.config["OVERSPENT_LIMIT"])
    if limit < 1:
        raise ValidationError("limit must be at least 1")
    budgets, transactions = current_snapshot()
    top = insights.top_overspent_categories(budgets, transactions, limit=limit)
    payload = {"categories": [entry.to_dict() for entry in top]}
    if not top:
        payload["message"] = ALL_WITHIN_LIMITS
    return jsonify(payload)


@insights_bp.route("/monthly", methods=["GET"])
@login_required
def monthly():
    today = datetime.date.today()
    month_index = parse_month_index(request.args.get("month"), default=today.month - 1)
    across_years = parse_bool_arg(request.args.get("all_years"))
    year = parse_int_arg(request.args.get("year"), "year", today.year)
    budgets, transactions = current_snapshot()
    stats = insights.monthly_rollup(budgets, transactions, month_index,
                                    year=year, across_years=across_years)
    return jsonify({
        "month": month_index,
        "year": None if across_years else year,
        "budgets": [stat.to_dict() for stat in stats],
    })


@insights_bp.route("/totals", methods=["GET"])
@login_required
def totals():
    _, transactions = current_snapshot()
    return jsonify(insights.totals(transactions).to_dict())


@insights_bp.route("/chart.png", methods=["GET"])
@login_required
def usage_chart():
    budgets, transactions = current_snapshot()
    buf = build_usage_chart(insights.budget_usage_report(budgets, transactions))
    return send_file(buf, mimetype="image/png")


STATUS_COLORS = {
    insights.SAFE: "tab:green",
    insights.WARNING: "tab:orange",
    insights.DANGER: "tab:red",
}


def build_usage_chart(report) -> BytesIO:
    """Bar chart of spent against allotted amount per budget."""
    labels = [u.category for u in report] or ['No budgets']
    allotted = [float(u.amount) for u in report] or [0]
    spent = [float(u.spent) for u in report] or [0]
    colors = [STATUS_COLORS[u.status] for u in report] or ["tab:gray"]
    positions = range(len(labels))

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar([p - 0.2 for p in positions], allotted, width=0.4, label='Budget', color="lightgray")
    ax.bar([p + 0.2 for p in positions], spent, width=0.4, label='Spent', color=colors)
    ax.set_xticks(list(positions))
    ax.set_xticklabels(labels, rotation=30, ha="right")
    ax.set_title('Spending vs. budget')
    ax.legend()
    fig.tight_layout()

    buf = BytesIO()
    fig.savefig(buf, format='png')
    buf.seek(0)
    plt.close(fig)
    return buf
