# handlers/monthly_report_handler.py
import datetime
import logging
from decimal import Decimal

from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from budget_app import insights
from budget_app.errors import ValidationError
from budget_app.models.budget import Budget
from budget_app.models.monthly_metric import MonthlyMetric
from budget_app.models.transaction import Transaction
from budget_app.models.user import User
from budget_app.utils.db import get_session

logger = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


# --------------------------------------------
# 1. Endpoint: report for one month (previous month by default)
# --------------------------------------------
@reports_bp.route("/monthly", methods=["GET"])
@login_required
def monthly_report():
    """
    Summary of one month with a comparison against the stored metric of the
    month before. The month's own metric is saved for the next comparison.
    """
    start, end = month_period(request.args.get("year_month"))
    session = get_session()
    user_id = current_user.id

    prev_metric = session.query(MonthlyMetric).filter(
        MonthlyMetric.user_id == user_id,
        MonthlyMetric.year_month == year_month_of(start - datetime.timedelta(days=1))
    ).first()

    data = collect_monthly_data(session, user_id, start, end)
    comparison = build_comparison(prev_metric, data)
    save_monthly_metric(session, user_id, year_month_of(start), data)

    return jsonify({
        "yearMonth": year_month_of(start),
        "start": start.isoformat(),
        "end": end.isoformat(),
        "totalIncome": float(data["total_income"]),
        "totalExpense": float(data["total_expense"]),
        "balance": float(data["balance"]),
        "categoryExpenses": {k: float(v) for k, v in data["cat_expenses"].items()},
        "categoryIncomes": {k: float(v) for k, v in data["cat_incomes"].items()},
        "overspent": [entry.to_dict() for entry in data["overspent"]],
        "comparison": comparison,
    })


# --------------------------------------------
# 2. Period helpers
# --------------------------------------------
def year_month_of(day: datetime.date) -> str:
    return day.strftime("%Y-%m")


def previous_month_period(today: datetime.date):
    first_of_current_month = today.replace(day=1)
    end_prev_month = first_of_current_month - datetime.timedelta(days=1)
    return end_prev_month.replace(day=1), end_prev_month


def month_period(year_month=None, today=None):
    """(first day, last day) of 'YYYY-MM', or of the previous month when not given."""
    if not year_month:
        return previous_month_period(today or datetime.date.today())
    try:
        start = datetime.datetime.strptime(year_month, "%Y-%m").date()
    except ValueError:
        raise ValidationError(f"Invalid year_month: {year_month!r} (expected YYYY-MM)")
    next_month = (start.replace(day=28) + datetime.timedelta(days=4)).replace(day=1)
    return start, next_month - datetime.timedelta(days=1)


# --------------------------------------------
# 3. Data for one month
# --------------------------------------------
def collect_monthly_data(session, user_id: int, start_dt: datetime.date, end_dt: datetime.date) -> dict:
    txs = session.query(Transaction).filter(
        Transaction.user_id == user_id,
        Transaction.date >= start_dt,
        Transaction.date <= end_dt
    ).all()
    budgets = session.query(Budget).filter(Budget.user_id == user_id).order_by(Budget.id).all()

    summary = insights.totals(txs)

    cat_expenses = {}
    cat_incomes = {}
    for t in txs:
        amount = insights.to_decimal(t.amount)
        if amount < 0:
            cat_expenses[t.category] = cat_expenses.get(t.category, Decimal("0")) - amount
        elif amount > 0:
            cat_incomes[t.category] = cat_incomes.get(t.category, Decimal("0")) + amount

    # every overspent budget of the month, not just the top few
    overspent = insights.top_overspent_categories(budgets, txs, limit=max(len(budgets), 1))

    return {
        "total_income": summary.income,
        "total_expense": summary.expenses,
        "balance": summary.balance,
        "cat_expenses": cat_expenses,
        "cat_incomes": cat_incomes,
        "overspent": overspent,
    }


# --------------------------------------------
# 4. Comparison with the previous month
# --------------------------------------------
def percent_change(previous, current):
    previous = insights.to_decimal(previous)
    if previous == 0:
        return None
    return float((insights.to_decimal(current) - previous) / previous * 100)


def build_comparison(prev_metric, data: dict):
    if not prev_metric:
        return None
    return {
        "previousYearMonth": prev_metric.year_month,
        "incomeChangePct": percent_change(prev_metric.total_income, data["total_income"]),
        "expenseChangePct": percent_change(prev_metric.total_expense, data["total_expense"]),
        "balanceDelta": float(insights.to_decimal(data["balance"]) - insights.to_decimal(prev_metric.balance)),
        "previousTopOverspentCategory": prev_metric.top_overspent_category,
    }


# --------------------------------------------
# 5. Persist the metric
# --------------------------------------------
def save_monthly_metric(session, user_id: int, year_month: str, data: dict) -> MonthlyMetric:
    metric = session.query(MonthlyMetric).filter(
        MonthlyMetric.user_id == user_id,
        MonthlyMetric.year_month == year_month
    ).first()
    if metric is None:
        metric = MonthlyMetric(user_id=user_id, year_month=year_month)
        session.add(metric)
    metric.total_income = data["total_income"]
    metric.total_expense = data["total_expense"]
    metric.balance = data["balance"]
    metric.overspent_count = len(data["overspent"])
    metric.top_overspent_category = data["overspent"][0].category if data["overspent"] else None
    session.commit()
    return metric


# --------------------------------------------
# 6. Scheduled job: snapshot the previous month for every user
# --------------------------------------------
def snapshot_monthly_metrics(session_factory, today=None) -> int:
    start, end = previous_month_period(today or datetime.date.today())
    year_month = year_month_of(start)
    session = session_factory()
    try:
        user_ids = [row.id for row in session.query(User.id).all()]
        for user_id in user_ids:
            data = collect_monthly_data(session, user_id, start, end)
            save_monthly_metric(session, user_id, year_month, data)
    except Exception:
        session.rollback()
        logger.exception("monthly metric snapshot for %s failed", year_month)
        raise
    finally:
        session.close()
    logger.info("saved %s monthly metrics for %s", len(user_ids), year_month)
    return len(user_ids)
