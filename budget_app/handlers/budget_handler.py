# handlers/budget_handler.py
from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from budget_app.ledger import LedgerStore
from budget_app.utils.db import get_session
from budget_app.utils.parsing import require_fields, parse_amount, parse_int_arg

budget_bp = Blueprint("budget", __name__, url_prefix="/api/budget")


def current_store():
    return LedgerStore(get_session(), current_user.id)


def parse_budget(data):
    category, amount = require_fields(data, "category", "amount")
    return str(category).strip(), parse_amount(amount, allow_zero=True, allow_negative=False)


@budget_bp.route("", methods=["GET"])
@login_required
def list_budgets():
    return jsonify([b.to_dict() for b in current_store().list_budgets()])


@budget_bp.route("", methods=["POST"])
@login_required
def create_budget():
    category, amount = parse_budget(request.get_json(silent=True) or {})
    budget = current_store().create_budget(category, amount)
    return jsonify(budget.to_dict()), 201


@budget_bp.route("", methods=["PUT"])
@login_required
def update_budget():
    data = request.get_json(silent=True) or {}
    budget_id = parse_int_arg(data.get("id"), "id")
    category, amount = parse_budget(data)
    budget = current_store().update_budget(budget_id, category, amount)
    return jsonify(budget.to_dict())


@budget_bp.route("", methods=["DELETE"])
@login_required
def delete_budget():
    budget_id = parse_int_arg(request.args.get("id"), "id")
    current_store().delete_budget(budget_id)
    return jsonify({"message": "Budget deleted successfully"})
