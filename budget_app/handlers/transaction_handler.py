# handlers/transaction_handler.py
from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from budget_app.ledger import LedgerStore
from budget_app.utils.db import get_session
from budget_app.utils.parsing import (
    require_fields, parse_amount, parse_date, parse_direction, parse_int_arg,
)

transaction_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


def current_store():
    return LedgerStore(get_session(), current_user.id)


def parse_transaction(data):
    """Validated (description, amount, date, category) from a request body."""
    amount, date, category = require_fields(data, "amount", "date", "category")
    amount = parse_amount(amount)
    parse_direction(amount, data.get("type"))
    description = str(data.get("description") or "").strip()
    return description, amount, parse_date(date), str(category).strip()


@transaction_bp.route("", methods=["GET"])
@login_required
def list_transactions():
    return jsonify([t.to_dict() for t in current_store().list_transactions()])


@transaction_bp.route("", methods=["POST"])
@login_required
def create_transaction():
    description, amount, date, category = parse_transaction(request.get_json(silent=True) or {})
    transaction = current_store().create_transaction(description, amount, date, category)
    return jsonify(transaction.to_dict()), 201


@transaction_bp.route("", methods=["PUT"])
@login_required
def update_transaction():
    data = request.get_json(silent=True) or {}
    transaction_id = parse_int_arg(data.get("id"), "id")
    description, amount, date, category = parse_transaction(data)
    transaction = current_store().update_transaction(transaction_id, description, amount, date, category)
    return jsonify(transaction.to_dict())


@transaction_bp.route("", methods=["DELETE"])
@login_required
def delete_transaction():
    transaction_id = parse_int_arg(request.args.get("id"), "id")
    current_store().delete_transaction(transaction_id)
    return jsonify({"message": "Transaction deleted successfully", "id": transaction_id})
