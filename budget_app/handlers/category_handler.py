# handlers/category_handler.py
from flask import Blueprint, jsonify

from budget_app.utils.categories import INCOME_CATEGORIES, EXPENSE_CATEGORIES

category_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@category_bp.route("", methods=["GET"])
def categories():
    return jsonify({
        "income": list(INCOME_CATEGORIES),
        "expense": list(EXPENSE_CATEGORIES),
    })
