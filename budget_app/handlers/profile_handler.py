# handlers/profile_handler.py
from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from budget_app.ledger import update_profile, change_password
from budget_app.utils.db import get_session
from budget_app.utils.parsing import require_text

profile_bp = Blueprint("profile", __name__, url_prefix="/api/profile")


@profile_bp.route("", methods=["GET"])
@login_required
def get_profile():
    return jsonify(current_user.to_dict())


@profile_bp.route("", methods=["PUT"])
@login_required
def put_profile():
    data = request.get_json(silent=True) or {}
    name, email = require_text(data, "name", "email", message="Name and email are required")
    user = update_profile(get_session(), current_user, name.strip(), email.strip())
    return jsonify(user.to_dict())


@profile_bp.route("/password", methods=["PUT"])
@login_required
def put_password():
    data = request.get_json(silent=True) or {}
    current, new = require_text(data, "currentPassword", "newPassword",
                                message="All password fields are required")
    change_password(get_session(), current_user, current, new)
    return jsonify({"message": "Password updated successfully"})
