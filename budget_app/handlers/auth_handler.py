# handlers/auth_handler.py
import logging

from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user

from budget_app.ledger import create_user, authenticate
from budget_app.utils.db import get_session
from budget_app.utils.parsing import require_text, parse_optional_text

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/signup", methods=["POST"])
def signup():
    data = request.get_json(silent=True) or {}
    email, password = require_text(data, "email", "password",
                                   message="Email and password are required")
    name = parse_optional_text(data.get("name"), "name")
    user = create_user(get_session(), email.strip(), password, name=name)
    return jsonify({"message": "User created successfully", "userId": user.id}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email, password = require_text(data, "email", "password",
                                   message="Email and password are required")
    user = authenticate(get_session(), email.strip(), password)
    login_user(user, remember=bool(data.get("remember")))
    logger.info("user %s logged in", user.id)
    return jsonify(user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    user_id = current_user.id
    logout_user()
    logger.info("user %s logged out", user_id)
    return jsonify({"message": "Logged out"})
