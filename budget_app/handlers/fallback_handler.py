#handlers/fallback_handler.py
import logging

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException

from budget_app.errors import LedgerError
from budget_app.utils.db import close_session

logger = logging.getLogger(__name__)

fallback_bp = Blueprint("fallback", __name__)


@fallback_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


def handle_ledger_error(error: LedgerError):
    logger.warning("request rejected (%s): %s", error.status_code, error.message)
    return jsonify({"error": error.message}), error.status_code


def handle_http_error(error: HTTPException):
    return jsonify({"error": error.name}), error.code


def handle_unexpected_error(error: Exception):
    logger.exception("unhandled error")
    close_session(error)
    return jsonify({"error": "Internal Server Error"}), 500


def register_error_handlers(app):
    app.register_error_handler(LedgerError, handle_ledger_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
