# web_app.py
import logging

import click
from flask import Flask, jsonify
from flask_login import LoginManager

from budget_app.models import init_db, create_session_factory
from budget_app.models.user import User
from budget_app.utils.db import SESSION_FACTORY_KEY, get_session, close_session

logger = logging.getLogger(__name__)


def create_app(session_factory=None, **overrides):
    """
    Build the Flask application.

    The database is handed in as a session factory; when none is given one is
    built from DATABASE_URL. Keyword overrides are applied to ``app.config``.
    """
    from budget_app.utils import config

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["OVERSPENT_LIMIT"] = config.OVERSPENT_LIMIT
    app.config.update(overrides)

    if session_factory is None:
        session_factory = create_session_factory(init_db(config.DATABASE_URL))
    app.extensions[SESSION_FACTORY_KEY] = session_factory
    app.teardown_appcontext(close_session)

    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id: str):
        try:
            return get_session().get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    # Handlers register their routes on blueprints
    from budget_app.handlers.auth_handler import auth_bp
    from budget_app.handlers.profile_handler import profile_bp
    from budget_app.handlers.budget_handler import budget_bp
    from budget_app.handlers.transaction_handler import transaction_bp
    from budget_app.handlers.insights_handler import insights_bp
    from budget_app.handlers.monthly_report_handler import reports_bp
    from budget_app.handlers.category_handler import category_bp
    from budget_app.handlers.fallback_handler import fallback_bp, register_error_handlers

    for bp in (auth_bp, profile_bp, budget_bp, transaction_bp,
               insights_bp, reports_bp, category_bp, fallback_bp):
        app.register_blueprint(bp)
    register_error_handlers(app)

    @app.cli.command("seed-demo")
    @click.option("--email", default="test@example.com", show_default=True)
    @click.option("--password", default="password123", show_default=True)
    def seed_demo(email, password):
        """Replace the demo user's data with sample budgets and transactions."""
        from budget_app.seed import seed_demo_user
        user = seed_demo_user(session_factory, email, password)
        click.echo(f"Seeded demo data for {user.email}")

    logger.info("application created")
    return app
