# utils/db.py
from flask import current_app, g

SESSION_FACTORY_KEY = "session_factory"


def get_session():
    """Request-scoped session, opened on first use from the factory injected into the app."""
    session = getattr(g, "_db_session", None)
    if session is None:
        factory = current_app.extensions[SESSION_FACTORY_KEY]
        session = g._db_session = factory()
    return session


def close_session(exception=None):
    session = g.pop("_db_session", None)
    if session is None:
        return
    if exception is not None:
        session.rollback()
    session.close()
