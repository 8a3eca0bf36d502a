import os

# Required by budget_app.utils.config; must be set before the app is imported.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from budget_app.models import Base, create_session_factory
from budget_app.web_app import create_app


@pytest.fixture(scope="function")
def engine():
    """
    In-memory SQLite engine with the schema created. StaticPool keeps one
    connection, so every session of a test sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture(scope="function")
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def app(session_factory):
    return create_app(session_factory=session_factory, TESTING=True)


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


def signup_and_login(client, email="alice@example.com", password="s3cret", name="Alice"):
    resp = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.get_json()
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["id"]


@pytest.fixture(scope="function")
def auth_client(client):
    """Test client with a signed-up, logged-in user."""
    signup_and_login(client)
    return client
