"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from auth_service.app import create_app
from auth_service.config import Settings
from auth_service.database import Base, create_db_engine, create_session_factory, init_db
from auth_service.repositories.memory import InMemoryUserStore
from auth_service.repositories.sql import SqlUserStore
from auth_service.services.auth import AuthService
from auth_service.services.passwords import PasswordHasher
from auth_service.services.tokens import TokenIssuer

TEST_SECRET = "test-secret-key"  # noqa: S105


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL when TEST_DATABASE_URL is set, in-memory SQLite otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def settings():
    """Settings with a fixed secret and the cheapest bcrypt cost."""
    return Settings(
        database_url=SQLALCHEMY_DATABASE_URL,
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        environment="test",
        _env_file=None,
    )


@pytest.fixture
def hasher(settings):
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def tokens(settings):
    return TokenIssuer(settings.jwt_secret, settings.jwt_algorithm)


@pytest.fixture
def memory_store():
    return InMemoryUserStore()


@pytest.fixture
def engine(settings):
    """Engine with a fresh schema for each test."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    engine = create_db_engine(settings)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session for a single test."""
    session = create_session_factory(engine)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every UserStore implementation, so contract tests run against both."""
    if request.param == "memory":
        return InMemoryUserStore()
    return SqlUserStore(request.getfixturevalue("db"))


@pytest.fixture
def auth_service(store, hasher, tokens):
    return AuthService(store, hasher, tokens)


@pytest.fixture
def client(settings, memory_store):
    """Test client backed by the in-memory store."""
    app = create_app(settings, user_store=memory_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sql_client(settings, engine):
    """Test client backed by the SQL store on the test database."""
    app = create_app(settings)
    # Share the fixture engine so in-memory SQLite keeps a single database
    app.state.engine.dispose()
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register and log in a user, returning auth headers with user info."""
    email = "test@example.com"
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Test User", "email": email, "password": "testpass123"},
    )
    assert response.status_code == 201

    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": "testpass123"},
    )
    assert response.status_code == 200
    data = response.json()
    token = data["token"]
    user_id = data["user"]["id"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)
