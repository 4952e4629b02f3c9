"""
pytest fixtures for integration tests.

Integration tests use:
- FastAPI's TestClient (in-process, lifespan enabled)
- A real PostgreSQL database
- MockEmailService instead of SMTP, via dependency overrides
- Automatic cleanup between tests

Every test here is skipped when the database cannot be reached.
"""

import os

import asyncpg
import pytest
from fastapi.testclient import TestClient

from src.infrastructure.database.connection import USERS_SCHEMA, DatabaseConnection
from src.main import app
from src.presentation.dependencies import get_email_service
from tests.mocks.mock_email_service import MockEmailService

# Database configuration for test setup and cleanup
DB_CONFIG = {
    "host": os.getenv("DATABASE_HOST", "localhost"),
    "port": int(os.getenv("DATABASE_PORT", "5432")),
    "database": os.getenv("DATABASE_NAME", "test_user_signup"),
    "user": os.getenv("DATABASE_USER", "postgres"),
    "password": os.getenv("DATABASE_PASSWORD", "postgres"),
}


def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(pytest.mark.integration)


async def open_connection() -> asyncpg.Connection:
    try:
        return await asyncpg.connect(**DB_CONFIG, timeout=5)
    except (OSError, asyncpg.PostgresError) as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")


@pytest.fixture(autouse=True)
async def clean_database_before_test():
    """
    Start each test with an empty users table.

    The schema is created here too, so the first test does not depend on
    the app lifespan having run.
    """
    conn = await open_connection()
    try:
        await conn.execute(USERS_SCHEMA)
        await conn.execute("TRUNCATE TABLE users;")
    finally:
        await conn.close()

    yield


@pytest.fixture
def api_client():
    """
    Create FastAPI TestClient with MockEmailService dependency override.

    Using TestClient as a context manager runs the app lifespan, which opens
    the database pool.
    """
    MockEmailService.clear()

    app.dependency_overrides[get_email_service] = lambda: MockEmailService()

    with TestClient(app) as client:
        yield client

    # Clean up overrides after test
    app.dependency_overrides.clear()
    MockEmailService.clear()


@pytest.fixture
async def db_connection():
    """
    Provide direct database connection for assertions.

    Example:
        async def test_something(db_connection):
            row = await db_connection.fetchrow(
                "SELECT * FROM users WHERE email = $1", "user1@example.com"
            )
    """
    conn = await open_connection()
    yield conn
    await conn.close()


@pytest.fixture
async def database():
    """An open DatabaseConnection pool for repository tests."""
    db = DatabaseConnection(**DB_CONFIG, min_connections=1, max_connections=2)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def register_user(api_client):
    """
    Helper fixture to register a user.

    Usage:
        def test_something(register_user):
            response = register_user(email="user1@example.com")
            assert response.status_code == 200
    """

    def _register(
        username: str = "user1",
        email: str = "user1@example.com",
        password: str = "Pass1234",
        **headers: str,
    ):
        return api_client.post(
            "/api/1.0/users",
            json={"username": username, "email": email, "password": password},
            headers=headers,
        )

    return _register


@pytest.fixture
def get_activation_token():
    """
    Helper to read the token mailed to an address.

    Usage:
        def test_activation(register_user, get_activation_token):
            register_user(email="user1@example.com")
            token = get_activation_token("user1@example.com")
    """

    def _get_token(email: str) -> str:
        token = MockEmailService.get_token_for(email)
        assert token, f"No email sent to {email}. Sent: {MockEmailService.get_all_messages()}"
        return token

    return _get_token
