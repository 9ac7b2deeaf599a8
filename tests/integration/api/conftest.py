"""Pytest fixtures for API tests.

The app runs against a file-backed SQLite database (aiosqlite) and a
recording notifier, so no external services are needed.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from tests.shared.fixtures.fakes import RecordingNotifier
from warden.presentation.api.app import create_app
from warden.presentation.api.config import get_api_settings
from warden.presentation.api.dependencies import get_db_session, get_notifier
from warden_config.settings import Settings
from warden_identity.infrastructure.persistence.sqlalchemy import IdentityBase

TEST_JWT_SECRET = "test-jwt-secret-for-testing-only-0123456789"


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings with debug enabled and fast hashing."""
    return Settings(
        _env_file=None,
        jwt_secret_key=SecretStr(TEST_JWT_SECRET),
        postgres_password=SecretStr("test-password"),
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        password_hash_rounds=4,
        public_base_url="https://auth.example.com",
        smtp_enabled=False,
    )


def _run(coro) -> None:
    """Run a coroutine in a fresh event loop (outside TestClient's loop)."""
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def sqlite_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'warden.db'}",
        poolclass=NullPool,
    )

    async def _setup():
        async with engine.begin() as conn:
            await conn.run_sync(IdentityBase.metadata.create_all)

    _run(_setup())
    yield engine
    _run(engine.dispose())


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(api_settings, sqlite_engine, notifier):
    app = create_app(settings=api_settings)

    session_maker = async_sessionmaker(
        sqlite_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_api_settings] = lambda: api_settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    return app


@pytest.fixture
def test_client(app) -> TestClient:
    """Client without lifespan; tables are created by the sqlite_engine fixture."""
    return TestClient(app)


@pytest.fixture
def signup_data() -> dict:
    return {
        "email": "ada@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "password": "Analytical1",
    }


@pytest.fixture
def verified_account(test_client, notifier, signup_data) -> dict:
    """Sign up and verify an account, returning its credentials."""
    response = test_client.post("/auth/signup", json=signup_data)
    assert response.status_code == 200, response.text

    code = notifier.last_code_for(signup_data["email"])
    response = test_client.post(
        "/auth/verify",
        json={"email": signup_data["email"], "code": code},
    )
    assert response.status_code == 200, response.text
    return signup_data
