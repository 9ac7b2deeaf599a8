"""Root pytest configuration for test discovery and auto-skip behavior.

Test Structure:
    tests/
    ├── unit/                  # warden_auth and warden_config primitives
    ├── warden_identity/       # Identity domain tests (accounts, tokens)
    │   ├── unit/              # Fast, isolated tests with in-memory fakes
    │   └── integration/       # Repository tests with Testcontainers PostgreSQL
    ├── integration/api/       # HTTP tests against a file-backed SQLite database
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")

# Required secrets must exist before the API module builds its app on import
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-for-testing-only-0123456789")
os.environ.setdefault("POSTGRES_PASSWORD", "test-password")
os.environ.setdefault("SMTP_ENABLED", "false")

from warden_config import clear_settings_cache  # noqa: E402


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need a PostgreSQL container (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def _enabled(config, option: str, env_var: str) -> bool:
    return config.getoption(option) or os.environ.get(env_var, "").lower() in (
        "1",
        "true",
        "yes",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if _enabled(config, "--run-all", "RUN_ALL_TESTS"):
        return

    if _enabled(config, "--run-integration", "RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Start and end the session with freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()
