"""Shared pytest fixtures for all test domains."""

from tests.shared.fixtures.database import (
    async_engine,
    db_session,
    postgres_container,
)
from tests.shared.fixtures.fakes import (
    FailingNotifier,
    InMemoryAccountRepository,
    InMemoryPasswordResetTokenRepository,
    RecordingNotifier,
    run_immediately,
)

__all__ = [
    "async_engine",
    "db_session",
    "postgres_container",
    "FailingNotifier",
    "InMemoryAccountRepository",
    "InMemoryPasswordResetTokenRepository",
    "RecordingNotifier",
    "run_immediately",
]
