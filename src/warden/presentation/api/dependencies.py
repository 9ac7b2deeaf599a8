"""FastAPI dependency injection for the Warden API.

Provides dependencies for:
- Database sessions
- Token and password primitives
- The notifier and its per-request dispatcher
- The identity service
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, AsyncGenerator

from fastapi import BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from warden.presentation.api.config import get_api_settings
from warden_auth import JWTService, PasswordHashingService
from warden_config.settings import Settings, get_settings
from warden_identity import (
    IdentityService,
    NotificationDispatcher,
    Notifier,
    PasswordResetService,
    VerificationCodeService,
)
from warden_identity.infrastructure.email import EmailService
from warden_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    IdentityBase,
    PasswordResetTokenRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_settings().database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker (singleton).

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency, one per request.

    Routers commit on success and roll back on failure.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


async def create_tables(engine: AsyncEngine) -> None:
    """Create all identity tables (idempotent)."""
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    logger.info("Database schema is up to date")


# -----------------------------------------------------------------------------
# Primitives
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_notifier(settings: SettingsDep) -> Notifier:
    """Get the outbound notifier (SMTP)."""
    return EmailService(settings)


def get_notification_dispatcher(
    background_tasks: BackgroundTasks,
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> NotificationDispatcher:
    """Dispatcher that delivers after the response has been sent."""
    return NotificationDispatcher(notifier, scheduler=background_tasks.add_task)


# -----------------------------------------------------------------------------
# Identity Service
# -----------------------------------------------------------------------------


def get_identity_service(
    session: DBSession,
    settings: SettingsDep,
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    password_service: Annotated[PasswordHashingService, Depends(get_password_service)],
    notifications: Annotated[
        NotificationDispatcher,
        Depends(get_notification_dispatcher),
    ],
) -> IdentityService:
    """
    Get identity service with all dependencies.

    Repositories share the request's session so that a use case is committed
    or rolled back as a whole.
    """
    account_repo = AccountRepositorySQLAlchemy(session)

    password_reset = PasswordResetService(
        account_repository=account_repo,
        token_repository=PasswordResetTokenRepositorySQLAlchemy(session),
        password_service=password_service,
        notifications=notifications,
        public_base_url=settings.public_base_url,
        token_expiry=timedelta(minutes=settings.password_reset_token_expire_minutes),
    )

    return IdentityService(
        account_repository=account_repo,
        password_service=password_service,
        jwt_service=jwt_service,
        verification_service=VerificationCodeService(),
        notifications=notifications,
        password_reset_service=password_reset,
        code_window=timedelta(minutes=settings.verification_code_expire_minutes),
        resend_window=timedelta(minutes=settings.verification_resend_expire_minutes),
    )


# Type alias for injected identity service
IdentitySvc = Annotated[IdentityService, Depends(get_identity_service)]
