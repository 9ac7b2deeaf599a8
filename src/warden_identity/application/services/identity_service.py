"""Identity service: signup, verification, login and token refresh."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from warden_auth import (
    InvalidTokenError,
    IssuedToken,
    JWTService,
    PasswordHashingService,
)
from warden_identity.domain.account import (
    Account,
    DuplicateAccountError,
    validate_email,
    validate_name,
    validate_password,
)
from warden_identity.domain.shared import Err, ErrorKind, Ok, Result

if TYPE_CHECKING:
    from warden_identity.application.services.notification_dispatcher import (
        NotificationDispatcher,
    )
    from warden_identity.application.services.password_reset_service import (
        PasswordResetService,
    )
    from warden_identity.domain.account import AccountRepository
    from warden_identity.services import VerificationCodeService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token issued on login."""

    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime


class IdentityService:
    """
    Application service for the account lifecycle.

    Orchestrates warden_auth primitives (password hashing, JWT tokens),
    the verification code engine and the notification dispatcher with the
    Account aggregate to provide:
    - Signup with email verification
    - Verification and resending of codes
    - Login with password
    - Access token refresh
    - Password reset (delegated to PasswordResetService)

    Every use case returns a ``Result``; nothing here raises for an
    expected outcome.
    """

    DEFAULT_CODE_WINDOW = timedelta(minutes=15)

    def __init__(  # noqa: PLR0913
        self,
        account_repository: AccountRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        verification_service: VerificationCodeService,
        notifications: NotificationDispatcher,
        password_reset_service: PasswordResetService,
        code_window: timedelta = DEFAULT_CODE_WINDOW,
        resend_window: timedelta = DEFAULT_CODE_WINDOW,
    ):
        self._account_repo = account_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._verification = verification_service
        self._notifications = notifications
        self._password_reset = password_reset_service
        self._code_window = code_window
        self._resend_window = resend_window

    async def signup(
        self,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> Result[Account]:
        checks = (
            validate_name(first_name, "First name"),
            validate_name(last_name, "Last name"),
            validate_email(email),
            validate_password(password),
        )
        for check in checks:
            if isinstance(check, Err):
                return check
        first_name, last_name, email = (c.value for c in checks[:3])

        existing = await self._reclaim_or_reject(
            await self._account_repo.find_by_email(email),
            "An account with this email is already registered",
        )
        if existing is not None:
            return existing

        # A pending record is only reclaimed by its own email, never by name
        display_name = Account.compose_display_name(first_name, last_name)
        if await self._account_repo.find_by_display_name(display_name) is not None:
            return Err(
                ErrorKind.DUPLICATE_ACCOUNT,
                "An account with this name is already registered",
            )

        account = Account.create(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=self._password_service.hash(password),
        )
        code = self._verification.issue(account, self._code_window)
        try:
            await self._account_repo.save(account)
        except DuplicateAccountError:
            logger.info("Concurrent signup lost the race for %s", account.email)
            return Err(
                ErrorKind.DUPLICATE_ACCOUNT,
                "An account with this email or name is already registered",
            )

        self._notifications.verification_code(account.email, code, self._code_window)

        logger.info("Account registered: %s (pending verification)", account.email)
        return Ok(account)

    async def authenticate(self, email: str, password: str) -> Result[TokenPair]:
        account = await self._account_repo.find_by_email(email)
        if account is None:
            return Err(ErrorKind.NOT_FOUND, "Account not found")

        if not account.enabled:
            return Err(ErrorKind.NOT_VERIFIED, "Account is not verified")

        if not self._password_service.verify(password or "", account.password_hash):
            logger.debug("Rejected login for %s", account.email)
            return Err(ErrorKind.INVALID_CREDENTIALS, "Invalid email or password")

        access = self._jwt_service.create_access_token(account.email)
        refresh = self._jwt_service.create_refresh_token(account.email)

        logger.info("Account logged in: %s", account.email)
        return Ok(
            TokenPair(
                access_token=access.token,
                access_expires_at=access.expires_at,
                refresh_token=refresh.token,
                refresh_expires_at=refresh.expires_at,
            ),
        )

    async def refresh_access_token(self, refresh_token: str) -> Result[IssuedToken]:
        try:
            subject = self._jwt_service.extract_subject(refresh_token)
        except InvalidTokenError as e:
            return Err(ErrorKind.INVALID_TOKEN, e.message)

        account = await self._account_repo.find_by_email(subject)
        if account is None:
            return Err(ErrorKind.NOT_FOUND, "Account not found")

        if not self._jwt_service.is_token_valid(refresh_token, account.email):
            return Err(ErrorKind.INVALID_TOKEN, "Invalid refresh token")

        logger.debug("Access token refreshed for: %s", account.email)
        return Ok(self._jwt_service.create_access_token(account.email))

    async def verify_account(self, email: str, code: str) -> Result[None]:
        account = await self._account_repo.find_by_email(email)
        if account is None:
            return Err(ErrorKind.NOT_FOUND, "Account not found")

        if account.enabled:
            return Err(ErrorKind.ALREADY_VERIFIED, "Account is already verified")

        checked = self._verification.check(account, code)
        if isinstance(checked, Err):
            logger.debug("Verification failed for %s: %s", email, checked.kind.value)
            return checked

        account.activate()
        await self._account_repo.save(account)

        logger.info("Account verified: %s", account.email)
        return Ok()

    async def resend_verification_code(self, email: str) -> Result[None]:
        account = await self._account_repo.find_by_email(email)
        if account is None:
            return Err(ErrorKind.NOT_FOUND, "Account not found")

        if account.enabled:
            return Err(ErrorKind.ALREADY_VERIFIED, "Account is already verified")

        code = self._verification.issue(account, self._resend_window)
        await self._account_repo.save(account)

        self._notifications.verification_code(
            account.email,
            code,
            self._resend_window,
        )

        logger.info("Verification code resent to: %s", account.email)
        return Ok()

    async def request_password_reset(self, email: str) -> Result[None]:
        return await self._password_reset.request_reset(email)

    async def reset_password(self, token: str, new_password: str) -> Result[None]:
        return await self._password_reset.reset_password(token, new_password)

    async def _reclaim_or_reject(
        self,
        holder: Account | None,
        message: str,
    ) -> Err | None:
        """Reject a verified holder; delete an abandoned, unverified one."""
        if holder is None:
            return None

        if holder.enabled:
            return Err(ErrorKind.DUPLICATE_ACCOUNT, message)

        await self._account_repo.delete(holder.id)
        logger.info("Removed unverified account %s to reclaim it", holder.email)
        return None
