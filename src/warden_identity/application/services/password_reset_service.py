import hashlib
import logging
import secrets
from datetime import timedelta
from urllib.parse import urlencode

from warden_auth import PasswordHashingService
from warden_identity.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from warden_identity.domain.account import AccountRepository, validate_password
from warden_identity.domain.password_reset import PasswordResetTokenRepository
from warden_identity.domain.shared import Err, ErrorKind, Ok, Result, utc_now

logger = logging.getLogger(__name__)

RESET_PATH = "/auth/reset-password"


class PasswordResetService:
    """Service for handling password reset requests and token validation."""

    DEFAULT_TOKEN_EXPIRY_MINUTES = 5

    def __init__(  # noqa: PLR0913
        self,
        account_repository: AccountRepository,
        token_repository: PasswordResetTokenRepository,
        password_service: PasswordHashingService,
        notifications: NotificationDispatcher,
        public_base_url: str,
        token_expiry: timedelta = timedelta(minutes=DEFAULT_TOKEN_EXPIRY_MINUTES),
    ):
        self._account_repo = account_repository
        self._token_repo = token_repository
        self._password_service = password_service
        self._notifications = notifications
        self._public_base_url = public_base_url.rstrip("/")
        self._token_expiry = token_expiry

    def _hash_token(self, raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode()).hexdigest()

    def build_reset_link(self, raw_token: str) -> str:
        return f"{self._public_base_url}{RESET_PATH}?{urlencode({'token': raw_token})}"

    async def request_reset(self, email: str) -> Result[None]:
        account = await self._account_repo.find_by_email(email)
        if account is None or not account.enabled:
            # Same answer for unknown and unverified accounts
            logger.debug("Password reset requested for unknown account: %s", email)
            return Err(ErrorKind.NOT_FOUND, "Account not found or not active")

        raw_token = secrets.token_urlsafe(32)
        token_hash = self._hash_token(raw_token)
        expires_at = utc_now() + self._token_expiry

        # At most one live token per account
        removed = await self._token_repo.delete_all_for_account(account.id)
        await self._token_repo.create(account.id, token_hash, expires_at)
        if removed:
            logger.debug("Superseded %d reset token(s) for %s", removed, account.id)

        self._notifications.password_reset_link(
            account.email,
            self.build_reset_link(raw_token),
        )
        logger.info("Password reset requested for account: %s", account.id)
        return Ok()

    async def reset_password(self, token: str, new_password: str) -> Result[None]:
        reset_token = await self._token_repo.find_by_hash(self._hash_token(token))

        if reset_token is None:
            return Err(
                ErrorKind.INVALID_OR_EXPIRED_TOKEN,
                "Invalid or expired password reset token",
            )

        if reset_token.is_expired(utc_now()):
            return Err(
                ErrorKind.INVALID_OR_EXPIRED_TOKEN,
                "Password reset token has expired",
            )

        checked = validate_password(new_password)
        if isinstance(checked, Err):
            return checked

        account = await self._account_repo.find_by_id(reset_token.account_id)
        if account is None:
            await self._token_repo.delete(reset_token.id)
            return Err(
                ErrorKind.INVALID_OR_EXPIRED_TOKEN,
                "Invalid or expired password reset token",
            )

        account.change_password_hash(self._password_service.hash(new_password))
        await self._account_repo.save(account)

        # Single use
        await self._token_repo.delete(reset_token.id)
        logger.info("Password reset completed for account: %s", account.id)
        return Ok()
