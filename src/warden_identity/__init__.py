"""Warden Identity - Account lifecycle and credential management.

This module handles all identity-related concerns:
- Account registration with email verification codes
- Authentication (login, access and refresh tokens)
- Password reset with single-use, short-lived tokens
- Email notifications (verification codes, reset links)

Token and hashing primitives live in warden_auth and know nothing about
accounts.
"""

from warden_identity.application.ports import Notifier
from warden_identity.application.services import (
    IdentityService,
    NotificationDispatcher,
    PasswordResetService,
    TokenPair,
    flush_pending_notifications,
)
from warden_identity.domain.account import (
    Account,
    AccountRepository,
    DuplicateAccountError,
    Email,
    InvalidEmailError,
    validate_email,
    validate_name,
    validate_password,
)
from warden_identity.domain.password_reset import (
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)
from warden_identity.domain.shared import Err, ErrorKind, Ok, Result
from warden_identity.services import VerificationCodeService

__all__ = [
    # Domain - Account
    "Account",
    "AccountRepository",
    "DuplicateAccountError",
    "Email",
    "InvalidEmailError",
    "validate_email",
    "validate_name",
    "validate_password",
    # Domain - Password reset
    "PasswordResetTokenData",
    "PasswordResetTokenRepository",
    # Results
    "Err",
    "ErrorKind",
    "Ok",
    "Result",
    # Ports
    "Notifier",
    # Services
    "VerificationCodeService",
    # Application Services
    "IdentityService",
    "NotificationDispatcher",
    "PasswordResetService",
    "TokenPair",
    "flush_pending_notifications",
]
