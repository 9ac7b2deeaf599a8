"""Password reset domain: single-use, short-lived reset tokens."""

from warden_identity.domain.password_reset.repositories import (
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)

__all__ = [
    "PasswordResetTokenData",
    "PasswordResetTokenRepository",
]
