"""Password reset token repository interfaces."""

from warden_identity.domain.password_reset.repositories.password_reset_token_repository import (  # noqa: E501
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)

__all__ = [
    "PasswordResetTokenData",
    "PasswordResetTokenRepository",
]
