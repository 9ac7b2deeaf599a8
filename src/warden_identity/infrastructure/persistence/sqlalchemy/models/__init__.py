# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for identity management."""

from warden_identity.infrastructure.persistence.sqlalchemy.models.account_model import (
    AccountModel,
)
from warden_identity.infrastructure.persistence.sqlalchemy.models.password_reset_token_model import (
    PasswordResetTokenModel,
)

__all__ = [
    "AccountModel",
    "PasswordResetTokenModel",
]
