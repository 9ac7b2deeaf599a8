"""Pydantic schemas for API request/response models."""

from warden.presentation.api.schemas.auth import (
    AccessTokenResponse,
    AccountResponse,
    EmailRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    ResetPasswordRequest,
    SignupRequest,
    VerifyRequest,
)
from warden.presentation.api.schemas.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)

__all__ = [
    "AccessTokenResponse",
    "AccountResponse",
    "EmailRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RefreshRequest",
    "ResetPasswordRequest",
    "SignupRequest",
    "VerifyRequest",
]
