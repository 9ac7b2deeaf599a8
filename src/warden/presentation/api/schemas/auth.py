"""Authentication schemas for request/response models.

Request fields are plain strings; format and strength rules are enforced
by the identity service so that every rejection carries the same error
format.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from warden_identity import Account


class SignupRequest(BaseModel):
    """Request schema for account registration."""

    email: str = Field(..., description="Account email address")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    password: str = Field(
        ...,
        description="8-20 characters with at least one uppercase letter and one digit",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "password": "Analytical1",
            },
        },
    )


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: str
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "ada@example.com", "password": "Analytical1"},
        },
    )


class RefreshRequest(BaseModel):
    """Request schema for access token refresh."""

    refresh_token: str


class VerifyRequest(BaseModel):
    """Request schema for account verification."""

    email: str
    code: str = Field(..., description="Six-digit verification code")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "ada@example.com", "code": "482913"},
        },
    )


class EmailRequest(BaseModel):
    """Request schema for endpoints that only take an email address."""

    email: str


class ResetPasswordRequest(BaseModel):
    """Request schema for completing a password reset."""

    token: str = Field(..., description="Token from the password reset link")
    new_password: str


class AccountResponse(BaseModel):
    """Public view of an account."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    display_name: str
    enabled: bool
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            display_name=account.display_name,
            enabled=account.enabled,
            created_at=account.created_at,
        )


class LoginResponse(BaseModel):
    """Access and refresh token pair with absolute expiries."""

    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime
    token_type: str = "bearer"  # noqa: S105


class AccessTokenResponse(BaseModel):
    """Fresh access token issued from a refresh token."""

    access_token: str
    expires_at: datetime
    token_type: str = "bearer"  # noqa: S105
