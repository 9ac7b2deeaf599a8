"""Warden Auth - Generic authentication primitives.

This package provides authentication building blocks that are independent
of the account lifecycle. It handles:
- Password hashing (bcrypt)
- Bearer token signing and verification (JWT, HS256)

Architecture:
    warden_auth/
    ├── services/           # Pure logic (password hashing, JWT)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from warden_auth import PasswordHashingService, JWTService
"""

from warden_auth.exceptions import AuthError, InvalidTokenError
from warden_auth.schemas import IssuedToken, TokenPayload
from warden_auth.services import JWTService, PasswordHashingService

__all__ = [
    # Services
    "PasswordHashingService",
    "JWTService",
    # Schemas
    "IssuedToken",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "InvalidTokenError",
]
