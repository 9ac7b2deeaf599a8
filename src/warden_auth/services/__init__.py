"""Authentication services (pure logic, no persistence)."""

from warden_auth.services.jwt_service import JWTService
from warden_auth.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "PasswordHashingService",
]
