"""Identity services (pure logic, no persistence)."""

from warden_identity.services.verification_code_service import (
    VerificationCodeService,
)

__all__ = ["VerificationCodeService"]
