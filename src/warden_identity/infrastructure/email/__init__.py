"""Email notifier."""

from warden_identity.infrastructure.email.email_service import EmailService

__all__ = ["EmailService"]
