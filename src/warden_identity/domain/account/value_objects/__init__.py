"""Value objects for the account domain."""

from warden_identity.domain.account.value_objects.email import EMAIL_PATTERN, Email

__all__ = [
    "EMAIL_PATTERN",
    "Email",
]
