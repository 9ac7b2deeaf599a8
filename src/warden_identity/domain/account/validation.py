"""Input validation policy for account use cases.

Pure functions without side effects. Each returns ``Ok`` with the
(normalized) value or ``Err(VALIDATION_FAILURE, reason)``, and is called
at the top of a use case before anything touches the store.
"""

import re

from warden_identity.domain.account.value_objects import EMAIL_PATTERN
from warden_identity.domain.shared import Err, ErrorKind, Ok, Result

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20
# Column widths of the accounts table
EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100
_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")


def validate_email(value: str | None) -> Result[str]:
    """Validate a conventional ``local@domain.tld`` address."""
    if value is None or not value.strip():
        return Err(ErrorKind.VALIDATION_FAILURE, "Email cannot be empty")

    normalized = value.strip().lower()
    if len(normalized) > EMAIL_MAX_LENGTH:
        return Err(
            ErrorKind.VALIDATION_FAILURE,
            f"Email must be at most {EMAIL_MAX_LENGTH} characters long",
        )

    if not EMAIL_PATTERN.match(normalized):
        return Err(ErrorKind.VALIDATION_FAILURE, "Invalid email format")

    return Ok(normalized)


def validate_password(value: str | None) -> Result[str]:
    """Validate password strength.

    Requirements:
    - 8 to 20 characters
    - at least one uppercase letter
    - at least one digit
    """
    if value is None:
        return Err(ErrorKind.VALIDATION_FAILURE, "Password cannot be empty")

    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        return Err(
            ErrorKind.VALIDATION_FAILURE,
            f"Password must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters long",
        )

    if not _UPPERCASE.search(value):
        return Err(
            ErrorKind.VALIDATION_FAILURE,
            "Password must contain at least one uppercase letter",
        )

    if not _DIGIT.search(value):
        return Err(
            ErrorKind.VALIDATION_FAILURE,
            "Password must contain at least one digit",
        )

    return Ok(value)


def validate_name(value: str | None, field: str) -> Result[str]:
    """Validate that a name field is present, not blank and fits its column."""
    if value is None or not value.strip():
        return Err(ErrorKind.VALIDATION_FAILURE, f"{field} cannot be empty")

    name = value.strip()
    if len(name) > NAME_MAX_LENGTH:
        return Err(
            ErrorKind.VALIDATION_FAILURE,
            f"{field} must be at most {NAME_MAX_LENGTH} characters long",
        )

    return Ok(name)
