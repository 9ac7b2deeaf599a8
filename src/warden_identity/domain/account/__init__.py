"""Account domain.

This domain handles:
- Account aggregate (email, names, password hash, verification state)
- Input validation policy for signup, login and password changes
"""

from warden_identity.domain.account.aggregates import Account
from warden_identity.domain.account.exceptions import (
    DuplicateAccountError,
    InvalidEmailError,
)
from warden_identity.domain.account.repositories import AccountRepository
from warden_identity.domain.account.validation import (
    validate_email,
    validate_name,
    validate_password,
)
from warden_identity.domain.account.value_objects import Email

__all__ = [
    "Account",
    "AccountRepository",
    "DuplicateAccountError",
    "Email",
    "InvalidEmailError",
    "validate_email",
    "validate_name",
    "validate_password",
]
