"""
Pytest configuration for warden_identity domain tests.

Provides accounts in the states the use cases care about.
"""

from datetime import timedelta

import pytest

from warden_identity import Account
from warden_identity.domain.shared import utc_now

TEST_EMAIL = "ada@example.com"
TEST_CODE = "123456"


@pytest.fixture
def pending_account() -> Account:
    """A freshly registered account waiting for verification."""
    account = Account.create(TEST_EMAIL, "Ada", "Lovelace", "hashed")
    account.assign_verification_code(TEST_CODE, utc_now() + timedelta(minutes=15))
    return account


@pytest.fixture
def verified_account() -> Account:
    """An enabled account."""
    account = Account.create(TEST_EMAIL, "Ada", "Lovelace", "hashed")
    account.activate()
    return account
