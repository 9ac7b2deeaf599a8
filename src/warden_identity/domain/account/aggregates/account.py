"""Account aggregate: a registered identity and its verification state."""

import hmac
from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from warden_identity.domain.account.value_objects import Email
from warden_identity.domain.shared.time import ensure_tz_aware, utc_now


class Account:
    """
    Account aggregate root.

    An account is created disabled with a pending verification code. Once
    the code is confirmed the account is enabled and the code is cleared,
    so an enabled account never carries a verification code.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str,
        enabled: bool = False,
        verification_code: str | None = None,
        verification_code_expires_at: datetime | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._id = id or uuid4()
        self._first_name = first_name
        self._last_name = last_name
        self._password_hash = password_hash
        self._enabled = enabled
        self._verification_code = verification_code
        self._verification_code_expires_at = (
            ensure_tz_aware(verification_code_expires_at)
            if verification_code_expires_at
            else None
        )
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def display_name(self) -> str:
        return self.compose_display_name(self._first_name, self._last_name)

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def verification_code(self) -> str | None:
        return self._verification_code

    @property
    def verification_code_expires_at(self) -> datetime | None:
        return self._verification_code_expires_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def assign_verification_code(self, code: str, expires_at: datetime) -> None:
        """Replace the pending verification code and its expiry."""
        self._verification_code = code
        self._verification_code_expires_at = ensure_tz_aware(expires_at)
        self._updated_at = utc_now()

    def is_verification_code_expired(self, now: datetime) -> bool:
        # A missing expiry counts as expired
        if self._verification_code_expires_at is None:
            return True
        return now >= self._verification_code_expires_at

    def matches_verification_code(self, code: str) -> bool:
        if self._verification_code is None or code is None:
            return False
        return hmac.compare_digest(
            self._verification_code.encode(),
            code.encode(),
        )

    def activate(self) -> None:
        """Enable the account and drop the verification code."""
        self._enabled = True
        self._verification_code = None
        self._verification_code_expires_at = None
        self._updated_at = utc_now()

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._updated_at = utc_now()

    @staticmethod
    def compose_display_name(first_name: str, last_name: str) -> str:
        return f"{first_name.strip()} {last_name.strip()}"

    @classmethod
    def create(
        cls,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str,
    ) -> "Account":
        return cls(
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            password_hash=password_hash,
            enabled=False,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str,
        enabled: bool,
        verification_code: str | None,
        verification_code_expires_at: datetime | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "Account":
        return cls(
            id=id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            enabled=enabled,
            verification_code=verification_code,
            verification_code_expires_at=verification_code_expires_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Account(id={self._id}, email={self._email.value}, "
            f"enabled={self._enabled})"
        )
