"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from warden_identity.domain.account.aggregates.account import Account
from warden_identity.domain.account.value_objects.email import Email


class AccountRepository(ABC):
    """Repository interface for Account aggregates."""

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> Optional[Account]:
        """Find an account by its ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[Account]:
        """Find an account by its email address."""

    @abstractmethod
    async def find_by_display_name(self, display_name: str) -> Optional[Account]:
        """Find an account by its display name."""

    @abstractmethod
    async def save(self, account: Account) -> None:
        """Save or update an account.

        Raises
        ------
        DuplicateAccountError
            If another stored account already holds the email or display name.
        """

    @abstractmethod
    async def delete(self, account_id: UUID) -> None:
        """Delete an account by ID."""
