"""Abstract repository interface for password reset tokens."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PasswordResetTokenData:
    """Immutable password reset token data."""

    id: UUID
    account_id: UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the token has expired."""
        return now >= self.expires_at


class PasswordResetTokenRepository(ABC):
    """Abstract repository for password reset tokens."""

    @abstractmethod
    async def create(
        self,
        account_id: UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> UUID:
        """Create a new password reset token.

        Parameters
        ----------
        account_id
            The owning account's unique identifier
        token_hash
            SHA-256 hash of the raw token
        expires_at
            When the token expires

        Returns
        -------
        The token's unique identifier
        """

    @abstractmethod
    async def find_by_hash(self, token_hash: str) -> PasswordResetTokenData | None:
        """Find a token by its hash, whether or not it has expired.

        Parameters
        ----------
        token_hash
            SHA-256 hash of the raw token

        Returns
        -------
        Token data if found, None otherwise
        """

    @abstractmethod
    async def delete(self, token_id: UUID) -> None:
        """Delete a single token.

        Parameters
        ----------
        token_id
            The token's unique identifier
        """

    @abstractmethod
    async def delete_all_for_account(self, account_id: UUID) -> int:
        """Delete every token of an account (e.g., when requesting a new one).

        Parameters
        ----------
        account_id
            The account's unique identifier

        Returns
        -------
        Number of tokens deleted
        """
