"""Token data structures.

Simple data classes used for transferring token data between components.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    Attributes
    ----------
    subject
        The account email the token was issued for
    issued_at
        Token issue timestamp
    exp
        Token expiration timestamp
    """

    subject: str
    issued_at: datetime
    exp: datetime

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) >= self.exp


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token together with its absolute expiry."""

    token: str
    expires_at: datetime
