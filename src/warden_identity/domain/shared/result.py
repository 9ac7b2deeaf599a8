"""Result values returned by the identity use cases.

Expected outcomes (bad input, unknown account, expired code, ...) are
returned as ``Err`` values rather than raised, so callers decide how to
present them:

    match await service.verify_account(email, code):
        case Ok():
            ...
        case Err(kind=ErrorKind.CODE_EXPIRED):
            ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_ACCOUNT = "DUPLICATE_ACCOUNT"
    NOT_VERIFIED = "NOT_VERIFIED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    CODE_EXPIRED = "CODE_EXPIRED"
    CODE_MISMATCH = "CODE_MISMATCH"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"

    # Only produced at the HTTP boundary for unexpected failures
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T = None  # type: ignore[assignment]

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome with a machine-readable kind and a readable message."""

    kind: ErrorKind
    message: str

    @property
    def is_ok(self) -> bool:
        return False


Result: TypeAlias = Ok[T] | Err
