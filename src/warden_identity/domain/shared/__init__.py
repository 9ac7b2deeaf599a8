"""Shared domain building blocks."""

from warden_identity.domain.shared.result import Err, ErrorKind, Ok, Result
from warden_identity.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    "Err",
    "ErrorKind",
    "Ok",
    "Result",
    "ensure_tz_aware",
    "utc_now",
]
