"""Verification code service.

Issues and checks the short numeric codes that gate account activation.
"""

import secrets
from datetime import timedelta

from warden_identity.domain.account import Account
from warden_identity.domain.shared import Err, ErrorKind, Ok, Result, utc_now


class VerificationCodeService:
    """Service for account verification codes.

    Codes are six-digit numeric strings (100000-999999) drawn from a
    cryptographically secure source.

    Examples
    --------
    >>> service = VerificationCodeService()
    >>> code = service.issue(account, timedelta(minutes=15))
    >>> service.check(account, code)
    Ok(value=None)
    """

    CODE_MIN = 100_000
    CODE_MAX = 999_999

    def generate_code(self) -> str:
        """Return a fresh six-digit code."""
        span = self.CODE_MAX - self.CODE_MIN + 1
        return str(self.CODE_MIN + secrets.randbelow(span))

    def issue(self, account: Account, window: timedelta) -> str:
        """Assign a new code to ``account`` valid for ``window``.

        Parameters
        ----------
        account
            The (disabled) account to issue the code for
        window
            How long the code stays valid

        Returns
        -------
        The issued code
        """
        code = self.generate_code()
        account.assign_verification_code(code, utc_now() + window)
        return code

    def check(self, account: Account, code: str) -> Result[None]:
        """Check a submitted code against the pending one.

        Expiry is checked first, so an expired code is reported as expired
        even when it is also wrong.
        """
        if account.is_verification_code_expired(utc_now()):
            return Err(ErrorKind.CODE_EXPIRED, "Verification code has expired")

        if not account.matches_verification_code(code):
            return Err(ErrorKind.CODE_MISMATCH, "Invalid verification code")

        return Ok()
