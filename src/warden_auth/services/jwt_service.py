"""JWT token service.

Provides bearer token signing and verification for authentication.
"""

from datetime import datetime, timedelta, timezone

import jwt

from warden_auth.exceptions import InvalidTokenError
from warden_auth.schemas import IssuedToken, TokenPayload


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived).
    Both kinds carry the same claims (``sub``, ``iat``, ``exp``) and differ
    only in their lifetime. The service holds no mutable state and can be
    shared between concurrent requests.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> issued = service.create_access_token("user@example.com")
    >>> payload = service.verify(issued.token)
    >>> print(payload.subject)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"
    REQUIRED_CLAIMS = ["sub", "iat", "exp"]

    def __init__(
        self,
        secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Pre-shared key for signing tokens. Must be kept secure.
        access_token_expire_minutes
            Minutes until an access token expires (default 15)
        refresh_token_expire_days
            Days until a refresh token expires (default 7)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)

    @property
    def access_token_ttl(self) -> timedelta:
        return self._access_expire

    @property
    def refresh_token_ttl(self) -> timedelta:
        return self._refresh_expire

    def issue(self, subject: str, ttl: timedelta) -> IssuedToken:
        """Sign a token for ``subject`` that expires ``ttl`` from now.

        Parameters
        ----------
        subject
            Value of the ``sub`` claim (the account email)
        ttl
            Time until the token expires

        Returns
        -------
        The encoded token and its absolute expiry
        """
        now = datetime.now(tz=timezone.utc).replace(microsecond=0)
        expire = now + ttl

        payload = {
            "sub": subject,
            "iat": now,
            "exp": expire,
        }

        token = jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        return IssuedToken(token=token, expires_at=expire)

    def create_access_token(
        self,
        subject: str,
        expires_delta: timedelta | None = None,
    ) -> IssuedToken:
        """Create a short-lived access token."""
        return self.issue(subject, expires_delta or self._access_expire)

    def create_refresh_token(
        self,
        subject: str,
        expires_delta: timedelta | None = None,
    ) -> IssuedToken:
        """Create a long-lived refresh token.

        Refresh tokens are only used to obtain new access tokens without
        requiring the user to log in again.
        """
        return self.issue(subject, expires_delta or self._refresh_expire)

    def extract_subject(self, token: str) -> str:
        """Return the ``sub`` claim of a correctly signed token.

        Expiry is deliberately not checked here, so callers can look up
        the subject before deciding whether the token is still valid.

        Raises
        ------
        InvalidTokenError
            If the signature does not match or the token is malformed
        """
        payload = self._decode(token, verify_exp=False)
        return payload["sub"]

    def verify(self, token: str) -> TokenPayload:
        """Verify and decode a JWT token.

        Parameters
        ----------
        token
            The JWT token string to verify

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, or malformed
        """
        payload = self._decode(token, verify_exp=True)

        try:
            return TokenPayload(
                subject=payload["sub"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

    def is_token_valid(self, token: str, subject: str) -> bool:
        """Check signature, expiry and that the token belongs to ``subject``."""
        try:
            payload = self.verify(token)
        except InvalidTokenError:
            return False
        return payload.subject == subject

    def _decode(self, token: str, verify_exp: bool) -> dict:
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={
                    "require": self.REQUIRED_CLAIMS,
                    "verify_exp": verify_exp,
                },
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
