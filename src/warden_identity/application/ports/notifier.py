"""Port for outbound account notifications."""

from abc import ABC, abstractmethod
from datetime import timedelta


class Notifier(ABC):
    """Delivers account messages to the user's contact channel.

    Implementations may block (SMTP, HTTP APIs) and may raise on delivery
    failure; callers go through ``NotificationDispatcher``, which runs them
    off the request path and logs failures.
    """

    @abstractmethod
    def send_verification_code(
        self,
        to_email: str,
        code: str,
        valid_for: timedelta,
    ) -> None:
        """Send the account verification code and how long it stays valid."""

    @abstractmethod
    def send_password_reset_link(self, to_email: str, reset_link: str) -> None:
        """Send the password reset link."""
