"""Account domain exceptions."""


class InvalidEmailError(ValueError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class DuplicateAccountError(Exception):
    """Email or display name already taken by another stored account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Account already registered: {email}")
