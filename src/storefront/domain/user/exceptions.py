"""User domain exceptions.

Custom exceptions for the user domain, used for input validation
and business rule violations. All of them are user errors: the
presentation layer reports their message back to the client.
"""


class UserDomainError(Exception):
    """Base class for user-facing user domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingFieldError(UserDomainError):
    """A required field was not provided."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"The {field_name} field is required")


class InvalidEmailError(UserDomainError, ValueError):
    """Raised when email format is invalid."""

    def __init__(self, message: str = "The email entered is not valid") -> None:
        super().__init__(message)


class EmailAlreadyExistsError(UserDomainError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"A user is already registered with the email {email}")


class UserNotFoundError(UserDomainError):
    """User not found."""

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)

    @classmethod
    def for_email(cls, email: str) -> "UserNotFoundError":
        return cls(f"No user is registered with the email {email}")


class PasswordReuseError(UserDomainError):
    """The new password equals the current one."""

    def __init__(self) -> None:
        super().__init__("The new password cannot be the same as the old one")
