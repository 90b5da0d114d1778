"""Authentication exceptions.

These exceptions are raised by the storefront_auth package and should be
caught and handled by the application layer.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a signed token or cookie is invalid, expired, or malformed."""

    def __init__(self, message: str = "No valid token was provided"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet complexity requirements."""

    def __init__(
        self,
        message: str = (
            "The password must be at least 8 characters long and contain an "
            "uppercase letter, a lowercase letter, a number and a special "
            "character"
        ),
    ):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class NotAuthenticatedError(AuthError):
    """Raised when an endpoint needs a session and the request has none."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)
