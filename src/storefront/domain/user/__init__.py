"""User domain manages customer identity.

This domain handles:
- User aggregate (identity, role, password hash)
- The password-free projection carried in identity tokens
- Input validation errors surfaced to API clients
"""

from storefront.domain.user.aggregates import PublicUser, User
from storefront.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    MissingFieldError,
    PasswordReuseError,
    UserDomainError,
    UserNotFoundError,
)
from storefront.domain.user.repositories import UserRepository
from storefront.domain.user.value_objects import (
    EMAIL_PATTERN,
    Email,
    UserRole,
)

__all__ = [
    "EMAIL_PATTERN",
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "MissingFieldError",
    "PasswordReuseError",
    "PublicUser",
    "User",
    "UserDomainError",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
]
