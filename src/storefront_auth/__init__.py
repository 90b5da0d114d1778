"""Storefront Auth - Generic authentication primitives.

This package provides authentication building blocks that are independent
of the storefront domain. It handles:
- Password hashing and complexity rules (bcrypt)
- Signed identity/reset token creation and validation (JWT)
- Session cookie signing (itsdangerous)

Architecture:
    storefront_auth/
    ├── services/           # Pure logic (passwords, tokens, cookies)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from storefront_auth import PasswordHashingService, TokenService
"""

from storefront_auth.exceptions import (
    AuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotAuthenticatedError,
    WeakPasswordError,
)
from storefront_auth.schemas import TokenPayload
from storefront_auth.services import (
    CookieSigner,
    PasswordHashingService,
    TokenService,
)

__all__ = [
    # Services
    "CookieSigner",
    "PasswordHashingService",
    "TokenService",
    # Schemas
    "TokenPayload",
    # Exceptions
    "AuthError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotAuthenticatedError",
    "WeakPasswordError",
]
