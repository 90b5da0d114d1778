"""Authentication services.

Provides password hashing, signed token management and cookie signing.
"""

from storefront_auth.services.cookie_signer import CookieSigner
from storefront_auth.services.password_service import PasswordHashingService
from storefront_auth.services.token_service import TokenService

__all__ = [
    "CookieSigner",
    "PasswordHashingService",
    "TokenService",
]
