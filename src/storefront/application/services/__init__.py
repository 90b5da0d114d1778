from storefront.application.services.password_reset_service import (
    PasswordResetService,
)
from storefront.application.services.session_service import SessionService
from storefront.application.services.user_service import UserService

__all__ = [
    "PasswordResetService",
    "SessionService",
    "UserService",
]
