from storefront.domain.user.value_objects.email import EMAIL_PATTERN, Email
from storefront.domain.user.value_objects.user_role import UserRole

__all__ = [
    "EMAIL_PATTERN",
    "Email",
    "UserRole",
]
