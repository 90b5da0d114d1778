from enum import Enum


class UserRole(str, Enum):
    """Customer roles. ``premium`` unlocks selling products in the store."""

    USER = "user"
    PREMIUM = "premium"
    ADMIN = "admin"
