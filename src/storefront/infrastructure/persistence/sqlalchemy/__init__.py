"""SQLAlchemy persistence for the storefront."""

from storefront.infrastructure.persistence.sqlalchemy.models import Base, UserModel
from storefront.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
