"""User aggregate.

Users are immutable records. Every change (role, password) goes through
an explicit operation that returns a new record, which the caller then
hands to the user service for persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Union
from uuid import UUID, uuid4

from storefront.domain.shared.time import utc_now
from storefront.domain.user.value_objects import Email, UserRole


@dataclass(frozen=True)
class User:
    """User aggregate root."""

    email: str
    password_hash: str = field(repr=False)
    first_name: str = ""
    last_name: str = ""
    age: int | None = None
    role: UserRole = UserRole.USER
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(  # NOQA: PLR0913
        cls,
        email: Union[str, Email],
        password_hash: str,
        first_name: str = "",
        last_name: str = "",
        age: int | None = None,
        role: Union[str, UserRole] = UserRole.USER,
    ) -> User:
        email_obj = email if isinstance(email, Email) else Email(email)
        return cls(
            email=email_obj.value,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            age=age,
            role=UserRole(role),
        )

    def with_role(self, role: Union[str, UserRole]) -> User:
        return replace(self, role=UserRole(role), updated_at=utc_now())

    def with_password_hash(self, password_hash: str) -> User:
        return replace(self, password_hash=password_hash, updated_at=utc_now())

    def toggle_role(self) -> User:
        """Flip between ``user`` and ``premium``.

        Any role other than ``user`` (``premium`` or a legacy ``admin``)
        falls back to ``user``.
        """
        new_role = UserRole.PREMIUM if self.role == UserRole.USER else UserRole.USER
        return self.with_role(new_role)

    def without_password(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            age=self.age,
            role=self.role,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class PublicUser:
    """Password-free projection of a user.

    This is what gets embedded in identity tokens and returned to clients.
    """

    id: UUID
    email: str
    first_name: str = ""
    last_name: str = ""
    age: int | None = None
    role: UserRole = UserRole.USER

    def to_claims(self) -> dict[str, Any]:
        return {
            "sub": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "age": self.age,
            "role": self.role.value,
        }

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> PublicUser:
        """Rebuild the projection from decoded token claims.

        Raises
        ------
        KeyError, ValueError
            If the claims are not those of an identity token
        """
        return cls(
            id=UUID(claims["sub"]),
            email=claims["email"],
            first_name=claims.get("first_name") or "",
            last_name=claims.get("last_name") or "",
            age=claims.get("age"),
            role=UserRole(claims.get("role", UserRole.USER.value)),
        )
