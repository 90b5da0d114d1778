"""User storage service.

Wraps the user repository with the password hashing rules, so callers
never deal with hashes directly: passwords go in as plaintext and are
hashed on the way to storage.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from typing import TYPE_CHECKING, Optional, Union
from uuid import UUID

from storefront.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    MissingFieldError,
    User,
    UserNotFoundError,
)
from storefront_auth import InvalidCredentialsError, PasswordHashingService

if TYPE_CHECKING:
    from storefront.domain.user import UserRepository
    from storefront.infrastructure.oauth import GitHubProfile

logger = logging.getLogger(__name__)


def _parse_user_id(user_id: Union[UUID, str]) -> UUID:
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(user_id)
    except (ValueError, AttributeError, TypeError) as e:
        raise UserNotFoundError from e


class UserService:
    """Application service for reading and writing users."""

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    async def get_user_by_email(self, email: Union[str, Email]) -> Optional[User]:
        return await self._user_repo.find_by_email(email)

    async def get_user_by_id(self, user_id: Union[UUID, str]) -> Optional[User]:
        return await self._user_repo.find_by_id(_parse_user_id(user_id))

    async def update_user(self, user_id: Union[UUID, str], user: User) -> User:
        """Persist the full ``user`` record under ``user_id``."""
        if _parse_user_id(user_id) != user.id:
            msg = f"User id mismatch: {user_id} != {user.id}"
            raise ValueError(msg)
        await self._user_repo.save(user)
        return user

    async def update_user_password(
        self,
        user_id: Union[UUID, str],
        new_password: str,
    ) -> User:
        """Hash ``new_password`` and store it on the user."""
        user = await self.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError

        updated = user.with_password_hash(await self._hash(new_password))
        await self._user_repo.save(updated)
        logger.debug("Password updated for user: %s", updated.id)
        return updated

    def is_valid_password(self, password: str, user: User) -> bool:
        return self._password_service.is_valid_password(password, user)

    async def _hash(self, password: str) -> str:
        # bcrypt blocks, keep it off the event loop
        return await asyncio.to_thread(self._password_service.hash, password)

    async def create_user(  # NOQA: PLR0913
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        age: int | None = None,
    ) -> User:
        email_obj = Email(email)
        if not password:
            raise MissingFieldError("password")
        self._password_service.validate_strength(password)

        if await self._user_repo.find_by_email(email_obj) is not None:
            raise EmailAlreadyExistsError(email_obj.value)

        user = User.create(
            email_obj,
            password_hash=await self._hash(password),
            first_name=first_name,
            last_name=last_name,
            age=age,
        )
        await self._user_repo.save(user)
        logger.info("User created: %s", user.email)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user owning ``email`` if ``password`` matches.

        Raises
        ------
        InvalidCredentialsError
            Unknown email and wrong password are indistinguishable
        """
        if not email or not password:
            raise InvalidCredentialsError

        try:
            user = await self._user_repo.find_by_email(email)
        except InvalidEmailError as e:
            raise InvalidCredentialsError from e

        if user is None or not await asyncio.to_thread(
            self.is_valid_password,
            password,
            user,
        ):
            raise InvalidCredentialsError
        return user

    async def get_or_create_oauth_user(self, profile: GitHubProfile) -> User:
        """Find the user for an OAuth profile, registering it on first login."""
        user = await self._user_repo.find_by_email(profile.email)
        if user is not None:
            return user

        # OAuth users never log in with a password, give them a random one
        user = User.create(
            profile.email,
            password_hash=await self._hash(secrets.token_urlsafe(32)),
            first_name=profile.first_name,
            last_name=profile.last_name,
        )
        await self._user_repo.save(user)
        logger.info("User created from GitHub account %s: %s", profile.login, user.email)
        return user
