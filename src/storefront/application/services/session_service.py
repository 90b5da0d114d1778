"""Session service: identity tokens and role changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union
from uuid import UUID

from storefront.domain.user import PublicUser, User, UserNotFoundError
from storefront_auth import TokenService

if TYPE_CHECKING:
    from storefront.application.services.user_service import UserService

logger = logging.getLogger(__name__)


class SessionService:
    """
    Application service for session handling.

    Issues identity tokens for already authenticated users and toggles a
    user's role, re-issuing the token so the session reflects it.
    """

    def __init__(self, user_service: UserService, token_service: TokenService):
        self._user_service = user_service
        self._token_service = token_service

    def issue_token(self, user: Union[User, PublicUser]) -> str:
        public = user.without_password() if isinstance(user, User) else user
        return self._token_service.generate_token(public.to_claims())

    def resolve_token(self, token: str | None) -> PublicUser | None:
        """Return the session user carried by ``token``, or None if invalid."""
        claims = self._token_service.validate_token(token)
        if claims is None:
            return None
        try:
            return PublicUser.from_claims(claims)
        except (KeyError, ValueError, TypeError):
            # A reset token (email only) is not a session
            return None

    async def change_user_role(
        self,
        user_id: Union[UUID, str],
    ) -> tuple[PublicUser, str]:
        """Toggle the user's role between ``user`` and ``premium``.

        Returns
        -------
        The updated password-free user and a fresh identity token
        """
        user = await self._user_service.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError

        updated = user.toggle_role()
        await self._user_service.update_user(updated.id, updated)

        public = updated.without_password()
        token = self.issue_token(public)

        logger.debug("Role of %s changed to %s", public.email, public.role.value)
        return public, token
