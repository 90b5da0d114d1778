import asyncio
import logging
from datetime import timedelta

from storefront.application.services.user_service import UserService
from storefront.domain.user import (
    Email,
    MissingFieldError,
    PasswordReuseError,
    User,
    UserNotFoundError,
)
from storefront.infrastructure.email import MailingService
from storefront_auth import InvalidTokenError, PasswordHashingService, TokenService

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for restore-password requests and reset completion.

    Reset tokens are signed tokens carrying only the email. They are not
    tracked server-side, so a token stays usable until it expires.
    """

    DEFAULT_TOKEN_EXPIRY = timedelta(hours=1)

    def __init__(  # NOQA: PLR0913
        self,
        user_service: UserService,
        token_service: TokenService,
        mailing_service: MailingService,
        password_service: PasswordHashingService,
        reset_password_url: str,
        token_expiry: timedelta = DEFAULT_TOKEN_EXPIRY,
    ):
        self._user_service = user_service
        self._token_service = token_service
        self._mailing_service = mailing_service
        self._password_service = password_service
        self._reset_password_url = reset_password_url
        self._token_expiry = token_expiry

    def build_reset_link(self, token: str) -> str:
        return f"{self._reset_password_url}?token={token}"

    async def request_reset(self, email: str | None) -> User:
        """Email a reset link to the owner of ``email``.

        Raises
        ------
        MissingFieldError, InvalidEmailError, UserNotFoundError
            Before any token is generated or mail sent
        """
        if not email:
            raise MissingFieldError("email")
        email_obj = Email(email)

        user = await self._user_service.get_user_by_email(email_obj)
        if user is None:
            raise UserNotFoundError.for_email(email)

        token = self._token_service.generate_token(
            {"email": user.email},
            expires_delta=self._token_expiry,
        )
        await self._mailing_service.send_reset_password_email(
            user,
            self.build_reset_link(token),
        )
        logger.debug("Reset link issued for %s", user.email)
        return user

    async def reset_password(self, token: str | None, new_password: str | None) -> User:
        """Replace the password of the user the reset token was issued for.

        Checks run in order and the first failure wins: password present,
        password complexity, token validity, user existence, password reuse.
        """
        if not new_password:
            raise MissingFieldError("password")
        self._password_service.validate_strength(new_password)

        claims = self._token_service.validate_token(token)
        if not claims or not claims.get("email"):
            raise InvalidTokenError

        user = await self._user_service.get_user_by_email(claims["email"])
        if user is None:
            msg = "No user was found for the provided token"
            raise UserNotFoundError(msg)

        if await asyncio.to_thread(
            self._user_service.is_valid_password,
            new_password,
            user,
        ):
            raise PasswordReuseError

        return await self._user_service.update_user_password(user.id, new_password)
