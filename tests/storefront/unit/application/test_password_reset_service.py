"""Unit tests for PasswordResetService."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock
from urllib.parse import parse_qs, urlparse

import pytest

from storefront.application.services import PasswordResetService
from storefront.domain.user import (
    InvalidEmailError,
    MissingFieldError,
    PasswordReuseError,
    User,
    UserNotFoundError,
)
from storefront_auth import (
    InvalidTokenError,
    PasswordHashingService,
    TokenService,
    WeakPasswordError,
)

TEST_EMAIL = "ada@example.com"
TEST_NEW_PASSWORD = "New$Secure1"
RESET_URL = "https://shop.example.com/reset-password"
SECRET = "reset-test-secret"


def _token_from_link(link: str) -> str:
    return parse_qs(urlparse(link).query)["token"][0]


class TestPasswordResetServiceRequestReset:
    """Tests for request_reset."""

    def setup_method(self):
        self.user_service = AsyncMock()
        self.token_service = TokenService(secret_key=SECRET)
        self.mailing_service = AsyncMock()
        self.password_service = PasswordHashingService(rounds=4)

        self.service = PasswordResetService(
            user_service=self.user_service,
            token_service=self.token_service,
            mailing_service=self.mailing_service,
            password_service=self.password_service,
            reset_password_url=RESET_URL,
        )

    @pytest.mark.asyncio
    async def test_request_reset_sends_one_email(self):
        user = User.create(TEST_EMAIL, password_hash="hashed")
        self.user_service.get_user_by_email.return_value = user

        result = await self.service.request_reset(TEST_EMAIL)

        assert result is user
        self.mailing_service.send_reset_password_email.assert_awaited_once()
        sent_user, link = self.mailing_service.send_reset_password_email.call_args[0]
        assert sent_user is user
        assert link.startswith(f"{RESET_URL}?token=")

    @pytest.mark.asyncio
    async def test_link_token_carries_only_the_email(self):
        self.user_service.get_user_by_email.return_value = User.create(
            TEST_EMAIL,
            password_hash="hashed",
        )

        await self.service.request_reset(TEST_EMAIL)

        link = self.mailing_service.send_reset_password_email.call_args[0][1]
        claims = self.token_service.validate_token(_token_from_link(link))
        assert claims == {"email": TEST_EMAIL}

    @pytest.mark.asyncio
    async def test_link_token_expires_after_configured_time(self):
        self.service = PasswordResetService(
            user_service=self.user_service,
            token_service=self.token_service,
            mailing_service=self.mailing_service,
            password_service=self.password_service,
            reset_password_url=RESET_URL,
            token_expiry=timedelta(seconds=-1),
        )
        self.user_service.get_user_by_email.return_value = User.create(
            TEST_EMAIL,
            password_hash="hashed",
        )

        await self.service.request_reset(TEST_EMAIL)

        link = self.mailing_service.send_reset_password_email.call_args[0][1]
        assert self.token_service.validate_token(_token_from_link(link)) is None

    @pytest.mark.asyncio
    async def test_missing_email(self):
        with pytest.raises(MissingFieldError):
            await self.service.request_reset(None)

        self.user_service.get_user_by_email.assert_not_called()
        self.mailing_service.send_reset_password_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_email_skips_lookup_and_mail(self):
        with pytest.raises(InvalidEmailError):
            await self.service.request_reset("not-an-email")

        self.user_service.get_user_by_email.assert_not_called()
        self.mailing_service.send_reset_password_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        self.user_service.get_user_by_email.return_value = None

        with pytest.raises(UserNotFoundError, match="unknown@example.com"):
            await self.service.request_reset("unknown@example.com")

        self.mailing_service.send_reset_password_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_mail_failure_propagates(self):
        self.user_service.get_user_by_email.return_value = User.create(
            TEST_EMAIL,
            password_hash="hashed",
        )
        self.mailing_service.send_reset_password_email.side_effect = RuntimeError(
            "SMTP error",
        )

        with pytest.raises(RuntimeError, match="SMTP error"):
            await self.service.request_reset(TEST_EMAIL)


class TestPasswordResetServiceResetPassword:
    """Tests for reset_password."""

    def setup_method(self):
        self.user = User.create(TEST_EMAIL, password_hash="old-hash")
        self.user_service = AsyncMock()
        self.user_service.get_user_by_email.return_value = self.user
        self.user_service.is_valid_password = Mock(return_value=False)
        self.user_service.update_user_password.return_value = (
            self.user.with_password_hash("new-hash")
        )
        self.token_service = TokenService(secret_key=SECRET)
        self.mailing_service = AsyncMock()

        self.service = PasswordResetService(
            user_service=self.user_service,
            token_service=self.token_service,
            mailing_service=self.mailing_service,
            password_service=PasswordHashingService(rounds=4),
            reset_password_url=RESET_URL,
        )

    def _reset_token(self, expires_delta: timedelta | None = None) -> str:
        return self.token_service.generate_token(
            {"email": TEST_EMAIL},
            expires_delta=expires_delta or timedelta(hours=1),
        )

    @pytest.mark.asyncio
    async def test_reset_password_success(self):
        result = await self.service.reset_password(
            self._reset_token(),
            TEST_NEW_PASSWORD,
        )

        assert result.password_hash == "new-hash"
        self.user_service.get_user_by_email.assert_awaited_once_with(TEST_EMAIL)
        self.user_service.update_user_password.assert_awaited_once_with(
            self.user.id,
            TEST_NEW_PASSWORD,
        )

    @pytest.mark.asyncio
    async def test_missing_password(self):
        with pytest.raises(MissingFieldError, match="password field is required"):
            await self.service.reset_password(self._reset_token(), "")

        self.user_service.update_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_weak_password_skips_token_validation(self):
        token_service = Mock(spec=TokenService)
        self.service = PasswordResetService(
            user_service=self.user_service,
            token_service=token_service,
            mailing_service=self.mailing_service,
            password_service=PasswordHashingService(rounds=4),
            reset_password_url=RESET_URL,
        )

        with pytest.raises(WeakPasswordError):
            await self.service.reset_password("any-token", "weak")

        token_service.validate_token.assert_not_called()
        self.user_service.get_user_by_email.assert_not_called()
        self.user_service.update_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_token(self):
        token = self._reset_token(expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            await self.service.reset_password(token, TEST_NEW_PASSWORD)

        self.user_service.update_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_tampered_token(self):
        token = self._reset_token()[:-3] + "abc"

        with pytest.raises(InvalidTokenError):
            await self.service.reset_password(token, TEST_NEW_PASSWORD)

        self.user_service.update_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_token(self):
        with pytest.raises(InvalidTokenError):
            await self.service.reset_password(None, TEST_NEW_PASSWORD)

    @pytest.mark.asyncio
    async def test_user_no_longer_exists(self):
        self.user_service.get_user_by_email.return_value = None

        with pytest.raises(UserNotFoundError, match="provided token"):
            await self.service.reset_password(self._reset_token(), TEST_NEW_PASSWORD)

        self.user_service.update_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_reusing_current_password_rejected(self):
        self.user_service.is_valid_password.return_value = True

        with pytest.raises(PasswordReuseError):
            await self.service.reset_password(self._reset_token(), TEST_NEW_PASSWORD)

        self.user_service.is_valid_password.assert_called_once_with(
            TEST_NEW_PASSWORD,
            self.user,
        )
        self.user_service.update_user_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_identity_token_also_resets(self):
        identity = self.token_service.generate_token(
            self.user.without_password().to_claims(),
        )

        await self.service.reset_password(identity, TEST_NEW_PASSWORD)

        self.user_service.update_user_password.assert_awaited_once()
