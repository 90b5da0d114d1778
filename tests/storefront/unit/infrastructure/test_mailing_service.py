"""Unit tests for MailingService."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from storefront.domain.user import User
from storefront.infrastructure.email import MailingService
from storefront_config.settings import Settings

RESET_LINK = "https://shop.example.com/reset-password?token=abc"


def _settings(**overrides) -> Settings:
    values = {
        "jwt_secret_key": SecretStr("jwt-secret"),
        "cookie_secret": SecretStr("cookie-secret"),
        "smtp_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": SecretStr("mailer-password"),
        "smtp_from_email": "noreply@example.com",
        "smtp_from_name": "Storefront",
        "smtp_use_tls": True,
        "smtp_starttls": True,
    }
    values.update(overrides)
    return Settings(**values)


class TestMailingService:
    def setup_method(self):
        self.user = User.create(
            "ada@example.com",
            password_hash="hashed",
            first_name="Ada",
        )

    @pytest.mark.asyncio
    async def test_sends_reset_link_with_starttls(self):
        service = MailingService(_settings())

        with patch(
            "storefront.infrastructure.email.mailing_service.smtplib.SMTP",
        ) as smtp_cls:
            server = MagicMock()
            smtp_cls.return_value.__enter__.return_value = server

            await service.send_reset_password_email(self.user, RESET_LINK)

        smtp_cls.assert_called_once_with("smtp.example.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "mailer-password")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "ada@example.com"
        assert message["From"] == "Storefront <noreply@example.com>"
        body = message.get_payload()[0].get_payload(decode=True).decode()
        assert RESET_LINK in body
        assert "Hello Ada" in body

    @pytest.mark.asyncio
    async def test_implicit_tls(self):
        service = MailingService(_settings(smtp_port=465, smtp_starttls=False))

        with patch(
            "storefront.infrastructure.email.mailing_service.smtplib.SMTP_SSL",
        ) as smtp_cls:
            server = MagicMock()
            smtp_cls.return_value.__enter__.return_value = server

            await service.send_reset_password_email(self.user, RESET_LINK)

        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_disabled_smtp_sends_nothing(self):
        service = MailingService(_settings(smtp_enabled=False))

        with patch(
            "storefront.infrastructure.email.mailing_service.smtplib.SMTP",
        ) as smtp_cls:
            await service.send_reset_password_email(self.user, RESET_LINK)

        smtp_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_host(self):
        service = MailingService(_settings(smtp_host=""))

        with pytest.raises(RuntimeError, match="SMTP host not configured"):
            await service.send_reset_password_email(self.user, RESET_LINK)

    @pytest.mark.asyncio
    async def test_smtp_failure_propagates(self):
        service = MailingService(_settings())

        with patch(
            "storefront.infrastructure.email.mailing_service.smtplib.SMTP",
        ) as smtp_cls:
            server = MagicMock()
            server.send_message.side_effect = OSError("connection reset")
            smtp_cls.return_value.__enter__.return_value = server

            with pytest.raises(OSError, match="connection reset"):
                await service.send_reset_password_email(self.user, RESET_LINK)
