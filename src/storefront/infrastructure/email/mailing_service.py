import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from storefront.domain.user import User
from storefront_config.settings import Settings

logger = logging.getLogger(__name__)

RESET_PASSWORD_SUBJECT = "Restore your password - Storefront"

RESET_PASSWORD_TEXT = """Hello {name},

We received a request to restore the password of your Storefront account.

Follow the link below to choose a new password (valid for {minutes} minutes):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- Storefront
"""

RESET_PASSWORD_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Hello {name},</h2>
        <p style="color: #374151; line-height: 1.6;">We received a request to restore the password of your Storefront account.</p>
        <p style="color: #374151; line-height: 1.6;">This link is valid for {minutes} minutes.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{reset_link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600;">Restore password</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{reset_link}</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">If you didn't request this, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""


class MailingService:
    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            msg = "SMTP host not configured"
            raise RuntimeError(msg)

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise

    async def send_reset_password_email(self, user: User, reset_link: str) -> None:
        """Send the restore-password link to ``user``.

        SMTP failures propagate to the caller; nothing is retried.
        """
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping reset password email to %s (link: %s)",
                user.email,
                reset_link,
            )
            return

        context = {
            "name": user.first_name or user.email,
            "minutes": self._settings.reset_token_expire_minutes,
            "reset_link": reset_link,
        }
        message = self._create_message(
            to_email=user.email,
            subject=RESET_PASSWORD_SUBJECT,
            text_body=RESET_PASSWORD_TEXT.format(**context),
            html_body=RESET_PASSWORD_HTML.format(**context),
        )

        # smtplib blocks, keep it off the event loop
        await asyncio.to_thread(self._send_email, user.email, message)
