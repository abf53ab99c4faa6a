"""
Transactional email.

Sends the account verification and password reset messages over SMTP. When
no SMTP host is configured (local development) the message is logged instead,
so the links can still be followed from the server output.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage

from towgo.core.logging_config import get_logger
from towgo.server.core.config import SMTPConfig

logger = get_logger(__name__)


class EmailService:
    """Builds and delivers TowGo's account emails."""

    def __init__(self, config: SMTPConfig, app_url: str) -> None:
        self.config = config
        self.app_url = app_url.rstrip("/")

    def verification_link(self, token: str) -> str:
        return f"{self.app_url}/api/auth/verify-email/{token}"

    def reset_link(self, token: str) -> str:
        return f"{self.app_url}/reset-password/{token}"

    async def send_verification_email(self, to: str, username: str, token: str) -> bool:
        link = self.verification_link(token)
        body = (
            f"Hi {username},\n\n"
            "Thanks for signing up for TowGo. Please confirm your email address by opening the link below:\n\n"
            f"{link}\n\n"
            "The link expires in 24 hours. If you did not create an account you can ignore this message.\n"
        )
        return await self.send(to, "Verify your TowGo email address", body)

    async def send_password_reset_email(self, to: str, username: str, token: str) -> bool:
        link = self.reset_link(token)
        body = (
            f"Hi {username},\n\n"
            "We received a request to reset your TowGo password. Choose a new password here:\n\n"
            f"{link}\n\n"
            "The link expires in 1 hour. If you did not request a reset you can ignore this message.\n"
        )
        return await self.send(to, "Reset your TowGo password", body)

    async def send(self, to: str, subject: str, body: str) -> bool:
        """
        Deliver a plain-text message.

        Args:
            to: Recipient address
            subject: Subject line
            body: Plain-text body

        Returns:
            True when delivered (or logged in development), False when SMTP failed
        """
        if not self.config.is_configured:
            logger.info(f"SMTP not configured; email to {to} not sent. Subject: {subject}\n{body}")
            return True

        message = EmailMessage()
        message["From"] = self.config.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}", exc_info=True)
            return False
        logger.info(f"Email '{subject}' sent to {to}")
        return True

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.config.host, self.config.port, timeout=15) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            if self.config.username and self.config.password:
                smtp.login(self.config.username, self.config.password)
            smtp.send_message(message)
