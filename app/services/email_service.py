"""
Email Service

Outbound mail for password reset codes.

The Mailer is built once at startup and lives on app.state; handlers get it
through the get_mailer dependency.
"""

import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from starlette.concurrency import run_in_threadpool

from app.core.config import Settings


logger = logging.getLogger(__name__)


def get_password_reset_email_html(otp_code: str, name: str, expires_minutes: int) -> str:
    """Generate HTML content for password reset email."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 0; padding: 0; background-color: #f5f5f5; }}
            .container {{ max-width: 600px; margin: 40px auto; background: white; border-radius: 12px; overflow: hidden; }}
            .header {{ background: #4f46e5; padding: 32px; text-align: center; }}
            .header h1 {{ color: white; margin: 0; font-size: 26px; }}
            .content {{ padding: 32px; }}
            .otp-code {{ font-size: 34px; font-weight: bold; letter-spacing: 8px; color: #4f46e5; font-family: monospace; text-align: center; margin: 24px 0; }}
            p {{ color: #374151; line-height: 1.6; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <h1>MindMeld Password Reset</h1>
            </div>
            <div class="content">
                <p>Hi {name},</p>
                <p>We received a request to reset your MindMeld password. Use the code below to reset it:</p>
                <div class="otp-code">{otp_code}</div>
                <p>This code will expire in <strong>{expires_minutes} minutes</strong>.</p>
                <p>If you didn't request a password reset, you can ignore this email.</p>
            </div>
        </div>
    </body>
    </html>
    """


def get_password_reset_email_text(otp_code: str, name: str, expires_minutes: int) -> str:
    """Generate plain text content for password reset email."""
    return f"""
Hi {name},

We received a request to reset your MindMeld password.

Your reset code: {otp_code}

This code will expire in {expires_minutes} minutes.

If you didn't request a password reset, you can ignore this email.
    """


class Mailer:
    """
    SMTP sender.
    
    When no SMTP host is configured outside production, messages are logged
    instead of sent and count as delivered.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        sender: str = "",
        log_only: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender or username
        self.log_only = log_only
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            sender=settings.SMTP_FROM,
            log_only=not settings.SMTP_HOST and not settings.is_production,
        )

    def _build_message(self, to: str, subject: str, html: str, text: Optional[str]) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        if text:
            msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        return msg

    def _deliver(self, to: str, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.sendmail(self.sender, to, msg.as_string())

    async def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> bool:
        """
        Send one email.
        
        Returns:
            bool: True if the email was sent (or logged in log-only mode),
            False otherwise.
        """
        if self.log_only:
            logger.info("[DEV MODE] Email to %s: %s\n%s", to, subject, text or html)
            return True

        if not self.host:
            logger.error("SMTP is not configured; cannot send '%s' to %s", subject, to)
            return False

        try:
            msg = self._build_message(to, subject, html, text)
            await run_in_threadpool(self._deliver, to, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}")
        return True

    async def send_password_reset(self, to: str, otp_code: str, name: str, expires_minutes: int) -> bool:
        return await self.send(
            to,
            f"Reset your MindMeld password - {otp_code}",
            get_password_reset_email_html(otp_code, name, expires_minutes),
            get_password_reset_email_text(otp_code, name, expires_minutes),
        )

    async def close(self) -> None:
        """Connections are opened per message; nothing is held between sends."""
        logger.debug("Mailer closed")
