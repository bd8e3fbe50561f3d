"""
Mailer Tests
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from app.services.email_service import Mailer


class TestMailer:
    """Tests for the SMTP Mailer."""

    @pytest.mark.asyncio
    async def test_log_only_mode_counts_as_sent(self):
        mailer = Mailer(host="", port=587, log_only=True)

        with patch("app.services.email_service.smtplib.SMTP") as mock_smtp:
            sent = await mailer.send("a@example.com", "Subject", "<p>Hi</p>")

        assert sent is True
        mock_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_with_starttls_and_login(self):
        mailer = Mailer(
            host="smtp.example.com",
            port=587,
            username="mailer@example.com",
            password="pw",
            sender="MindMeld <no-reply@example.com>",
        )
        server = MagicMock()

        with patch("app.services.email_service.smtplib.SMTP") as mock_smtp:
            mock_smtp.return_value.__enter__.return_value = server
            sent = await mailer.send_password_reset("a@example.com", "123456", "Ada", 10)

        assert sent is True
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer@example.com", "pw")
        args = server.sendmail.call_args.args
        assert args[1] == "a@example.com"
        assert "123456" in args[2]

    @pytest.mark.asyncio
    async def test_smtp_failure_returns_false(self):
        mailer = Mailer(host="smtp.example.com", port=587)

        with patch("app.services.email_service.smtplib.SMTP") as mock_smtp:
            mock_smtp.side_effect = smtplib.SMTPConnectError(421, "unavailable")
            sent = await mailer.send("a@example.com", "Subject", "<p>Hi</p>")

        assert sent is False

    def test_from_settings_log_only_outside_production(self):
        from app.core.config import Settings

        dev = Settings(DATABASE_URL="sqlite+aiosqlite://", SECRET_KEY="x", ENVIRONMENT="development")
        prod = Settings(DATABASE_URL="sqlite+aiosqlite://", SECRET_KEY="x", ENVIRONMENT="production")

        assert Mailer.from_settings(dev).log_only is True
        assert Mailer.from_settings(prod).log_only is False
