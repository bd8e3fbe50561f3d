"""
Settings Tests
"""

import pytest

from app.core.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(DATABASE_URL="sqlite+aiosqlite://", SECRET_KEY="x", **overrides)


class TestSettings:
    """Tests for environment-driven configuration."""

    @pytest.mark.parametrize("value", ["abc", "0", "-3", ""])
    def test_bad_reset_expiry_falls_back(self, value):
        assert _settings(PASSWORD_RESET_EXP_MINUTES=value).PASSWORD_RESET_EXP_MINUTES == 10

    def test_reset_expiry_override(self):
        assert _settings(PASSWORD_RESET_EXP_MINUTES="30").PASSWORD_RESET_EXP_MINUTES == 30

    def test_cors_origins_list(self):
        settings = _settings(CORS_ORIGINS="http://a.test, http://b.test,")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
