"""
Unit Tests for configuration and startup validation
"""
import pytest

from app.core.config import settings, parse_cors_origins
from app.main import validate_critical_config


class TestParseCorsOrigins:

    def test_comma_separated(self):
        assert parse_cors_origins("http://a.edu, http://b.edu,") == ["http://a.edu", "http://b.edu"]

    def test_json_list(self):
        assert parse_cors_origins('["http://a.edu"]') == ["http://a.edu"]

    def test_list_passthrough(self):
        assert parse_cors_origins(["http://a.edu"]) == ["http://a.edu"]

    def test_other_types(self):
        assert parse_cors_origins(None) == []


class TestValidateCriticalConfig:
    """Startup refuses to run with unusable token secrets"""

    @pytest.mark.asyncio
    async def test_valid_configuration(self):
        assert await validate_critical_config() is True

    @pytest.mark.asyncio
    async def test_secrets_must_differ(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_REFRESH_SECRET_KEY", settings.JWT_SECRET_KEY)

        with pytest.raises(RuntimeError, match="must differ"):
            await validate_critical_config()

    @pytest.mark.asyncio
    async def test_placeholder_secret_rejected(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", "CHANGE_ME")

        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            await validate_critical_config()

    @pytest.mark.asyncio
    async def test_empty_refresh_secret_rejected(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_REFRESH_SECRET_KEY", "")

        with pytest.raises(RuntimeError, match="JWT_REFRESH_SECRET_KEY"):
            await validate_critical_config()
