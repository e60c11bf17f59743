# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from learnhub.core.config.settings import CORSSettings, Settings, clear_settings_cache, get_settings


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Drop cached settings around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestSettings:
    """Tests for Settings loading."""

    def test_loads_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that nested settings read their prefixed variables."""
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        monkeypatch.setenv("GRADING_PASS_MARK", "60")
        monkeypatch.setenv("AUTH_INACTIVE_AFTER_DAYS", "14")

        settings = get_settings()

        assert settings.database.is_sqlite
        assert settings.grading.pass_mark == 60
        assert settings.auth.inactive_after_days == 14

    def test_get_settings_is_cached(self) -> None:
        """Test that get_settings returns a singleton until cleared."""
        assert get_settings() is get_settings()

    def test_production_rejects_short_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that production refuses an unsafe JWT secret."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("JWT_SECRET_KEY", "short")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/learnhub")

        with pytest.raises(ValidationError):
            Settings()

    def test_pass_mark_bounds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the pass mark must be a percentage."""
        monkeypatch.setenv("GRADING_PASS_MARK", "150")

        with pytest.raises(ValidationError):
            Settings()


class TestCORSSettings:
    """Tests for CORS settings."""

    def test_origins_list(self) -> None:
        """Test parsing of the comma separated origins."""
        cors = CORSSettings(origins="http://a.test, http://b.test,,")

        assert cors.origins_list == ["http://a.test", "http://b.test"]
