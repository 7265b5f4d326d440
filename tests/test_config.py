"""Tests for application configuration management."""

import os
import tempfile
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from investment_simulator.config import (
    Settings,
    get_global_settings,
    get_settings,
    reset_global_settings,
)


class TestSettings:
    """Test cases for Settings class."""

    def test_settings_loads_from_env_file(self):
        """Test that settings can load from a .env file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".env", delete=False) as f:
            f.write("APP_ENV=development\n")
            f.write("SECRET_KEY=test-secret-key-123\n")
            f.write("BRASILAPI_URL=http://localhost:8080/taxas\n")
            f.write("FALLBACK_CDI_RATE=11.9\n")
            f.write("LOG_LEVEL=DEBUG\n")
            temp_env_file = f.name

        try:
            with patch.dict(os.environ, {}, clear=True):
                settings = get_settings(env_file=temp_env_file)

                assert settings.app_env == "development"
                assert settings.secret_key == "test-secret-key-123"
                assert settings.brasilapi_url == "http://localhost:8080/taxas"
                assert settings.fallback_cdi_rate == 11.9
                assert settings.log_level == "DEBUG"
        finally:
            os.unlink(temp_env_file)

    def test_missing_secret_key_raises_exception(self):
        """Test that missing SECRET_KEY raises ValidationError."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "SECRET_KEY" in str(exc_info.value)

    def test_placeholder_secret_key_raises_exception(self):
        """Test that placeholder SECRET_KEY raises ValidationError."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "your-secret-key-here-change-in-production"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "SECRET_KEY must be set to a secure value" in str(exc_info.value)

    def test_app_env_validation(self):
        """Test APP_ENV validation."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "APP_ENV": "staging"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "APP_ENV must be one of" in str(exc_info.value)

    def test_log_level_case_insensitive(self):
        """Test that LOG_LEVEL is normalised to upper case."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "LOG_LEVEL": "warning"},
            clear=True,
        ):
            settings = Settings(_env_file=None)
            assert settings.log_level == "WARNING"

    def test_log_level_validation(self):
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "LOG_LEVEL": "VERBOSE"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "LOG_LEVEL must be one of" in str(exc_info.value)

    def test_default_values(self):
        """Test default values when environment variables are not set."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            settings = Settings(_env_file=None)

            assert settings.app_env == "development"
            assert settings.flask_env == "development"
            assert settings.brasilapi_url == "https://brasilapi.com.br/api/taxas/v1"
            assert "bcdata.sgs.4389" in settings.bcb_cdi_series_url
            assert settings.rate_feed_timeout == 3.0
            assert settings.rate_feed_retries == 2
            assert settings.fallback_cdi_rate == 12.15
            assert settings.log_level == "INFO"

    def test_rate_feed_bounds(self):
        """Test that the rate feed knobs reject nonsensical values."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "RATE_FEED_TIMEOUT": "0"},
            clear=True,
        ):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "RATE_FEED_RETRIES": "-1"},
            clear=True,
        ):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_environment_variable_aliases(self):
        """Test that environment variable aliases work correctly."""
        with patch.dict(
            os.environ,
            {
                "SECRET_KEY": "valid-secret-key-123",
                "APP_ENV": "production",
                "BCB_CDI_SERIES_URL": "http://bcb.local/sgs",
                "RATE_FEED_TIMEOUT": "1.5",
                "RATE_FEED_RETRIES": "4",
                "LOG_LEVEL": "ERROR",
            },
            clear=True,
        ):
            settings = Settings(_env_file=None)

            assert settings.app_env == "production"
            assert settings.bcb_cdi_series_url == "http://bcb.local/sgs"
            assert settings.rate_feed_timeout == 1.5
            assert settings.rate_feed_retries == 4
            assert settings.log_level == "ERROR"


class TestGlobalSettings:
    """Test the lazily created settings singleton."""

    def test_global_settings_is_cached(self):
        reset_global_settings()
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            first = get_global_settings()
            second = get_global_settings()

        assert first is second

    def test_reset_global_settings(self):
        reset_global_settings()
        with patch.dict(os.environ, {"SECRET_KEY": "first-secret-key"}, clear=True):
            first = get_global_settings()

        reset_global_settings()
        with patch.dict(os.environ, {"SECRET_KEY": "second-secret-key"}, clear=True):
            second = get_global_settings()

        assert first is not second
        assert second.secret_key == "second-secret-key"
