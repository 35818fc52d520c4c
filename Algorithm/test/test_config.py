"""
Unit tests for skillscope/config/ and skillscope/utils/logger_config.py.

Tests:
- settings.py: Environment loading, validation, global instance
- logger_config.py: Logging setup
"""

import pytest
import os
import logging
from unittest.mock import patch


# =============================================================================
# Settings Tests (CFG-001 to CFG-008)
# =============================================================================

class TestSettings:
    """Test application settings."""

    def test_defaults(self):
        """CFG-001: Defaults without environment overrides."""
        from skillscope.config.settings import Settings

        settings = Settings()
        assert settings.default_mu == 25.0
        assert settings.default_sigma == 8.0
        assert settings.items_per_page == 10
        assert settings.default_subset == "Balanced Subset"
        assert settings.supabase_configured is False
        assert settings.max_history_hours == 744

    def test_env_overrides(self):
        """CFG-002: Environment variables override defaults."""
        from skillscope.config.settings import Settings

        env = {
            "SUPABASE_URL": "https://arena.supabase.test",
            "SUPABASE_ANON_KEY": "anon",
            "SKILLSCOPE_DEFAULT_MU": "1500",
            "SKILLSCOPE_DEFAULT_SIGMA": "166",
            "SKILLSCOPE_ITEMS_PER_PAGE": "25",
            "SKILLSCOPE_MAX_HISTORY_HOURS": "48",
        }
        with patch.dict(os.environ, env):
            settings = Settings()

        assert settings.supabase_configured is True
        assert settings.default_mu == 1500.0
        assert settings.default_sigma == 166.0
        assert settings.items_per_page == 25
        assert settings.max_history_hours == 48

    def test_invalid_env_rejected(self):
        """CFG-003: Out-of-range values raise ConfigurationError."""
        from skillscope.config.settings import Settings
        from skillscope.errors import ConfigurationError

        with patch.dict(os.environ, {"SKILLSCOPE_ITEMS_PER_PAGE": "0"}):
            with pytest.raises(ConfigurationError):
                Settings()

        with patch.dict(os.environ, {"SKILLSCOPE_DEFAULT_SIGMA": "-1"}):
            with pytest.raises(ConfigurationError):
                Settings()

        with patch.dict(os.environ, {"SKILLSCOPE_MAX_HISTORY_HOURS": "0"}):
            with pytest.raises(ConfigurationError):
                Settings()

    def test_cors_origin_list(self):
        """CFG-004: Comma separated origins, blanks dropped."""
        from skillscope.config.settings import Settings

        with patch.dict(os.environ, {"CORS_ORIGINS": "https://a.test, ,https://b.test"}):
            settings = Settings()
        assert settings.cors_origin_list == ["https://a.test", "https://b.test"]

    def test_to_dict_masks_key(self):
        """CFG-005: The anon key is never serialized."""
        from skillscope.config.settings import Settings

        with patch.dict(os.environ, {"SUPABASE_ANON_KEY": "secret"}):
            data = Settings().to_dict()
        assert data["supabase_anon_key"] == "***"

    def test_global_instance(self):
        """CFG-006: get_settings returns one shared instance."""
        from skillscope.config.settings import get_settings, reset_settings

        first = get_settings()
        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first

    def test_configure(self):
        """CFG-007: configure overrides and validates."""
        from skillscope.config.settings import configure, get_settings
        from skillscope.errors import ConfigurationError

        configure(default_mu=30.0)
        assert get_settings().default_mu == 30.0

        with pytest.raises(ConfigurationError):
            configure(request_timeout=0)

    def test_configure_ignores_unknown(self):
        """CFG-008: Unknown keys are ignored."""
        from skillscope.config.settings import configure

        settings = configure(not_a_setting=1)
        assert not hasattr(settings, "not_a_setting")


# =============================================================================
# Logging Tests (CFG-010 to CFG-012)
# =============================================================================

class TestLogging:
    """Test logging configuration."""

    def test_setup_logging_level(self):
        """CFG-010: Level applies to the skillscope logger."""
        from skillscope.utils.logger_config import setup_logging

        logger = setup_logging(level="DEBUG")
        assert logger.name == "skillscope"
        assert logger.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

        setup_logging(level="INFO")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_setup_logging_replaces_handlers(self, tmp_path):
        """CFG-011: Repeated setup does not stack handlers."""
        from skillscope.utils.logger_config import setup_logging

        setup_logging(level="INFO")
        logger = setup_logging(level="INFO", log_file=str(tmp_path / "skillscope.log"))
        assert len(logger.handlers) == 2

        logger = setup_logging(level="INFO")
        assert len(logger.handlers) == 1

    def test_log_context(self):
        """CFG-012: LogContext restores the previous level."""
        from skillscope.utils.logger_config import LogContext, get_logger

        logger = get_logger("analytics.history")
        logger.setLevel(logging.WARNING)

        with LogContext("DEBUG", "analytics.history"):
            assert logger.level == logging.DEBUG
        assert logger.level == logging.WARNING
