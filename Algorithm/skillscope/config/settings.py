"""
Global configuration settings for SkillScope.

Loads configuration from environment variables and provides
typed access to all system settings.
"""

import os
from typing import Optional, Dict, Any, List
from dataclasses import dataclass

from dotenv import load_dotenv

from skillscope.core.constants import (
    TRUESKILL_MU_0,
    TRUESKILL_SIGMA_0,
    ITEMS_PER_PAGE,
    DEFAULT_SUBSET,
    MAX_HISTORY_HOURS,
)
from skillscope.errors import ConfigurationError

load_dotenv()


@dataclass
class Settings:
    """Global settings for SkillScope."""

    # Supabase data source
    supabase_url: str = ""
    supabase_anon_key: str = ""
    request_timeout: float = 10.0

    # Forward-fill baseline for entities without history
    default_mu: float = TRUESKILL_MU_0
    default_sigma: float = TRUESKILL_SIGMA_0

    # Longest span build_time_series will grid, in hours
    max_history_hours: int = MAX_HISTORY_HOURS

    # Leaderboard
    items_per_page: int = ITEMS_PER_PAGE
    default_subset: str = DEFAULT_SUBSET

    # Preferences file for JsonFilePreferenceStore (empty = in memory)
    preferences_path: str = ""

    # API
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Load settings from environment variables."""
        self.supabase_url = os.getenv("SUPABASE_URL", self.supabase_url)
        self.supabase_anon_key = os.getenv("SUPABASE_ANON_KEY", self.supabase_anon_key)
        self.preferences_path = os.getenv("SKILLSCOPE_PREFERENCES_PATH", self.preferences_path)
        self.default_subset = os.getenv("SKILLSCOPE_DEFAULT_SUBSET", self.default_subset)
        self.cors_origins = os.getenv("CORS_ORIGINS", self.cors_origins)
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

        # Load numeric settings if provided
        if os.getenv("SKILLSCOPE_DEFAULT_MU"):
            self.default_mu = float(os.getenv("SKILLSCOPE_DEFAULT_MU"))
        if os.getenv("SKILLSCOPE_DEFAULT_SIGMA"):
            self.default_sigma = float(os.getenv("SKILLSCOPE_DEFAULT_SIGMA"))
        if os.getenv("SKILLSCOPE_ITEMS_PER_PAGE"):
            self.items_per_page = int(os.getenv("SKILLSCOPE_ITEMS_PER_PAGE"))
        if os.getenv("SKILLSCOPE_REQUEST_TIMEOUT"):
            self.request_timeout = float(os.getenv("SKILLSCOPE_REQUEST_TIMEOUT"))
        if os.getenv("SKILLSCOPE_MAX_HISTORY_HOURS"):
            self.max_history_hours = int(os.getenv("SKILLSCOPE_MAX_HISTORY_HOURS"))

        self.validate()

    def validate(self):
        """
        Check value ranges.

        Raises:
            ConfigurationError: If a setting is out of range
        """
        if self.default_sigma < 0:
            raise ConfigurationError(f"default_sigma must be >= 0, got {self.default_sigma}")
        if self.items_per_page < 1:
            raise ConfigurationError(f"items_per_page must be >= 1, got {self.items_per_page}")
        if self.request_timeout <= 0:
            raise ConfigurationError(f"request_timeout must be > 0, got {self.request_timeout}")
        if self.max_history_hours < 1:
            raise ConfigurationError(f"max_history_hours must be >= 1, got {self.max_history_hours}")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "supabase_url": self.supabase_url,
            "supabase_anon_key": "***" if self.supabase_anon_key else "",
            "supabase_configured": self.supabase_configured,
            "request_timeout": self.request_timeout,
            "default_mu": self.default_mu,
            "default_sigma": self.default_sigma,
            "max_history_hours": self.max_history_hours,
            "items_per_page": self.items_per_page,
            "default_subset": self.default_subset,
            "preferences_path": self.preferences_path,
            "log_level": self.log_level,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**kwargs) -> Settings:
    """
    Configure global settings.

    Args:
        **kwargs: Settings to override

    Returns:
        Configured Settings instance

    Raises:
        ConfigurationError: If an override is out of range
    """
    settings = get_settings()

    for key, value in kwargs.items():
        if hasattr(settings, key):
            setattr(settings, key, value)

    settings.validate()
    return settings


def reset_settings():
    """Drop the global instance so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
