"""
Dependency injection for the SkillScope API.

Routes receive the data source through Depends(get_data_source); tests
swap it with app.dependency_overrides.
"""

import logging
from typing import Optional

from skillscope.config.settings import get_settings
from skillscope.database.source import SupabaseDataSource
from skillscope.errors import ConfigurationError

logger = logging.getLogger(__name__)


_data_source: Optional[SupabaseDataSource] = None


def get_data_source() -> SupabaseDataSource:
    """
    Get the shared data source.

    Raises:
        ConfigurationError: If Supabase is not configured
    """
    global _data_source

    if _data_source is None:
        settings = get_settings()
        if not settings.supabase_configured:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        _data_source = SupabaseDataSource.from_settings(settings)
        logger.info(f"Data source initialized: {settings.supabase_url}")

    return _data_source


def data_source_configured() -> bool:
    return get_settings().supabase_configured


async def cleanup_async():
    """Close the shared data source."""
    global _data_source
    if _data_source is not None:
        await _data_source.aclose()
        _data_source = None
