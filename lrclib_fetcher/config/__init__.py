"""
Configuration package for lrclib-fetcher

Settings are loaded once into a module-level singleton and accessed with:

    from lrclib_fetcher.config import get_settings

    settings = get_settings()
    settings.batch.size

Configuration sources in order of precedence:
1. Environment variables (LRCLIB_*)
2. YAML configuration file
3. Default values
"""

from .settings import (
    get_settings,
    reload_settings,
    parse_bool,
    Settings,
    SearchConfig,
    FileConfig,
    BatchConfig,
    NetworkConfig,
    LoggingConfig,
    DEFAULT_AUDIO_EXTENSIONS,
)

__all__ = [
    'get_settings',
    'reload_settings',
    'parse_bool',
    'Settings',
    'SearchConfig',
    'FileConfig',
    'BatchConfig',
    'NetworkConfig',
    'LoggingConfig',
    'DEFAULT_AUDIO_EXTENSIONS',
]
