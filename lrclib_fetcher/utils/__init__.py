# lrclib_fetcher/utils/__init__.py
"""
Utilities package
Logging, exceptions, helpers and input validation
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    OperationLogger,
    get_current_log_file
)
from .helpers import (
    format_duration,
    parse_duration_string,
    truncate_string,
    retry_on_failure
)
from .exceptions import (
    LrcLibError,
    ConfigError,
    MetadataExtractionError,
    LyricsFetchError,
    FileWriteError
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'OperationLogger',
    'get_current_log_file',

    # Helper exports
    'format_duration',
    'parse_duration_string',
    'truncate_string',
    'retry_on_failure',

    # Exception exports
    'LrcLibError',
    'ConfigError',
    'MetadataExtractionError',
    'LyricsFetchError',
    'FileWriteError',
]
