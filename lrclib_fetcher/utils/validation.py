"""
Input validation for CLI arguments
Each validator returns (is_valid, error_message)
"""

from pathlib import Path
from typing import Optional, Tuple


VALID_LOG_LEVELS = ['debug', 'info', 'warning', 'error', 'critical']


def validate_music_directory(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate that a music directory exists and is readable

    Args:
        path: Directory path to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not path:
        return False, "Directory path cannot be empty"

    directory = Path(path).expanduser()

    if not directory.exists():
        return False, f"Directory not found: {directory}"

    if not directory.is_dir():
        return False, f"Path is not a directory: {directory}"

    try:
        next(directory.iterdir(), None)
    except PermissionError:
        return False, f"Permission denied: {directory}"

    return True, None


def validate_batch_size(size: int) -> Tuple[bool, Optional[str]]:
    """
    Validate number of files processed in parallel

    Args:
        size: Batch size

    Returns:
        Tuple of (is_valid, error_message)
    """
    if size < 1 or size > 50:
        return False, "Batch size must be between 1 and 50"
    return True, None


def validate_delay(delay_ms: int) -> Tuple[bool, Optional[str]]:
    """
    Validate delay between batches in milliseconds

    Args:
        delay_ms: Delay in milliseconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    if delay_ms < 0:
        return False, "Delay cannot be negative"
    return True, None


def validate_log_level(level: str) -> Tuple[bool, Optional[str]]:
    """
    Validate log level name

    Args:
        level: Level name (case-insensitive)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not level or level.lower() not in VALID_LOG_LEVELS:
        return False, f"Log level must be one of: {', '.join(VALID_LOG_LEVELS)}"
    return True, None
