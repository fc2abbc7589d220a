"""
Exception classes for lrclib-fetcher.

Exception Hierarchy:
    LrcLibError (base)
        ConfigError - Invalid configuration values
        MetadataExtractionError - Audio tags could not be read
        LyricsFetchError - Lookup service unreachable or returned an error
        FileWriteError - Lyrics file could not be written

"No lyrics found" is deliberately NOT an exception: the resolver returns
None for it, so callers can tell a miss apart from a failure.
"""


class LrcLibError(Exception):
    """
    Base exception for all lrclib-fetcher errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., file path,
                 artist/title being searched, underlying reason).

    Example:
        try:
            resolver.resolve(metadata)
        except LrcLibError as e:
            logger.error(f"Operation failed: {e.message}")
            logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(LrcLibError):
    """
    Raised when a configuration value is invalid.

    Example:
        raise ConfigError(
            "Batch size must be a positive integer",
            details={'field': 'batch.size', 'value': 0}
        )
    """
    pass


class MetadataExtractionError(LrcLibError):
    """
    Raised when metadata cannot be extracted from an audio file.

    Common causes:
        - File extension is not a supported audio format
        - mutagen cannot identify the container
        - File is truncated or unreadable
    """

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to extract metadata from {file_path}: {reason}",
            details={'file_path': str(file_path), 'reason': reason}
        )
        self.file_path = str(file_path)
        self.reason = reason


class LyricsFetchError(LrcLibError):
    """
    Raised when the lyrics lookup service fails during a search.

    Covers transport failures (DNS, connection refused, timeouts), non-2xx
    responses and bodies that are not valid JSON. A failure on any search
    tier aborts the whole search; tiers are not retried here.

    Attributes:
        artist: Artist name that was being searched.
        title: Track title that was being searched.
        reason: Underlying failure description.
    """

    def __init__(self, artist: str, title: str, reason: str) -> None:
        super().__init__(
            f'Failed to fetch lyrics for "{artist} - {title}": {reason}',
            details={'artist': artist, 'title': title, 'reason': reason}
        )
        self.artist = artist
        self.title = title
        self.reason = reason


class FileWriteError(LrcLibError):
    """Raised when a lyrics file cannot be written or removed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write lyrics to {file_path}: {reason}",
            details={'file_path': str(file_path), 'reason': reason}
        )
        self.file_path = str(file_path)
        self.reason = reason
