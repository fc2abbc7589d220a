# lrclib_fetcher/audio/__init__.py
"""
Audio package: finding audio files and reading their search metadata
"""

from .metadata import (
    AUDIO_EXTENSIONS,
    TAG_NAMES,
    UNKNOWN_ARTIST,
    MetadataExtractor,
    extract_metadata,
    parse_filename,
)
from .scanner import scan_directory, is_audio_file

__all__ = [
    'AUDIO_EXTENSIONS',
    'TAG_NAMES',
    'UNKNOWN_ARTIST',
    'MetadataExtractor',
    'extract_metadata',
    'parse_filename',
    'scan_directory',
    'is_audio_file',
]
