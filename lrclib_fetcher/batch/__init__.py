# lrclib_fetcher/batch/__init__.py
"""
Batch processing package: runs lyrics fetching across a music directory
"""

from .orchestrator import (
    ProcessStatus,
    ProcessResult,
    FetchSummary,
    LyricsFetcherOrchestrator,
    create_lyrics_fetcher,
    fetch_lyrics_for_directory,
    INSUFFICIENT_METADATA,
    NO_LYRICS_FOUND,
)

__all__ = [
    'ProcessStatus',
    'ProcessResult',
    'FetchSummary',
    'LyricsFetcherOrchestrator',
    'create_lyrics_fetcher',
    'fetch_lyrics_for_directory',
    'INSUFFICIENT_METADATA',
    'NO_LYRICS_FOUND',
]
