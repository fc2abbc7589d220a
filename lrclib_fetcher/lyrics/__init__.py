# lrclib_fetcher/lyrics/__init__.py
"""
Lyrics package: LRCLIB lookup, match selection and lyrics files

Key components:
- LyricsResolver: tiered search with the synced-lyrics preference
- LrcLibClient: HTTP transport for the LRCLIB lookup endpoint
- LyricsFileWriter: writes .lrc/.txt files beside audio files

Usage:
    resolver = get_lyrics_resolver()
    result = resolver.resolve(TrackMetadata(artist, title, album, duration))
"""

from .models import (
    LRCLIB_SOURCE,
    SearchTier,
    TrackMetadata,
    LyricSearchOptions,
    LyricResult,
)
from .lrclib import LrcLibClient, get_lrclib_client, reset_lrclib_client, build_user_agent
from .resolver import (
    FIELD_ALIASES,
    LyricsResolver,
    get_lyrics_resolver,
    reset_lyrics_resolver,
    normalize_candidates,
    select_title_only_candidate,
    artist_matches,
    map_candidate,
    build_query,
)
from .writer import LyricsFileWriter, INSTRUMENTAL_MARKER

__all__ = [
    # Models
    'LRCLIB_SOURCE',
    'SearchTier',
    'TrackMetadata',
    'LyricSearchOptions',
    'LyricResult',

    # Transport
    'LrcLibClient',
    'get_lrclib_client',
    'reset_lrclib_client',
    'build_user_agent',

    # Resolver
    'FIELD_ALIASES',
    'LyricsResolver',
    'get_lyrics_resolver',
    'reset_lyrics_resolver',
    'normalize_candidates',
    'select_title_only_candidate',
    'artist_matches',
    'map_candidate',
    'build_query',

    # Files
    'LyricsFileWriter',
    'INSTRUMENTAL_MARKER',
]
