"""
Tiered lyrics resolver

Decides which LRCLIB record, if any, best matches a local track. Track
metadata is often incomplete or slightly off, so the resolver runs up to three
successively looser queries and stops as soon as one produces a satisfying
match:

1. Exact signature: artist, title, album and duration
2. Artist and title only
3. Title only (opt-in); the response may contain many artists, so candidates
   are ranked by artist-name containment

Synced lyrics preference:
    With prefer_synced enabled, a match carrying only plain lyrics does not end
    the search. It is kept as that tier's fallback and the next tier is tried.
    If no tier produces synced lyrics (or an instrumental flag), the earliest
    fallback wins, so an exact-signature plain match beats a title-only one.

Outcomes:
    - LyricResult: the chosen lyrics
    - None: nothing usable found in any permitted tier (a normal outcome)
    - LyricsFetchError: the service failed during any tier; remaining tiers
      are skipped and no fallback is returned

The resolver keeps no state between calls. All per-search bookkeeping lives
in local variables, so a single instance can be shared across threads.
"""

from typing import Any, Dict, List, Optional, Tuple

import requests

from ..utils.exceptions import LyricsFetchError
from ..utils.logger import get_logger
from .lrclib import LrcLibClient, get_lrclib_client
from .models import (
    LRCLIB_SOURCE,
    LyricResult,
    LyricSearchOptions,
    SearchTier,
    TrackMetadata,
)


# Accepted key spellings per logical field, in priority order.
# The first key holding a non-empty value wins.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'artist': ('artistName', 'artist_name', 'artist'),
    'title': ('trackName', 'track_name', 'title'),
    'album': ('albumName', 'album_name', 'album'),
    'synced_lyrics': ('syncedLyrics', 'synced_lyrics', 'lrc'),
    'plain_lyrics': ('plainLyrics', 'plain_lyrics', 'text'),
    'instrumental': ('instrumental',),
}


def _is_missing(value: Any) -> bool:
    return value is None or value == ''


def pick_field(record: Dict[str, Any], field_name: str) -> Any:
    """
    Return the first non-empty value among a field's aliases

    Only None and the empty string count as missing. Whitespace-only text is
    a value and is returned unchanged.

    Args:
        record: Raw candidate object
        field_name: Logical field name (a key of FIELD_ALIASES)

    Returns:
        The value, or None when no alias holds one
    """
    for key in FIELD_ALIASES[field_name]:
        value = record.get(key)
        if not _is_missing(value):
            return value
    return None


def normalize_candidates(payload: Any) -> List[Dict[str, Any]]:
    """
    Turn any response body into a list of candidate objects

    A JSON array keeps its object members in order, a single object becomes
    a one-element list, and null or any other JSON type yields no candidates.
    An empty object is kept; it is discarded later as contentless.

    Args:
        payload: Decoded JSON body

    Returns:
        List of candidate dictionaries (possibly empty)
    """
    if payload is None:
        return []
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    return []


def artist_matches(query_artist: str, candidate_artist: str) -> bool:
    """
    Bidirectional, case-insensitive substring containment

    Either name containing the other counts as a match, so "Beatles" matches
    "The Beatles" and vice versa. This is a loose heuristic: "Art" also
    matches "Arthur", and an empty name on either side matches anything.
    """
    query = (query_artist or '').lower()
    candidate = (candidate_artist or '').lower()
    return candidate in query or query in candidate


def select_title_only_candidate(
    candidates: List[Dict[str, Any]],
    query_artist: str
) -> Optional[Dict[str, Any]]:
    """
    Pick the candidate for a title-only search

    Args:
        candidates: Normalized candidates in service order
        query_artist: Artist from the local track metadata

    Returns:
        First candidate whose artist matches, else the first candidate,
        else None for an empty list
    """
    if not candidates:
        return None

    for candidate in candidates:
        candidate_artist = pick_field(candidate, 'artist')
        if artist_matches(query_artist, str(candidate_artist or '')):
            return candidate

    return candidates[0]


def map_candidate(record: Dict[str, Any], metadata: TrackMetadata) -> Optional[LyricResult]:
    """
    Map a raw candidate into a LyricResult

    Query metadata fills artist, title and album when the record has none.

    Args:
        record: Raw candidate object
        metadata: Metadata the search was issued with

    Returns:
        LyricResult, or None when the record carries no lyrics and is not
        flagged instrumental
    """
    if not record:
        return None

    synced_lyrics = pick_field(record, 'synced_lyrics')
    plain_lyrics = pick_field(record, 'plain_lyrics')
    instrumental = bool(pick_field(record, 'instrumental'))

    if synced_lyrics is None and plain_lyrics is None and not instrumental:
        return None

    return LyricResult(
        artist=str(pick_field(record, 'artist') or metadata.artist),
        title=str(pick_field(record, 'title') or metadata.title),
        album=str(pick_field(record, 'album') or metadata.album or ''),
        synced_lyrics=str(synced_lyrics) if synced_lyrics is not None else None,
        plain_lyrics=str(plain_lyrics) if plain_lyrics is not None else None,
        source=LRCLIB_SOURCE,
        instrumental=instrumental,
    )


def build_query(tier: SearchTier, metadata: TrackMetadata) -> Dict[str, str]:
    """
    Build the query parameters for a search tier

    The exact tier always sends all four parameters; an unknown album or
    duration is sent as an empty string. Duration is rounded to whole seconds.
    """
    if tier is SearchTier.EXACT:
        duration = ''
        if metadata.duration:
            duration = str(int(round(metadata.duration)))
        return {
            'artist_name': metadata.artist,
            'track_name': metadata.title,
            'album_name': metadata.album or '',
            'duration': duration,
        }

    if tier is SearchTier.ARTIST_TITLE:
        return {
            'artist_name': metadata.artist,
            'track_name': metadata.title,
        }

    return {'track_name': metadata.title}


class LyricsResolver:
    """
    Chooses the best LRCLIB lyrics for a track

    Attributes:
        client: Transport exposing get_lyrics(params) -> decoded JSON
    """

    def __init__(self, client: Optional[LrcLibClient] = None):
        """
        Args:
            client: Lookup client; defaults to the shared LrcLibClient
        """
        self.client = client or get_lrclib_client()
        self.logger = get_logger(__name__)

    def resolve(
        self,
        metadata: TrackMetadata,
        options: Optional[LyricSearchOptions] = None
    ) -> Optional[LyricResult]:
        """
        Find lyrics for a track

        Args:
            metadata: Track search keys
            options: Search switches (defaults: no title-only tier, prefer synced)

        Returns:
            The chosen LyricResult, or None when nothing usable was found

        Raises:
            LyricsFetchError: If the lookup service fails during any tier
        """
        options = options or LyricSearchOptions()

        self.logger.debug(f'Starting search for: "{metadata}"')
        self.logger.debug(f"Search options: {options}")

        # At most one retained plain-only match per tier, in tier order
        fallbacks: List[LyricResult] = []

        for tier in self.tiers_for(options):
            match = self._search_tier(tier, metadata)
            if match is None:
                continue

            if options.prefer_synced and not match.satisfies_synced_preference:
                self.logger.debug(f"Found {tier.label} match but no synced lyrics, continuing search...")
                fallbacks.append(match)
                continue

            self.logger.debug(f'Using {tier.label} match for: "{metadata}"')
            return match

        return self._pick_fallback(fallbacks, metadata)

    @staticmethod
    def tiers_for(options: LyricSearchOptions) -> List[SearchTier]:
        """Tiers permitted by the options, in evaluation order"""
        tiers = [SearchTier.EXACT, SearchTier.ARTIST_TITLE]
        if options.allow_title_only_search:
            tiers.append(SearchTier.TITLE_ONLY)
        return tiers

    def _search_tier(self, tier: SearchTier, metadata: TrackMetadata) -> Optional[LyricResult]:
        """
        Run one tier's query and pick its candidate

        Returns:
            The tier's content-bearing match, or None
        """
        params = build_query(tier, metadata)
        self.logger.debug(f"Making {tier.label} request: {params}")

        try:
            payload = self.client.get_lyrics(params)
        except requests.RequestException as e:
            self.logger.debug(f"Error in {tier.label} search: {e}")
            raise LyricsFetchError(metadata.artist, metadata.title, str(e)) from e

        candidates = normalize_candidates(payload)
        if not candidates:
            self.logger.debug(f"No candidates in {tier.label} response")
            return None

        self.logger.debug(f"Found {len(candidates)} candidate(s) in {tier.label} response")

        if tier is SearchTier.TITLE_ONLY:
            chosen = select_title_only_candidate(candidates, metadata.artist)
        else:
            chosen = candidates[0]

        result = map_candidate(chosen, metadata)
        if result is None:
            self.logger.debug(f"Discarded contentless {tier.label} candidate")
            return None

        self.logger.debug(f"Processed {tier.label} candidate: {result.summary()}")
        return result

    def _pick_fallback(
        self,
        fallbacks: List[LyricResult],
        metadata: TrackMetadata
    ) -> Optional[LyricResult]:
        if fallbacks:
            self.logger.debug("Using non-synced match as fallback")
            return fallbacks[0]

        self.logger.debug(f'No lyrics found for: "{metadata}" after all search attempts')
        return None


# Global resolver instance
_lyrics_resolver: Optional[LyricsResolver] = None


def get_lyrics_resolver() -> LyricsResolver:
    """
    Get the shared resolver, bound to the shared LRCLIB client

    Returns:
        The global LyricsResolver instance
    """
    global _lyrics_resolver
    if _lyrics_resolver is None:
        _lyrics_resolver = LyricsResolver()
    return _lyrics_resolver


def reset_lyrics_resolver() -> None:
    """Drop the shared resolver so it is rebuilt with the current client"""
    global _lyrics_resolver
    _lyrics_resolver = None
