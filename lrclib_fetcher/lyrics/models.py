"""
Data models for lyrics search

TrackMetadata and LyricSearchOptions are the resolver's inputs, LyricResult is
its output. SearchTier names the three search strategies in the order the
resolver tries them.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


# Source tag stamped on every result built from an LRCLIB record
LRCLIB_SOURCE = "lrclib.net"


class SearchTier(Enum):
    """
    Search strategies, from most to least specific

    - EXACT: artist, title, album and duration together
    - ARTIST_TITLE: artist and title only
    - TITLE_ONLY: title alone, candidates ranked by artist similarity
    """
    EXACT = "exact"
    ARTIST_TITLE = "artist_title"
    TITLE_ONLY = "title_only"

    @property
    def label(self) -> str:
        """Human-readable tier name for log messages"""
        return {
            "exact": "exact match",
            "artist_title": "artist/title",
            "title_only": "title-only",
        }[self.value]


@dataclass
class TrackMetadata:
    """
    Track information used as search keys

    artist and title are the primary keys; an empty title makes the track
    unsearchable. album and duration only feed the exact-signature tier.
    """
    artist: str
    title: str
    album: Optional[str] = None
    duration: Optional[float] = None
    filepath: str = ""

    @property
    def is_searchable(self) -> bool:
        return bool(self.artist and self.artist.strip() and self.title and self.title.strip())

    def __str__(self) -> str:
        return f"{self.artist} - {self.title}"


@dataclass(frozen=True)
class LyricSearchOptions:
    """
    Resolver behaviour switches

    Attributes:
        allow_title_only_search: Enable the title-only tier as a last resort
        prefer_synced: Keep searching looser tiers when a match only has plain
                       lyrics, returning the plain match only if nothing better
                       turns up
    """
    allow_title_only_search: bool = False
    prefer_synced: bool = True


@dataclass(frozen=True)
class LyricResult:
    """
    Lyrics chosen for a track

    Immutable once built. A result always carries synced lyrics, plain
    lyrics or the instrumental flag; contentless records never become a
    LyricResult.

    Attributes:
        artist: Artist name as reported by the lookup service
        title: Track name as reported by the lookup service
        album: Album name, empty string when unknown
        synced_lyrics: LRC text with [mm:ss.xx] timestamps, or None
        plain_lyrics: Plain text lyrics, or None
        source: Identifier of the service the lyrics came from
        instrumental: True when the service flags the track as instrumental
    """
    artist: str
    title: str
    album: str = ""
    synced_lyrics: Optional[str] = None
    plain_lyrics: Optional[str] = None
    source: str = LRCLIB_SOURCE
    instrumental: bool = False

    @property
    def has_synced_lyrics(self) -> bool:
        return bool(self.synced_lyrics)

    @property
    def has_plain_lyrics(self) -> bool:
        return bool(self.plain_lyrics)

    @property
    def has_content(self) -> bool:
        return self.has_synced_lyrics or self.has_plain_lyrics or self.instrumental

    @property
    def satisfies_synced_preference(self) -> bool:
        """Synced lyrics or an instrumental flag: nothing better to look for"""
        return self.has_synced_lyrics or self.instrumental

    @property
    def kind(self) -> str:
        if self.has_synced_lyrics:
            return "synced"
        if self.has_plain_lyrics:
            return "plain"
        return "instrumental"

    def summary(self) -> Dict[str, Any]:
        """Loggable description without the lyrics text itself"""
        return {
            'artist': self.artist,
            'title': self.title,
            'album': self.album,
            'has_synced_lyrics': self.has_synced_lyrics,
            'has_plain_lyrics': self.has_plain_lyrics,
            'instrumental': self.instrumental,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
