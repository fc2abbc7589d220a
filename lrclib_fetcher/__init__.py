"""
LRCLib Fetcher: synchronized lyrics for a local music collection

Scans a music directory, reads track metadata from audio tags (or file names
when tags are missing), looks each track up on LRCLIB and writes the lyrics
next to the audio file.

## Package Layout

**Configuration (`lrclib_fetcher/config/`)**
- Dataclass settings loaded from YAML files and `LRCLIB_*` environment variables

**Audio (`lrclib_fetcher/audio/`)**
- Directory scanning for supported audio formats
- Tag extraction with mutagen plus file name heuristics

**Lyrics (`lrclib_fetcher/lyrics/`)**
- LRCLIB HTTP client
- Tiered lyrics resolver (exact signature, artist + title, title only)
  with a preference for synchronized lyrics
- `.lrc` / `.txt` file writer

**Batch processing (`lrclib_fetcher/batch/`)**
- Directory orchestration with bounded concurrency and a delay between batches

**Utilities (`lrclib_fetcher/utils/`)**
- Logging, exceptions, helpers and input validation

## Usage

    lrclib-fetch fetch ~/Music --allow-title-only
    lrclib-fetch lookup --artist "Daft Punk" --title "Digital Love"

Or from Python:

    from lrclib_fetcher.lyrics import LyricsResolver, TrackMetadata

    resolver = LyricsResolver()
    result = resolver.resolve(TrackMetadata(artist="Daft Punk", title="Digital Love"))
"""

# Version information, also used for the outbound User-Agent header
__version__ = "0.9.0"

__title__ = "lrclib-fetcher"

__author__ = "lrclib-fetcher contributors"

__url__ = "https://github.com/leshicodes/lrclib-fetcher"

__description__ = "Fetch synchronized lyrics from LRCLIB for your local music files"

__all__ = [
    "__version__",
    "__title__",
    "__author__",
    "__url__",
    "__description__",
]
