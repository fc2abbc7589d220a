"""
Track metadata extraction for lyrics lookup

Reads the search keys (artist, title, album, duration) from an audio file using
mutagen's "easy" tag interface, which exposes ID3, Vorbis comment and MP4 atoms
under the same lower-case names. WAVE and WMA have no easy interface, so their
ID3 frame ids and ASF attribute names are looked up as well. When tags are
missing, artist and title are
recovered from the file name:

    "07 Daft Punk - Digital Love.flac"  -> artist "Daft Punk", title "Digital Love"
    "Digital Love.mp3"                  -> title "Digital Love"

Merge rules:
- Tag values win over file name values
- A missing artist becomes "Unknown Artist"
- A missing title becomes the file stem
- Titles that are clearly embedded-art file names ("cover.jpg") are replaced
  with the file stem

The public entry point never raises: any failure is logged and reported as None
so a directory run can carry on with the next file.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import mutagen

from ..config.settings import DEFAULT_AUDIO_EXTENSIONS
from ..lyrics.models import TrackMetadata
from ..utils.exceptions import MetadataExtractionError
from ..utils.logger import get_logger


AUDIO_EXTENSIONS = list(DEFAULT_AUDIO_EXTENSIONS)

UNKNOWN_ARTIST = 'Unknown Artist'

# Tag names per field, in priority order. The lower-case names cover formats
# with an easy interface (ID3 in MP3, Vorbis comments, MP4). WAVE files expose
# raw ID3 frame ids and WMA files expose case-sensitive ASF attribute names.
# The album artist is preferred so compilation tracks group under one name.
TAG_NAMES: Dict[str, List[str]] = {
    'artist': [
        'albumartist', 'album_artist', 'artist', 'performer', 'author',
        'TPE2', 'TPE1',
        'WM/AlbumArtist', 'Author',
    ],
    'title': ['title', 'TIT2', 'Title'],
    'album': ['album', 'TALB', 'WM/AlbumTitle'],
}

# Optional leading track number, optional "Artist - " prefix, then the title
FILENAME_PATTERN = re.compile(r'^(?:\d+\s+)?(?:(?P<artist>.+?)\s+-\s+)?(?P<title>.+?)$')

SUSPICIOUS_TITLE_MARKERS = ('.jpg', '.png', 'cover')


def parse_filename(file_path: Union[str, Path]) -> Dict[str, str]:
    """
    Recover artist and title from a file name

    Args:
        file_path: Audio file path

    Returns:
        Dictionary with 'title' and, when present, 'artist'
    """
    stem = Path(file_path).stem
    info: Dict[str, str] = {}

    match = FILENAME_PATTERN.match(stem)
    if not match:
        info['title'] = stem
        return info

    if match.group('artist'):
        info['artist'] = match.group('artist').strip()

    title = match.group('title').strip()
    info['title'] = stem if 'cover.jpg' in title.lower() else title
    return info


class MetadataExtractor:
    """
    Extracts TrackMetadata from audio files

    Attributes:
        extensions: Lower-case file extensions accepted for probing
    """

    def __init__(self, extensions: Optional[List[str]] = None):
        self.logger = get_logger(__name__)
        self.extensions = [ext.lower() for ext in (extensions or AUDIO_EXTENSIONS)]

    def extract_metadata(self, file_path: Union[str, Path]) -> Optional[TrackMetadata]:
        """
        Extract search metadata from an audio file

        Args:
            file_path: Path of the audio file

        Returns:
            TrackMetadata, or None when the file is not a readable audio file
        """
        try:
            return self._extract(Path(file_path))
        except MetadataExtractionError as e:
            self.logger.error(str(e))
            return None

    def _extract(self, path: Path) -> TrackMetadata:
        if path.suffix.lower() not in self.extensions:
            self.logger.debug(f"Skipping non-audio file: {path.name}")
            raise MetadataExtractionError(str(path), "not an audio file")

        self.logger.debug(f"Extracting metadata from: {path.name}")

        try:
            audio = mutagen.File(str(path), easy=True)
        except (mutagen.MutagenError, OSError) as e:
            raise MetadataExtractionError(str(path), str(e)) from e

        if audio is None:
            raise MetadataExtractionError(str(path), "unrecognized audio format")

        tag_info = self._read_tags(audio)
        filename_info = parse_filename(path)

        duration = None
        info = getattr(audio, 'info', None)
        if info is not None and getattr(info, 'length', None):
            duration = float(info.length)

        metadata = self._merge(tag_info, filename_info, duration, path)
        self.logger.debug(f'Extracted metadata: "{metadata}"')
        return metadata

    def _read_tags(self, audio: Any) -> Dict[str, str]:
        """Pick the first non-blank tag value for each field"""
        tags = audio.tags
        info: Dict[str, str] = {}
        if not tags:
            return info

        for field_name, tag_names in TAG_NAMES.items():
            for tag_name in tag_names:
                try:
                    values = tags.get(tag_name)
                except (KeyError, ValueError):
                    # EasyID3 rejects keys it has no mapping for
                    continue
                value = self._first_value(values)
                if value:
                    info[field_name] = value
                    self.logger.debug(f"Found {field_name} in tag '{tag_name}': {value}")
                    break

        return info

    @staticmethod
    def _first_value(values: Any) -> Optional[str]:
        if values is None:
            return None
        # ID3 text frames hold their strings in .text
        values = getattr(values, 'text', values)
        if isinstance(values, (list, tuple)):
            for value in values:
                text = str(value).strip()
                if text:
                    return text
            return None
        text = str(values).strip()
        return text or None

    def _merge(
        self,
        tag_info: Dict[str, str],
        filename_info: Dict[str, str],
        duration: Optional[float],
        path: Path
    ) -> TrackMetadata:
        tag_title = tag_info.get('title', '')
        if tag_title and any(marker in tag_title.lower() for marker in SUSPICIOUS_TITLE_MARKERS):
            self.logger.warning(f'Detected suspicious title in metadata: "{tag_title}"')

        title = tag_title or filename_info.get('title') or path.stem
        if 'cover.jpg' in title.lower():
            title = path.stem
            self.logger.debug(f'Fixed incorrect title containing "cover.jpg": {title}')

        return TrackMetadata(
            artist=tag_info.get('artist') or filename_info.get('artist') or UNKNOWN_ARTIST,
            title=title,
            album=tag_info.get('album') or None,
            duration=duration,
            filepath=str(path),
        )


def extract_metadata(file_path: Union[str, Path]) -> Optional[TrackMetadata]:
    """Extract metadata with a default extractor"""
    return MetadataExtractor().extract_metadata(file_path)
