"""
Lyrics file writer

Saves lyrics next to the audio file they belong to, sharing its stem:

- Synced lyrics   -> <stem>.lrc
- Plain lyrics    -> <stem>.txt
- Instrumental    -> <stem>.lrc holding a single "[00:00.00]Instrumental" line

Only one file is written per track. Synced lyrics win over plain lyrics, and
the instrumental marker is written only when there is no text at all.
"""

from pathlib import Path
from typing import List, Optional, Union

from ..utils.exceptions import FileWriteError
from ..utils.logger import get_logger
from .models import LyricResult


LRC_EXTENSION = '.lrc'
TXT_EXTENSION = '.txt'
INSTRUMENTAL_MARKER = '[00:00.00]Instrumental\n'


class LyricsFileWriter:
    """
    Writes and manages lyrics sidecar files
    """

    def __init__(self):
        self.logger = get_logger(__name__)

    @staticmethod
    def lyrics_paths(audio_path: Union[str, Path]) -> List[Path]:
        """Candidate sidecar paths for an audio file (.lrc first)"""
        path = Path(audio_path)
        return [path.with_suffix(LRC_EXTENSION), path.with_suffix(TXT_EXTENSION)]

    def write_lyrics(self, audio_path: Union[str, Path], lyrics: Optional[LyricResult]) -> Optional[Path]:
        """
        Write lyrics beside an audio file

        Args:
            audio_path: Path of the audio file the lyrics belong to
            lyrics: Chosen lyrics

        Returns:
            Path of the created file, or None when there was nothing to write

        Raises:
            FileWriteError: If the file cannot be written
        """
        if lyrics is None:
            self.logger.warning(f"No lyrics provided for: {audio_path}")
            return None

        audio_path = Path(audio_path)

        if lyrics.has_synced_lyrics:
            return self._write(audio_path.with_suffix(LRC_EXTENSION), lyrics.synced_lyrics, "synchronized lyrics")

        if lyrics.has_plain_lyrics:
            return self._write(audio_path.with_suffix(TXT_EXTENSION), lyrics.plain_lyrics, "plain lyrics")

        if lyrics.instrumental:
            return self._write(audio_path.with_suffix(LRC_EXTENSION), INSTRUMENTAL_MARKER, "instrumental marker")

        self.logger.warning(f"No lyrics content available for: {audio_path}")
        return None

    def _write(self, target: Path, content: str, description: str) -> Path:
        try:
            with open(target, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            self.logger.error(f"Error writing {description} to {target}: {e}")
            raise FileWriteError(str(target), str(e)) from e

        self.logger.info(f"Written {description} to: {target.name}")
        return target

    def lyrics_file_exists(self, audio_path: Union[str, Path]) -> bool:
        """Check whether a .lrc or .txt file already sits beside the audio file"""
        return any(path.exists() for path in self.lyrics_paths(audio_path))

    def delete_existing_lyrics(self, audio_path: Union[str, Path]) -> List[Path]:
        """
        Remove existing .lrc and .txt files for an audio file

        Args:
            audio_path: Path of the audio file

        Returns:
            Paths that were deleted

        Raises:
            FileWriteError: If an existing file cannot be removed
        """
        deleted = []
        for path in self.lyrics_paths(audio_path):
            if not path.exists():
                continue
            try:
                path.unlink()
            except OSError as e:
                raise FileWriteError(str(path), f"could not delete: {e}") from e
            self.logger.debug(f"Deleted existing lyrics: {path.name}")
            deleted.append(path)
        return deleted
