"""
Music directory scanner
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..config.settings import DEFAULT_AUDIO_EXTENSIONS
from ..utils.logger import get_logger


logger = get_logger(__name__)


def is_audio_file(path: Union[str, Path], extensions: Optional[Iterable[str]] = None) -> bool:
    """Check a file name against the supported audio extensions (case-insensitive)"""
    allowed = {ext.lower() for ext in (extensions or DEFAULT_AUDIO_EXTENSIONS)}
    return Path(path).suffix.lower() in allowed


def scan_directory(
    directory: Union[str, Path],
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None
) -> List[Path]:
    """
    Find audio files in a directory

    Args:
        directory: Root directory to scan
        recursive: Descend into subdirectories
        extensions: Accepted extensions, defaults to the supported audio formats

    Returns:
        Sorted list of audio file paths. Directories that cannot be read are
        logged and skipped.
    """
    allowed = [ext.lower() for ext in (extensions or DEFAULT_AUDIO_EXTENSIONS)]
    results: List[Path] = []
    _scan_into(Path(directory), recursive, allowed, results)
    return sorted(results)


def _scan_into(directory: Path, recursive: bool, extensions: List[str], results: List[Path]) -> None:
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.error(f"Error scanning directory {directory}: {e}")
        return

    for entry in entries:
        if entry.is_dir():
            if recursive:
                _scan_into(entry, recursive, extensions, results)
        elif is_audio_file(entry, extensions):
            results.append(entry)
        else:
            logger.debug(f"Skipping non-audio file: {entry.name}")
