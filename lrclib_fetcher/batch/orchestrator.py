"""
Directory orchestration for lyrics fetching

Runs the whole pipeline for a music directory: scan for audio files, read
their metadata, resolve lyrics on LRCLIB and write the sidecar files.

Processing model:
    Files are processed in batches of `batch.size`. Within a batch every file
    gets its own worker thread; batches run one after another with a fixed
    pause of `batch.delay_ms` between them so LRCLIB is not flooded. Results
    come back in scan order regardless of which worker finished first.

Per-file outcomes are values, never exceptions: a broken tag, a lookup
failure or a read-only directory is recorded in that file's ProcessResult and
the run carries on with the rest of the batch.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..audio.metadata import MetadataExtractor
from ..audio.scanner import scan_directory
from ..config.settings import Settings, get_settings
from ..lyrics.lrclib import LrcLibClient
from ..lyrics.models import LyricResult, TrackMetadata
from ..lyrics.resolver import LyricsResolver, get_lyrics_resolver
from ..lyrics.writer import LyricsFileWriter
from ..utils.exceptions import ConfigError, FileWriteError, LyricsFetchError
from ..utils.helpers import retry_on_failure
from ..utils.logger import OperationLogger, get_logger


INSUFFICIENT_METADATA = "Insufficient metadata to search for lyrics"
METADATA_UNREADABLE = "Could not read audio metadata"
NO_LYRICS_FOUND = "No lyrics found"
NOTHING_WRITTEN = "No lyrics file was written"

ProgressCallback = Callable[[int, int], None]


class ProcessStatus(Enum):
    """Outcome of processing one audio file"""
    WRITTEN = "written"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class ProcessResult:
    """
    Result of processing one audio file

    Attributes:
        file_path: Audio file that was processed
        status: Outcome classification
        metadata: Extracted metadata (None for skipped or unreadable files)
        lyrics: Lyrics that were chosen, if any
        lyrics_path: Sidecar file that was written, if any
        error_message: Failure or miss description
    """
    file_path: Path
    status: ProcessStatus
    metadata: Optional[TrackMetadata] = None
    lyrics: Optional[LyricResult] = None
    lyrics_path: Optional[Path] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        """Skipped files count as successful: they already have lyrics"""
        return self.status in (ProcessStatus.WRITTEN, ProcessStatus.SKIPPED)


@dataclass
class FetchSummary:
    """
    Aggregate statistics for a directory run
    """
    total: int = 0
    written: int = 0
    skipped: int = 0
    not_found: int = 0
    failed: int = 0
    synced: int = 0
    plain: int = 0
    instrumental: int = 0
    error_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def successful(self) -> int:
        return self.written + self.skipped

    @property
    def unsuccessful(self) -> int:
        return self.not_found + self.failed

    @classmethod
    def from_results(cls, results: List[ProcessResult]) -> 'FetchSummary':
        """
        Build a summary from per-file results

        Failure messages (including "No lyrics found") are grouped so the
        CLI can print one line per distinct reason.
        """
        summary = cls(total=len(results))

        for result in results:
            if result.status == ProcessStatus.WRITTEN:
                summary.written += 1
                if result.lyrics is not None:
                    if result.lyrics.kind == "synced":
                        summary.synced += 1
                    elif result.lyrics.kind == "plain":
                        summary.plain += 1
                    else:
                        summary.instrumental += 1
            elif result.status == ProcessStatus.SKIPPED:
                summary.skipped += 1
            elif result.status == ProcessStatus.NOT_FOUND:
                summary.not_found += 1
            else:
                summary.failed += 1

            if not result.success:
                message = result.error_message or "Unknown error"
                summary.error_counts[message] = summary.error_counts.get(message, 0) + 1

        return summary


class LyricsFetcherOrchestrator:
    """
    Coordinates scanning, metadata extraction, lyrics resolution and writing

    Collaborators are injectable so tests (and library users) can swap the
    lookup client, the resolver or the file writer.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resolver: Optional[LyricsResolver] = None,
        writer: Optional[LyricsFileWriter] = None,
        extractor: Optional[MetadataExtractor] = None,
        show_progress: bool = True
    ):
        """
        Initialize the orchestrator

        Args:
            settings: Settings to use, defaults to the global settings
            resolver: Lyrics resolver; built from the network settings if omitted
            writer: Lyrics file writer
            extractor: Metadata extractor; limited to the configured extensions
            show_progress: Draw a progress bar during directory runs

        Raises:
            ConfigError: If the settings fail validation
        """
        self.logger = get_logger(__name__)
        self.settings = settings or get_settings()

        errors = self.settings.get_validation_errors()
        if errors:
            raise ConfigError(
                f"Invalid configuration: {'; '.join(errors)}",
                details={'errors': errors}
            )

        if resolver is not None:
            self.resolver = resolver
        elif settings is None:
            self.resolver = get_lyrics_resolver()
        else:
            network = self.settings.network
            self.resolver = LyricsResolver(LrcLibClient(
                base_url=network.base_url,
                timeout=network.request_timeout,
                not_found_is_empty=network.not_found_is_empty,
            ))

        self.writer = writer or LyricsFileWriter()
        self.extractor = extractor or MetadataExtractor(self.settings.files.extensions)
        self.search_options = self.settings.search_options()
        self.show_progress = show_progress

        self.logger.debug(f"Initialized LyricsFetcherOrchestrator: {self.settings}")

    def process_directory(
        self,
        directory: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None
    ) -> List[ProcessResult]:
        """
        Fetch lyrics for every audio file in a directory

        Args:
            directory: Music directory to process
            on_progress: Called with (processed, total) after each batch

        Returns:
            One ProcessResult per audio file, in scan order
        """
        files_config = self.settings.files
        audio_files = scan_directory(
            directory,
            recursive=files_config.recursive,
            extensions=files_config.extensions
        )

        if not audio_files:
            self.logger.console_warning(f"No audio files found in {directory}")
            return []

        total = len(audio_files)
        batch_size = self.settings.batch.size
        delay_seconds = self.settings.batch.delay_ms / 1000

        operation_logger = OperationLogger(self.logger, "Lyrics Fetch", show_progress=self.show_progress)
        operation_logger.start(f"🎵 Found {total} audio files in {directory}")

        results: List[ProcessResult] = []
        for start in range(0, total, batch_size):
            if start > 0 and delay_seconds > 0:
                self.logger.debug(f"Waiting {self.settings.batch.delay_ms}ms before next batch")
                time.sleep(delay_seconds)

            batch = audio_files[start:start + batch_size]
            results.extend(self._process_batch(batch))

            operation_logger.progress(f"Processed {len(results)}/{total} files", len(results), total)
            if on_progress:
                on_progress(len(results), total)

        summary = FetchSummary.from_results(results)
        operation_logger.complete(
            f"✅ Processed {summary.total} files ({summary.successful} successful)"
        )
        return results

    def _process_batch(self, batch: List[Path]) -> List[ProcessResult]:
        """Process one batch concurrently, keeping results in input order"""
        results: List[Optional[ProcessResult]] = [None] * len(batch)

        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            future_to_index = {
                executor.submit(self.process_audio_file, file_path): i
                for i, file_path in enumerate(batch)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    self.logger.error(f"Unexpected error processing {batch[index]}: {e}")
                    results[index] = ProcessResult(
                        file_path=batch[index],
                        status=ProcessStatus.FAILED,
                        error_message=f"Execution error: {e}"
                    )

        return results

    def process_audio_file(self, file_path: Union[str, Path]) -> ProcessResult:
        """
        Fetch and write lyrics for a single audio file

        Args:
            file_path: Audio file path

        Returns:
            ProcessResult describing the outcome
        """
        path = Path(file_path)
        files_config = self.settings.files

        if files_config.skip_existing and not files_config.overwrite_existing \
                and self.writer.lyrics_file_exists(path):
            self.logger.debug(f"Lyrics already exist, skipping: {path.name}")
            return ProcessResult(file_path=path, status=ProcessStatus.SKIPPED)

        metadata = self.extractor.extract_metadata(path)
        if metadata is None:
            return self._failed(path, METADATA_UNREADABLE)

        if not metadata.is_searchable:
            return self._failed(path, INSUFFICIENT_METADATA, metadata)

        try:
            lyrics = self._resolve(metadata)
        except LyricsFetchError as e:
            return self._failed(path, e.message, metadata)

        if lyrics is None:
            self.logger.info(f'No lyrics found for "{metadata}"')
            return ProcessResult(
                file_path=path,
                status=ProcessStatus.NOT_FOUND,
                metadata=metadata,
                error_message=NO_LYRICS_FOUND
            )

        try:
            if files_config.overwrite_existing:
                self.writer.delete_existing_lyrics(path)
            lyrics_path = self.writer.write_lyrics(path, lyrics)
        except FileWriteError as e:
            return self._failed(path, e.message, metadata, lyrics)

        if lyrics_path is None:
            return self._failed(path, NOTHING_WRITTEN, metadata, lyrics)

        self.logger.info(f'Saved {lyrics.kind} lyrics for "{metadata}": {lyrics_path.name}')
        return ProcessResult(
            file_path=path,
            status=ProcessStatus.WRITTEN,
            metadata=metadata,
            lyrics=lyrics,
            lyrics_path=lyrics_path
        )

    def _resolve(self, metadata: TrackMetadata) -> Optional[LyricResult]:
        """Resolve lyrics, retrying lookup failures per the network settings"""
        network = self.settings.network

        @retry_on_failure(
            max_attempts=network.retry_attempts,
            delay=network.retry_delay,
            exceptions=(LyricsFetchError,)
        )
        def search() -> Optional[LyricResult]:
            return self.resolver.resolve(metadata, self.search_options)

        return search()

    def _failed(
        self,
        path: Path,
        message: str,
        metadata: Optional[TrackMetadata] = None,
        lyrics: Optional[LyricResult] = None
    ) -> ProcessResult:
        self.logger.warning(f"{path.name}: {message}")
        return ProcessResult(
            file_path=path,
            status=ProcessStatus.FAILED,
            metadata=metadata,
            lyrics=lyrics,
            error_message=message
        )


def create_lyrics_fetcher(settings: Optional[Settings] = None, **kwargs) -> LyricsFetcherOrchestrator:
    """
    Create a new lyrics fetcher

    Args:
        settings: Settings to use, defaults to the global settings
        **kwargs: Forwarded to LyricsFetcherOrchestrator

    Returns:
        Configured LyricsFetcherOrchestrator
    """
    return LyricsFetcherOrchestrator(settings=settings, **kwargs)


def fetch_lyrics_for_directory(
    directory: Union[str, Path],
    settings: Optional[Settings] = None,
    on_progress: Optional[ProgressCallback] = None
) -> List[ProcessResult]:
    """Convenience wrapper: process a directory with a fresh orchestrator"""
    return create_lyrics_fetcher(settings).process_directory(directory, on_progress=on_progress)
