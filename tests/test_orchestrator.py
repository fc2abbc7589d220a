# tests/test_orchestrator.py
"""Test directory orchestration"""

import pytest
from unittest.mock import Mock, patch

from lrclib_fetcher.batch.orchestrator import (
    INSUFFICIENT_METADATA,
    NO_LYRICS_FOUND,
    FetchSummary,
    LyricsFetcherOrchestrator,
    create_lyrics_fetcher,
    fetch_lyrics_for_directory,
    ProcessResult,
    ProcessStatus,
)
from lrclib_fetcher.config.settings import Settings
from lrclib_fetcher.lyrics.models import LyricResult, TrackMetadata
from lrclib_fetcher.utils.exceptions import ConfigError, LyricsFetchError


SYNCED = LyricResult(artist='A', title='T', synced_lyrics='[00:01.00] la')
PLAIN = LyricResult(artist='A', title='T', plain_lyrics='la')


@pytest.fixture
def settings():
    settings = Settings()
    settings.files.recursive = True
    settings.files.skip_existing = True
    settings.files.overwrite_existing = False
    settings.batch.size = 2
    settings.batch.delay_ms = 500
    settings.network.retry_attempts = 1
    settings.network.retry_delay = 0
    settings.search.allow_title_only_search = False
    settings.search.prefer_synced = True
    return settings


@pytest.fixture
def extractor():
    extractor = Mock()
    extractor.extract_metadata.side_effect = lambda path: TrackMetadata(
        artist='Artist', title=path.stem, filepath=str(path)
    )
    return extractor


def make_audio_files(directory, names):
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(b'')
        paths.append(path)
    return paths


def make_orchestrator(settings, extractor, resolver):
    return LyricsFetcherOrchestrator(
        settings=settings,
        resolver=resolver,
        extractor=extractor,
        show_progress=False
    )


class TestProcessAudioFile:
    """Test single file outcomes"""

    def test_lyrics_written(self, temp_dir, settings, extractor):
        """Test lyrics written beside the audio file"""
        audio, = make_audio_files(temp_dir, ["Song.mp3"])
        resolver = Mock()
        resolver.resolve.return_value = SYNCED

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.WRITTEN
        assert result.success
        assert result.lyrics_path == temp_dir / "Song.lrc"
        resolver.resolve.assert_called_once()
        options = resolver.resolve.call_args[0][1]
        assert options.prefer_synced is True
        assert options.allow_title_only_search is False

    def test_existing_lyrics_skipped(self, temp_dir, settings, extractor):
        """Test files with lyrics are skipped"""
        audio, existing = make_audio_files(temp_dir, ["Song.mp3", "Song.lrc"])
        resolver = Mock()

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.SKIPPED
        assert result.success
        resolver.resolve.assert_not_called()
        extractor.extract_metadata.assert_not_called()

    def test_overwrite_replaces_old_lyrics(self, temp_dir, settings, extractor):
        """Test overwrite replaces old lyrics"""
        audio, old_txt = make_audio_files(temp_dir, ["Song.mp3", "Song.txt"])
        settings.files.overwrite_existing = True
        resolver = Mock()
        resolver.resolve.return_value = SYNCED

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.WRITTEN
        assert not old_txt.exists()
        assert (temp_dir / "Song.lrc").exists()

    def test_no_lyrics_found(self, temp_dir, settings, extractor):
        """Test no lyrics found"""
        audio, = make_audio_files(temp_dir, ["Song.mp3"])
        resolver = Mock()
        resolver.resolve.return_value = None

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.NOT_FOUND
        assert result.error_message == NO_LYRICS_FOUND
        assert not result.success

    def test_unreadable_metadata(self, temp_dir, settings):
        """Test unreadable metadata"""
        audio, = make_audio_files(temp_dir, ["Song.mp3"])
        extractor = Mock()
        extractor.extract_metadata.return_value = None

        result = make_orchestrator(settings, extractor, Mock()).process_audio_file(audio)

        assert result.status == ProcessStatus.FAILED

    def test_insufficient_metadata(self, temp_dir, settings):
        """Test insufficient metadata"""
        audio, = make_audio_files(temp_dir, ["Song.mp3"])
        extractor = Mock()
        extractor.extract_metadata.return_value = TrackMetadata(artist='Artist', title='')
        resolver = Mock()

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.FAILED
        assert result.error_message == INSUFFICIENT_METADATA
        resolver.resolve.assert_not_called()

    def test_fetch_error_is_contained(self, temp_dir, settings, extractor):
        """Test fetch error is contained"""
        audio, = make_audio_files(temp_dir, ["Song.mp3"])
        resolver = Mock()
        resolver.resolve.side_effect = LyricsFetchError('Artist', 'Song', 'timed out')

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.FAILED
        assert 'timed out' in result.error_message

    @patch('lrclib_fetcher.utils.helpers.time.sleep')
    def test_fetch_error_is_retried(self, mock_sleep, temp_dir, settings, extractor):
        """Test fetch error is retried"""
        audio, = make_audio_files(temp_dir, ["Song.mp3"])
        settings.network.retry_attempts = 2
        resolver = Mock()
        resolver.resolve.side_effect = [LyricsFetchError('Artist', 'Song', 'timed out'), PLAIN]

        result = make_orchestrator(settings, extractor, resolver).process_audio_file(audio)

        assert result.status == ProcessStatus.WRITTEN
        assert result.lyrics_path == temp_dir / "Song.txt"
        assert resolver.resolve.call_count == 2


class TestProcessDirectory:
    """Test batching, delays and ordering"""

    @patch('lrclib_fetcher.batch.orchestrator.time.sleep')
    def test_batches_with_delay_between(self, mock_sleep, temp_dir, settings, extractor):
        """Test batches with delay between"""
        make_audio_files(temp_dir, ["a.mp3", "b.mp3", "c.mp3", "d.mp3", "e.mp3"])
        resolver = Mock()
        resolver.resolve.return_value = SYNCED
        progress = []

        results = make_orchestrator(settings, extractor, resolver).process_directory(
            temp_dir, on_progress=lambda done, total: progress.append((done, total))
        )

        assert [r.file_path.name for r in results] == ["a.mp3", "b.mp3", "c.mp3", "d.mp3", "e.mp3"]
        assert progress == [(2, 5), (4, 5), (5, 5)]
        # Three batches, two pauses, none after the last batch
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(0.5)

    @patch('lrclib_fetcher.batch.orchestrator.time.sleep')
    def test_one_failure_does_not_stop_batch(self, mock_sleep, temp_dir, settings, extractor):
        """Test one failure does not stop batch"""
        make_audio_files(temp_dir, ["a.mp3", "b.mp3", "c.mp3"])
        resolver = Mock()

        def resolve(metadata, options):
            if metadata.title == 'b':
                raise RuntimeError("boom")
            return PLAIN

        resolver.resolve.side_effect = resolve

        results = make_orchestrator(settings, extractor, resolver).process_directory(temp_dir)

        statuses = [r.status for r in results]
        assert statuses == [ProcessStatus.WRITTEN, ProcessStatus.FAILED, ProcessStatus.WRITTEN]
        assert "boom" in results[1].error_message

    @patch('lrclib_fetcher.batch.orchestrator.time.sleep')
    def test_empty_directory(self, mock_sleep, temp_dir, settings, extractor):
        """Test directory without audio files"""
        assert make_orchestrator(settings, extractor, Mock()).process_directory(temp_dir) == []
        mock_sleep.assert_not_called()


class TestConfiguration:
    """Test settings validation at construction"""

    def test_invalid_settings_rejected(self, settings, extractor):
        """Test invalid settings rejected"""
        settings.batch.size = 0
        with pytest.raises(ConfigError) as exc_info:
            make_orchestrator(settings, extractor, Mock())
        assert 'errors' in exc_info.value.details


class TestFetchSummary:
    """Test run statistics"""

    def test_counts_and_grouped_errors(self, temp_dir):
        """Test counts and grouped errors"""
        instrumental = LyricResult(artist='A', title='T', instrumental=True)
        results = [
            ProcessResult(temp_dir / "1.mp3", ProcessStatus.WRITTEN, lyrics=SYNCED),
            ProcessResult(temp_dir / "2.mp3", ProcessStatus.WRITTEN, lyrics=PLAIN),
            ProcessResult(temp_dir / "3.mp3", ProcessStatus.WRITTEN, lyrics=instrumental),
            ProcessResult(temp_dir / "4.mp3", ProcessStatus.SKIPPED),
            ProcessResult(temp_dir / "5.mp3", ProcessStatus.NOT_FOUND, error_message=NO_LYRICS_FOUND),
            ProcessResult(temp_dir / "6.mp3", ProcessStatus.NOT_FOUND, error_message=NO_LYRICS_FOUND),
            ProcessResult(temp_dir / "7.mp3", ProcessStatus.FAILED),
        ]

        summary = FetchSummary.from_results(results)

        assert summary.total == 7
        assert (summary.written, summary.skipped, summary.not_found, summary.failed) == (3, 1, 2, 1)
        assert (summary.synced, summary.plain, summary.instrumental) == (1, 1, 1)
        assert summary.successful == 4
        assert summary.error_counts == {NO_LYRICS_FOUND: 2, "Unknown error": 1}


class TestConvenienceFunctions:
    """Test module-level helpers"""

    @patch('lrclib_fetcher.batch.orchestrator.LyricsFetcherOrchestrator')
    def test_fetch_lyrics_for_directory(self, mock_orchestrator, temp_dir, settings):
        """Test fetch lyrics for directory"""
        mock_orchestrator.return_value.process_directory.return_value = []
        callback = Mock()

        assert fetch_lyrics_for_directory(temp_dir, settings, on_progress=callback) == []

        mock_orchestrator.assert_called_once_with(settings=settings)
        mock_orchestrator.return_value.process_directory.assert_called_once_with(
            temp_dir, on_progress=callback
        )

    def test_create_lyrics_fetcher_builds_client_from_settings(self, settings):
        """Test create lyrics fetcher builds client from settings"""
        settings.network.base_url = "https://mirror.example"

        fetcher = create_lyrics_fetcher(settings, show_progress=False)

        assert fetcher.resolver.client.api_url == "https://mirror.example/api/get"
        assert fetcher.extractor.extensions == settings.files.extensions
