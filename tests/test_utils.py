# tests/test_utils.py
"""Test utilities and helpers"""

import logging
import pytest
from unittest.mock import Mock, patch

from lrclib_fetcher.utils.exceptions import LrcLibError, LyricsFetchError, MetadataExtractionError
from lrclib_fetcher.utils.helpers import (
    format_duration,
    parse_duration_string,
    truncate_string,
    retry_on_failure
)
from lrclib_fetcher.utils.logger import (
    ConsoleMessageFilter,
    get_logger,
    parse_size,
    setup_logging,
    get_current_log_file
)
from lrclib_fetcher.utils.validation import (
    validate_batch_size,
    validate_delay,
    validate_log_level,
    validate_music_directory
)


class TestHelpers:
    """Test helper functions"""

    def test_format_duration(self):
        """Test duration formatting"""
        assert format_duration(90) == "1:30"
        assert format_duration(3661) == "1:01:01"
        assert format_duration(0) == "0:00"
        assert format_duration(-10) == "0:00"

    def test_parse_duration_string(self):
        """Test duration string parsing"""
        assert parse_duration_string("3:45") == 225
        assert parse_duration_string("1:23:45") == 5025
        assert parse_duration_string("215.5") == 215.5
        assert parse_duration_string("invalid") is None
        assert parse_duration_string("") is None

    def test_truncate_string(self):
        """Test string truncation"""
        assert truncate_string("short", 10) == "short"
        assert truncate_string("a much longer line", 10) == "a much ..."

    @patch('lrclib_fetcher.utils.helpers.time.sleep')
    def test_retry_until_success(self, mock_sleep):
        """Test retry until success"""
        func = Mock(side_effect=[ValueError("first"), "ok"])
        wrapped = retry_on_failure(max_attempts=3, delay=1.0, exceptions=(ValueError,))(func)

        assert wrapped() == "ok"
        assert func.call_count == 2
        mock_sleep.assert_called_once_with(1.0)

    @patch('lrclib_fetcher.utils.helpers.time.sleep')
    def test_retry_gives_up(self, mock_sleep):
        """Test retry gives up"""
        func = Mock(side_effect=ValueError("always"))
        wrapped = retry_on_failure(max_attempts=2, delay=0.5, backoff=2.0, exceptions=(ValueError,))(func)

        with pytest.raises(ValueError):
            wrapped()
        assert func.call_count == 2

    @patch('lrclib_fetcher.utils.helpers.time.sleep')
    def test_retry_ignores_other_exceptions(self, mock_sleep):
        """Test retry ignores other exceptions"""
        func = Mock(side_effect=KeyError("nope"))
        wrapped = retry_on_failure(max_attempts=3, exceptions=(ValueError,))(func)

        with pytest.raises(KeyError):
            wrapped()
        assert func.call_count == 1
        mock_sleep.assert_not_called()


class TestValidation:
    """Test CLI input validators"""

    def test_music_directory(self, temp_dir):
        """Test music directory validation"""
        assert validate_music_directory(str(temp_dir)) == (True, None)
        assert validate_music_directory("")[0] is False
        assert validate_music_directory(str(temp_dir / "missing"))[0] is False

        some_file = temp_dir / "file.mp3"
        some_file.write_bytes(b'')
        assert validate_music_directory(str(some_file))[0] is False

    def test_batch_size(self):
        """Test batch size validation"""
        assert validate_batch_size(5)[0] is True
        assert validate_batch_size(0)[0] is False
        assert validate_batch_size(51)[0] is False

    def test_delay(self):
        """Test delay validation"""
        assert validate_delay(0)[0] is True
        assert validate_delay(-1)[0] is False

    def test_log_level(self):
        """Test log level validation"""
        assert validate_log_level("DEBUG")[0] is True
        assert validate_log_level("verbose")[0] is False


class TestExceptions:
    """Test exception messages and details"""

    def test_lyrics_fetch_error(self):
        """Test lyrics fetch error"""
        error = LyricsFetchError("Artist", "Song", "503 Service Unavailable")
        assert isinstance(error, LrcLibError)
        assert str(error) == 'Failed to fetch lyrics for "Artist - Song": 503 Service Unavailable'
        assert error.details == {'artist': 'Artist', 'title': 'Song', 'reason': '503 Service Unavailable'}

    def test_metadata_extraction_error(self):
        """Test metadata extraction error"""
        error = MetadataExtractionError("/music/a.mp3", "not an audio file")
        assert error.file_path == "/music/a.mp3"
        assert "not an audio file" in error.message


class TestLogging:
    """Test logging configuration"""

    def test_parse_size(self):
        """Test size string parsing"""
        assert parse_size("10MB") == 10 * 1024 ** 2
        assert parse_size("500kb") == 500 * 1024
        with pytest.raises(ValueError):
            parse_size("ten megabytes")

    def test_console_filter(self):
        """Test console message filtering"""
        console_filter = ConsoleMessageFilter()

        def record(level, name='lrclib_fetcher.test', **extra):
            rec = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
            for key, value in extra.items():
                setattr(rec, key, value)
            return rec

        assert console_filter.filter(record(logging.WARNING))
        assert not console_filter.filter(record(logging.INFO))
        assert console_filter.filter(record(logging.INFO, console_output=True))
        assert console_filter.filter(record(logging.INFO, name='lrclib_fetcher.console'))

    def test_logger_has_console_helpers(self):
        """Test logger has console helpers"""
        logger = get_logger('lrclib_fetcher.test')
        for helper in ('console_info', 'console_warning', 'console_error', 'progress_update'):
            assert callable(getattr(logger, helper))

    def test_file_logging(self, temp_dir):
        """Test rotating file output"""
        log_file = temp_dir / "logs" / "fetch.log"
        try:
            setup_logging(level="DEBUG", log_file=str(log_file), console_output=False)
            get_logger('lrclib_fetcher.test').info("written to file")

            assert get_current_log_file() == log_file
            for handler in logging.getLogger().handlers:
                handler.flush()
            assert "written to file" in log_file.read_text(encoding='utf-8')
        finally:
            setup_logging(level="INFO", log_file=None, console_output=False)
