"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path

from lrclib_fetcher.lyrics.models import TrackMetadata


class StubClient:
    """
    Stand-in for LrcLibClient

    Returns queued responses in order and records the params of every call.
    A queued exception instance is raised instead of returned. Once the queue
    is empty every further call returns None.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get_lyrics(self, params):
        self.calls.append(dict(params))
        if not self.responses:
            return None
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def stub_client_factory():
    """Build a StubClient with queued responses"""
    return StubClient


@pytest.fixture
def track_metadata():
    """Fully tagged track"""
    return TrackMetadata(
        artist="Daft Punk",
        title="Digital Love",
        album="Discovery",
        duration=301.4,
        filepath="/music/Daft Punk - Digital Love.flac"
    )


@pytest.fixture
def synced_record():
    """LRCLIB record with synchronized and plain lyrics"""
    return {
        'id': 3396226,
        'trackName': 'Digital Love',
        'artistName': 'Daft Punk',
        'albumName': 'Discovery',
        'duration': 301.0,
        'instrumental': False,
        'plainLyrics': "Last night I had a dream about you",
        'syncedLyrics': "[00:47.12] Last night I had a dream about you",
    }


@pytest.fixture
def plain_record():
    """LRCLIB record with plain lyrics only"""
    return {
        'id': 1,
        'trackName': 'Digital Love',
        'artistName': 'Daft Punk',
        'albumName': 'Discovery',
        'instrumental': False,
        'plainLyrics': "Last night I had a dream about you",
        'syncedLyrics': None,
    }


@pytest.fixture
def instrumental_record():
    """LRCLIB record flagged instrumental"""
    return {
        'id': 2,
        'trackName': 'Aerodynamic',
        'artistName': 'Daft Punk',
        'albumName': 'Discovery',
        'instrumental': True,
        'plainLyrics': None,
        'syncedLyrics': None,
    }
