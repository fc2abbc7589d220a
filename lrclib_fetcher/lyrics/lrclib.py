"""
LRCLIB API client

Thin transport over the public LRCLIB lookup endpoint (`GET /api/get`). The
service is open and unauthenticated; the client still identifies itself with
a descriptive User-Agent as a courtesy.

The client knows nothing about search tiers or candidate selection. It sends
the query parameters it is given and returns the decoded JSON body, which may
be a list, a single object or null. Interpreting that body is the resolver's
job.

Usage:

    from lrclib_fetcher.lyrics.lrclib import get_lrclib_client

    client = get_lrclib_client()
    payload = client.get_lyrics({'artist_name': 'Daft Punk', 'track_name': 'Digital Love'})
"""

from typing import Any, Dict, Optional

import requests

from .. import __title__, __version__, __url__
from ..config.settings import get_settings
from ..utils.logger import get_logger


LOOKUP_PATH = "/api/get"


def build_user_agent() -> str:
    """
    Build the outbound User-Agent header

    Returns:
        String of the form "name/version (homepage)"
    """
    return f"{__title__}/{__version__} ({__url__})"


class LrcLibClient:
    """
    HTTP client for the LRCLIB lookup endpoint

    A single requests.Session is shared by every call. It carries only fixed
    headers, so one client can serve concurrent searches from several worker
    threads.

    Attributes:
        base_url: Service root, e.g. "https://lrclib.net"
        api_url: Full lookup endpoint URL
        timeout: Per-request timeout in seconds
        not_found_is_empty: Return None for HTTP 404 instead of raising
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        not_found_is_empty: Optional[bool] = None
    ):
        """
        Initialize the client from explicit arguments or network settings

        Args:
            base_url: Service root URL (defaults to settings.network.base_url)
            user_agent: User-Agent header (defaults to build_user_agent())
            timeout: Request timeout in seconds (defaults to settings.network.request_timeout)
            session: Pre-built session, mainly for tests
            not_found_is_empty: Treat 404 as "no candidate" (defaults to settings)
        """
        network = get_settings().network
        self.logger = get_logger(__name__)

        self.base_url = (base_url or network.base_url).rstrip('/')
        self.api_url = f"{self.base_url}{LOOKUP_PATH}"
        self.timeout = timeout if timeout is not None else network.request_timeout
        self.not_found_is_empty = (
            network.not_found_is_empty if not_found_is_empty is None else not_found_is_empty
        )

        self.user_agent = user_agent or build_user_agent()
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.user_agent})

        self.logger.debug(f"Using User-Agent: {self.user_agent}")

    def get_lyrics(self, params: Dict[str, str]) -> Any:
        """
        Query the lookup endpoint

        Args:
            params: Query parameters (artist_name, track_name, album_name, duration)

        Returns:
            Decoded JSON body (list, dict or None). An empty body is None.

        Raises:
            requests.RequestException: Transport failure, non-2xx status or a
                body that is not valid JSON
        """
        self.logger.debug(f"GET {self.api_url} params={params}")

        response = self.session.get(self.api_url, params=params, timeout=self.timeout)
        self.logger.debug(f"Response status: {response.status_code}")

        if response.status_code == 404 and self.not_found_is_empty:
            self.logger.debug("404 treated as empty result")
            return None

        response.raise_for_status()

        if not response.content or not response.content.strip():
            return None

        return response.json()

    def close(self) -> None:
        self.session.close()


# Global client instance shared by all resolvers
_lrclib_client: Optional[LrcLibClient] = None


def get_lrclib_client() -> LrcLibClient:
    """
    Get the shared LRCLIB client, creating it on first use

    Returns:
        The global LrcLibClient instance
    """
    global _lrclib_client
    if _lrclib_client is None:
        _lrclib_client = LrcLibClient()
    return _lrclib_client


def reset_lrclib_client() -> None:
    """Close and drop the shared client so the next call picks up new settings"""
    global _lrclib_client
    if _lrclib_client is not None:
        _lrclib_client.close()
    _lrclib_client = None
