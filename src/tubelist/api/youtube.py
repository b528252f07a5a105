"""YouTube request layer: client identification and browse envelopes."""

import json
import logging
import re
from typing import Any

from ..core.settings import ClientSettings
from ..extractor.errors import InvalidResponseError
from .base import Downloader, TransportError

logger = logging.getLogger(__name__)

# Bodies shorter than this are soft errors served with a success status
MIN_RESPONSE_LENGTH = 50

# Used when the current version cannot be scraped from youtube.com
HARDCODED_CLIENT_VERSION = "2.20200214.04.00"
CLIENT_VERSION_PAGE_URL = "https://www.youtube.com/results?search_query=test"

# The web client publishes its version in the ytcfg blob of every page
CLIENT_VERSION_RES = (
    re.compile(r'"INNERTUBE_CONTEXT_CLIENT_VERSION"\s*:\s*"([0-9.]+?)"'),
    re.compile(r'"innertube_context_client_version"\s*:\s*"([0-9.]+?)"'),
    re.compile(r'"client\.version"\s*,\s*"value"\s*:\s*"([0-9.]+?)"'),
)

CLIENT_NAME_HEADER = "X-YouTube-Client-Name"
CLIENT_VERSION_HEADER = "X-YouTube-Client-Version"


class YouTubeClient:
    """Issues browse requests the way the YouTube web front end does.

    The client version is taken from settings when configured; otherwise it is
    scraped from youtube.com on first use and reused for the lifetime of this
    client.
    """

    def __init__(self, downloader: Downloader, settings: ClientSettings | None = None) -> None:
        self.downloader = downloader
        self.settings = settings or ClientSettings()
        self._client_version: str | None = self.settings.client_version or None

    @property
    def locale(self) -> str:
        return self.settings.locale

    async def get_client_version(self) -> str:
        """Get the web client version sent with every browse request."""
        if self._client_version is None:
            self._client_version = await self._resolve_client_version()
        return self._client_version

    async def _resolve_client_version(self) -> str:
        try:
            response = await self.downloader.fetch(
                CLIENT_VERSION_PAGE_URL, locale=self.settings.locale
            )
        except TransportError as e:
            logger.warning(
                f"Could not fetch client version, using {HARDCODED_CLIENT_VERSION}: {e}"
            )
            return HARDCODED_CLIENT_VERSION

        version = self._parse_client_version(response.body)
        if version is None:
            logger.warning(
                f"Client version not found in page, using {HARDCODED_CLIENT_VERSION}"
            )
            return HARDCODED_CLIENT_VERSION

        logger.debug(f"Resolved YouTube client version {version}")
        return version

    @staticmethod
    def _parse_client_version(html: str) -> str | None:
        """Extract the client version from a youtube.com page."""
        for pattern in CLIENT_VERSION_RES:
            match = pattern.search(html)
            if match:
                return match.group(1)
        return None

    async def client_headers(self) -> dict[str, str]:
        """Headers identifying the web client to the browse endpoints."""
        return {
            CLIENT_NAME_HEADER: self.settings.client_name,
            CLIENT_VERSION_HEADER: await self.get_client_version(),
        }

    async def fetch_browse_response(self, url: str) -> dict[str, Any]:
        """Fetch a ``pbj=1``/``browse_ajax`` URL and return its response object.

        Both endpoints answer with a JSON array whose element 1 holds the
        payload under ``response``.

        Raises:
            TransportError: If the request itself fails.
            InvalidResponseError: If the body is too short, is not a JSON
                array, or lacks the ``response`` object.
        """
        headers = await self.client_headers()
        response = await self.downloader.fetch(url, headers=headers, locale=self.settings.locale)
        return self._parse_browse_envelope(response.body, url)

    @staticmethod
    def _parse_browse_envelope(body: str, url: str = "") -> dict[str, Any]:
        if body is None or len(body) < MIN_RESPONSE_LENGTH:
            raise InvalidResponseError(f"Response from {url} is too short to be valid")

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(f"Could not parse json data from {url}") from e

        if not isinstance(data, list):
            raise InvalidResponseError(
                f"Expected a JSON array from {url}, got {type(data).__name__}"
            )

        try:
            payload = data[1]["response"]
        except (IndexError, KeyError, TypeError) as e:
            raise InvalidResponseError(f"No response object in data from {url}") from e

        if not isinstance(payload, dict):
            raise InvalidResponseError(f"Response object from {url} is not a JSON object")
        return payload
