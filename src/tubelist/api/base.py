"""HTTP transport used by the extractors."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import aiohttp

from ..core.settings import HttpSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransportError(Exception):
    """A request failed at the network or HTTP layer."""

    def __init__(self, message: str, url: str = "", status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class RetryableStatusError(TransportError):
    """The server answered with a status worth retrying (5xx, 429)."""

    def __init__(self, message: str, url: str, status: int, retry_after: float | None) -> None:
        super().__init__(message, url=url, status=status)
        self.retry_after = retry_after


@dataclass
class Response:
    """A fetched response body."""

    body: str
    status: int
    url: str = ""


def accept_language(locale: str | None) -> str:
    """Build an Accept-Language header value for a locale like ``en-US``."""
    if not locale:
        return "en-US,en;q=0.9"
    language = locale.split("-")[0]
    if language == locale:
        return f"{locale};q=1.0"
    return f"{locale},{language};q=0.9"


class Downloader:
    """Fetches URLs with a shared aiohttp session.

    Transient failures (connection errors, timeouts, 5xx and 429 responses)
    are retried with exponential backoff; every other non-2xx status raises
    :class:`TransportError` immediately.
    """

    def __init__(self, settings: HttpSettings | None = None) -> None:
        self.settings = settings or HttpSettings()
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
            connector = aiohttp.TCPConnector(limit=10)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers={"User-Agent": self.settings.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            try:
                await self._session.close()
                # Allow time for underlying connections to fully close
                await asyncio.sleep(0.1)
            except RuntimeError as e:
                # Session may be attached to a different event loop
                if "attached to a different loop" in str(e):
                    logger.debug(f"Session attached to different loop, skipping close: {e}")
                else:
                    raise
            finally:
                self._session = None

    def reset_session(self) -> None:
        """Drop the session so it is recreated lazily on the next request.

        Use this before running requests in a new event loop.
        """
        self._session = None

    async def __aenter__(self) -> "Downloader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        locale: str | None = None,
    ) -> Response:
        """GET ``url`` and return its body.

        Raises:
            TransportError: On network errors, timeouts or non-2xx statuses
                once retries are exhausted.
        """
        request_headers = {"Accept-Language": accept_language(locale)}
        if headers:
            request_headers.update(headers)

        async def operation() -> Response:
            return await self._request_once(url, request_headers)

        try:
            return await self._retry_with_backoff(operation)
        except TransportError:
            raise
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timeout fetching {url}", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Error fetching {url}: {e}", url=url) from e

    async def _request_once(self, url: str, headers: dict[str, str]) -> Response:
        logger.debug(f"GET {url}")
        async with self.session.get(url, headers=headers) as resp:
            body = await resp.text()
            if 200 <= resp.status < 300:
                return Response(body=body, status=resp.status, url=str(resp.url))
            if self._is_retryable_status(resp.status):
                raise RetryableStatusError(
                    f"{url} returned {resp.status}",
                    url=url,
                    status=resp.status,
                    retry_after=self._parse_retry_after(resp.headers, default=None),
                )
            raise TransportError(f"{url} returned {resp.status}", url=url, status=resp.status)

    async def _retry_with_backoff(
        self,
        operation: Callable[[], Awaitable[T]],
        retryable_exceptions: tuple[type[Exception], ...] = (
            aiohttp.ClientError,
            asyncio.TimeoutError,
            RetryableStatusError,
        ),
    ) -> T:
        """Execute an operation with exponential backoff retry.

        Args:
            operation: Async callable to execute.
            retryable_exceptions: Tuple of exceptions to retry on.

        Returns:
            The result of the operation.

        Raises:
            The last exception if all retries fail.
        """
        max_retries = self.settings.max_retries
        last_exception: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                return await operation()
            except retryable_exceptions as e:
                last_exception = e

                if attempt < max_retries:
                    delay = self._backoff_delay(attempt, e)
                    logger.warning(
                        f"Downloader: Attempt {attempt + 1}/{max_retries + 1} failed: {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        f"Downloader: All {max_retries + 1} attempts failed. Last error: {e}"
                    )

        raise last_exception  # type: ignore[misc]

    def _backoff_delay(self, attempt: int, error: Exception) -> float:
        """Delay before the next attempt, honoring Retry-After when given."""
        delay = min(self.settings.base_delay * (2**attempt), self.settings.max_delay)
        retry_after = getattr(error, "retry_after", None)
        if retry_after is not None:
            delay = min(max(delay, retry_after), self.settings.max_delay)
        return delay

    def _is_retryable_status(self, status: int) -> bool:
        """Check if an HTTP status code is retryable.

        Args:
            status: HTTP status code.

        Returns:
            True if the status indicates a transient error worth retrying.
        """
        return status >= 500 or status == 429

    def _parse_retry_after(self, headers, default: float | None = 1.0) -> float | None:
        """Parse Retry-After header value.

        Args:
            headers: Response headers.
            default: Default delay if header is missing or unparseable.

        Returns:
            Delay in seconds to wait before retrying.
        """
        retry_after = headers.get("Retry-After")
        if not retry_after:
            return default

        try:
            return float(retry_after)
        except ValueError:
            # Try parsing as HTTP-date (RFC 7231)
            from email.utils import parsedate_to_datetime

            try:
                retry_dt = parsedate_to_datetime(retry_after)
                from datetime import datetime, timezone

                now = datetime.now(timezone.utc)
                delta = (retry_dt - now).total_seconds()
                return max(delta, 0.0)
            except (TypeError, ValueError):
                return default
