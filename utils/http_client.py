"""
Async HTTP client for fetching listing pages.
"""
import asyncio
import logging
import socket
from typing import Dict, Optional
from urllib.parse import urlparse

import aiohttp
from aiohttp import ClientError, ClientTimeout

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "sv-SE,sv;q=0.9,en;q=0.8",
}

# Bytes of an error response body kept for the error message
ERROR_BODY_LIMIT = 1024


class FetchError(Exception):
    """Raised when a page cannot be fetched."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class HttpClient:
    """Async HTTP client with per-request timeout and error handling."""

    def __init__(self, timeout_seconds: float = 12.0, headers: Optional[Dict[str, str]] = None):
        self.timeout_seconds = timeout_seconds
        self.headers = headers or DEFAULT_HEADERS
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.timeout_seconds),
                headers=self.headers,
            )
        return self._session

    async def get_bytes(self, url: str) -> bytes:
        """
        Perform GET request and return the raw body.

        Raises:
            FetchError: on HTTP status >= 400, timeout or network failure
        """
        domain = urlparse(url).netloc or "unknown"
        session = await self._get_session()

        try:
            logger.debug(f"GET {url}")
            async with session.get(url) as response:
                logger.debug(f"Response: {response.status} from {domain}")

                if response.status >= 400:
                    body = await response.content.read(ERROR_BODY_LIMIT)
                    text = body.decode("utf-8", errors="replace")
                    raise FetchError(
                        f"unexpected status code {response.status}: {text}",
                        status=response.status,
                    )

                return await response.read()

        except asyncio.TimeoutError as e:
            logger.warning(f"Timeout for {url}")
            raise FetchError(f"timeout fetching {url}") from e

        except (socket.gaierror, ClientError) as e:
            logger.warning(f"Network error for {url}: {e}")
            raise FetchError(f"could not fetch {url}: {e}") from e

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
