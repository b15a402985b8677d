"""Shared HTTP helpers for playlist sources, stream probes, and diagnostics."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urljoin

import aiohttp
import requests

from ..models import FetchResult

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS: Dict[str, str] = {
    "user-agent": BROWSER_USER_AGENT,
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "accept-language": "en-US,en;q=0.5",
    "accept-encoding": "identity",
}

STREAM_HEADERS: Dict[str, str] = {
    "user-agent": "VLC/3.0.18 LibVLC/3.0.18",
    "accept": "application/x-mpegURL, application/vnd.apple.mpegurl, audio/mpegurl, application/dash+xml, */*",
}

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

DEFAULT_TIMEOUT = 20.0
DEFAULT_MAX_REDIRECTS = 15


class FetchError(Exception):
    """Raised when a request cannot be completed (DNS, connection, protocol)."""


class FetchTimeout(FetchError):
    """Raised when a request exceeds its timeout."""


class TooManyRedirects(FetchError):
    """Raised when a redirect chain exceeds the configured bound."""


class ResponseTooLarge(FetchError):
    """Raised when a response body exceeds the allowed size."""


class HttpClient:
    """Issues redirect-following requests and posts diagnostic payloads."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.max_redirects = max_redirects
        self._headers = DEFAULT_HEADERS.copy()
        if headers:
            self._headers.update(headers)

        self._sync_session = requests.Session()
        self._sync_session.headers.update({"user-agent": self._headers["user-agent"]})

        self._async_session: Optional[aiohttp.ClientSession] = None
        self._async_lock: Optional[asyncio.Lock] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        *,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        max_bytes: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> FetchResult:
        """Request ``url``, following redirects by hand up to ``max_redirects`` hops."""

        timeout = self.timeout if timeout is None else timeout
        max_redirects = self.max_redirects if max_redirects is None else max_redirects

        current = url
        visited: List[str] = []
        depth = 0
        while True:
            if depth > max_redirects:
                raise TooManyRedirects(f"Too many redirects ({max_redirects}) starting at {url}")

            status, location, body = await self._request_once(method, current, timeout, max_bytes, headers)
            logging.debug("  [%s] %s -> %s%s", depth, current, status, f" -> {location}" if location else "")

            if status in REDIRECT_STATUSES and location:
                visited.append(current)
                try:
                    current = location if location.startswith("http") else urljoin(current, location)
                except ValueError as exc:
                    raise FetchError(f"Invalid redirect target {location!r} from {current}: {exc}") from exc
                depth += 1
                continue

            return FetchResult(url=current, status=status, body=body, redirects=visited)

    async def _request_once(
        self,
        method: str,
        url: str,
        timeout: float,
        max_bytes: Optional[int],
        headers: Optional[Dict[str, str]],
    ) -> Tuple[int, Optional[str], str]:
        session = await self._get_async_session()
        request_headers = self._headers.copy()
        if headers:
            request_headers.update(headers)
        try:
            async with session.request(
                method,
                url,
                headers=request_headers,
                allow_redirects=False,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                location = resp.headers.get("Location")
                if resp.status in REDIRECT_STATUSES and location:
                    return resp.status, location, ""
                if method.upper() == "HEAD":
                    return resp.status, None, ""
                body = await self._read_body(resp, url, max_bytes)
                return resp.status, None, body
        except asyncio.TimeoutError as exc:
            raise FetchTimeout(f"Timeout: {url}") from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"{method} {url} failed: {exc}") from exc
        except ValueError as exc:
            # yarl rejects some malformed URLs before aiohttp wraps them in InvalidURL.
            raise FetchError(f"{method} {url} is not a valid URL: {exc}") from exc

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse, url: str, max_bytes: Optional[int]) -> str:
        chunks = bytearray()
        async for chunk in resp.content.iter_chunked(1 << 14):
            chunks.extend(chunk)
            if max_bytes is not None and len(chunks) > max_bytes:
                raise ResponseTooLarge(f"Response from {url} exceeds {max_bytes} bytes")
        return chunks.decode("utf-8", errors="replace")

    def post_json(self, url: str, payload: Dict[str, Any], timeout: float) -> int:
        """POST a JSON document and return the status code."""

        try:
            response = self._sync_session.post(url, json=payload, timeout=timeout)
            response.raise_for_status()
            return response.status_code
        except requests.RequestException as exc:
            logging.error("HTTP POST to %s failed: %s", url, exc)
            raise

    async def _get_async_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._async_session:
            if (
                self._async_session.closed
                or not self._loop
                or self._loop.is_closed()
                or self._loop is not current_loop
            ):
                await self._shutdown_async_session()

        if self._async_lock is None:
            self._async_lock = asyncio.Lock()

        async with self._async_lock:
            if self._async_session and not self._async_session.closed:
                return self._async_session
            connector = aiohttp.TCPConnector(limit=0)
            self._async_session = aiohttp.ClientSession(connector=connector)
            self._loop = current_loop
        return self._async_session

    async def _shutdown_async_session(self) -> None:
        if self._async_session:
            try:
                await self._async_session.close()
            except RuntimeError as exc:
                logging.debug("Ignoring error while closing HTTP session: %s", exc)
        self._async_session = None
        self._async_lock = None
        self._loop = None

    def close(self) -> None:
        """Closes the blocking session; the aiohttp session is closed by ``aclose``."""

        self._sync_session.close()

    async def aclose(self) -> None:
        await self._shutdown_async_session()
        self.close()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
