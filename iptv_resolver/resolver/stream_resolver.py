"""Resolves wrapper, redirect and playlist URLs into directly playable streams."""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Optional
from urllib.parse import urljoin

from ..models import ResolvedStream, ResolverConfig, StreamType
from ..utils.http_client import STREAM_HEADERS, FetchError, HttpClient
from ..utils.url_utils import is_valid_url
from .cancellation import CancellationToken
from .stream_type import classify, stream_type_or_default

PLAYLIST_MARKERS = ("#EXTINF", "#EXT-X-")
MANIFEST_MARKERS = ("<?xml", "<MPD", "urn:mpeg:dash")
DASH_MARKERS = ("<MPD", "urn:mpeg:dash")
ABSOLUTE_SCHEMES = ("http://", "https://", "rtmp://", "rtsp://")
BASE_URL_RE = re.compile(r"<BaseURL[^>]*>([^<]+)</BaseURL>")


class ProbeFailed(Exception):
    """Raised when a probe gets a server error response."""


def looks_like_playlist(body: str) -> bool:
    if body.startswith("#EXTM3U"):
        return True
    return any(marker in body for marker in PLAYLIST_MARKERS + MANIFEST_MARKERS)


def extract_from_playlist(body: str, base_url: str) -> Optional[ResolvedStream]:
    """Returns the first playable reference inside an M3U playlist or DASH manifest."""

    if any(marker in body for marker in DASH_MARKERS):
        match = BASE_URL_RE.search(body)
        if not match:
            return ResolvedStream(url=base_url, type=StreamType.DASH)
        raw = match.group(1).strip()
        resolved = raw if raw.startswith("http") else urljoin(base_url, raw)
        return ResolvedStream(url=resolved, type=StreamType.DASH)

    for raw_line in body.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith(ABSOLUTE_SCHEMES):
            return ResolvedStream(url=line, type=stream_type_or_default(line))
        if line.startswith("<"):
            continue
        resolved = urljoin(base_url, line)
        return ResolvedStream(url=resolved, type=stream_type_or_default(resolved))

    return None


class StreamResolver:
    """Turns one entry-point URL into a playable URL and its stream type.

    Strategies run in order and stop at the first success:

    * URLs with a recognised suffix are returned untouched.
    * A HEAD probe follows redirects and checks the final URL.
    * A GET probe checks the final URL, a bare-URL body, then a playlist or
      DASH manifest body.
    * Otherwise the input is returned as HLS.

    References found inside a probe body are not resolved again.
    """

    def __init__(
        self,
        http_client: HttpClient,
        config: Optional[ResolverConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http_client = http_client
        self._config = config or ResolverConfig()
        self._clock = clock

    async def resolve(self, url: str, token: Optional[CancellationToken] = None) -> ResolvedStream:
        known_type = classify(url)

        if known_type is StreamType.HLS:
            logging.debug("Direct HLS stream: %s", url)
            return ResolvedStream(url=url, type=StreamType.HLS)

        if known_type is not StreamType.UNKNOWN:
            logging.debug("Direct %s stream: %s", known_type.value, url)
            return ResolvedStream(url=url, type=known_type)

        logging.info("Resolving unknown URL: %s", url)
        started = self._clock()

        for strategy_name, strategy in (("HEAD", self._resolve_via_head), ("GET", self._resolve_via_get)):
            if token is not None and token.cancelled:
                logging.debug("Resolution of %s cancelled before %s probe", url, strategy_name)
                break
            try:
                result = await strategy(url)
            except (FetchError, ProbeFailed) as exc:
                logging.debug("%s probe failed for %s: %s", strategy_name, url, exc)
                continue
            if result:
                logging.info(
                    "%s resolved -> %s: %s (%.0f ms)",
                    strategy_name,
                    result.type.value,
                    result.url,
                    (self._clock() - started) * 1000,
                )
                return result

        logging.warning("Could not resolve, falling back to original URL: %s", url)
        return ResolvedStream(url=url, type=StreamType.HLS)

    async def _resolve_via_head(self, url: str) -> Optional[ResolvedStream]:
        response = await self._http_client.fetch(
            url,
            "HEAD",
            timeout=self._config.head_timeout,
            max_redirects=self._config.head_max_redirects,
            headers=STREAM_HEADERS,
        )
        if response.status >= 500:
            raise ProbeFailed(f"HEAD {url} returned {response.status}")

        final_url = response.url
        if not final_url or final_url == url:
            return None
        stream_type = classify(final_url)
        if stream_type is StreamType.UNKNOWN:
            return None
        return ResolvedStream(url=final_url, type=stream_type)

    async def _resolve_via_get(self, url: str) -> Optional[ResolvedStream]:
        response = await self._http_client.fetch(
            url,
            "GET",
            timeout=self._config.get_timeout,
            max_redirects=self._config.get_max_redirects,
            max_bytes=self._config.max_body_bytes,
            headers=STREAM_HEADERS,
        )
        if response.status >= 500:
            raise ProbeFailed(f"GET {url} returned {response.status}")

        body = response.body.strip()
        final_url = response.url
        logging.debug("GET status: %s, final URL: %s", response.status, final_url)
        logging.debug("GET body (first 300): %s", body[:300])

        if final_url and final_url != url:
            stream_type = classify(final_url)
            if stream_type is not StreamType.UNKNOWN:
                return ResolvedStream(url=final_url, type=stream_type)

        if is_valid_url(body) and "\n" not in body and "<" not in body:
            return ResolvedStream(url=body, type=stream_type_or_default(body))

        if looks_like_playlist(body):
            return extract_from_playlist(body, final_url or url)

        return None
