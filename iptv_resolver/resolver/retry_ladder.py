"""Playback retry escalation driven by player events."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional, Set

from ..models import ResolvedStream, StreamType
from ..reporting.error_reporter import ErrorReporter
from .cancellation import CancellationToken
from .stream_resolver import StreamResolver

CHANNEL_UNAVAILABLE = "Channel unavailable"
RESOLUTION_FAILED = "Failed to resolve stream URL"


class LadderState(str, Enum):
    RESOLVING = "resolving"
    PLAYING = "playing"
    RETRY_AS_HLS = "retry_as_hls"
    RETRY_AS_DASH = "retry_as_dash"
    FAILED = "failed"


class RetryLadder:
    """Tracks one channel's playback attempts.

    After the first playback error the entry URL is retried as HLS (only when
    the resolver had substituted a different URL), after the second it is
    retried as DASH, and the next error is terminal.
    """

    def __init__(
        self,
        entry_url: str,
        resolver: StreamResolver,
        reporter: Optional[ErrorReporter] = None,
        channel_name: Optional[str] = None,
    ) -> None:
        self.entry_url = entry_url
        self.channel_name = channel_name
        self._resolver = resolver
        self._reporter = reporter
        self.state = LadderState.RESOLVING
        self.stream: Optional[ResolvedStream] = None
        self.error: Optional[str] = None
        self.is_loading = True
        self._pending_reports: Set[asyncio.Task] = set()

    async def start(self, token: Optional[CancellationToken] = None) -> Optional[ResolvedStream]:
        """Resolves the entry URL; returns ``None`` on failure or when ``token`` was cancelled."""

        self.state = LadderState.RESOLVING
        self.stream = None
        self.error = None
        self.is_loading = True

        try:
            resolved = await self._resolver.resolve(self.entry_url, token)
        except Exception as exc:
            if token is not None and token.cancelled:
                return None
            logging.error("URL resolution threw for %s: %s", self.entry_url, exc)
            self.state = LadderState.FAILED
            self.error = RESOLUTION_FAILED
            self.is_loading = False
            return None

        if token is not None and token.cancelled:
            logging.debug("Discarding stale resolution for %s", self.entry_url)
            return None

        logging.info("Playing %s stream: %s", resolved.type.value, resolved.url)
        self.stream = resolved
        self.state = LadderState.PLAYING
        return resolved

    async def retry(self, token: Optional[CancellationToken] = None) -> Optional[ResolvedStream]:
        """Manual retry requested by the user; starts the ladder over."""

        return await self.start(token)

    def on_load_start(self) -> None:
        self.is_loading = True
        self.error = None

    def on_loaded(self) -> None:
        self.is_loading = False

    def on_buffering(self, is_buffering: bool) -> None:
        self.is_loading = is_buffering

    def on_playback_error(
        self,
        error_code: Optional[Any] = None,
        error_message: Optional[str] = None,
    ) -> Optional[ResolvedStream]:
        """Advances the ladder; returns the next stream to try, or ``None`` once failed."""

        self.is_loading = False
        if self.state is LadderState.FAILED:
            return None
        logging.error("Playback error for %s: %s %s", self.entry_url, error_code, error_message)

        current = self.stream
        if self.state is LadderState.PLAYING and current is not None and current.url != self.entry_url:
            logging.warning("Retrying with original URL as HLS")
            return self._escalate(LadderState.RETRY_AS_HLS, StreamType.HLS)

        if self.state is LadderState.RETRY_AS_HLS and current is not None and current.type is StreamType.HLS:
            logging.warning("Retrying as DASH")
            return self._escalate(LadderState.RETRY_AS_DASH, StreamType.DASH)

        self._fail(error_code, error_message)
        return None

    def _escalate(self, state: LadderState, stream_type: StreamType) -> ResolvedStream:
        self.state = state
        self.stream = ResolvedStream(url=self.entry_url, type=stream_type)
        self.is_loading = True
        return self.stream

    def _fail(self, error_code: Optional[Any], error_message: Optional[str]) -> None:
        self.state = LadderState.FAILED
        self.error = CHANNEL_UNAVAILABLE
        if self._reporter is None:
            return
        details: Dict[str, Any] = {
            "channelName": self.channel_name,
            "originalUrl": self.entry_url,
            "resolvedUrl": self.stream.url if self.stream else None,
            "resolvedType": self.stream.type.value if self.stream else None,
            "errorCode": error_code,
            "errorMessage": error_message,
        }
        args = ("Video playback error", "PLAYBACK_ERROR", details)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._reporter.report(*args)
            return
        # The reporter posts with a blocking session, so it runs on a worker thread.
        task = loop.create_task(asyncio.to_thread(self._reporter.report, *args))
        self._pending_reports.add(task)
        task.add_done_callback(self._report_done)

    def _report_done(self, task: asyncio.Task) -> None:
        self._pending_reports.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logging.warning("Diagnostic report for %s failed: %s", self.entry_url, exc)

    async def wait_for_reports(self) -> None:
        """Waits until diagnostic reports already scheduled have been sent."""

        if self._pending_reports:
            await asyncio.gather(*self._pending_reports, return_exceptions=True)


class ChannelPlayback:
    """Owns the ladder for the currently selected channel.

    Selecting another channel cancels the previous request's token, so a
    resolution that finishes late is dropped instead of replacing the newer one.
    """

    def __init__(self, resolver: StreamResolver, reporter: Optional[ErrorReporter] = None) -> None:
        self._resolver = resolver
        self._reporter = reporter
        self._token: Optional[CancellationToken] = None
        self.ladder: Optional[RetryLadder] = None

    async def select_channel(self, url: str, name: Optional[str] = None) -> Optional[ResolvedStream]:
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token
        ladder = RetryLadder(url, self._resolver, self._reporter, channel_name=name)
        self.ladder = ladder
        return await ladder.start(token)

    async def retry(self) -> Optional[ResolvedStream]:
        if self.ladder is None:
            return None
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token
        return await self.ladder.retry(token)
