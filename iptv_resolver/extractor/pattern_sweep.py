"""Regex sweep that recovers stream URLs embedded in HTML or script wrappers."""

from __future__ import annotations

import re
from typing import Iterable, List, NamedTuple, Optional, Sequence, Set

from ..models import PlaylistEntry
from ..utils.url_utils import normalize_stream_url


class SweepPattern(NamedTuple):
    """A named regular expression; group 1 holds the URL when the pattern has one."""

    name: str
    regex: re.Pattern


def _pattern(name: str, source: str) -> SweepPattern:
    return SweepPattern(name, re.compile(source, re.IGNORECASE))


DEFAULT_PATTERNS: Sequence[SweepPattern] = (
    _pattern("m3u8-suffix", r"https?://[^\s\"'<>,]+\.m3u8(?:\?[^\s\"'<>,]*)?"),
    _pattern(
        "stream-path",
        r"https?://[^\s\"'<>,`]+/(?:live|hls|stream|play|playlist|channel|index|chunklist|master)[^\s\"'<>,`]*",
    ),
    _pattern("m3u8-query", r"https?://[^\s\"'<>,?&]+[?&][^\s\"'<>,]*m3u8[^\s\"'<>,]*"),
    _pattern(
        "assignment",
        r"(?:file|src|source|url|hls|stream|hlsUrl|streamUrl|m3u8|playUrl|videoUrl|link)\s*[=:]\s*[\"'`]?"
        r"(https?://[^\"'`\s,<>]+)",
    ),
    _pattern(
        "json-field",
        r"\"(?:url|src|file|stream|hls|link|video|source)\"\s*:\s*\"(https?://[^\"]+)\"",
    ),
    _pattern("markup-attribute", r"(?:href|src|action)\s*=\s*[\"'](https?://[^\"']+)"),
)


def _matched_url(match: re.Match) -> str:
    if match.re.groups and match.group(1):
        return match.group(1)
    return match.group(0)


def sweep(
    text: str,
    known_urls: Iterable[str] = (),
    patterns: Optional[Sequence[SweepPattern]] = None,
) -> List[PlaylistEntry]:
    """Runs ``patterns`` in order, returning URLs not already in ``known_urls``.

    The seen-set grows as each pattern runs, so a URL captured by an earlier
    pattern is never added again by a later one.
    """

    patterns = DEFAULT_PATTERNS if patterns is None else patterns
    seen: Set[str] = set(known_urls)
    found: List[PlaylistEntry] = []

    for pattern in patterns:
        for match in pattern.regex.finditer(text):
            stream_url = normalize_stream_url(_matched_url(match))
            if stream_url and stream_url not in seen:
                seen.add(stream_url)
                found.append(PlaylistEntry(stream_url=stream_url))

    return found
