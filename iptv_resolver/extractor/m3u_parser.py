"""Tools for parsing M3U playlists into discrete stream entries."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..models import PlaylistEntry
from ..utils.url_utils import normalize_stream_url

EXTINF_PREFIX = "#EXTINF:"
DURATION_RE = re.compile(r"^#EXTINF:\s*(-?\d+(?:\.\d+)?)")
LINE_SPLIT_RE = re.compile(r"\r?\n")

# Attribute name in the #EXTINF line -> PlaylistEntry field.
EXTINF_ATTRIBUTES = {
    "tvg-id": "tvg_id",
    "tvg-name": "name",
    "tvg-logo": "logo",
    "group-title": "group",
    "tvg-language": "language",
}


def _attribute_pattern(attribute: str) -> re.Pattern:
    return re.compile(rf'{re.escape(attribute)}\s*=\s*"([^"]*)"', re.IGNORECASE)


ATTRIBUTE_PATTERNS = {attribute: _attribute_pattern(attribute) for attribute in EXTINF_ATTRIBUTES}


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in LINE_SPLIT_RE.split(text)]


def parse_extinf(line: str) -> Dict[str, str]:
    """Extracts duration, tvg attributes and the trailing label from an #EXTINF line."""

    meta = {"duration": "-1", "tvg_id": "", "name": "", "logo": "", "group": "", "language": ""}

    duration = DURATION_RE.match(line)
    if duration:
        meta["duration"] = duration.group(1)

    for attribute, field in EXTINF_ATTRIBUTES.items():
        match = ATTRIBUTE_PATTERNS[attribute].search(line)
        if match:
            meta[field] = match.group(1)

    display = ""
    comma = line.rfind(",")
    if comma != -1:
        display = line[comma + 1:].strip()
        if display and not meta["name"]:
            meta["name"] = display
    meta["display_name"] = display or meta["name"]
    return meta


def parse_structural(text: str) -> List[PlaylistEntry]:
    """Pairs each #EXTINF line with the URL line that immediately follows it."""

    entries: List[PlaylistEntry] = []
    pending: Optional[Dict[str, str]] = None

    for line in split_lines(text):
        if line.startswith(EXTINF_PREFIX):
            pending = parse_extinf(line)
            continue
        if pending is None:
            continue
        stream_url = normalize_stream_url(line)
        if stream_url:
            entries.append(PlaylistEntry(stream_url=stream_url, **pending))
        pending = None

    return entries


def scan_plain_lines(text: str) -> List[PlaylistEntry]:
    """Collects every non-comment line that is a bare http(s) URL."""

    entries: List[PlaylistEntry] = []
    for line in split_lines(text):
        if line.startswith("#"):
            continue
        stream_url = normalize_stream_url(line)
        if stream_url:
            entries.append(PlaylistEntry(stream_url=stream_url))
    return entries


def find_header_line(text: str) -> Optional[str]:
    """Returns the first #EXTM3U line verbatim, if the text has one."""

    match = re.search(r"^#EXTM3U[^\r\n]*", text, re.MULTILINE)
    return match.group(0) if match else None
