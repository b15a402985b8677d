"""Combines the structural, plain-line and regex-sweep tiers into one entry list."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..models import ExtractionBundle, PlaylistEntry
from .m3u_parser import find_header_line, parse_structural, scan_plain_lines
from .pattern_sweep import SweepPattern, sweep


def _unique(entries: Iterable[PlaylistEntry], seen: Set[str]) -> List[PlaylistEntry]:
    unique: List[PlaylistEntry] = []
    for entry in entries:
        if entry.stream_url in seen:
            continue
        seen.add(entry.stream_url)
        unique.append(entry)
    return unique


def merge_tiers(
    structural: Sequence[PlaylistEntry],
    plain: Sequence[PlaylistEntry],
    swept: Sequence[PlaylistEntry],
) -> List[PlaylistEntry]:
    """Structural entries first, then unseen plain entries, then unseen swept entries."""

    seen: Set[str] = set()
    merged = _unique(structural, seen)
    merged.extend(_unique(plain, seen))
    merged.extend(_unique(swept, seen))
    return merged


class PlaylistExtractor:
    """Extracts playable entries from playlist text or arbitrary markup."""

    def __init__(self, patterns: Optional[Sequence[SweepPattern]] = None) -> None:
        self._patterns = patterns

    def extract(self, text: str) -> ExtractionBundle:
        structural = parse_structural(text)
        plain = scan_plain_lines(text)
        known_urls = [entry.stream_url for entry in structural]
        known_urls.extend(entry.stream_url for entry in plain)
        swept = sweep(text, known_urls, self._patterns)

        logging.debug(
            "Extracted %s structural, %s plain, %s swept entries",
            len(structural),
            len(plain),
            len(swept),
        )
        return ExtractionBundle(
            structural=structural,
            plain=plain,
            swept=swept,
            header_line=find_header_line(text),
        )


def extract_entries(text: str, patterns: Optional[Sequence[SweepPattern]] = None) -> List[PlaylistEntry]:
    return PlaylistExtractor(patterns).extract(text).entries
