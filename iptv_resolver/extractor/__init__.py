"""Extraction pipeline: playlist parsing, regex sweep, merging, and output."""

from .m3u_parser import parse_extinf, parse_structural, scan_plain_lines
from .pattern_sweep import DEFAULT_PATTERNS, SweepPattern, sweep
from .playlist_extractor import PlaylistExtractor, extract_entries, merge_tiers
from .source_loader import LoadedSource, SourceError, SourceLoader

__all__ = [
    "parse_extinf",
    "parse_structural",
    "scan_plain_lines",
    "DEFAULT_PATTERNS",
    "SweepPattern",
    "sweep",
    "PlaylistExtractor",
    "extract_entries",
    "merge_tiers",
    "LoadedSource",
    "SourceError",
    "SourceLoader",
]
