"""Data models for streams, playlist entries, configuration, and reports."""

from .config_models import ReportingConfig, ResolverConfig
from .playlist_models import ExtractionBundle, PlaylistEntry
from .report_models import DiagnosticReport
from .stream_models import FetchResult, ResolvedStream, StreamType

__all__ = [
    "StreamType",
    "ResolvedStream",
    "FetchResult",
    "PlaylistEntry",
    "ExtractionBundle",
    "ResolverConfig",
    "ReportingConfig",
    "DiagnosticReport",
]
