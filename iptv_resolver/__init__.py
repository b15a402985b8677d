"""Extract IPTV stream references from playlists and resolve them to playable URLs."""

__version__ = "0.1.0"

from .extractor import PlaylistExtractor, SourceLoader, extract_entries
from .models import ExtractionBundle, PlaylistEntry, ResolvedStream, ResolverConfig, StreamType
from .resolver import ChannelPlayback, RetryLadder, StreamResolver, classify
from .utils import HttpClient

__all__ = [
    "__version__",
    "PlaylistExtractor",
    "SourceLoader",
    "extract_entries",
    "ExtractionBundle",
    "PlaylistEntry",
    "ResolvedStream",
    "ResolverConfig",
    "StreamType",
    "ChannelPlayback",
    "RetryLadder",
    "StreamResolver",
    "classify",
    "HttpClient",
]
