"""Stream classification, resolution, and playback retry handling."""

from .cancellation import CancellationToken
from .retry_ladder import ChannelPlayback, LadderState, RetryLadder
from .stream_resolver import StreamResolver, extract_from_playlist
from .stream_type import classify, stream_type_or_default

__all__ = [
    "CancellationToken",
    "ChannelPlayback",
    "LadderState",
    "RetryLadder",
    "StreamResolver",
    "extract_from_playlist",
    "classify",
    "stream_type_or_default",
]
