"""Maps URLs to stream types by their path suffix."""

from __future__ import annotations

from ..models import StreamType

# Checked in order; the first matching suffix wins.
SUFFIXES = (
    (".m3u8", StreamType.HLS),
    (".mpd", StreamType.DASH),
    (".mp4", StreamType.MP4),
    (".ts", StreamType.TS),
    (".flv", StreamType.FLV),
    (".mkv", StreamType.MKV),
)


def classify(url: str) -> StreamType:
    """Returns the stream type for ``url``, ignoring its query string and case."""

    path = url.split("?", 1)[0].lower()
    for suffix, stream_type in SUFFIXES:
        if path.endswith(suffix):
            return stream_type
    return StreamType.UNKNOWN


def stream_type_or_default(url: str, default: StreamType = StreamType.HLS) -> StreamType:
    stream_type = classify(url)
    return default if stream_type is StreamType.UNKNOWN else stream_type
