"""Models describing stream types, resolved streams, and fetch outcomes."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class StreamType(str, Enum):
    """Transport/container tag derived from a URL suffix."""

    HLS = "hls"
    DASH = "dash"
    MP4 = "mp4"
    TS = "ts"
    FLV = "flv"
    MKV = "mkv"
    UNKNOWN = "unknown"


class ResolvedStream(BaseModel):
    """A directly playable stream reference."""

    url: str
    type: StreamType


class FetchResult(BaseModel):
    """Outcome of a redirect-following request."""

    url: str
    status: int
    body: str = ""
    redirects: List[str] = Field(default_factory=list)
