"""Pydantic models for extracted playlist entries and extraction results."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class PlaylistEntry(BaseModel):
    """A single playable stream reference with optional playlist metadata."""

    stream_url: str
    duration: str = "-1"
    tvg_id: str = ""
    name: str = ""
    logo: str = ""
    group: str = ""
    language: str = ""
    display_name: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.name


class ExtractionBundle(BaseModel):
    """Entries found by each extraction tier, plus the merged result."""

    structural: List[PlaylistEntry] = Field(default_factory=list)
    plain: List[PlaylistEntry] = Field(default_factory=list)
    swept: List[PlaylistEntry] = Field(default_factory=list)
    header_line: Optional[str] = None

    @property
    def entries(self) -> List[PlaylistEntry]:
        """Ordered, de-duplicated entries (structural > plain > swept)."""

        from ..extractor.playlist_extractor import merge_tiers

        return merge_tiers(self.structural, self.plain, self.swept)
