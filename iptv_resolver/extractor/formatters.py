"""Renders extracted entries as plain text, M3U, JSON, or CSV."""

from __future__ import annotations

import csv
import io
import json
from typing import List, Optional, Sequence

from ..models import PlaylistEntry

FORMATS = ("txt", "m3u8", "json", "csv")


def detect_format(output_file: str, explicit: Optional[str] = None) -> str:
    """Uses ``explicit`` when given, else the output file extension, else ``txt``."""

    if explicit:
        return explicit
    extension = output_file.rsplit(".", 1)[-1].lower() if "." in output_file else ""
    return extension if extension in FORMATS else "txt"


def to_plain_text(entries: Sequence[PlaylistEntry]) -> str:
    return "\n".join(entry.stream_url for entry in entries) + "\n"


def to_m3u(entries: Sequence[PlaylistEntry], header_line: Optional[str] = None) -> str:
    lines: List[str] = [header_line or "#EXTM3U"]
    for entry in entries:
        attrs = f"#EXTINF:{entry.duration}"
        if entry.tvg_id:
            attrs += f' tvg-id="{entry.tvg_id}"'
        if entry.name:
            attrs += f' tvg-name="{entry.name}"'
        if entry.logo:
            attrs += f' tvg-logo="{entry.logo}"'
        if entry.group:
            attrs += f' group-title="{entry.group}"'
        attrs += "," + (entry.label or "Unknown")
        lines.append(attrs)
        lines.append(entry.stream_url)
    return "\n".join(lines) + "\n"


def to_json(entries: Sequence[PlaylistEntry]) -> str:
    payload = [
        {
            "name": entry.label or None,
            "tvgId": entry.tvg_id or None,
            "group": entry.group or None,
            "logo": entry.logo or None,
            "streamUrl": entry.stream_url,
        }
        for entry in entries
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def to_csv(entries: Sequence[PlaylistEntry]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["name", "tvg_id", "group", "logo", "stream_url"])
    for entry in entries:
        writer.writerow([entry.label, entry.tvg_id, entry.group, entry.logo, entry.stream_url])
    return buffer.getvalue()


def render(entries: Sequence[PlaylistEntry], fmt: str, header_line: Optional[str] = None) -> str:
    if fmt == "m3u8":
        return to_m3u(entries, header_line)
    if fmt == "json":
        return to_json(entries)
    if fmt == "csv":
        return to_csv(entries)
    return to_plain_text(entries)
