"""Filesystem helpers for reading playlists and writing extraction output."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    Path(path).mkdir(parents=True, exist_ok=True)
    return path


def strip_file_scheme(path: str) -> str:
    if path.startswith("file://"):
        return path[len("file://"):]
    return path


def read_text_file(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        return handle.read()


def write_text_file(path: str, content: str) -> str:
    """Writes ``content`` to ``path``, creating the parent folder first."""

    ensure_directory(os.path.dirname(os.path.abspath(path)) or ".")
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(content)
    return path
