"""Loads entry-point text from a remote URL or a local playlist file."""

from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import BaseModel

from ..utils.file_utils import read_text_file, strip_file_scheme
from ..utils.http_client import FetchError, HttpClient


class SourceError(Exception):
    """Raised when a playlist source cannot be loaded."""


class LoadedSource(BaseModel):
    text: str
    final_url: Optional[str] = None
    status: Optional[int] = None


def is_remote_source(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


class SourceLoader:
    """Fetches remote sources through the redirect-following client."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http_client = http_client

    async def load(self, source: str) -> LoadedSource:
        if is_remote_source(source):
            return await self._load_remote(source)
        return self._load_local(source)

    async def _load_remote(self, url: str) -> LoadedSource:
        try:
            result = await self._http_client.fetch(url)
        except FetchError as exc:
            logging.error("Failed to fetch %s: %s", url, exc)
            raise SourceError(f"Failed to fetch playlist from {url}: {exc}") from exc
        logging.info("Final URL  : %s", result.url)
        logging.info("Status     : %s", result.status)
        logging.info("Body       : %.1f KB", len(result.body) / 1024)
        return LoadedSource(text=result.body, final_url=result.url, status=result.status)

    def _load_local(self, source: str) -> LoadedSource:
        path = strip_file_scheme(source)
        if not os.path.exists(path):
            raise SourceError(f"M3U file not found at: {path}")
        try:
            content = read_text_file(path)
        except OSError as exc:
            raise SourceError(f"Failed to read local M3U file {path}: {exc}") from exc
        if not content.strip():
            raise SourceError(f"M3U file is empty: {path}")
        if not content.lstrip("\ufeff").strip().startswith("#EXTM3U"):
            raise SourceError(f"Invalid M3U file format, {path} must start with #EXTM3U")
        return LoadedSource(text=content)
