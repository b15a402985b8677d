"""Helpers for cleaning and validating candidate stream URLs."""

from __future__ import annotations

import re
from typing import Optional

URL_TERMINATORS = re.compile(r"[\s\"'<>#]")
VALID_URL = re.compile(r"^https?://.{4,}", re.IGNORECASE)


def clean_url(raw: str) -> str:
    """Trims ``raw`` and cuts it at the first whitespace, quote, angle bracket or hash."""

    return URL_TERMINATORS.split(raw.strip(), maxsplit=1)[0]


def is_valid_url(value: str) -> bool:
    return bool(VALID_URL.match(value))


def normalize_stream_url(raw: str) -> Optional[str]:
    """Returns the cleaned URL, or ``None`` when it is not a usable http(s) URL."""

    cleaned = clean_url(raw)
    if is_valid_url(cleaned):
        return cleaned
    return None
