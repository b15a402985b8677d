"""Utility helpers for HTTP, URL cleanup, and filesystem operations."""

from .file_utils import ensure_directory, read_text_file, strip_file_scheme, write_text_file
from .http_client import (
    FetchError,
    FetchTimeout,
    HttpClient,
    ResponseTooLarge,
    TooManyRedirects,
)
from .url_utils import clean_url, is_valid_url, normalize_stream_url

__all__ = [
    "HttpClient",
    "FetchError",
    "FetchTimeout",
    "TooManyRedirects",
    "ResponseTooLarge",
    "clean_url",
    "is_valid_url",
    "normalize_stream_url",
    "ensure_directory",
    "read_text_file",
    "strip_file_scheme",
    "write_text_file",
]
