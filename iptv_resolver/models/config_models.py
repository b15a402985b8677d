"""Runtime knobs for fetching, resolving, and diagnostics."""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_REPORT_ENDPOINT = "https://your-error-reporting-endpoint.com/api/errors"


class ResolverConfig(BaseModel):
    """Bounds applied to each probing strategy of the stream resolver."""

    head_timeout: float = 8.0
    head_max_redirects: int = 10
    get_timeout: float = 10.0
    get_max_redirects: int = 10
    max_body_bytes: int = 200 * 1024


class ReportingConfig(BaseModel):
    """Settings for the optional remote diagnostic reports."""

    enabled: bool = False
    endpoint: str = DEFAULT_REPORT_ENDPOINT
    timeout: float = 5.0
