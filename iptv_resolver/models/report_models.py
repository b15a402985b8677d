"""Payload sent to the remote diagnostics endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel


class DiagnosticReport(BaseModel):
    timestamp: str
    app_version: str
    platform: str
    os_version: str
    machine: str
    error_type: str
    error_message: str
    additional_info: Optional[Dict[str, Any]] = None
