"""Optional remote reporting of playback failures."""

from __future__ import annotations

import logging
import platform
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .. import __version__
from ..models import DiagnosticReport, ReportingConfig
from ..utils.http_client import HttpClient


class ErrorReporter:
    """Posts diagnostic reports when reporting is enabled; never raises."""

    def __init__(self, config: Optional[ReportingConfig] = None, http_client: Optional[HttpClient] = None) -> None:
        self.config = config or ReportingConfig()
        self._http_client = http_client

    def build_report(
        self,
        message: str,
        error_type: str,
        additional_info: Optional[Dict[str, Any]] = None,
    ) -> DiagnosticReport:
        return DiagnosticReport(
            timestamp=datetime.now(timezone.utc).isoformat(),
            app_version=__version__,
            platform=platform.system(),
            os_version=platform.release(),
            machine=platform.machine(),
            error_type=error_type,
            error_message=message,
            additional_info=additional_info,
        )

    def report(
        self,
        message: str,
        error_type: str,
        additional_info: Optional[Dict[str, Any]] = None,
    ) -> bool:
        if not self.config.enabled:
            return False

        report = self.build_report(message, error_type, additional_info)
        client = self._http_client or HttpClient()
        try:
            client.post_json(self.config.endpoint, report.model_dump(), timeout=self.config.timeout)
        except requests.RequestException as exc:
            logging.warning("Failed to send diagnostic report: %s", exc)
            return False
        finally:
            if client is not self._http_client:
                client.close()
        logging.debug("Sent %s report to %s", error_type, self.config.endpoint)
        return True
