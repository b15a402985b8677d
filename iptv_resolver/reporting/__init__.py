"""Diagnostic reporting for terminal playback failures."""

from .error_reporter import ErrorReporter

__all__ = ["ErrorReporter"]
