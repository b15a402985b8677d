"""Cooperative cancellation for in-flight resolutions."""

from __future__ import annotations


class CancellationToken:
    """Flag shared between a caller and the coroutine working on its behalf.

    Cancelling does not abort network I/O; the worker checks the flag between
    steps and the caller discards any result that arrives after cancellation.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
