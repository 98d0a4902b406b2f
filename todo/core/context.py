"""Cancellation/deadline token threaded through every service and repository call."""

from __future__ import annotations

import threading
import time
from typing import Optional

from .errors import CancelledError


class RequestContext:
    """
    Per-request token. The transport layer creates one per request and may
    cancel it from another thread; service and repository code only call
    ``check()``.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        # deadline is a time.monotonic() timestamp
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "RequestContext":
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float | None) -> "RequestContext":
        if seconds is None or seconds <= 0:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        if self._cancelled.is_set():
            raise CancelledError("request cancelled")
        if self.expired:
            raise CancelledError("deadline exceeded")
