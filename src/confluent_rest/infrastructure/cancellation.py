"""Cancellation signals observed by the retry engine"""

from __future__ import annotations

import threading
import time
from typing import Optional, Protocol


class CancellationSignal(Protocol):
    """Anything with threading.Event's is_set()/wait() contract."""

    def is_set(self) -> bool:
        ...

    def wait(self, timeout: Optional[float] = None) -> bool:
        ...


class CancellationToken:
    """Explicit abort token with an optional deadline.

    ``wait`` blocks on an internal ``threading.Event`` with a timeout, so no
    timer thread outlives it whichever side wins.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if self._reason is None:
            self._reason = reason
        self._event.set()

    @property
    def reason(self) -> Optional[str]:
        if self._event.is_set():
            return self._reason
        if self._deadline_passed():
            return "deadline exceeded"
        return None

    @property
    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def _deadline_passed(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def is_set(self) -> bool:
        return self._event.is_set() or self._deadline_passed()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled, the deadline passes or ``timeout`` elapses

        Returns:
            True if the token fired, False if the timeout elapsed first
        """
        remaining = self.remaining
        if remaining is not None and (timeout is None or remaining <= timeout):
            self._event.wait(remaining)
            return self.is_set()
        return self._event.wait(timeout)


def cancellation_reason(signal: CancellationSignal) -> str:
    """Describe why a signal fired; plain events just report 'cancelled'"""
    reason = getattr(signal, "reason", None)
    return reason if isinstance(reason, str) and reason else "cancelled"
