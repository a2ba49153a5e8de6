"""Cooperative deadline and cancellation flag for the iterative loops.

Both the power iteration and the resolvent loop poll a Deadline once per
outer iteration. Expiry never raises: the loop stops and reports its best
iterate with stop_reason "deadline".
"""

import threading
import time


class Deadline:
    """Monotonic-clock deadline combined with a thread-safe cancel flag.

    A Deadline with seconds=None never expires on its own but can still be
    cancelled from another thread.
    """

    def __init__(self, seconds: float | None = None) -> None:
        if seconds is not None and seconds <= 0:
            raise ValueError(f"deadline seconds must be positive, got {seconds}")
        self.seconds = seconds
        self._expires_at = None if seconds is None else time.monotonic() + seconds
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before expiry, None when no time limit is set."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def expired(self) -> bool:
        if self._cancelled.is_set():
            return True
        if self._expires_at is None:
            return False
        return time.monotonic() >= self._expires_at
