"""
Cancellable request context.

A Context carries an optional deadline and a cancel signal. Every API
operation takes one so a caller can abort a long upload/poll cycle from
another thread or bound it in time:

    ctx = Context.with_timeout(30)
    document, resp = client.upload_and_wait(ctx, fh, UploadOptions())

Contexts are thread-safe. Once done they stay done.
"""

import threading
import time
from typing import Callable

from .errors import GiniError


class ContextError(GiniError):
    """Context ended before the operation finished."""

    pass


class Cancelled(ContextError):
    """Context was cancelled."""

    def __init__(self):
        super().__init__("context canceled")


class DeadlineExceeded(ContextError):
    """Context deadline passed."""

    def __init__(self):
        super().__init__("context deadline exceeded")


class Context:
    """Deadline plus cancel signal shared between a caller and its workers."""

    def __init__(self, deadline: float | None = None):
        """
        Args:
            deadline: Absolute time.monotonic() value, or None for no deadline
        """
        self.deadline = deadline
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @classmethod
    def background(cls) -> "Context":
        """Context that never times out (until cancelled)."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Context whose deadline is `seconds` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Signal cancellation and wake everybody waiting on this context."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        for callback in callbacks:
            callback()

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Run `callback` on cancel (immediately if already cancelled).

        Deadlines do not trigger callbacks; waiters use remaining() as
        their timeout instead.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_done_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def remaining(self) -> float | None:
        """Seconds left until the deadline (never negative), None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    @property
    def done(self) -> bool:
        return self.error is not None

    @property
    def error(self) -> ContextError | None:
        """Why the context ended, or None while it is still live."""
        if self._cancelled.is_set():
            return Cancelled()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceeded()
        return None

    def raise_if_done(self) -> None:
        err = self.error
        if err is not None:
            raise err

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`, returning early when the context ends.

        Returns:
            True if the context is done
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._cancelled.wait(max(0.0, seconds))
        return self.done

    def timeout(self, default: float) -> float:
        """Socket timeout for one request, bounded by the deadline."""
        remaining = self.remaining()
        if remaining is None:
            return default
        # requests rejects a zero timeout
        return max(min(default, remaining), 0.001)
