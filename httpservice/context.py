"""Per-call context: cancellation, deadline and parent trace context."""

import threading
import time

from opentelemetry.context import Context

from .exceptions import ContextCancelledError, ContextError, DeadlineExceededError


class CallContext:
    """
    Caller-owned context forwarded with each request.

    A CallContext may be shared between threads; cancel() can be called from
    any thread. The HTTP service checks it right before dispatch and uses the
    remaining time to cap the transport timeout.
    """

    def __init__(self, deadline: float | None = None, parent: Context | None = None):
        """
        Args:
            deadline: Absolute time.monotonic() value after which calls fail
            parent: OpenTelemetry context the request span is started under
        """
        self.deadline = deadline
        self.parent = parent
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float, parent: Context | None = None) -> "CallContext":
        """Create a context whose deadline is `seconds` from now."""
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None if there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> ContextError | None:
        """Return the error a call made now would fail with, or None."""
        if self.cancelled:
            return ContextCancelledError()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceededError(deadline=self.deadline)
        return None

    def raise_if_done(self) -> None:
        error = self.err()
        if error is not None:
            raise error
