"""
Call Context

Cancellation and deadline handling for sign and verify calls. A context is
checked before any cryptographic work starts; the RSA operations
themselves are not interruptible.
"""

import threading
import time
from typing import Optional

from .errors import OperationCancelled


class CallContext:
    """Carries a caller's deadline and cancellation flag for one call."""

    def __init__(self, deadline: Optional[float] = None):
        """
        Initialize context.

        Args:
            deadline: Absolute deadline as a ``time.monotonic()`` value
        """
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CallContext":
        """Create a context that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self):
        """
        Raise if the context can no longer be honoured.

        Raises:
            OperationCancelled: If cancelled or past the deadline
        """
        if self.cancelled:
            raise OperationCancelled("Operation was cancelled by the caller")
        if self.expired:
            raise OperationCancelled("Operation deadline exceeded")


def check_context(ctx: Optional[CallContext]):
    if ctx is not None:
        ctx.check()
