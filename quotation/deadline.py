"""
Explicit deadlines threaded through each blocking operation.

A deadline derived from another never outlives it: the effective expiry is
the earlier of the parent's expiry and ``now + timeout``.
"""

import time
from datetime import timedelta
from typing import Callable, Optional


class DeadlineExceeded(Exception):
    """Raised when an operation runs past its deadline."""


class Deadline:
    """Absolute expiry on a monotonic clock, or no expiry at all."""

    def __init__(
        self,
        expires_at: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.expires_at = expires_at
        self._clock = clock

    @classmethod
    def background(cls, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        """Deadline that never expires."""
        return cls(None, clock)

    @classmethod
    def after(
        cls, timeout: timedelta, clock: Callable[[], float] = time.monotonic
    ) -> "Deadline":
        """Deadline expiring ``timeout`` from now."""
        return cls.background(clock).derive(timeout)

    def derive(self, timeout: timedelta) -> "Deadline":
        """Child deadline bounded by both this deadline and ``timeout``."""
        expires_at = self._clock() + timeout.total_seconds()
        if self.expires_at is not None:
            expires_at = min(expires_at, self.expires_at)
        return Deadline(expires_at, self._clock)

    def remaining(self) -> Optional[float]:
        """Seconds left before expiry, or None when unbounded."""
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - self._clock())

    def expired(self) -> bool:
        return self.expires_at is not None and self._clock() >= self.expires_at

    def check(self) -> None:
        if self.expired():
            raise DeadlineExceeded("deadline exceeded")

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining()!r})"
