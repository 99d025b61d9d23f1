"""Per-operation time budget passed explicitly into store calls."""

from __future__ import annotations

import time
from typing import Callable

from greenlight.errors import DeadlineExceededError


class Deadline:
    """A fixed time budget measured from construction.

    Stores hand ``remaining()`` to the backend client so the backend enforces
    the bound itself; ``check()`` fails fast once the budget is spent.
    """

    def __init__(self, timeout: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.timeout = timeout
        self._clock = clock
        self._expires_at = clock() + timeout

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self, operation: str) -> None:
        """Raise DeadlineExceededError if the budget is spent."""
        if self.expired:
            raise self.exceeded(operation)

    def exceeded(self, operation: str) -> DeadlineExceededError:
        return DeadlineExceededError(
            f"{operation} exceeded its {self.timeout:g}s deadline",
            operation=operation,
            timeout=self.timeout,
        )

    def __repr__(self) -> str:
        return f"Deadline(timeout={self.timeout!r}, remaining={self.remaining():.3f})"
