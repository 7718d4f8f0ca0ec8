"""Retry policy for launching external processes."""

from __future__ import annotations

import errno
from dataclasses import dataclass, field

DEFAULT_RETRY_ERRNOS = (errno.ENOMEM, errno.EAGAIN)


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to wait before relaunching a failed process.

    Attributes:
        max_attempts: Total launch attempts, including the first one
        delay_seconds: Wait before the first retry
        backoff: Multiplier applied to the delay after each retry (1.0 keeps it fixed)
        retry_errnos: OS error codes considered transient
    """

    max_attempts: int = 5
    delay_seconds: float = 5.0
    backoff: float = 1.0
    retry_errnos: tuple[int, ...] = field(default=DEFAULT_RETRY_ERRNOS)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must not be negative, got {self.delay_seconds}")
        if self.backoff < 1.0:
            raise ValueError(f"backoff must be at least 1.0, got {self.backoff}")

    def is_retryable(self, exc: OSError) -> bool:
        return exc.errno in self.retry_errnos

    def delay_for(self, attempt: int) -> float:
        """Delay before retrying after the given (1-based) failed attempt."""
        return self.delay_seconds * (self.backoff ** (attempt - 1))
