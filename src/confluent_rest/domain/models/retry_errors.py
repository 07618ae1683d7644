"""Retry outcome models - attempt records and the terminal failure shapes"""

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class Attempt:
    """One failed attempt inside a single retry loop"""

    index: int  # 1-based attempt number
    error: Optional[BaseException] = None
    wait: float = 0.0  # Seconds waited before the next attempt


class RetryFailure(Exception):
    """Base class for failures produced by the retry engine itself.

    The underlying error is kept on ``last_error`` and chained as
    ``__cause__`` by the engine.
    """

    def __init__(self, message: str, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class RetryExhaustedError(RetryFailure):
    """Every allowed attempt failed with a retryable error"""

    def __init__(
        self,
        attempts: int,
        last_error: BaseException,
        history: Sequence[Attempt] = (),
    ):
        waits = ", ".join(f"{a.wait:.2f}s" for a in history)
        waited = f" (waited {waits})" if waits else ""
        super().__init__(
            f"operation failed after {attempts} attempts{waited}: {last_error}",
            attempts=attempts,
            last_error=last_error,
        )


class RetryCancelledError(RetryFailure):
    """The cancellation signal fired before the retry loop finished"""

    def __init__(
        self,
        attempts: int,
        reason: str = "cancelled",
        last_error: Optional[BaseException] = None,
    ):
        if attempts == 0:
            message = f"retry cancelled before first attempt: {reason}"
        else:
            message = f"retry cancelled after attempt {attempts}: {reason}"
        super().__init__(message, attempts=attempts, last_error=last_error)
        self.reason = reason
