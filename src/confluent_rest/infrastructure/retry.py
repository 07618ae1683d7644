"""Retry orchestration using tenacity.

``RetryStrategy`` runs a zero-argument operation under a ``RetryConfig``:
non-retryable errors are re-raised as-is, exhausted attempts raise
``RetryExhaustedError`` and a fired cancellation signal raises
``RetryCancelledError``. The wait between attempts blocks on the cancellation
signal, so it can be cut short at any point.
"""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, List, Optional, TypeVar

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception, stop_after_attempt

from confluent_rest.domain.config.retry import RetryConfig
from confluent_rest.domain.models.retry_errors import (
    Attempt,
    RetryCancelledError,
    RetryExhaustedError,
    RetryFailure,
)
from confluent_rest.infrastructure.backoff import RandomSource, wait_retry_after_or_backoff
from confluent_rest.infrastructure.cancellation import CancellationSignal, cancellation_reason

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = [
    "RetryStrategy",
    "RetryFailure",
    "RetryExhaustedError",
    "RetryCancelledError",
]


class RetryStrategy:
    """Executes operations with automatic retry under a RetryConfig.

    A strategy holds no per-call state and may be shared across threads.
    """

    def __init__(self, config: Optional[RetryConfig] = None, rng: Optional[RandomSource] = None):
        """Initialize retry strategy

        Args:
            config: Retry configuration (default: RetryConfig())
            rng: Random source for jitter (default: system CSPRNG)
        """
        self.config = config if config is not None else RetryConfig()
        self.rng = rng

    @classmethod
    def default(cls) -> "RetryStrategy":
        return cls(RetryConfig())

    def do(self, operation: Callable[[], T], cancel: Optional[CancellationSignal] = None) -> T:
        """Execute the operation with retry logic

        Args:
            operation: Zero-argument callable; must be safe to call repeatedly
            cancel: Cancellation signal checked before each attempt and during waits

        Returns:
            The operation's return value

        Raises:
            RetryExhaustedError: Every attempt failed with a retryable error
            RetryCancelledError: The cancellation signal fired
            Exception: Any non-retryable error from the operation, unchanged
        """
        signal = cancel if cancel is not None else threading.Event()
        config = self.config
        history: List[Attempt] = []

        def _record(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
            history.append(Attempt(index=retry_state.attempt_number, error=error, wait=wait))
            logger.warning(
                f"Confluent API error (attempt {retry_state.attempt_number}/{config.max_attempts}): "
                f"{error}. Retrying in {wait:.2f}s..."
            )

        def _sleep(seconds: float) -> None:
            # Lock timeouts above TIMEOUT_MAX overflow
            if signal.wait(min(seconds, threading.TIMEOUT_MAX)):
                last = history[-1]
                reason = cancellation_reason(signal)
                logger.warning(f"Retry cancelled after attempt {last.index}: {reason}")
                raise RetryCancelledError(last.index, reason=reason, last_error=last.error) from last.error

        retrying = Retrying(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_retry_after_or_backoff(config, self.rng),
            retry=retry_if_exception(config.is_retryable),
            sleep=_sleep,
            before_sleep=_record,
            reraise=False,
        )

        try:
            for attempt in retrying:
                if signal.is_set():
                    last_error = history[-1].error if history else None
                    raise RetryCancelledError(
                        attempt.retry_state.attempt_number - 1,
                        reason=cancellation_reason(signal),
                        last_error=last_error,
                    ) from last_error
                with attempt:
                    result = operation()
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(f"Confluent API failed after {config.max_attempts} attempts: {last_error}")
            raise RetryExhaustedError(config.max_attempts, last_error, history) from last_error

        return result

    def wrap(self, func: Callable[..., T]) -> Callable[..., T]:
        """Decorate ``func`` so every call runs through ``do``.

        The wrapped function accepts an extra ``cancel`` keyword argument.
        """

        @functools.wraps(func)
        def wrapped(*args: Any, cancel: Optional[CancellationSignal] = None, **kwargs: Any) -> T:
            return self.do(lambda: func(*args, **kwargs), cancel=cancel)

        return wrapped
