"""Retry configuration model."""

from datetime import timedelta
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from confluent_rest.domain.retry_policy import (
    RetryPolicy,
    default_retryable_errors,
    is_retryable,
    policy_name,
    resolve_policy,
)

Seconds = Union[float, timedelta]


class RetryConfig(BaseModel):
    """Immutable configuration for the retry engine.

    Out-of-range values are clamped rather than rejected, so a config built from
    loose input always describes a usable strategy. NaN and infinite floats are
    rejected. The ``with_*`` methods return a new validated instance and never
    touch the receiver.

    Attributes:
        max_attempts: Total tries including the first one (>= 1)
        initial_backoff: Seconds to wait before the second attempt (>= 0)
        max_backoff: Ceiling in seconds for any computed wait (>= 0)
        multiplier: Exponential growth factor per retry (>= 1.0)
        jitter: Apply a symmetric +/-20% random perturbation to waits
        classification_policy: Predicate deciding retryability, or a preset
            name ("default", "aggressive", "conservative")
    """

    max_attempts: int = 5
    initial_backoff: float = 1.0
    max_backoff: float = 60.0
    multiplier: float = 2.0
    jitter: bool = True
    classification_policy: RetryPolicy = default_retryable_errors

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    @field_validator("max_attempts")
    @classmethod
    def _clamp_max_attempts(cls, value: int) -> int:
        return max(value, 1)

    @field_validator("initial_backoff", "max_backoff", mode="before")
    @classmethod
    def _from_timedelta(cls, value: Any) -> Any:
        if isinstance(value, timedelta):
            return value.total_seconds()
        return value

    @field_validator("initial_backoff", "max_backoff")
    @classmethod
    def _clamp_backoff(cls, value: float) -> float:
        return max(value, 0.0)

    @field_validator("multiplier")
    @classmethod
    def _clamp_multiplier(cls, value: float) -> float:
        # Backoff never shrinks between retries
        return max(value, 1.0)

    @field_validator("classification_policy", mode="before")
    @classmethod
    def _resolve_policy(cls, value: Any) -> Any:
        if value is None:
            return default_retryable_errors
        if isinstance(value, str):
            return resolve_policy(value)
        return value

    @property
    def policy_name(self) -> str:
        return policy_name(self.classification_policy)

    def is_retryable(self, error: BaseException) -> bool:
        """Apply the classification policy; non-ApiError values never retry"""
        return is_retryable(error, self.classification_policy)

    def _replace(self, **changes: Any) -> "RetryConfig":
        return type(self)(**{**dict(self), **changes})

    def with_max_attempts(self, attempts: int) -> "RetryConfig":
        return self._replace(max_attempts=attempts)

    def with_initial_backoff(self, backoff: Seconds) -> "RetryConfig":
        return self._replace(initial_backoff=backoff)

    def with_max_backoff(self, backoff: Seconds) -> "RetryConfig":
        return self._replace(max_backoff=backoff)

    def with_multiplier(self, multiplier: float) -> "RetryConfig":
        return self._replace(multiplier=multiplier)

    def with_jitter(self, enabled: bool) -> "RetryConfig":
        return self._replace(jitter=enabled)

    def with_classification_policy(self, policy: Optional[Union[RetryPolicy, str]]) -> "RetryConfig":
        """Swap the classification policy; None keeps the current one"""
        if policy is None:
            return self
        return self._replace(classification_policy=policy)
