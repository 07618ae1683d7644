"""Classification policies deciding which API errors are worth retrying."""

from enum import Enum
from typing import Callable, Dict, Optional

from confluent_rest.domain.models.api_error import ApiError
from confluent_rest.domain.models.retry_errors import RetryCancelledError

RetryPolicy = Callable[[ApiError], bool]


class ErrorKind(str, Enum):
    """Failure categories seen by the retry engine"""

    PERMANENT_CLIENT = "permanent_client"
    TRANSIENT_RATE_LIMIT = "transient_rate_limit"
    TRANSIENT_SERVER = "transient_server"
    UNCLASSIFIABLE = "unclassifiable"
    CANCELLED = "cancelled"

    @classmethod
    def of(cls, error: Optional[BaseException]) -> "ErrorKind":
        """Return the category of any exception.

        Anything that is not an ApiError (or a retry cancellation) is
        UNCLASSIFIABLE.
        """
        if isinstance(error, RetryCancelledError):
            return cls.CANCELLED
        if not isinstance(error, ApiError):
            return cls.UNCLASSIFIABLE
        if error.is_rate_limited:
            return cls.TRANSIENT_RATE_LIMIT
        if error.is_server_error:
            return cls.TRANSIENT_SERVER
        if error.is_client_error:
            return cls.PERMANENT_CLIENT
        return cls.UNCLASSIFIABLE


def default_retryable_errors(error: Optional[ApiError]) -> bool:
    """Retry rate limiting (429) and any server error (500+)."""
    if error is None:
        return False
    return error.is_rate_limited or error.is_server_error


def aggressive_retryable_errors(error: Optional[ApiError]) -> bool:
    """Retry rate limiting and every 5xx status, 502/503/504 included."""
    if error is None:
        return False
    code = error.status_code
    return code == 429 or 500 <= code <= 599


def conservative_retryable_errors(error: Optional[ApiError]) -> bool:
    """Retry only rate limiting (429), 503 and 504.

    A bare 500 or a 502 is more likely a persistent fault than transient load.
    """
    if error is None:
        return False
    return error.status_code in (429, 503, 504)


RETRY_POLICIES: Dict[str, RetryPolicy] = {
    "default": default_retryable_errors,
    "aggressive": aggressive_retryable_errors,
    "conservative": conservative_retryable_errors,
}


def resolve_policy(name: str) -> RetryPolicy:
    """Look up a preset policy by name

    Raises:
        ValueError: If the preset is unknown
    """
    key = name.strip().lower()
    if key not in RETRY_POLICIES:
        available = ", ".join(RETRY_POLICIES.keys())
        raise ValueError(f"Unknown retry policy: {name}. Available policies: {available}")
    return RETRY_POLICIES[key]


def policy_name(policy: RetryPolicy) -> str:
    """Return the preset name of a policy, or the callable's name"""
    for name, preset in RETRY_POLICIES.items():
        if preset is policy:
            return name
    return getattr(policy, "__name__", repr(policy))


def is_retryable(error: Optional[BaseException], policy: RetryPolicy = default_retryable_errors) -> bool:
    """Decide whether a failed attempt should be retried.

    Errors that are not ApiError values never retry.
    """
    if not isinstance(error, ApiError):
        return False
    return bool(policy(error))
