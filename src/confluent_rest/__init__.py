"""REST client for Confluent Cloud with a classification-driven retry engine"""

from confluent_rest.domain.config.retry import RetryConfig
from confluent_rest.domain.models.api_error import ApiError
from confluent_rest.domain.models.retry_errors import (
    RetryCancelledError,
    RetryExhaustedError,
    RetryFailure,
)
from confluent_rest.domain.retry_policy import (
    RETRY_POLICIES,
    ErrorKind,
    aggressive_retryable_errors,
    conservative_retryable_errors,
    default_retryable_errors,
    is_retryable,
)
from confluent_rest.infrastructure.backoff import calculate_backoff
from confluent_rest.infrastructure.cancellation import CancellationToken
from confluent_rest.infrastructure.http_client import ApiResponse, ConfluentClient, TransportError
from confluent_rest.infrastructure.retry import RetryStrategy

__all__ = [
    "ApiError",
    "ApiResponse",
    "CancellationToken",
    "ConfluentClient",
    "ErrorKind",
    "RETRY_POLICIES",
    "RetryCancelledError",
    "RetryConfig",
    "RetryExhaustedError",
    "RetryFailure",
    "RetryStrategy",
    "TransportError",
    "aggressive_retryable_errors",
    "calculate_backoff",
    "conservative_retryable_errors",
    "default_retryable_errors",
    "is_retryable",
]
