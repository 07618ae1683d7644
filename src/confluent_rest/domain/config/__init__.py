"""Configuration models with Pydantic validation."""

from confluent_rest.domain.config.api import ApiConfig
from confluent_rest.domain.config.app import AppConfig
from confluent_rest.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "ApiConfig",
    "RetryConfig",
]
