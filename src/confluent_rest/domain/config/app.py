"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from confluent_rest.domain.config.api import ApiConfig
from confluent_rest.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Aggregates all configuration sections. Validation is performed at load time
    to fail fast on configuration errors.

    Attributes:
        api: REST endpoint and credentials
        retry: Retry engine configuration
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "api": {
                    "base_url": "https://api.confluent.cloud",
                    "api_key": None,
                    "api_secret": None,
                    "timeout": 30.0,
                },
                "retry": {
                    "max_attempts": 5,
                    "initial_backoff": 1.0,
                    "max_backoff": 60.0,
                    "multiplier": 2.0,
                    "jitter": True,
                    "classification_policy": "default",
                },
            }
        },
    )
