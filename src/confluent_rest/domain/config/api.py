"""API endpoint configuration model."""

from typing import Optional

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    """Configuration for the Confluent REST endpoint.

    Attributes:
        base_url: API base URL (None = from CONFLUENT_BASE_URL env or api.confluent.cloud)
        api_key: API key (None = from CONFLUENT_API_KEY env)
        api_secret: API secret (None = from CONFLUENT_API_SECRET env)
        timeout: Per-request HTTP timeout in seconds
    """

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    timeout: float = Field(30.0, gt=0.0)
