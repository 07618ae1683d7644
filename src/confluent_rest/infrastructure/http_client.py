"""REST client for Confluent Cloud and Platform APIs (requests + retry).

We keep HTTP logic centralized so every resource call gets the same
authentication, error decoding and retry behaviour.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests

from confluent_rest.domain.config.retry import RetryConfig
from confluent_rest.domain.models.api_error import ApiError
from confluent_rest.infrastructure.cancellation import CancellationSignal
from confluent_rest.infrastructure.retry import RetryStrategy

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.confluent.cloud"


class TransportError(RuntimeError):
    """The request never produced an HTTP response"""


@dataclass
class ApiResponse:
    status_code: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the body as JSON (None for an empty body)"""
        if not self.body:
            return None
        return json.loads(self.body)


class ConfluentClient:
    """HTTP client for the Confluent REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize Confluent client

        Args:
            base_url: API base URL (default: from CONFLUENT_BASE_URL env or api.confluent.cloud)
            api_key: API key (default: from CONFLUENT_API_KEY env)
            api_secret: API secret (default: from CONFLUENT_API_SECRET env)
            timeout: Per-request HTTP timeout in seconds
            retry_config: Retry configuration (None = single attempt, no retry)
            session: requests session to reuse (default: new session)
        """
        self.base_url = base_url or os.getenv("CONFLUENT_BASE_URL", DEFAULT_BASE_URL)
        self.api_key = api_key or os.getenv("CONFLUENT_API_KEY")
        self.api_secret = api_secret or os.getenv("CONFLUENT_API_SECRET")
        self.timeout = timeout

        if not self.api_key:
            raise ValueError(
                "Confluent API key is required. "
                "Set CONFLUENT_API_KEY environment variable or provide in config."
            )
        if not self.api_secret:
            raise ValueError(
                "Confluent API secret is required. "
                "Set CONFLUENT_API_SECRET environment variable or provide in config."
            )

        self.retry_strategy = RetryStrategy(retry_config) if retry_config is not None else None
        self.session = session or requests.Session()
        self.session.auth = (self.api_key, self.api_secret)
        self.session.headers.update(
            {"Content-Type": "application/json", "Accept": "application/json"}
        )

        logger.info(f"Confluent client initialized for {self.base_url}")

    def _url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    def _send(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        url = self._url(path)
        logger.debug(f"HTTP {method} {url}")
        try:
            resp = self.session.request(
                method,
                url,
                data=json.dumps(body) if body is not None else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        if resp.status_code >= 400:
            raise ApiError.from_response(resp.status_code, resp.content, resp.headers)
        return ApiResponse(status_code=resp.status_code, body=resp.content, headers=resp.headers)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        cancel: Optional[CancellationSignal] = None,
    ) -> ApiResponse:
        """Execute a request against the API

        Args:
            method: HTTP method
            path: Path relative to base_url
            body: JSON-serializable request body
            headers: Extra request headers
            cancel: Cancellation signal for the retry loop

        Returns:
            ApiResponse for statuses below 400

        Raises:
            ApiError: API returned an error status
            TransportError: Network failure
            RetryFailure: Retries exhausted or cancelled
        """
        method = method.upper()
        if self.retry_strategy is None:
            return self._send(method, path, body, headers)
        return self.retry_strategy.do(lambda: self._send(method, path, body, headers), cancel=cancel)

    def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, body: Any = None, **kwargs: Any) -> ApiResponse:
        return self.request("POST", path, body=body, **kwargs)

    def put(self, path: str, body: Any = None, **kwargs: Any) -> ApiResponse:
        return self.request("PUT", path, body=body, **kwargs)

    def patch(self, path: str, body: Any = None, **kwargs: Any) -> ApiResponse:
        return self.request("PATCH", path, body=body, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("DELETE", path, **kwargs)
