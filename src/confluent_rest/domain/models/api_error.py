"""ApiError model - structured error returned by the Confluent REST API"""

import json
import math
import time
from email.utils import parsedate_to_datetime
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional

# Error codes used when the API response does not carry its own
ERROR_CODE_INVALID_REQUEST = "INVALID_REQUEST"
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_CONFLICT = "CONFLICT"
ERROR_CODE_RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
ERROR_CODE_INTERNAL_SERVER = "INTERNAL_SERVER_ERROR"
ERROR_CODE_BAD_GATEWAY = "BAD_GATEWAY"
ERROR_CODE_SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
ERROR_CODE_GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"

_STATUS_ERROR_CODES = {
    400: ERROR_CODE_INVALID_REQUEST,
    401: ERROR_CODE_UNAUTHORIZED,
    403: ERROR_CODE_FORBIDDEN,
    404: ERROR_CODE_NOT_FOUND,
    409: ERROR_CODE_CONFLICT,
    429: ERROR_CODE_RATE_LIMIT_EXCEEDED,
    500: ERROR_CODE_INTERNAL_SERVER,
    502: ERROR_CODE_BAD_GATEWAY,
    503: ERROR_CODE_SERVICE_UNAVAILABLE,
    504: ERROR_CODE_GATEWAY_TIMEOUT,
}


def status_code_to_error_code(status_code: int) -> str:
    """Map an HTTP status code to a Confluent error code string"""
    if status_code in _STATUS_ERROR_CODES:
        return _STATUS_ERROR_CODES[status_code]
    if status_code >= 500:
        return "SERVER_ERROR"
    if status_code >= 400:
        return "CLIENT_ERROR"
    return "UNKNOWN_ERROR"


def parse_retry_after(value: Any) -> Optional[float]:
    """Parse a Retry-After value into seconds.

    Accepts a number, a numeric string or an HTTP-date.

    Returns:
        Seconds to wait, or None if the value is missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = float(value)
        return seconds if math.isfinite(seconds) else None

    text = str(value).strip()
    if not text:
        return None
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        return seconds if math.isfinite(seconds) else None

    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    return max(0.0, when.timestamp() - time.time())


class ApiError(Exception):
    """Represents a Confluent API error with structured information"""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.error_code = error_code or status_code_to_error_code(status_code)
        self.message = message or _reason_phrase(status_code)
        self.details: Dict[str, Any] = dict(details or {})
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.error_code:
            return f"confluent error {self.error_code} ({self.status_code}): {self.message}"
        return f"confluent error ({self.status_code}): {self.message}"

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, error_code={self.error_code!r})"

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "ApiError":
        """Build an error from an HTTP status code, response body and headers

        Args:
            status_code: HTTP status code
            body: Raw response body
            headers: Response headers (case-insensitive mapping recommended)

        Returns:
            ApiError instance
        """
        error_code = None
        message = ""
        details: Dict[str, Any] = {}

        if body:
            text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else str(body)
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                details = parsed
                error_code = parsed.get("error_code") or None
                raw_message = parsed.get("message") or parsed.get("error")
                if isinstance(raw_message, str):
                    message = raw_message
            else:
                message = text.strip()

        if headers is not None:
            retry_after = headers.get("Retry-After")
            if retry_after:
                details["retry_after"] = retry_after

        return cls(status_code, message=message, error_code=error_code, details=details)

    @property
    def is_bad_request(self) -> bool:
        return self.status_code == 400

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    @property
    def retry_after(self) -> Optional[float]:
        """Server-supplied wait in seconds for rate-limited responses, if any"""
        if not self.is_rate_limited:
            return None
        return parse_retry_after(self.details.get("retry_after"))


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"
