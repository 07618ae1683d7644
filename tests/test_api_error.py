"""Tests for ApiError decoding"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest
from requests.structures import CaseInsensitiveDict

from confluent_rest.domain.models.api_error import (
    ApiError,
    parse_retry_after,
    status_code_to_error_code,
)


class TestStatusCodeToErrorCode:
    """Tests for status to error code mapping"""

    @pytest.mark.parametrize(
        "status,code",
        [
            (400, "INVALID_REQUEST"),
            (401, "UNAUTHORIZED"),
            (403, "FORBIDDEN"),
            (404, "NOT_FOUND"),
            (409, "CONFLICT"),
            (429, "RATE_LIMIT_EXCEEDED"),
            (500, "INTERNAL_SERVER_ERROR"),
            (502, "BAD_GATEWAY"),
            (503, "SERVICE_UNAVAILABLE"),
            (504, "GATEWAY_TIMEOUT"),
            (507, "SERVER_ERROR"),
            (418, "CLIENT_ERROR"),
            (302, "UNKNOWN_ERROR"),
        ],
    )
    def test_mapping(self, status, code):
        assert status_code_to_error_code(status) == code


class TestFromResponse:
    """Tests for ApiError.from_response"""

    def test_json_body(self):
        """Test error_code and message are read from a JSON body"""
        body = json.dumps({"error_code": "TOPIC_EXISTS", "message": "Topic already exists"}).encode()
        error = ApiError.from_response(409, body, CaseInsensitiveDict())

        assert error.status_code == 409
        assert error.error_code == "TOPIC_EXISTS"
        assert error.message == "Topic already exists"
        assert error.details["error_code"] == "TOPIC_EXISTS"
        assert str(error) == "confluent error TOPIC_EXISTS (409): Topic already exists"

    def test_json_body_without_error_code(self):
        """Test a missing error_code is derived from the status"""
        body = json.dumps({"error": "no such cluster"}).encode()
        error = ApiError.from_response(404, body)

        assert error.error_code == "NOT_FOUND"
        assert error.message == "no such cluster"

    def test_plain_text_body(self):
        """Test a non-JSON body becomes the message"""
        error = ApiError.from_response(502, b"upstream connect error\n")

        assert error.message == "upstream connect error"
        assert error.error_code == "BAD_GATEWAY"
        assert error.details == {}

    def test_empty_body_uses_reason_phrase(self):
        """Test an empty body falls back to the HTTP reason phrase"""
        error = ApiError.from_response(429, b"")

        assert error.message == "Too Many Requests"
        assert error.error_code == "RATE_LIMIT_EXCEEDED"

    def test_retry_after_header(self):
        """Test the Retry-After header is copied into details"""
        headers = CaseInsensitiveDict({"retry-after": "7"})
        error = ApiError.from_response(429, b"", headers)

        assert error.details["retry_after"] == "7"
        assert error.retry_after == 7.0


class TestRetryAfter:
    """Tests for Retry-After parsing"""

    def test_numeric_forms(self):
        assert parse_retry_after("5") == 5.0
        assert parse_retry_after(" 0.05 ") == pytest.approx(0.05)
        assert parse_retry_after(3) == 3.0
        assert parse_retry_after(1.5) == 1.5

    def test_http_date(self):
        """Test an HTTP-date is converted to seconds from now"""
        when = datetime.now(timezone.utc) + timedelta(seconds=30)
        seconds = parse_retry_after(format_datetime(when, usegmt=True))
        assert 0 < seconds <= 31

    def test_past_http_date(self):
        """Test a date in the past means no wait"""
        when = datetime.now(timezone.utc) - timedelta(hours=1)
        assert parse_retry_after(format_datetime(when, usegmt=True)) == 0.0

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "Infinity", float("inf"), float("nan")])
    def test_non_finite_rejected(self, value):
        """Test infinite and NaN hints are treated as absent"""
        assert parse_retry_after(value) is None

    def test_huge_finite_hint_kept(self):
        assert parse_retry_after("1e300") == 1e300

    @pytest.mark.parametrize("value", [None, "", "soon", True])
    def test_unparseable(self, value):
        assert parse_retry_after(value) is None

    def test_only_for_rate_limited(self):
        """Test the hint is ignored on non-429 errors"""
        error = ApiError(503, details={"retry_after": "5"})
        assert error.retry_after is None

    def test_missing_hint(self):
        """Test a 429 without a hint has no retry_after"""
        assert ApiError(429).retry_after is None


class TestPredicates:
    """Tests for status predicates"""

    def test_predicates(self):
        assert ApiError(400).is_bad_request
        assert ApiError(401).is_unauthorized
        assert ApiError(403).is_forbidden
        assert ApiError(404).is_not_found
        assert ApiError(409).is_conflict
        assert ApiError(429).is_rate_limited
        assert ApiError(404).is_client_error
        assert not ApiError(404).is_server_error
        assert ApiError(503).is_server_error
        assert not ApiError(503).is_client_error

    def test_is_exception(self):
        """Test ApiError can be raised and caught"""
        with pytest.raises(ApiError, match="SERVICE_UNAVAILABLE"):
            raise ApiError(503)
