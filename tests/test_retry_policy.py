"""Tests for retry classification policies"""

from __future__ import annotations

import pytest

from confluent_rest.domain.models.api_error import ApiError
from confluent_rest.domain.models.retry_errors import RetryCancelledError, RetryExhaustedError
from confluent_rest.domain.retry_policy import (
    RETRY_POLICIES,
    ErrorKind,
    aggressive_retryable_errors,
    conservative_retryable_errors,
    default_retryable_errors,
    is_retryable,
    policy_name,
    resolve_policy,
)

CLIENT_ERRORS = [400, 401, 403, 404, 409, 422]


class TestPresets:
    """Tests for the three preset policies"""

    @pytest.mark.parametrize(
        "policy",
        [default_retryable_errors, aggressive_retryable_errors, conservative_retryable_errors],
    )
    def test_rate_limit_always_retryable(self, policy):
        """Test every preset retries 429"""
        assert policy(ApiError(429)) is True

    @pytest.mark.parametrize(
        "policy",
        [default_retryable_errors, aggressive_retryable_errors, conservative_retryable_errors],
    )
    @pytest.mark.parametrize("status", CLIENT_ERRORS)
    def test_client_errors_never_retryable(self, policy, status):
        """Test no preset retries a 4xx other than 429"""
        assert policy(ApiError(status)) is False

    @pytest.mark.parametrize(
        "policy",
        [default_retryable_errors, aggressive_retryable_errors, conservative_retryable_errors],
    )
    def test_none_is_not_retryable(self, policy):
        """Test a missing error is never retried"""
        assert policy(None) is False

    @pytest.mark.parametrize("status", [500, 501, 502, 503, 504, 599])
    def test_default_retries_server_errors(self, status):
        """Test default retries any 5xx"""
        assert default_retryable_errors(ApiError(status)) is True

    @pytest.mark.parametrize("status", [500, 502, 503, 504, 599])
    def test_aggressive_retries_all_5xx(self, status):
        """Test aggressive retries the whole 5xx range"""
        assert aggressive_retryable_errors(ApiError(status)) is True

    def test_aggressive_stops_at_599(self):
        """Test aggressive does not retry statuses past the 5xx range"""
        assert aggressive_retryable_errors(ApiError(600)) is False

    @pytest.mark.parametrize("status,expected", [(500, False), (501, False), (502, False), (503, True), (504, True)])
    def test_conservative_server_errors(self, status, expected):
        """Test conservative retries only 503 and 504"""
        assert conservative_retryable_errors(ApiError(status)) is expected


class TestIsRetryable:
    """Tests for the classifier entry point"""

    def test_non_api_error_never_retryable(self):
        """Test unclassifiable errors fail safe"""
        assert is_retryable(ValueError("boom")) is False
        assert is_retryable(ConnectionError("down"), lambda e: True) is False
        assert is_retryable(None) is False

    def test_custom_policy(self):
        """Test a caller-supplied predicate is consulted"""
        only_409 = lambda e: e.status_code == 409  # noqa: E731
        assert is_retryable(ApiError(409), only_409) is True
        assert is_retryable(ApiError(503), only_409) is False

    def test_default_policy(self):
        """Test the default policy is used when none is given"""
        assert is_retryable(ApiError(503)) is True
        assert is_retryable(ApiError(404)) is False


class TestErrorKind:
    """Tests for the error taxonomy"""

    @pytest.mark.parametrize(
        "error,kind",
        [
            (ApiError(400), ErrorKind.PERMANENT_CLIENT),
            (ApiError(404), ErrorKind.PERMANENT_CLIENT),
            (ApiError(429), ErrorKind.TRANSIENT_RATE_LIMIT),
            (ApiError(500), ErrorKind.TRANSIENT_SERVER),
            (ApiError(503), ErrorKind.TRANSIENT_SERVER),
            (ApiError(302), ErrorKind.UNCLASSIFIABLE),
            (ValueError("x"), ErrorKind.UNCLASSIFIABLE),
            (None, ErrorKind.UNCLASSIFIABLE),
            (RetryCancelledError(1), ErrorKind.CANCELLED),
        ],
    )
    def test_of(self, error, kind):
        """Test each exception maps to its category"""
        assert ErrorKind.of(error) is kind

    def test_exhausted_error_is_unclassifiable(self):
        """Test an exhausted wrapper is not itself retryable"""
        error = RetryExhaustedError(3, ApiError(503))
        assert ErrorKind.of(error) is ErrorKind.UNCLASSIFIABLE


class TestPolicyRegistry:
    """Tests for preset lookup"""

    def test_registry_names(self):
        """Test the three presets are registered"""
        assert set(RETRY_POLICIES) == {"default", "aggressive", "conservative"}

    def test_resolve_case_insensitive(self):
        """Test preset names ignore case and whitespace"""
        assert resolve_policy(" Conservative ") is conservative_retryable_errors

    def test_resolve_unknown(self):
        """Test unknown presets are rejected"""
        with pytest.raises(ValueError, match="Unknown retry policy"):
            resolve_policy("reckless")

    def test_policy_name(self):
        """Test presets report their registered name"""
        assert policy_name(aggressive_retryable_errors) == "aggressive"

        def only_conflicts(error):
            return error.is_conflict

        assert policy_name(only_conflicts) == "only_conflicts"
