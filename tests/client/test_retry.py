"""Tests for retry policy and classification."""

from unittest.mock import MagicMock

import pytest

from callwire.client.exceptions import (
    BackendError,
    ConfigurationMissingError,
    DecodingFailedError,
    NetworkError,
    ServerError,
)
from callwire.client.retry import RetryPolicy, is_retryable, is_retryable_status_code


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_presets(self):
        """Test the named presets."""
        assert RetryPolicy.NONE == RetryPolicy(max_attempts=1, base_delay=0)
        assert RetryPolicy.DEFAULT == RetryPolicy(max_attempts=3, base_delay=0.5)

    def test_delay_doubles_per_attempt(self):
        """Test delay is base_delay * 2^(attempt-1)."""
        policy = RetryPolicy(max_attempts=5, base_delay=0.5)
        assert [policy.delay_for(n) for n in range(1, 5)] == [0.5, 1.0, 2.0, 4.0]

    def test_delay_cap(self):
        """Test max_delay caps the delay."""
        policy = RetryPolicy(max_attempts=10, base_delay=1, max_delay=5)
        assert policy.delay_for(3) == 4
        assert policy.delay_for(4) == 5
        assert policy.delay_for(9) == 5

    def test_tenacity_wait_matches_delay_for(self):
        """Test the tenacity wait strategy agrees with delay_for."""
        for policy in (RetryPolicy(4, 0.25), RetryPolicy(6, 1, max_delay=7)):
            wait = policy.wait()
            for attempt in range(1, policy.max_attempts):
                state = MagicMock(attempt_number=attempt)
                assert wait(state) == pytest.approx(policy.delay_for(attempt))

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"base_delay": -1},
            {"max_delay": -0.1},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test invalid policies are rejected."""
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)

    def test_policy_is_immutable(self):
        """Test policies cannot be mutated."""
        with pytest.raises(AttributeError):
            RetryPolicy.DEFAULT.max_attempts = 10


class TestRetryClassification:
    """Tests for is_retryable."""

    def test_network_is_retryable(self):
        assert is_retryable(NetworkError(OSError("down"))) is True

    @pytest.mark.parametrize("status_code, expected", [(500, True), (503, True), (499, False), (404, False), (302, False)])
    def test_server_error_by_status(self, status_code, expected):
        """Test only 5xx server errors are retryable."""
        assert is_retryable(ServerError(status_code, b"")) is expected
        assert is_retryable_status_code(status_code) is expected

    @pytest.mark.parametrize(
        "error",
        [
            BackendError({"code": 1}, 500),
            BackendError({"code": 1}, 400),
            DecodingFailedError(b"{}", ValueError("bad")),
            ConfigurationMissingError(),
            RuntimeError("unrelated"),
        ],
    )
    def test_terminal_errors(self, error):
        """Test terminal kinds are never retried."""
        assert is_retryable(error) is False
