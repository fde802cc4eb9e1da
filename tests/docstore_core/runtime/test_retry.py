"""Unit tests for RetryPolicy and the sync retry decorator."""

from unittest.mock import MagicMock, patch

import pytest

from docstore_core.runtime.errors import RetryableError, TerminalError
from docstore_core.runtime.retry import RetryPolicy, sync_with_retry


class TestRetryPolicy:
    """Tests for RetryPolicy configuration."""

    def test_default_values(self):
        """Should have sensible defaults."""
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.base_delay == 0.5
        assert policy.max_delay == 10.0
        assert policy.exponential_base == 2.0
        assert policy.jitter is True

    def test_is_frozen(self):
        """Should be immutable."""
        policy = RetryPolicy()
        with pytest.raises(Exception):
            policy.max_attempts = 10


class TestCalculateDelay:
    """Tests for delay calculation."""

    def test_exponential_backoff(self):
        """Delay should increase exponentially."""
        policy = RetryPolicy(base_delay=1.0, exponential_base=2.0, jitter=False)

        assert policy.calculate_delay(0) == 1.0
        assert policy.calculate_delay(1) == 2.0
        assert policy.calculate_delay(2) == 4.0

    def test_max_delay_caps_backoff(self):
        """Delay should not exceed max_delay."""
        policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter=False)

        assert policy.calculate_delay(10) == 5.0

    def test_jitter_adds_at_most_a_quarter(self):
        """Jitter should stay within 25% of the base delay."""
        policy = RetryPolicy(base_delay=4.0, jitter=True)

        for _ in range(20):
            assert 4.0 <= policy.calculate_delay(0) <= 5.0


class TestSyncWithRetry:
    """Tests for the sync_with_retry decorator."""

    @patch("docstore_core.runtime.retry.time.sleep")
    def test_retries_retryable_error_then_succeeds(self, mock_sleep):
        """Should retry on RetryableError and return the eventual result."""
        func = MagicMock(
            side_effect=[RetryableError(code="BACKEND_UNAVAILABLE", message_safe="down"), "ok"]
        )
        func.__name__ = "func"

        result = sync_with_retry(RetryPolicy(max_attempts=3, jitter=False))(func)()

        assert result == "ok"
        assert func.call_count == 2
        mock_sleep.assert_called_once()

    @patch("docstore_core.runtime.retry.time.sleep")
    def test_raises_after_max_attempts(self, mock_sleep):
        """Should re-raise once attempts are exhausted."""
        func = MagicMock(side_effect=RetryableError(code="BACKEND_UNAVAILABLE", message_safe="down"))
        func.__name__ = "func"

        with pytest.raises(RetryableError):
            sync_with_retry(RetryPolicy(max_attempts=2))(func)()

        assert func.call_count == 2
        assert mock_sleep.call_count == 1

    @patch("docstore_core.runtime.retry.time.sleep")
    def test_terminal_error_is_not_retried(self, mock_sleep):
        """TerminalError should propagate immediately."""
        func = MagicMock(side_effect=TerminalError(code="NOT_FOUND", message_safe="gone"))
        func.__name__ = "func"

        with pytest.raises(TerminalError):
            sync_with_retry(RetryPolicy(max_attempts=5))(func)()

        assert func.call_count == 1
        mock_sleep.assert_not_called()

    @patch("docstore_core.runtime.retry.time.sleep")
    def test_on_retry_callback(self, mock_sleep):
        """on_retry should receive the attempt number and error."""
        error = RetryableError(code="BACKEND_UNAVAILABLE", message_safe="down")
        func = MagicMock(side_effect=[error, "ok"])
        func.__name__ = "func"
        callback = MagicMock()

        sync_with_retry(RetryPolicy(jitter=False, base_delay=0.1), on_retry=callback)(func)()

        callback.assert_called_once_with(0, error, 0.1)

    @patch("docstore_core.runtime.retry.time.sleep")
    def test_policy_call_runs_function_with_args(self, mock_sleep):
        """RetryPolicy.call should pass arguments through."""
        func = MagicMock(return_value=42)
        func.__name__ = "func"

        assert RetryPolicy().call(func, "a", key="b") == 42
        func.assert_called_once_with("a", key="b")
