"""Unit tests for the OperationResult envelope."""

import pytest

from docstore_core.domain import OperationFailedError, OperationResult
from docstore_core.runtime.errors import ErrorCode, TerminalError


class TestOperationResult:
    """Tests for construction and invariants."""

    def test_ok_carries_result(self):
        """ok() should be successful with the payload and no error."""
        result = OperationResult[int].ok(7)

        assert result.successful is True
        assert result.result == 7
        assert result.error is None
        assert result.code is None

    def test_ok_without_payload(self):
        """Unit operations succeed with result=None."""
        result = OperationResult[None].ok()

        assert result.successful is True
        assert result.result is None

    def test_fail_copies_error_details(self):
        """fail() should copy code, message and debug id."""
        error = TerminalError(
            code=ErrorCode.NOT_FOUND, message_safe="Document 'x' does not exist", debug_id="abc"
        )

        result = OperationResult[int].fail(error)

        assert result.successful is False
        assert result.result is None
        assert result.code == ErrorCode.NOT_FOUND
        assert result.error == "Document 'x' does not exist"
        assert result.debug_id == "abc"

    def test_successful_result_cannot_carry_error(self):
        """A successful result with an error should be rejected."""
        with pytest.raises(ValueError):
            OperationResult[int](successful=True, result=1, error="boom", code="X")

    def test_failed_result_cannot_carry_payload(self):
        """An unsuccessful result with a payload should be rejected."""
        with pytest.raises(ValueError):
            OperationResult[int](successful=False, result=1, error="boom", code="X")

    def test_failed_result_requires_error(self):
        """An unsuccessful result needs an error description."""
        with pytest.raises(ValueError):
            OperationResult[int](successful=False)

    def test_is_frozen(self):
        """Results should be immutable."""
        result = OperationResult[int].ok(1)

        with pytest.raises(Exception):
            result.successful = False


class TestUnwrap:
    """Tests for unwrap()."""

    def test_unwrap_returns_payload(self):
        assert OperationResult[str].ok("x").unwrap() == "x"

    def test_unwrap_raises_on_failure(self):
        """unwrap() should raise OperationFailedError with the code."""
        result = OperationResult[str].fail(
            TerminalError(code=ErrorCode.WRITE_FAILED, message_safe="nope")
        )

        with pytest.raises(OperationFailedError) as exc_info:
            result.unwrap()

        assert exc_info.value.code == ErrorCode.WRITE_FAILED
        assert exc_info.value.message == "nope"
