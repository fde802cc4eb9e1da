"""
Standardized error model with retry semantics.

Blob backends raise these errors; the document store catches them at its
boundary and turns them into unsuccessful OperationResults.
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Standardized service error with retry classification.

    ServiceError carries structured information about failures:
    - code: Machine-readable error code (e.g., "NOT_FOUND")
    - message_safe: Human-readable message safe for logs/users
    - message_debug: Detailed debug info (not logged in production)
    - retryable: Whether the operation can be retried
    - cause: The underlying exception, if any
    - debug_id: Unique ID for support correlation
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        """Initialize a ServiceError.

        Args:
            code: Machine-readable error code.
            message_safe: Human-readable message safe for logs.
            message_debug: Optional detailed debug message.
            retryable: Whether the operation can be retried.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID (auto-generated if None).
        """
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"ServiceError(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary (excludes debug info)."""
        return {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }


class RetryableError(ServiceError):
    """Error that indicates the operation can be retried.

    Use this for transient failures like:
    - Connection refused or reset by the blob service
    - Request timeouts
    - Throttling / temporary unavailability
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=True,
            cause=cause,
            debug_id=debug_id,
        )


class TerminalError(ServiceError):
    """Error that indicates the operation should not be retried.

    Use this for permanent failures like:
    - Invalid input
    - Missing document
    - Write rejected by the backend
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=False,
            cause=cause,
            debug_id=debug_id,
        )


class ErrorCode:
    """Error codes surfaced by the document store."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
    WRITE_FAILED = "WRITE_FAILED"

    # Reserved for overwrite-guard policies; uploads currently overwrite silently.
    CONFLICT = "CONFLICT"


def not_found(key: str, cause: Exception | None = None) -> TerminalError:
    """Build the NOT_FOUND error for a missing document."""
    return TerminalError(
        code=ErrorCode.NOT_FOUND,
        message_safe=f"Document '{key}' does not exist",
        cause=cause,
    )


def backend_unavailable(action: str, cause: Exception | None = None) -> RetryableError:
    """Build the BACKEND_UNAVAILABLE error for a transport failure."""
    return RetryableError(
        code=ErrorCode.BACKEND_UNAVAILABLE,
        message_safe=f"Blob backend unavailable while trying to {action}",
        message_debug=str(cause) if cause else None,
        cause=cause,
    )


def write_failed(key: str, cause: Exception | None = None) -> TerminalError:
    """Build the WRITE_FAILED error for an upload the backend rejected."""
    return TerminalError(
        code=ErrorCode.WRITE_FAILED,
        message_safe=f"Could not persist document '{key}'",
        message_debug=str(cause) if cause else None,
        cause=cause,
    )
