"""
Uniform success/failure envelope returned by every document store operation.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, model_validator

from docstore_core.domain.exceptions import OperationFailedError
from docstore_core.runtime.errors import ServiceError

T = TypeVar("T")


class OperationResult(BaseModel, Generic[T]):
    """
    Outcome of a store operation.

    Either successful with an optional payload, or unsuccessful with an error
    description and code. There is no partial-success state.

    Attributes:
        successful: Whether the operation succeeded.
        result: Payload of a successful operation (None for unit operations).
        error: Human-readable failure reason.
        code: ErrorCode of the failure.
        debug_id: Correlation id of the underlying ServiceError.
    """

    successful: bool
    result: T | None = None
    error: str | None = None
    code: str | None = None
    debug_id: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_consistency(self) -> "OperationResult[T]":
        if self.successful:
            if self.error is not None or self.code is not None:
                raise ValueError("a successful result cannot carry an error")
        else:
            if self.result is not None:
                raise ValueError("an unsuccessful result cannot carry a payload")
            if not self.error or not self.code:
                raise ValueError("an unsuccessful result requires an error and a code")
        return self

    @classmethod
    def ok(cls, result: T | None = None) -> "OperationResult[T]":
        """Build a successful result."""
        return cls(successful=True, result=result)

    @classmethod
    def fail(cls, error: ServiceError) -> "OperationResult[T]":
        """Build an unsuccessful result from a ServiceError."""
        return cls(
            successful=False,
            error=error.message_safe,
            code=error.code,
            debug_id=error.debug_id,
        )

    def unwrap(self) -> T | None:
        """Return the payload, raising OperationFailedError when unsuccessful."""
        if not self.successful:
            raise OperationFailedError(self.code, self.error)
        return self.result
