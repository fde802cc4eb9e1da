"""
Standard exceptions for docstore.

The store itself never raises these across its boundary; they exist for
callers that prefer exceptions over branching on OperationResult.successful.
"""


class DocumentStoreError(Exception):
    """Base exception for all docstore errors."""
    pass


class OperationFailedError(DocumentStoreError):
    """Raised by OperationResult.unwrap() on an unsuccessful result."""

    def __init__(self, code: str | None, message: str | None):
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
