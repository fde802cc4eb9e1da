"""
Service runtime layer for docstore.

This package provides shared infrastructure for reliability:
- ServiceError: Standardized errors with retry semantics
- ErrorCode: Error codes surfaced by the document store
- RetryPolicy: Configurable retry behavior for backend calls
"""

from .errors import ErrorCode, RetryableError, ServiceError, TerminalError
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy, sync_with_retry

__all__ = [
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "TerminalError",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "sync_with_retry",
]
