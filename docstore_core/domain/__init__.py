"""
Domain model for docstore.

Exports:
    - DocumentEntity: Immutable metadata record of a stored document
    - OperationResult: Uniform success/failure envelope
    - DocumentStoreError, OperationFailedError: Exceptions for unwrap()
"""

from docstore_core.domain.document import DocumentEntity, is_absolute_uri
from docstore_core.domain.exceptions import DocumentStoreError, OperationFailedError
from docstore_core.domain.result import OperationResult

__all__ = [
    "DocumentEntity",
    "DocumentStoreError",
    "OperationFailedError",
    "OperationResult",
    "is_absolute_uri",
]
