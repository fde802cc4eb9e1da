"""
Document metadata entity.

A DocumentEntity describes one stored document: its unique name, its byte
size, the absolute URI where the backend keeps its content, and an optional
ordering position used when listing.
"""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, Field, StrictInt, ValidationError, field_validator

from docstore_core.domain.result import OperationResult
from docstore_core.runtime.errors import ErrorCode, TerminalError

PATH_SEPARATORS = ("/", "\\")


class DocumentEntity(BaseModel):
    """
    Immutable metadata record of a stored document.

    Equality is structural over all fields. Reordering produces new
    entities via model_copy, never mutation.
    """

    name: str = Field(..., description="Unique key of the document within a store")
    size: StrictInt = Field(..., ge=0, description="Content length in bytes")
    location: str = Field(..., description="Absolute URI of the stored content")
    order: StrictInt | None = Field(None, description="Listing position")

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name must not be empty")
        if any(sep in value for sep in PATH_SEPARATORS):
            raise ValueError("name must not contain path separators")
        if value in (".", ".."):
            raise ValueError("name must not be a relative path component")
        return value

    @field_validator("location")
    @classmethod
    def _validate_location(cls, value: str) -> str:
        if not is_absolute_uri(value):
            raise ValueError("location must be an absolute URI")
        return value

    @classmethod
    def create(
        cls,
        name: str,
        size: int,
        location: str,
        order: int | None = None,
    ) -> OperationResult["DocumentEntity"]:
        """
        Validate and build a DocumentEntity.

        Returns:
            A successful result carrying the entity, or an unsuccessful
            result with code VALIDATION_FAILED describing every broken rule.
        """
        try:
            entity = cls(name=name, size=size, location=location, order=order)
        except ValidationError as e:
            return OperationResult[DocumentEntity].fail(validation_failed(e))
        return OperationResult[DocumentEntity].ok(entity)

    def with_order(self, order: int | None) -> "DocumentEntity":
        """Return a copy positioned at order."""
        return self.model_copy(update={"order": order})


def is_absolute_uri(value: str) -> bool:
    """True when value has a scheme plus a host or an absolute path."""
    if not value or any(ch.isspace() for ch in value):
        return False
    parsed = urlparse(value)
    if not parsed.scheme:
        return False
    return bool(parsed.netloc) or parsed.path.startswith("/")


def validation_failed(error: ValidationError) -> TerminalError:
    """Turn a pydantic ValidationError into a VALIDATION_FAILED error."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'entity'}: {err['msg']}"
        for err in error.errors()
    )
    return TerminalError(
        code=ErrorCode.VALIDATION_FAILED,
        message_safe=f"Invalid document: {details}",
        cause=error,
    )
