"""Standardized error handling for sequence construction.

Provides error codes and structured error payloads for invalid arguments.
Uses Pydantic for validation and serialization.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for rejected arguments.

    Used for programmatic error handling in callers that build sequences
    from untrusted input.
    """
    INVALID_STEP = "INVALID_STEP"
    INVALID_SIZE = "INVALID_SIZE"
    INVALID_BOUNDS = "INVALID_BOUNDS"
    INVALID_PRODUCER = "INVALID_PRODUCER"
    INVALID_LENGTH = "INVALID_LENGTH"
    UNKNOWN = "UNKNOWN"


class IterError(BaseModel):
    """Structured description of a rejected operation.

    Attributes:
        operation: Name of the factory or combinator that rejected its input
        message: Human-readable error message
        code: Machine-readable error code
        details: Optional extra information (offending values)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Iter Error",
            "description": "Structured error raised while building a sequence",
            "examples": [{
                "operation": "irange",
                "message": "step can't be 0",
                "code": "INVALID_STEP",
            }],
        },
    )

    operation: Annotated[str, Field(
        min_length=1,
        description="Factory or combinator that rejected its arguments",
    )]
    message: Annotated[str, Field(
        min_length=1,
        description="Human-readable error message",
    )]
    code: ErrorCode = Field(
        default=ErrorCode.UNKNOWN,
        description="Machine-readable error classification",
    )
    details: str | None = Field(
        default=None,
        description="Optional detail such as the offending values",
    )

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_argument_error(self) -> bool:
        """Whether the error was caused by a bad numeric argument."""
        return self.code in _ARGUMENT_CODES

    @classmethod
    def create(
        cls,
        operation: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        details: str | None = None,
    ) -> Self:
        """Factory method for construction."""
        return cls(operation=operation, message=message, code=code, details=details)

    def render(self) -> str:
        """Format error as a single line."""
        base = f"{self.operation}: {self.message}"
        return f"{base} ({self.details})" if self.details else base


_ARGUMENT_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.INVALID_STEP,
    ErrorCode.INVALID_SIZE,
    ErrorCode.INVALID_BOUNDS,
    ErrorCode.INVALID_LENGTH,
})


class IterException(Exception):
    """Exception wrapping an IterError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: IterError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(
        cls,
        operation: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        details: str | None = None,
    ) -> Self:
        """Create exception from its parts."""
        return cls(IterError.create(operation, message, code, details=details))


class ConstructionError(IterException, ValueError):
    """Raised when a sequence or helper is built with invalid arguments.

    Always raised eagerly, before any value is pulled.
    """
