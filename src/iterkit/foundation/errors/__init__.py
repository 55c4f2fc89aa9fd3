"""Unified error handling for iterkit.

- ErrorCode: Standard error codes for rejected arguments
- IterError/IterException: Structured errors and exceptions
- ConstructionError: Raised eagerly by factories and combinators
"""

from .errors import ConstructionError, ErrorCode, IterError, IterException
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    "ErrorCode", "IterError", "IterException", "ConstructionError",
    "JsonDict", "JsonPrimitive", "JsonValue",
]
