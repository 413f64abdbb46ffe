"""Error handling framework for vicsedi.

This package provides:
- Typed domain exceptions (format, validation, reconciliation)
- Error code registry with E-XXXX format codes
- Error formatting for terminal and API output

Error categories:
- E-1xxx: Input format errors
- E-2xxx: Validation and reconciliation errors
- E-4xxx: System/internal errors
"""

from vicsedi.errors.domain import (
    DomainError,
    FormatError,
    ReconciliationError,
    UnsupportedDialectError,
    ValidationError,
)
from vicsedi.errors.formatter import error_payload, format_error
from vicsedi.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Domain exceptions
    "DomainError",
    "FormatError",
    "ValidationError",
    "UnsupportedDialectError",
    "ReconciliationError",
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Formatter
    "format_error",
    "error_payload",
]
