"""Error code registry with E-XXXX format codes.

This module defines the error code system for vicsedi, organizing errors
into categories:
- E-1xxx: Input format errors
- E-2xxx: Validation and reconciliation errors
- E-4xxx: System/internal errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    FORMAT = "format"  # E-1xxx: Input format errors
    VALIDATION = "validation"  # E-2xxx: Validation errors
    SYSTEM = "system"  # E-4xxx: System/internal errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str  # E-XXXX format
    category: ErrorCategory
    title: str  # Short title for display
    message_template: str  # Message with {placeholders}
    remediation: str  # Action user should take
    is_retryable: bool = False  # Can be retried without user action

    def format_message(self, **context: object) -> str:
        """Fill the message template from context.

        The template is returned unchanged if a placeholder is missing.
        """
        try:
            return self.message_template.format(**context)
        except KeyError:
            return self.message_template


# Error registry - all defined error codes
ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Format errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.FORMAT,
        title="Malformed Document",
        message_template="Document could not be parsed: {detail}",
        remediation="Check the segment terminator (~), element delimiter (*) and that the input is not empty.",
    ),
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Document Validation Failed",
        message_template="{count} validation error(s) found.",
        remediation="Fix every listed error and resubmit. Warnings do not block generation.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="SKU Reconciliation Failed",
        message_template="SKU {sku} from ASN not found in PO.",
        remediation="Make sure every shipped SKU appears on the purchase order. No partial invoice was produced.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Dialect",
        message_template="Unsupported VICS dialect '{dialect}'.",
        remediation="Use dialect 4010 or 5010.",
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Internal Error",
        message_template="Unexpected error: {detail}",
        remediation="Report this issue with the input document attached.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Look up error code definition.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
