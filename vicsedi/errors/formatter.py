"""Error formatting utilities.

This module provides:
- Multi-line error formatting for terminal display
- JSON-ready error payloads for API responses
"""

from typing import Any

from vicsedi.errors.domain import DomainError
from vicsedi.errors.registry import get_error


def format_error(error: DomainError, include_remediation: bool = True) -> str:
    """Format error for display to user.

    Args:
        error: The domain error to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string suitable for user display.
    """
    error_def = get_error(error.code)
    title = error_def.title if error_def else "Error"
    lines = [f"{error.code}: {title}"]

    for message in error.messages:
        lines.append(f"  - {message}")

    if include_remediation and error_def:
        lines.append(f"  Action: {error_def.remediation}")

    return "\n".join(lines)


def error_payload(error: DomainError) -> dict[str, Any]:
    """Build the response body for a failed request.

    Args:
        error: The domain error raised by the service layer.

    Returns:
        Dict with success flag, error code, joined message, the individual
        messages and, for registered codes, the rendered summary.
    """
    error_def = get_error(error.code)
    payload: dict[str, Any] = {
        "success": False,
        "code": error.code,
        "error": str(error),
        "errors": error.messages,
    }
    if error_def:
        payload["summary"] = error_def.format_message(**error.context)
        payload["remediation"] = error_def.remediation
    return payload
