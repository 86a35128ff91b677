"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class PetroleumOpsError(Exception):
    """Base exception for petroleum-ops."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(PetroleumOpsError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(PetroleumOpsError):
    """Resource not found."""

    status_code = 404


class UnexpectedError(PetroleumOpsError):
    """Any other failure (persistence unavailable, etc.)."""

    status_code = 500


_LOCATION_PREFIXES = ("body", "query", "path", "header")


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """
    Build a field-level message from pydantic error dicts.

    Example: [{"loc": ("body", "plannedDate"), "msg": "Field required"}]
    -> "plannedDate: Field required"
    """
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(loc)
        msg = error.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return "; ".join(messages) or "Invalid request"
