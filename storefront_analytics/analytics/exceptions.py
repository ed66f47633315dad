"""
Custom exceptions for the analytics engine.

Arithmetic edge cases never raise; only bad identifiers, unsupported
filters and data-access failures surface as errors.
"""

from typing import Any, Dict, Optional


class AnalyticsError(Exception):
    """Base exception for all analytics errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or "ANALYTICS_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class InvalidIdentifierError(AnalyticsError):
    """Raised when a record identifier is structurally invalid"""

    status_code = 400

    def __init__(self, field: str, value: str):
        super().__init__(
            f"Invalid {field}: {value!r}",
            "INVALID_IDENTIFIER",
            {"field": field, "value": value},
        )


class InvalidFilterError(AnalyticsError):
    """Raised when a filter parameter has an unsupported value"""

    status_code = 400

    def __init__(self, field: str, value: str, allowed: list):
        super().__init__(
            f"Unsupported {field} {value!r}. Allowed: {', '.join(allowed)}",
            "INVALID_FILTER",
            {"field": field, "value": value, "allowed": allowed},
        )


class DataAccessError(AnalyticsError):
    """Raised when the record store cannot complete a query"""

    status_code = 500

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Record query '{operation}' failed: {reason}",
            "DATA_ACCESS_ERROR",
            {"operation": operation},
        )
