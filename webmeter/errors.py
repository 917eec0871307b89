"""
Error kinds raised by the webmeter service.

``QueryValidationError`` is raised at the HTTP boundary before any store
access or aggregation. ``StoreUnavailableError`` wraps any failure or
timeout of the Reading Store query. Both are converted to JSON envelopes
by the exception handlers registered in :mod:`webmeter.api.main`.

Empty result sets and a zero demand denominator are not errors; they are
absorbed by the aggregators.

CHANGELOG:
- 2026-10-19: Initial creation
"""

# Machine-readable reason codes for QueryValidationError.
MISSING_PARAMETER = "missing_parameter"
INVALID_PARAMETER = "invalid_parameter"
INVALID_DATE = "invalid_date"
INVALID_TIME = "invalid_time"
INVALID_SLAVE_ID = "invalid_slave_id"
INVALID_RANGE = "invalid_range"


class WebmeterError(Exception):
    """Base class for errors surfaced to API callers."""


class QueryValidationError(WebmeterError):
    """A required query parameter is missing or malformed.

    Attributes:
        reason: Machine-readable reason code (one of the module constants).
        message: Human-readable explanation.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class StoreUnavailableError(WebmeterError):
    """The Reading Store query failed or exceeded its deadline."""
