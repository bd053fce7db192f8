from __future__ import annotations


class AttendanceSummaryError(RuntimeError):
    """Base class for errors reported at the service boundary."""


class ValidationError(AttendanceSummaryError):
    """Raised when a required selection is missing or a posted value is malformed."""


class NotFoundError(AttendanceSummaryError):
    """Raised when a record looked up by id does not exist."""
