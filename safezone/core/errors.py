"""Error taxonomy for the notification pipeline.

These exceptions carry no I/O. The shell raises StorageError and
DeliveryError from the underlying client exceptions; the HTTP layer maps
them to status codes.
"""

from typing import Any


class NotifierError(Exception):
    """Base class for notification pipeline errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(NotifierError):
    """Request input failed validation.

    Attributes:
        details: Field-level breakdown, shaped as
            {"formErrors": [...], "fieldErrors": {field: [messages]}}
    """

    def __init__(self, details: dict[str, Any], message: str = "Invalid input") -> None:
        super().__init__(message)
        self.details = details

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields."""
        return sorted(self.details.get("fieldErrors", {}))


class ReportNotFoundError(NotifierError):
    """No usable report exists for the requested id."""

    def __init__(self, report_id: int, reason: str | None = None) -> None:
        message = f"Report not found or error fetching report: {report_id}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.report_id = report_id


class StorageError(NotifierError):
    """The report or subscription store was unreachable or errored."""


class DeliveryError(NotifierError):
    """Delivering a notification to one subscriber failed."""

    def __init__(self, user_id: str, message: str) -> None:
        super().__init__(message)
        self.user_id = user_id
