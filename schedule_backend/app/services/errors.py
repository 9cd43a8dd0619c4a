"""Exceptions raised by the schedule services."""

from __future__ import annotations


class ScheduleError(RuntimeError):
    """Base class for failures of a single schedule action."""


class ScheduleValidationError(ScheduleError):
    """Raised before any I/O when user input is incomplete or invalid."""


class MissingReferenceError(ScheduleError):
    """Raised when an action targets a profile, entry or note that no longer exists."""


class DocumentStoreError(ScheduleError):
    """Raised when the document store cannot complete a read or write."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Document store failed to {operation}")
