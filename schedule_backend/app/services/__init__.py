"""Service layer encapsulating the schedule business logic."""

from .calendar import build_month_view, shift_month
from .document_store import DocumentStore, SqlDocumentStore
from .errors import (
    DocumentStoreError,
    MissingReferenceError,
    ScheduleError,
    ScheduleValidationError,
)
from .note_ledger import NoteLedgerService
from .rate_profiles import RateProfileService
from .revenue_engine import compute_total, compute_total_for_date, is_weekend, select_rates
from .revenue_ledger import RevenueLedgerService
from .schedule_controller import CommandResult, Overlay, ScheduleController, ScheduleState

__all__ = [
    "build_month_view",
    "shift_month",
    "DocumentStore",
    "SqlDocumentStore",
    "DocumentStoreError",
    "MissingReferenceError",
    "ScheduleError",
    "ScheduleValidationError",
    "NoteLedgerService",
    "RateProfileService",
    "compute_total",
    "compute_total_for_date",
    "is_weekend",
    "select_rates",
    "RevenueLedgerService",
    "CommandResult",
    "Overlay",
    "ScheduleController",
    "ScheduleState",
]
