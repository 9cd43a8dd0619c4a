"""Expose SQLAlchemy models for convenient imports."""

from .document import ScheduleDocument

__all__ = ["ScheduleDocument"]
