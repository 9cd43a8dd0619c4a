"""Routers package."""

from .calendar import router as calendar_router
from .notes import router as notes_router
from .rate_profiles import router as rate_profiles_router
from .revenues import router as revenues_router

__all__ = [
    "calendar_router",
    "notes_router",
    "rate_profiles_router",
    "revenues_router",
]
