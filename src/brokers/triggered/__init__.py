"""Triggered brokers package."""

from .on_year_updated import on_year_updated
from .on_calendar_deleted import on_calendar_deleted

__all__ = [
    "on_year_updated",
    "on_calendar_deleted",
]
