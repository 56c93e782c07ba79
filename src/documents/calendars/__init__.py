"""Calendars document package."""

from .Calendar import Calendar
from .YearShard import YearShard

__all__ = ["Calendar", "YearShard"]
