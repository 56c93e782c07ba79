"""Documents package initialization."""

from .calendars import Calendar, YearShard

__all__ = ["Calendar", "YearShard"]
