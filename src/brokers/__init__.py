"""Deployed function brokers."""

from .callable import update_tag_callable
from .https import health_check, update_tag
from .triggered import on_calendar_deleted, on_year_updated

__all__ = [
    "update_tag_callable",
    "health_check",
    "update_tag",
    "on_year_updated",
    "on_calendar_deleted",
]
