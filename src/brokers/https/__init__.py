"""HTTPS brokers package."""

from .health_check import health_check
from .update_tag import update_tag

__all__ = [
    "health_check",
    "update_tag",
]
