"""Callable brokers package."""

from .update_tag import update_tag_callable

__all__ = [
    "update_tag_callable",
]
