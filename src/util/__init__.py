"""Utility functions package."""

from .logger import get_logger
from .cors_response import (
    preflight_response,
    add_cors_headers,
    create_cors_response,
)
from .errors import to_https_error, to_http_error

__all__ = [
    "get_logger",
    "preflight_response",
    "add_cors_headers",
    "create_cors_response",
    "to_https_error",
    "to_http_error",
]
