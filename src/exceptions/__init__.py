"""Exceptions package initialization."""

from .CustomError import (
    ErrorKind,
    ProjectError,
    ValidationError,
    UnauthenticatedError,
    PermissionError,
    NotFoundError,
    TransientStoreError,
    InternalError,
)

__all__ = [
    "ErrorKind",
    "ProjectError",
    "ValidationError",
    "UnauthenticatedError",
    "PermissionError",
    "NotFoundError",
    "TransientStoreError",
    "InternalError",
]
