"""Custom exception classes for the project."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the functions."""
    INVALID_ARGUMENT = "invalid-argument"
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission-denied"
    NOT_FOUND = "not-found"
    TRANSIENT_STORE_FAILURE = "transient-store-failure"
    INTERNAL = "internal"


class ProjectError(Exception):
    """Base exception class for project-specific errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, kind: Optional[ErrorKind] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize ProjectError.

        Args:
            message: Error message
            kind: Optional error kind, defaults to the class kind
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}

    @property
    def code(self) -> str:
        return self.kind.value


class ValidationError(ProjectError):
    """Raised when request fields are missing or malformed."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize ValidationError.

        Args:
            message: Error message
            field: Optional field that failed validation
            details: Optional additional error details
        """
        if field:
            details = details or {}
            details["field"] = field

        super().__init__(message, details=details)


class UnauthenticatedError(ProjectError):
    """Raised when the caller identity is missing or cannot be verified."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Authentication required", reason: Optional[str] = None):
        details = {"reason": reason} if reason else {}
        super().__init__(message, details=details)


class PermissionError(ProjectError):
    """Raised when permission check fails."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, message: str = "Permission denied", resource: Optional[str] = None):
        """Initialize PermissionError.

        Args:
            message: Error message
            resource: Optional resource that was denied
        """
        details = {"resource": resource} if resource else {}
        super().__init__(message, details=details)


class NotFoundError(ProjectError):
    """Raised when a resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource_type: str, resource_id: str):
        """Initialize NotFoundError.

        Args:
            resource_type: Type of resource not found
            resource_id: ID of resource not found
        """
        message = f"{resource_type} with ID '{resource_id}' not found"
        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, details=details)


class TransientStoreError(ProjectError):
    """Raised when a store write fails in a way a retry may fix."""

    kind = ErrorKind.TRANSIENT_STORE_FAILURE

    def __init__(self, operation: str, target: str, cause: Optional[BaseException] = None):
        message = f"{operation} failed for '{target}'"
        if cause is not None:
            message = f"{message}: {cause}"
        details = {
            "operation": operation,
            "target": target,
        }
        super().__init__(message, details=details)


class InternalError(ProjectError):
    """Raised for unexpected failures."""

    kind = ErrorKind.INTERNAL
