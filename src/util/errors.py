"""Conversion of project errors to transport errors."""

from typing import Dict, Tuple
from firebase_functions import https_fn
from src.exceptions import ErrorKind, ProjectError
from src.models.util_types import ErrorResponse

_CALLABLE_CODES: Dict[ErrorKind, https_fn.FunctionsErrorCode] = {
    ErrorKind.INVALID_ARGUMENT: https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
    ErrorKind.UNAUTHENTICATED: https_fn.FunctionsErrorCode.UNAUTHENTICATED,
    ErrorKind.PERMISSION_DENIED: https_fn.FunctionsErrorCode.PERMISSION_DENIED,
    ErrorKind.NOT_FOUND: https_fn.FunctionsErrorCode.NOT_FOUND,
    ErrorKind.TRANSIENT_STORE_FAILURE: https_fn.FunctionsErrorCode.UNAVAILABLE,
    ErrorKind.INTERNAL: https_fn.FunctionsErrorCode.INTERNAL,
}

_HTTP_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TRANSIENT_STORE_FAILURE: 503,
    ErrorKind.INTERNAL: 500,
}


def to_https_error(error: ProjectError) -> https_fn.HttpsError:
    """Map a project error to the error raised from a callable function."""
    code = _CALLABLE_CODES.get(error.kind, https_fn.FunctionsErrorCode.INTERNAL)
    if error.kind == ErrorKind.INTERNAL:
        return https_fn.HttpsError(code, "An error occurred processing your request")
    return https_fn.HttpsError(code, error.message, error.details or None)


def to_http_error(error: ProjectError) -> Tuple[dict, int]:
    """Map a project error to a JSON body and HTTP status code."""
    status = _HTTP_STATUS.get(error.kind, 500)
    message = error.message
    if error.kind == ErrorKind.INTERNAL:
        message = "An error occurred processing your request"
    body = ErrorResponse(code=error.code, message=message, details=error.details or None)
    return body.model_dump(exclude_none=True), status
