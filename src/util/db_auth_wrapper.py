"""Database authentication wrapper utility."""

from firebase_functions import https_fn
from src.apis.Db import Db
from src.util.logger import get_logger

logger = get_logger(__name__)


def db_auth_wrapper(req: https_fn.CallableRequest) -> str:
    """Wrapper for authenticating Firebase callable requests.

    Args:
        req: Firebase callable request object

    Returns:
        Authenticated user ID

    Raises:
        HttpsError: If authentication fails (not in emulator/dev mode)
    """
    # In development the emulator tests identify the caller with a User-Id header
    if Db.is_development():
        raw_request = getattr(req, "raw_request", None)
        if raw_request is not None and raw_request.headers:
            user_id = raw_request.headers.get('User-Id')
            if user_id:
                return user_id
        if req.auth:
            return req.auth.uid
        return "test-user-id"

    if not req.auth:
        logger.warning("Unauthenticated request")
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.UNAUTHENTICATED,
            "The function must be called while authenticated."
        )

    return req.auth.uid


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None
