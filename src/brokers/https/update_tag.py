"""Rename tag HTTP endpoint."""

from typing import Any, Dict, Optional, Tuple
from firebase_functions import https_fn, options
from src.apis.Db import Db
from src.exceptions import ProjectError, UnauthenticatedError, ValidationError
from src.models.config_types import AppConfig
from src.models.util_types import ErrorResponse
from src.services.tag_service import TagService
from src.util.config import load_config
from src.util.cors_response import preflight_response, create_cors_response
from src.util.db_auth_wrapper import bearer_token
from src.util.errors import to_http_error
from src.util.logger import get_logger

logger = get_logger(__name__)


def handle_update_tag_request(
    req: https_fn.Request,
    db=None,
    config: Optional[AppConfig] = None,
) -> Tuple[Dict[str, Any], int]:
    """Authenticate a REST tag rename and run it.

    Args:
        req: HTTP request with a Bearer ID token and a JSON body
        db: Optional store, defaults to the Firestore-backed Db
        config: Optional configuration, loaded from the environment if omitted

    Returns:
        Tuple of JSON payload and HTTP status code
    """
    if req.method != "POST":
        body = ErrorResponse(code="method-not-allowed", message="Method not allowed")
        return body.model_dump(exclude_none=True), 405

    db = db if db is not None else Db.get_instance()

    try:
        token = bearer_token(req.headers.get("Authorization"))
        if token is None:
            raise UnauthenticatedError("Unauthorized", reason="missing-token")

        decoded = db.verify_token(token)
        uid = decoded.get("uid")
        if not uid:
            raise UnauthenticatedError("Invalid authentication token", reason="invalid-token")

        data = req.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        service = TagService(config or load_config(), db)
        result = service.rename_tag(uid, data.get("calendarId"), data.get("oldTag"), data.get("newTag"))
        return dict(result), 200

    except ProjectError as e:
        logger.warning(f"Tag update rejected ({e.code}): {e.message}")
        return to_http_error(e)
    except Exception as e:
        logger.error(f"Error updating tag: {e}")
        body = ErrorResponse(code="internal", message="An error occurred processing your request")
        return body.model_dump(exclude_none=True), 500


@https_fn.on_request(
    ingress=options.IngressSetting.ALLOW_ALL,
    timeout_sec=540,
    memory=options.MemoryOption.MB_512,
)
def update_tag(req: https_fn.Request):
    """REST transport for tag renames.

    Args:
        req: Firebase HTTP request

    Returns:
        JSON response with CORS headers
    """
    preflight = preflight_response(req, ["POST", "OPTIONS"])
    if preflight is not None:
        return preflight

    payload, status = handle_update_tag_request(req)
    return create_cors_response(payload, status)
