"""Rename tag callable function."""

from typing import Any, Dict, Optional
from firebase_functions import https_fn, options
from src.exceptions import ProjectError
from src.models.config_types import AppConfig
from src.models.function_types import UpdateTagResponse
from src.services.tag_service import TagService
from src.util.config import load_config
from src.util.db_auth_wrapper import db_auth_wrapper
from src.util.errors import to_https_error
from src.util.logger import get_logger

logger = get_logger(__name__)


def handle_update_tag(
    uid: str,
    data: Optional[Dict[str, Any]],
    db=None,
    config: Optional[AppConfig] = None,
) -> UpdateTagResponse:
    """Rename or delete a tag for an authenticated caller.

    Args:
        uid: Authenticated user ID
        data: Request payload with calendarId, oldTag and newTag
        db: Optional store, defaults to the Firestore-backed Db
        config: Optional configuration, loaded from the environment if omitted

    Returns:
        UpdateTagResponse with success status and trades updated

    Raises:
        ProjectError: Validation, permission or lookup failure
    """
    data = data or {}
    service = TagService(config or load_config(), db)
    return service.rename_tag(
        uid,
        data.get("calendarId"),
        data.get("oldTag"),
        data.get("newTag"),
    )


@https_fn.on_call(
    cors=options.CorsOptions(cors_origins=["*"]),
    ingress=options.IngressSetting.ALLOW_ALL,
    timeout_sec=540,
    memory=options.MemoryOption.MB_512,
)
def update_tag_callable(req: https_fn.CallableRequest) -> UpdateTagResponse:
    """Rename a tag across a calendar and all its trades.

    Args:
        req: Firebase callable request containing UpdateTagRequest data

    Returns:
        UpdateTagResponse with success status and trades updated
    """
    uid = db_auth_wrapper(req)

    try:
        result = handle_update_tag(uid, req.data)
        logger.info(f"Tag update for user {uid} touched {result['tradesUpdated']} trades")
        return result

    except ProjectError as e:
        logger.warning(f"Tag update rejected ({e.code}): {e.message}")
        raise to_https_error(e)
    except Exception as e:
        logger.error(f"Failed to update tag: {e}")
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INTERNAL,
            "An error occurred processing your request"
        )
