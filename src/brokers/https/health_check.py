"""Health check HTTP endpoint."""

from typing import Any, Dict, Optional, Tuple
from firebase_functions import https_fn, options
from src.apis.Db import Db
from src.models.config_types import AppConfig
from src.util.config import load_config
from src.util.cors_response import preflight_response, create_cors_response
from src.util.logger import get_logger

logger = get_logger(__name__)


def check_health(db=None, config: Optional[AppConfig] = None) -> Tuple[Dict[str, Any], int]:
    """Probe the store and report service status.

    Returns:
        Tuple of status payload and HTTP status code
    """
    db = db if db is not None else Db.get_instance()
    config = config or load_config()
    db_status = "healthy"

    try:
        # Cheapest read that proves the calendars collection is reachable
        db.query_docs(config.calendars_collection, limit=1)
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"

    response_data = {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "timestamp": Db.timestamp_now().isoformat(),
        "environment": config.env.value,
        "services": {
            "database": db_status,
            "functions": "healthy"
        }
    }

    logger.info(f"Health check: {response_data['status']}")
    return response_data, 200 if db_status == "healthy" else 503


@https_fn.on_request(
    ingress=options.IngressSetting.ALLOW_ALL,
    timeout_sec=30,
)
def health_check(req: https_fn.Request):
    """Health check endpoint for monitoring.

    Args:
        req: Firebase HTTP request

    Returns:
        Health status response
    """
    preflight = preflight_response(req, ["GET", "OPTIONS"])
    if preflight is not None:
        return preflight

    try:
        payload, status = check_health()
        return create_cors_response(payload, status)

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return create_cors_response(
            {
                "status": "unhealthy",
                "error": str(e)
            },
            status=503
        )
