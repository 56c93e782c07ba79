"""Trigger function for calendar deletion."""

from typing import Optional
from firebase_functions import firestore_fn, options
from src.models.config_types import AppConfig
from src.models.function_types import CalendarCleanupResponse
from src.services.calendar_service import CalendarService
from src.util.config import load_config
from src.util.logger import get_logger

logger = get_logger(__name__)


def handle_calendar_deleted(
    calendar_id: str,
    calendar_data: Optional[dict],
    db=None,
    config: Optional[AppConfig] = None,
) -> CalendarCleanupResponse:
    """Remove the images and year shards left behind by a deleted calendar."""
    service = CalendarService(config or load_config(), db)
    return service.cleanup_deleted_calendar(calendar_id, calendar_data)


@firestore_fn.on_document_deleted(
    document="calendars/{calendarId}",
    timeout_sec=540,
    memory=options.MemoryOption.MB_512,
)
def on_calendar_deleted(event: firestore_fn.Event[firestore_fn.DocumentSnapshot]):
    """Handle calendar deletion events.

    Args:
        event: Firestore document deletion event
    """
    try:
        calendar_id = event.params["calendarId"]
        calendar_data = event.data.to_dict() if event.data else None

        result = handle_calendar_deleted(calendar_id, calendar_data)
        logger.info(
            f"Calendar {calendar_id} cleanup: {result['imagesDeleted']}/{result['imagesChecked']} "
            f"images deleted, {result['yearsDeleted']} years deleted"
        )

    except Exception as e:
        logger.error(f"Error processing deleted calendar: {e}")
