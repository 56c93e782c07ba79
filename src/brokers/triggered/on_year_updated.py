"""Trigger function for year shard updates."""

from typing import Optional
from firebase_functions import firestore_fn, options
from src.models.config_types import AppConfig
from src.models.firestore_types import YearDoc
from src.models.function_types import YearUpdateResponse
from src.services.calendar_service import CalendarService
from src.util.config import load_config
from src.util.logger import get_logger

logger = get_logger(__name__)


def _year_doc(data: Optional[dict]) -> Optional[YearDoc]:
    return YearDoc(**data) if data is not None else None


def handle_year_updated(
    calendar_id: str,
    year_id: str,
    before_data: Optional[dict],
    after_data: Optional[dict],
    db=None,
    config: Optional[AppConfig] = None,
) -> YearUpdateResponse:
    """Handle year shard update business logic.

    Args:
        calendar_id: ID of the calendar owning the shard
        year_id: Key of the updated shard
        before_data: Shard data before update
        after_data: Shard data after update
        db: Optional store, defaults to the Firestore-backed Db
        config: Optional configuration, loaded from the environment if omitted
    """
    logger.info(f"Processing updated year {year_id} of calendar {calendar_id}")

    service = CalendarService(config or load_config(), db)
    result = service.handle_year_updated(
        calendar_id,
        year_id,
        _year_doc(before_data),
        _year_doc(after_data),
    )

    logger.info(
        f"Processed year {year_id} of calendar {calendar_id}: "
        f"{result['imagesDeleted']} images deleted, {result['tradesMoved']} trades moved, "
        f"tags rebuilt: {result['tagsRebuilt']}"
    )
    return result


@firestore_fn.on_document_updated(
    document="calendars/{calendarId}/years/{yearId}",
    timeout_sec=540,
    memory=options.MemoryOption.MB_512,
)
def on_year_updated(event: firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot]]):
    """Handle year shard update events.

    Failures are logged and not re-raised so the event is not retried.

    Args:
        event: Firestore document update event
    """
    try:
        calendar_id = event.params["calendarId"]
        year_id = event.params["yearId"]
        change = event.data
        before_data = change.before.to_dict() if change and change.before else None
        after_data = change.after.to_dict() if change and change.after else None

        handle_year_updated(calendar_id, year_id, before_data, after_data)

    except Exception as e:
        logger.error(f"Error processing updated year document: {e}")
