"""Calendar service for cascades that span a whole calendar."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional
from src.apis.Db import Db
from src.documents.calendars.Calendar import Calendar
from src.models.config_types import AppConfig
from src.models.firestore_types import YearDoc
from src.models.function_types import CalendarCleanupResponse, YearUpdateResponse
from src.services.image_service import ImageService
from src.services.tag_service import TagService
from src.services.trade_year_service import TradeYearService
from src.util.logger import get_logger
from src.util.tags import have_tags_changed
from src.util.trades import collect_image_ids

logger = get_logger(__name__)


class CalendarService:
    """Service orchestrating year shard updates and calendar deletion."""

    def __init__(self, config: AppConfig, db=None):
        self.config = config
        self.db = db if db is not None else Db.get_instance()

    def handle_year_updated(
        self,
        calendar_id: str,
        year_id: str,
        before: Optional[YearDoc],
        after: Optional[YearDoc],
    ) -> YearUpdateResponse:
        """React to a write on calendars/{calendarId}/years/{yearId}.

        Removed images are cleaned up first, then trades whose date changed
        year are moved, then the calendar tag list is rebuilt if the set of
        tags in the shard changed.
        """
        images = ImageService(self.config, self.db).cleanup_removed_images(calendar_id, before, after)
        moved = TradeYearService(self.config, self.db).handle_trade_year_changes(
            calendar_id, year_id, before, after
        )

        rebuilt = False
        if have_tags_changed(before, after):
            logger.info(f"Tags changed in calendar {calendar_id}, updating calendar tags")
            rebuilt = TagService(self.config, self.db).refresh_calendar_tags(calendar_id)
        else:
            logger.info(f"No tag changes detected in calendar {calendar_id}, skipping calendar tags update")

        return YearUpdateResponse(
            imagesDeleted=images["imagesDeleted"],
            tradesMoved=moved,
            tagsRebuilt=rebuilt,
        )

    def cleanup_deleted_calendar(self, calendar_id: str, calendar_data: Optional[dict]) -> CalendarCleanupResponse:
        """Delete the images and year shards of a deleted calendar.

        Args:
            calendar_id: Id of the deleted calendar
            calendar_data: Calendar data from the deletion snapshot

        Returns:
            CalendarCleanupResponse with counts of what was removed
        """
        if not calendar_data:
            logger.info("No data in deleted calendar document")
            return CalendarCleanupResponse(
                imagesChecked=0, imagesDeleted=0, yearsDeleted=0, message="No calendar data"
            )

        calendar = Calendar(calendar_id, self.config, doc=calendar_data, db=self.db)
        user_id = calendar.owner_id
        if not user_id:
            logger.error("Calendar document does not have a userId field")
            return CalendarCleanupResponse(
                imagesChecked=0, imagesDeleted=0, yearsDeleted=0, message="Calendar has no owner"
            )

        logger.info(f"Processing deletion of calendar {calendar_id} for user {user_id}")

        shards = calendar.year_shards()
        image_ids = sorted(collect_image_ids(shard.doc for shard in shards))
        logger.info(f"Found {len(image_ids)} images to check for deletion")

        images = ImageService(self.config, self.db)
        deletable = images.filter_deletable(image_ids, calendar_id, calendar.doc)
        logger.info(f"Will delete {len(deletable)} images")
        images_deleted = images.delete_images(user_id, deletable)

        years_deleted = self.delete_year_shards([shard.path for shard in shards])

        logger.info(f"Successfully cleaned up calendar {calendar_id}")
        return CalendarCleanupResponse(
            imagesChecked=len(image_ids),
            imagesDeleted=images_deleted,
            yearsDeleted=years_deleted,
            message=None,
        )

    def delete_year_shards(self, paths) -> int:
        if not paths:
            return 0

        deleted = 0
        with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(paths))) as executor:
            future_to_path = {executor.submit(self.db.delete_doc, path): path for path in paths}
            for future in as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    future.result()
                    deleted += 1
                    logger.info(f"Deleted year document: {path}")
                except Exception as e:
                    logger.error(f"Error deleting year document {path}: {e}")

        return deleted
