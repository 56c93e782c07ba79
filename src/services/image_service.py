"""Image service: decides which trade images are safe to delete.

A duplicated calendar shares image blobs with its source calendar and with
its sibling duplicates, so a blob may only go once no related calendar
references it any more. Lookups are cached for the lifetime of one service
instance, which should not outlive a single invocation.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional
from src.apis.Db import Db
from src.documents.calendars.Calendar import Calendar
from src.exceptions import NotFoundError
from src.models.config_types import AppConfig
from src.models.firestore_types import CalendarDoc, YearDoc
from src.models.function_types import ImageCleanupResponse
from src.util.logger import get_logger
from src.util.trades import image_exists_in_shards, removed_image_ids

logger = get_logger(__name__)


class ImageService:
    """Service for image reference checks and blob cleanup."""

    def __init__(self, config: AppConfig, db=None):
        self.config = config
        self.db = db if db is not None else Db.get_instance()
        self._years_cache: Dict[str, List[YearDoc]] = {}
        self._duplicates_cache: Dict[str, List[str]] = {}

    def get_year_shards(self, calendar_id: str) -> List[YearDoc]:
        if calendar_id not in self._years_cache:
            stored = self.db.list_docs(self.config.years_path(calendar_id))
            self._years_cache[calendar_id] = [YearDoc(**item.data) for item in stored]
        return self._years_cache[calendar_id]

    def image_exists_in_calendar(self, image_id: str, calendar_id: str) -> bool:
        return image_exists_in_shards(image_id, self.get_year_shards(calendar_id))

    def find_duplicated_calendars(self, source_calendar_id: str, user_id: Optional[str]) -> List[str]:
        """Ids of the owner's calendars duplicated from source_calendar_id."""
        if source_calendar_id not in self._duplicates_cache:
            filters = [
                ("duplicatedCalendar", "==", True),
                ("sourceCalendarId", "==", source_calendar_id),
            ]
            if user_id:
                filters.insert(0, ("userId", "==", user_id))
            stored = self.db.query_docs(self.config.calendars_collection, filters)
            self._duplicates_cache[source_calendar_id] = [item.id for item in stored]
        return self._duplicates_cache[source_calendar_id]

    def can_delete_image(self, image_id: str, calendar_id: str, calendar_doc: Optional[CalendarDoc]) -> bool:
        """Check whether an image blob can be removed for a calendar.

        Args:
            image_id: Image to check
            calendar_id: Calendar the image was removed from
            calendar_doc: That calendar's data

        Returns:
            False if any related calendar still references the image, or if
            the check itself fails
        """
        if calendar_doc is None:
            logger.error(f"Calendar data for {calendar_id} not found")
            return False

        try:
            if calendar_doc.is_duplicate:
                source_id = calendar_doc.sourceCalendarId
                logger.info(
                    f"Checking deletion from duplicated calendar {calendar_id}, source: {source_id}"
                )

                if self.image_exists_in_calendar(image_id, source_id):
                    logger.info(f"Image {image_id} exists in source calendar {source_id}, cannot delete")
                    return False

                for sibling_id in self.find_duplicated_calendars(source_id, calendar_doc.userId):
                    if sibling_id == calendar_id:
                        continue
                    if self.image_exists_in_calendar(image_id, sibling_id):
                        logger.info(
                            f"Image {image_id} exists in other duplicated calendar {sibling_id}, cannot delete"
                        )
                        return False

                return True

            for duplicate_id in self.find_duplicated_calendars(calendar_id, calendar_doc.userId):
                if self.image_exists_in_calendar(image_id, duplicate_id):
                    logger.info(
                        f"Image {image_id} exists in duplicated calendar {duplicate_id}, cannot delete"
                    )
                    return False

            return True

        except Exception as e:
            logger.error(f"Error checking if image {image_id} can be deleted: {e}")
            return False

    def filter_deletable(self, image_ids: Iterable[str], calendar_id: str, calendar_doc: CalendarDoc) -> List[str]:
        deletable = []
        for image_id in image_ids:
            if self.can_delete_image(image_id, calendar_id, calendar_doc):
                logger.info(f"Image {image_id} can be safely deleted")
                deletable.append(image_id)
            else:
                logger.info(f"Image {image_id} cannot be deleted - exists in related calendars")
        return deletable

    def delete_images(self, user_id: str, image_ids: List[str]) -> int:
        """Delete image blobs concurrently.

        A failed delete is logged and does not stop the others.

        Returns:
            Number of blobs deleted
        """
        if not image_ids:
            return 0

        deleted = 0
        with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(image_ids))) as executor:
            future_to_image = {
                executor.submit(self.db.delete_blob, self.config.image_blob_key(user_id, image_id)): image_id
                for image_id in image_ids
            }

            for future in as_completed(future_to_image):
                image_id = future_to_image[future]
                try:
                    future.result()
                    deleted += 1
                    logger.info(f"Successfully deleted image: {image_id}")
                except Exception as e:
                    logger.error(f"Error deleting image {image_id}: {e}")

        return deleted

    def cleanup_removed_images(self, calendar_id: str, before: Optional[YearDoc], after: Optional[YearDoc]) -> ImageCleanupResponse:
        """Delete blobs of images dropped from a year shard by an update."""
        if before is None or after is None:
            logger.info("No data in year document")
            return ImageCleanupResponse(candidates=0, imagesDeleted=0)

        candidates = removed_image_ids(before, after)
        if not candidates:
            logger.info("No images to delete")
            return ImageCleanupResponse(candidates=0, imagesDeleted=0)

        try:
            calendar = Calendar(calendar_id, self.config, db=self.db)
        except NotFoundError:
            logger.error(f"Calendar {calendar_id} not found, cannot clean up images")
            return ImageCleanupResponse(candidates=len(candidates), imagesDeleted=0)

        if not calendar.owner_id:
            logger.error(f"Calendar {calendar_id} does not have a userId field")
            return ImageCleanupResponse(candidates=len(candidates), imagesDeleted=0)

        remaining = []
        for image_id in candidates:
            if self.image_exists_in_calendar(image_id, calendar_id):
                logger.info(f"Image {image_id} still referenced in another year of {calendar_id}")
            else:
                remaining.append(image_id)

        deletable = self.filter_deletable(remaining, calendar_id, calendar.doc)
        if not deletable:
            logger.info("No images to delete after checking related calendars")
            return ImageCleanupResponse(candidates=len(candidates), imagesDeleted=0)

        deleted = self.delete_images(calendar.owner_id, deletable)
        logger.info(f"Successfully deleted {deleted} images")
        return ImageCleanupResponse(candidates=len(candidates), imagesDeleted=deleted)
