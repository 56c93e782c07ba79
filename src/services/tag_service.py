"""Tag service: rename/delete cascades and calendar tag rebuilds."""

from typing import Any, Dict, List, Optional
from google.api_core.exceptions import GoogleAPICallError
from src.apis.Db import Db
from src.documents.calendars.Calendar import Calendar
from src.documents.calendars.YearShard import YearShard
from src.exceptions import NotFoundError, PermissionError, TransientStoreError, ValidationError
from src.models.config_types import AppConfig
from src.models.firestore_types import CalendarDoc
from src.models.function_types import UpdateTagResponse
from src.models.util_types import StagedWrite
from src.util.batching import commit_in_batches
from src.util.logger import get_logger
from src.util.tags import (
    rebuild_calendar_tags,
    rename_tag_in_list,
    rename_tag_in_trade,
    rewrite_required_groups,
)

logger = get_logger(__name__)


def validate_rename_args(calendar_id: Any, old_tag: Any, new_tag: Any):
    """Validate the arguments of a tag rename.

    ``new_tag`` may be an empty string (deletion) but must be present.

    Raises:
        ValidationError: If a parameter is missing or not a string
    """
    if not calendar_id or not isinstance(calendar_id, str):
        raise ValidationError("Missing required parameter: calendarId", field="calendarId")
    if not old_tag or not isinstance(old_tag, str):
        raise ValidationError("Missing required parameter: oldTag", field="oldTag")
    if new_tag is None:
        raise ValidationError("Missing required parameter: newTag", field="newTag")
    if not isinstance(new_tag, str):
        raise ValidationError("newTag must be a string", field="newTag")


class TagService:
    """Service keeping calendar tags and trade tags consistent."""

    def __init__(self, config: AppConfig, db=None):
        """Initialize TagService.

        Args:
            config: Runtime configuration
            db: Optional store, defaults to the Firestore-backed Db
        """
        self.config = config
        self.db = db if db is not None else Db.get_instance()

    def rename_tag(self, user_id: str, calendar_id: str, old_tag: str, new_tag: str) -> UpdateTagResponse:
        """Rename or delete a tag across a calendar and all of its trades.

        Args:
            user_id: Authenticated caller
            calendar_id: Calendar to update
            old_tag: Tag to replace
            new_tag: Replacement tag, or empty string to delete

        Returns:
            UpdateTagResponse with the number of trades updated

        Raises:
            ValidationError: Missing parameters
            NotFoundError: Calendar does not exist
            PermissionError: Caller does not own the calendar
            TransientStoreError: The calendar document could not be written
        """
        validate_rename_args(calendar_id, old_tag, new_tag)

        if old_tag == new_tag.strip():
            logger.info(f"Tag {old_tag!r} unchanged for calendar {calendar_id}, nothing to do")
            return UpdateTagResponse(success=True, tradesUpdated=0)

        calendar = Calendar(calendar_id, self.config, db=self.db)
        if not calendar.validate_permissions(user_id):
            logger.warning(f"User {user_id} denied tag update on calendar {calendar_id}")
            raise PermissionError("Unauthorized access to calendar", resource=calendar.path)

        try:
            calendar.update_doc(self.calendar_tag_updates(calendar.doc, old_tag, new_tag))
        except GoogleAPICallError as e:
            raise TransientStoreError("update", calendar.path, e)

        shards = calendar.year_shards()
        if not shards:
            return UpdateTagResponse(success=True, tradesUpdated=0)

        logger.info(f"Updating tag {old_tag!r} to {new_tag!r} in calendar {calendar_id}")
        writes = self.stage_shard_renames(shards, old_tag, new_tag)
        report = commit_in_batches(
            self.db,
            writes,
            max_batch_size=min(self.config.max_batch_size, self.db.max_batch_size),
            max_workers=self.config.max_workers,
        )

        if report.failed:
            logger.error(
                f"{len(report.failed)} year shards of calendar {calendar_id} were not updated"
            )

        return UpdateTagResponse(success=True, tradesUpdated=report.trades_updated)

    @staticmethod
    def calendar_tag_updates(doc: CalendarDoc, old_tag: str, new_tag: str) -> Dict[str, Any]:
        """Calendar-level fields affected by a rename.

        Only fields already present on the calendar are included.
        """
        updates: Dict[str, Any] = {}

        if doc.requiredTagGroups is not None:
            updates["requiredTagGroups"] = rewrite_required_groups(
                doc.requiredTagGroups, old_tag, new_tag
            )

        if doc.tags is not None:
            updates["tags"] = sorted(rename_tag_in_list(doc.tags, old_tag, new_tag))

        settings = doc.scoreSettings
        if settings is not None and settings.excludedTagsFromPatterns is not None:
            updates["scoreSettings.excludedTagsFromPatterns"] = rename_tag_in_list(
                settings.excludedTagsFromPatterns, old_tag, new_tag
            )
        if settings is not None and settings.selectedTags is not None:
            updates["scoreSettings.selectedTags"] = rename_tag_in_list(
                settings.selectedTags, old_tag, new_tag
            )

        return updates

    def stage_shard_renames(self, shards: List[YearShard], old_tag: str, new_tag: str) -> List[StagedWrite]:
        """Rewrite trades in memory and queue one update per changed shard."""
        writes = []
        for shard in shards:
            trades_updated = 0
            for trade in shard.trades:
                if rename_tag_in_trade(trade, old_tag, new_tag).updated:
                    trades_updated += 1

            if trades_updated:
                writes.append(StagedWrite(
                    path=shard.path,
                    data=shard.trades_update(),
                    trades_updated=trades_updated,
                ))

        return writes

    def refresh_calendar_tags(self, calendar_id: str) -> bool:
        """Rebuild a calendar's tag list from every trade in every year shard.

        Returns:
            True if the stored tag list was rewritten
        """
        try:
            calendar = Calendar(calendar_id, self.config, db=self.db)
        except NotFoundError:
            logger.info(f"Calendar {calendar_id} not found, skipping tag update")
            return False

        tags = rebuild_calendar_tags(shard.doc for shard in calendar.year_shards())
        current: Optional[List[str]] = calendar.doc.tags
        if current is not None and list(current) == tags:
            logger.info(f"Calendar {calendar_id} tags already up to date")
            return False

        calendar.update_tags(tags)
        return True
