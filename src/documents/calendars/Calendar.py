"""Calendar document class."""

from typing import List, Optional
from src.documents.DocumentBase import DocumentBase
from src.documents.calendars.YearShard import YearShard
from src.models.config_types import AppConfig
from src.models.firestore_types import CalendarDoc
from src.util.logger import get_logger

logger = get_logger(__name__)


class Calendar(DocumentBase[CalendarDoc]):
    """Calendar document: owner, aggregate tags and tag settings."""

    pydantic_model = CalendarDoc
    resource_type = "Calendar"

    def __init__(self, id: str, config: AppConfig, doc: Optional[dict] = None, db=None):
        """Initialize Calendar document.

        Args:
            id: Calendar ID
            config: Runtime configuration holding collection names
            doc: Optional document data dictionary
            db: Optional store, defaults to the Firestore-backed Db
        """
        self.config = config
        self.collection_path = config.calendars_collection
        super().__init__(id, doc, db)

    @property
    def doc(self) -> CalendarDoc:
        """Get the typed document."""
        return super().doc

    @property
    def owner_id(self) -> Optional[str]:
        return self.doc.userId

    def validate_permissions(self, user_id: str) -> bool:
        """Check if user owns this calendar.

        Args:
            user_id: ID of the user to check

        Returns:
            True if user owns the calendar, False otherwise
        """
        return bool(user_id) and self.doc.userId == user_id

    def year_shards(self) -> List[YearShard]:
        """Fetch every year shard of this calendar (unordered)."""
        stored = self.db.list_docs(self.config.years_path(self.id))
        shards = [
            YearShard(self.id, item.id, self.config, doc=item.data, db=self.db)
            for item in stored
        ]
        logger.debug(f"Calendar {self.id} has {len(shards)} year shards")
        return shards

    def update_tags(self, tags: List[str]):
        self.update_doc({"tags": tags})
        logger.info(f"Updated calendar {self.id} with {len(tags)} unique tags")
