"""Runtime configuration for the functions."""

from pydantic import BaseModel, Field, field_validator
from src.models.util_types import Env

# Firestore rejects write batches with more operations than this.
FIRESTORE_BATCH_LIMIT = 500


class AppConfig(BaseModel):
    """Configuration passed explicitly into every service call."""

    env: Env = Env.PRODUCTION
    calendars_collection: str = "calendars"
    years_subcollection: str = "years"
    trade_images_path: str = "users/{userId}/trade-images/{imageId}"
    max_batch_size: int = Field(default=FIRESTORE_BATCH_LIMIT, ge=1)
    max_workers: int = Field(default=8, ge=1)

    @field_validator("max_batch_size")
    @classmethod
    def _cap_batch_size(cls, value: int) -> int:
        return min(value, FIRESTORE_BATCH_LIMIT)

    def calendar_path(self, calendar_id: str) -> str:
        return f"{self.calendars_collection}/{calendar_id}"

    def years_path(self, calendar_id: str) -> str:
        return f"{self.calendar_path(calendar_id)}/{self.years_subcollection}"

    def year_path(self, calendar_id: str, year) -> str:
        return f"{self.years_path(calendar_id)}/{year}"

    def image_blob_key(self, user_id: str, image_id: str) -> str:
        return self.trade_images_path.format(userId=user_id, imageId=image_id)
