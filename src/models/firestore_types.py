"""Firestore document type definitions using Pydantic."""

from typing import Optional, List, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseDoc(BaseModel):
    """Base document type for all Firestore documents.

    Unknown fields are kept so that a read-modify-write never drops data
    written by other clients.
    """

    model_config = ConfigDict(extra="allow")

    lastModified: Optional[Any] = None


class ImageRef(BaseModel):
    """Image reference embedded in a trade."""

    model_config = ConfigDict(extra="allow")

    id: str
    calendarId: Optional[str] = None


class TradeDoc(BaseModel):
    """Trade record stored inside a year shard's trades array."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    # Firestore timestamp, ISO string or epoch millis; kept as stored
    date: Optional[Any] = None
    calendarId: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    images: List[ImageRef] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _drop_non_string_tags(cls, value):
        if not isinstance(value, list):
            return []
        return [tag for tag in value if isinstance(tag, str)]

    @field_validator("images", mode="before")
    @classmethod
    def _drop_invalid_images(cls, value):
        if not isinstance(value, list):
            return []
        return [
            image for image in value
            if isinstance(image, dict) and image.get("id")
        ]

    def image_ids(self) -> List[str]:
        return [image.id for image in self.images]


class YearDoc(BaseDoc):
    """Year shard document: calendars/{calendarId}/years/{year}."""

    year: Optional[int] = None
    trades: List[TradeDoc] = Field(default_factory=list)

    @field_validator("trades", mode="before")
    @classmethod
    def _drop_invalid_trades(cls, value):
        if not isinstance(value, list):
            return []
        return [trade for trade in value if isinstance(trade, dict)]


class ScoreSettings(BaseModel):
    """Score settings holding tag references."""

    model_config = ConfigDict(extra="allow")

    excludedTagsFromPatterns: Optional[List[str]] = None
    selectedTags: Optional[List[str]] = None


class CalendarDoc(BaseDoc):
    """Calendar document: calendars/{calendarId}."""

    userId: Optional[str] = None
    tags: Optional[List[str]] = None
    requiredTagGroups: Optional[List[str]] = None
    scoreSettings: Optional[ScoreSettings] = None
    duplicatedCalendar: bool = False
    sourceCalendarId: Optional[str] = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicatedCalendar is True and bool(self.sourceCalendarId)
