"""Function request and response type definitions."""

from typing import Optional, TypedDict


class UpdateTagRequest(TypedDict):
    """Request structure for update_tag_callable and the update_tag endpoint."""
    calendarId: str
    oldTag: str
    newTag: str


class UpdateTagResponse(TypedDict):
    """Response structure for update_tag_callable and the update_tag endpoint."""
    success: bool
    tradesUpdated: int


class ImageCleanupResponse(TypedDict):
    """Result of cleaning up images removed from a year shard."""
    candidates: int
    imagesDeleted: int


class YearUpdateResponse(TypedDict):
    """Result of processing a year shard update."""
    imagesDeleted: int
    tradesMoved: int
    tagsRebuilt: bool


class CalendarCleanupResponse(TypedDict):
    """Result of cleaning up a deleted calendar."""
    imagesChecked: int
    imagesDeleted: int
    yearsDeleted: int
    message: Optional[str]
