"""Models package initialization."""

from .firestore_types import BaseDoc, CalendarDoc, ImageRef, ScoreSettings, TradeDoc, YearDoc
from .function_types import (
    UpdateTagRequest,
    UpdateTagResponse,
    ImageCleanupResponse,
    YearUpdateResponse,
    CalendarCleanupResponse,
)
from .config_types import AppConfig
from .util_types import Env, StoredDoc, StagedWrite, TagRewrite, YearMove, BatchReport, ErrorResponse

__all__ = [
    # Firestore types
    "BaseDoc",
    "CalendarDoc",
    "ImageRef",
    "ScoreSettings",
    "TradeDoc",
    "YearDoc",
    # Function types
    "UpdateTagRequest",
    "UpdateTagResponse",
    "ImageCleanupResponse",
    "YearUpdateResponse",
    "CalendarCleanupResponse",
    # Configuration
    "AppConfig",
    # Utility types
    "Env",
    "StoredDoc",
    "StagedWrite",
    "TagRewrite",
    "YearMove",
    "BatchReport",
    "ErrorResponse",
]
