"""Utility type definitions."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pydantic import BaseModel


class Env(str, Enum):
    """Runtime environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


@dataclass
class StoredDoc:
    """A document read from the store: its id, full path and raw data."""
    id: str
    path: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StagedWrite:
    """A pending update queued for a write batch."""
    path: str
    data: Dict[str, Any]
    trades_updated: int = 0


@dataclass
class TagRewrite:
    """Outcome of rewriting one trade's tags."""
    updated: bool = False
    updated_count: int = 0


@dataclass
class YearMove:
    """A trade whose date now belongs to a different year shard."""
    trade_id: str
    from_year: Optional[int]
    to_year: int


class ErrorResponse(BaseModel):
    """Standard error response structure."""
    error: bool = True
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass
class BatchReport:
    """Outcome of flushing staged writes in batches."""
    batches: int = 0
    committed: List[StagedWrite] = field(default_factory=list)
    failed: List[StagedWrite] = field(default_factory=list)

    @property
    def trades_updated(self) -> int:
        return sum(write.trades_updated for write in self.committed)
