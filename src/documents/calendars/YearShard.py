"""Year shard document class."""

from typing import Any, Dict, List, Optional
from src.documents.DocumentBase import DocumentBase
from src.models.config_types import AppConfig
from src.models.firestore_types import TradeDoc, YearDoc
from src.util.trades import dump_trades


class YearShard(DocumentBase[YearDoc]):
    """Per-year shard holding a calendar's trades as one array."""

    pydantic_model = YearDoc
    resource_type = "Year"

    def __init__(self, calendar_id: str, year_id: str, config: AppConfig, doc: Optional[dict] = None, db=None):
        self.calendar_id = calendar_id
        self.config = config
        self.collection_path = config.years_path(calendar_id)
        super().__init__(year_id, doc, db)

    @property
    def doc(self) -> YearDoc:
        return super().doc

    @property
    def trades(self) -> List[TradeDoc]:
        return self.doc.trades

    def trades_update(self) -> Dict[str, Any]:
        """Write payload replacing the whole trades array."""
        return {
            "trades": dump_trades(self.trades),
            "lastModified": self.db.server_timestamp,
        }
