"""Moves trades between year shards when their date changes year."""

from typing import Optional
from src.apis.Db import Db
from src.models.config_types import AppConfig
from src.models.firestore_types import YearDoc
from src.models.util_types import YearMove
from src.util.logger import get_logger
from src.util.trades import find_year_moves

logger = get_logger(__name__)


class TradeYearService:
    """Keeps every trade in the shard matching the year of its date."""

    def __init__(self, config: AppConfig, db=None):
        self.config = config
        self.db = db if db is not None else Db.get_instance()

    def handle_trade_year_changes(
        self,
        calendar_id: str,
        year_id: str,
        before: Optional[YearDoc],
        after: Optional[YearDoc],
    ) -> int:
        """Move trades whose year changed out of the updated shard.

        Args:
            calendar_id: Calendar owning the shard
            year_id: Key of the shard that was updated
            before: Shard snapshot before the write
            after: Shard snapshot after the write

        Returns:
            Number of trades moved
        """
        if before is None or after is None:
            logger.info("No data in year document")
            return 0

        moves = find_year_moves(before, after)
        if not moves:
            logger.info("No trades with date changes that affect year")
            return 0

        logger.info(f"Found {len(moves)} trades with year changes in calendar {calendar_id}")

        moved = 0
        for move in moves:
            if str(move.to_year) == str(year_id):
                logger.info(
                    f"Trade {move.trade_id} new year {move.to_year} is the same as current year {year_id}, skipping"
                )
                continue

            try:
                if self.move_trade(calendar_id, year_id, move):
                    moved += 1
            except Exception as e:
                logger.error(f"Failed to move trade {move.trade_id} to year {move.to_year}: {e}")

        return moved

    def move_trade(self, calendar_id: str, year_id: str, move: YearMove) -> bool:
        """Move one trade from its current shard to the target year shard.

        Runs in a single transaction so concurrent writers to either shard
        are serialized by the store.
        """
        current_path = self.config.year_path(calendar_id, year_id)
        target_path = self.config.year_path(calendar_id, move.to_year)
        now = self.db.server_timestamp

        def _move(transaction):
            current = transaction.get(current_path)
            target = transaction.get(target_path)

            if current is None:
                logger.error(f"Current year document {year_id} not found in transaction")
                return False

            def _is_moving(trade):
                return isinstance(trade, dict) and trade.get("id") == move.trade_id

            current_trades = current.get("trades") or []
            moving = [trade for trade in current_trades if _is_moving(trade)]
            if not moving:
                logger.info(f"Trade {move.trade_id} already left year {year_id}")
                return False

            remaining = [trade for trade in current_trades if not _is_moving(trade)]
            trade_data = moving[-1]

            if target is not None:
                target_trades = [
                    trade for trade in (target.get("trades") or [])
                    if not _is_moving(trade)
                ]
                target_trades.append(trade_data)
                transaction.update(target_path, {
                    "trades": target_trades,
                    "lastModified": now,
                })
            else:
                transaction.set(target_path, {
                    "year": move.to_year,
                    "trades": [trade_data],
                    "lastModified": now,
                })

            if remaining:
                transaction.update(current_path, {
                    "trades": remaining,
                    "lastModified": now,
                })
            else:
                transaction.delete(current_path)

            logger.info(
                f"Removed trade {move.trade_id} from year {year_id} "
                f"({len(current_trades)} -> {len(remaining)} trades)"
            )
            return True

        moved = bool(self.db.run_transaction(_move))
        if moved:
            logger.info(f"Successfully moved trade {move.trade_id} to year {move.to_year}")
        return moved
