"""Helpers for trades stored in year shards."""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set
from src.models.firestore_types import TradeDoc, YearDoc
from src.models.util_types import YearMove


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        # JavaScript clients store epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        return None

    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return _to_datetime(to_datetime())

    return None


def trade_year(trade: TradeDoc) -> Optional[int]:
    """Year (UTC) the trade belongs to, or None when the date is unusable."""
    parsed = _to_datetime(trade.date)
    return parsed.astimezone(timezone.utc).year if parsed else None


def dump_trade(trade: TradeDoc) -> Dict[str, Any]:
    """Serialize a trade back to its stored shape."""
    return trade.model_dump(exclude_unset=True)


def dump_trades(trades: Iterable[TradeDoc]) -> List[Dict[str, Any]]:
    return [dump_trade(trade) for trade in trades]


def trades_by_id(trades: Iterable[TradeDoc]) -> Dict[str, TradeDoc]:
    return {trade.id: trade for trade in trades if trade.id}


def find_year_moves(before: YearDoc, after: YearDoc) -> List[YearMove]:
    """Find trades whose date moved them into another year.

    Trades are matched between the two snapshots by id. Only trades present
    in both snapshots with a changed, parseable year are returned.
    """
    before_map = trades_by_id(before.trades)
    after_map = trades_by_id(after.trades)

    moves = []
    for trade_id, before_trade in before_map.items():
        after_trade = after_map.get(trade_id)
        if after_trade is None:
            continue

        before_year = trade_year(before_trade)
        after_year = trade_year(after_trade)
        if after_year is None or before_year == after_year:
            continue

        moves.append(YearMove(
            trade_id=trade_id,
            from_year=before_year,
            to_year=after_year,
        ))

    return moves


def collect_image_ids(shards: Iterable[YearDoc]) -> Set[str]:
    """Every image id referenced by any trade of the given shards."""
    image_ids: Set[str] = set()
    for shard in shards:
        for trade in shard.trades:
            image_ids.update(trade.image_ids())
    return image_ids


def image_exists_in_shards(image_id: str, shards: Iterable[YearDoc]) -> bool:
    for shard in shards:
        for trade in shard.trades:
            if image_id in trade.image_ids():
                return True
    return False


def removed_image_ids(before: YearDoc, after: YearDoc) -> List[str]:
    """Images referenced before the write and no longer referenced after it.

    An image copied from another calendar (its calendarId differs from the
    trade's) is left alone.
    """
    remaining = collect_image_ids([after])

    removed = []
    for trade in before.trades:
        for image in trade.images:
            if image.id in remaining or image.id in removed:
                continue
            if not image.calendarId or not trade.calendarId or image.calendarId == trade.calendarId:
                removed.append(image.id)

    return removed
