"""Tag extraction, rename and rebuild helpers.

Everything here works on in-memory documents and never touches the store.
Tags are plain strings, optionally of the form ``Group:Value``; the group is
the text before the first colon.
"""

from typing import Iterable, List, Optional, Set
from src.models.firestore_types import TradeDoc, YearDoc
from src.models.util_types import TagRewrite


def tag_group(tag: Optional[str]) -> Optional[str]:
    """Return the group part of a ``Group:Value`` tag, or None."""
    if not tag or ":" not in tag:
        return None
    return tag.split(":", 1)[0]


def _dedupe(values: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    result = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def extract_tags_from_trades(trades: Iterable[TradeDoc]) -> Set[str]:
    """Collect the distinct non-empty trimmed tags of the given trades."""
    tag_set: Set[str] = set()
    for trade in trades:
        for tag in trade.tags:
            stripped = tag.strip()
            if stripped:
                tag_set.add(stripped)
    return tag_set


def extract_tag_set(shard: Optional[YearDoc]) -> Set[str]:
    """Collect the distinct tags used by every trade in a year shard."""
    if shard is None:
        return set()
    return extract_tags_from_trades(shard.trades)


def have_tags_changed(before: Optional[YearDoc], after: Optional[YearDoc]) -> bool:
    """Check whether the set of tags used in a year shard changed.

    Args:
        before: Shard snapshot before the write
        after: Shard snapshot after the write

    Returns:
        True if the two tag sets differ
    """
    before_tags = extract_tag_set(before)
    after_tags = extract_tag_set(after)

    if len(before_tags) != len(after_tags):
        return True

    return any(tag not in after_tags for tag in before_tags)


def rename_tag_in_list(tags: Optional[List[str]], old_tag: str, new_tag: str) -> List[str]:
    """Rename a tag inside a flat list of tags.

    Every exact match of ``old_tag`` becomes ``new_tag`` (trimmed). An empty
    ``new_tag`` removes the entry instead. Duplicates produced by the rename
    are dropped, keeping the first occurrence.

    Args:
        tags: Calendar tags or a score-settings tag list
        old_tag: Tag to replace
        new_tag: Replacement, or empty string to delete

    Returns:
        New list; the input is not modified
    """
    tags = list(tags or [])
    replacement = (new_tag or "").strip()
    if old_tag == replacement:
        return tags

    renamed = []
    for tag in tags:
        if tag == old_tag:
            if replacement:
                renamed.append(replacement)
        else:
            renamed.append(tag)

    return _dedupe(renamed)


def rename_tag_in_trade(trade: TradeDoc, old_tag: str, new_tag: str) -> TagRewrite:
    """Rename or delete a tag on a single trade, in place.

    Args:
        trade: Trade whose tags are rewritten
        old_tag: Tag to replace
        new_tag: Replacement, or empty string to delete

    Returns:
        TagRewrite with whether the trade changed and how many slots were touched
    """
    replacement = (new_tag or "").strip()
    if old_tag == replacement or old_tag not in trade.tags:
        return TagRewrite()

    touched = 0
    rewritten = []
    for tag in trade.tags:
        if tag == old_tag:
            touched += 1
            if replacement:
                rewritten.append(replacement)
        else:
            rewritten.append(tag)

    trade.tags = _dedupe(rewritten)
    return TagRewrite(updated=True, updated_count=touched)


def rewrite_required_groups(groups: Optional[List[str]], old_tag: str, new_tag: str) -> List[str]:
    """Carry a group rename over to the required tag groups.

    Only a rename whose old and new tags both carry a group, with different
    group names, changes anything. Deleting a tag never removes its group.
    """
    groups = list(groups or [])
    old_group = tag_group(old_tag)
    new_group = tag_group((new_tag or "").strip())

    if not old_group or not new_group or old_group == new_group:
        return groups

    return _dedupe(new_group if group == old_group else group for group in groups)


def rebuild_calendar_tags(shards: Iterable[YearDoc]) -> List[str]:
    """Recompute a calendar's tag list from all of its year shards.

    Returns:
        Sorted list of unique, trimmed, non-empty tags
    """
    tag_set: Set[str] = set()
    for shard in shards:
        tag_set |= extract_tag_set(shard)
    return sorted(tag_set)
