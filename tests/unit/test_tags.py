"""Unit tests for tag extraction, rename and rebuild helpers."""

import itertools
import pytest
from src.models.firestore_types import TradeDoc, YearDoc
from src.util.tags import (
    have_tags_changed,
    rebuild_calendar_tags,
    rename_tag_in_list,
    rename_tag_in_trade,
    rewrite_required_groups,
    tag_group,
)


def _shard(*tag_lists):
    return YearDoc(trades=[{"id": f"t{i}", "tags": tags} for i, tags in enumerate(tag_lists)])


@pytest.mark.unit
class TestTagGroup:

    @pytest.mark.parametrize("tag,expected", [
        ("Setup:Breakout", "Setup"),
        ("Setup:Breakout:Retest", "Setup"),
        ("Risk", None),
        ("", None),
        (None, None),
    ])
    def test_tag_group(self, tag, expected):
        assert tag_group(tag) == expected


@pytest.mark.unit
class TestRenameTagInList:

    def test_renames_exact_match_only(self):
        assert rename_tag_in_list(["Risk", "Risky", "A"], "Risk", "Size") == ["Size", "Risky", "A"]

    def test_empty_new_tag_removes_entry(self):
        """Deleting a tag removes it instead of leaving an empty string."""
        result = rename_tag_in_list(["A", "B", "C"], "B", "")
        assert result == ["A", "C"]
        assert "" not in result

    def test_rename_onto_existing_tag_collapses_duplicates(self):
        assert rename_tag_in_list(["A", "B"], "A", "B") == ["B"]

    def test_new_tag_is_trimmed(self):
        assert rename_tag_in_list(["A"], "A", "  C  ") == ["C"]

    def test_same_tag_is_a_no_op(self):
        tags = ["A", "A", "B"]
        assert rename_tag_in_list(tags, "A", "A") == tags

    def test_padded_same_tag_is_a_no_op(self):
        tags = ["A", "A", "B"]
        assert rename_tag_in_list(tags, "A", " A ") == tags

    def test_missing_list(self):
        assert rename_tag_in_list(None, "A", "B") == []

    def test_input_is_not_modified(self):
        tags = ["A", "B"]
        rename_tag_in_list(tags, "A", "C")
        assert tags == ["A", "B"]


@pytest.mark.unit
class TestRenameTagInTrade:

    def test_rename_updates_trade(self):
        trade = TradeDoc(id="t1", tags=["Setup:Breakout", "Risk"])

        result = rename_tag_in_trade(trade, "Setup:Breakout", "Setup:Retest")

        assert result.updated is True
        assert result.updated_count == 1
        assert trade.tags == ["Setup:Retest", "Risk"]

    def test_trade_without_tag_is_untouched(self):
        trade = TradeDoc(id="t1", tags=["Risk"])

        result = rename_tag_in_trade(trade, "Setup:Breakout", "Setup:Retest")

        assert result.updated is False
        assert trade.tags == ["Risk"]

    def test_duplicate_occurrences_all_rewritten(self):
        trade = TradeDoc(id="t1", tags=["A", "B", "A"])

        result = rename_tag_in_trade(trade, "A", "C")

        assert result.updated_count == 2
        assert trade.tags == ["C", "B"]

    def test_delete_tag(self):
        trade = TradeDoc(id="t1", tags=["A", "B"])

        rename_tag_in_trade(trade, "A", "")

        assert trade.tags == ["B"]

    def test_second_application_changes_nothing(self):
        trade = TradeDoc(id="t1", tags=["A", "B"])

        rename_tag_in_trade(trade, "A", "C")
        again = rename_tag_in_trade(trade, "A", "C")

        assert again.updated is False
        assert trade.tags == ["C", "B"]

    def test_padded_same_tag_leaves_trade_unchanged(self):
        trade = TradeDoc(id="t1", tags=["Risk", "B", "Risk"])

        result = rename_tag_in_trade(trade, "Risk", " Risk")

        assert result.updated is False
        assert result.updated_count == 0
        assert trade.tags == ["Risk", "B", "Risk"]

    def test_unknown_fields_survive(self):
        trade = TradeDoc(id="t1", tags=["A"], pnl=12.5, notes="kept")

        rename_tag_in_trade(trade, "A", "B")

        dumped = trade.model_dump(exclude_unset=True)
        assert dumped["pnl"] == 12.5
        assert dumped["notes"] == "kept"
        assert dumped["tags"] == ["B"]


@pytest.mark.unit
class TestRewriteRequiredGroups:

    def test_group_rename_propagates(self):
        groups = rewrite_required_groups(["Setup", "Mistake"], "Setup:Breakout", "Strategy:Breakout")
        assert groups == ["Strategy", "Mistake"]

    def test_same_group_keeps_groups(self):
        groups = rewrite_required_groups(["Setup"], "Setup:Breakout", "Setup:Retest")
        assert groups == ["Setup"]

    def test_deletion_keeps_group(self):
        assert rewrite_required_groups(["Setup"], "Setup:Breakout", "") == ["Setup"]

    def test_new_tag_without_group_keeps_groups(self):
        assert rewrite_required_groups(["Setup"], "Setup:Breakout", "Breakout") == ["Setup"]

    def test_merging_into_existing_group_dedupes(self):
        groups = rewrite_required_groups(["Setup", "Strategy"], "Setup:Breakout", "Strategy:Breakout")
        assert groups == ["Strategy"]


@pytest.mark.unit
class TestHaveTagsChanged:

    def test_same_set_in_different_order(self):
        before = _shard(["A", "B"], ["C"])
        after = _shard(["C", "B"], ["A"])
        assert have_tags_changed(before, after) is False

    def test_tag_added(self):
        assert have_tags_changed(_shard(["A"]), _shard(["A", "B"])) is True

    def test_tag_replaced(self):
        assert have_tags_changed(_shard(["A", "B"]), _shard(["A", "C"])) is True

    def test_missing_snapshot(self):
        assert have_tags_changed(None, _shard(["A"])) is True
        assert have_tags_changed(None, None) is False

    def test_whitespace_and_empty_tags_ignored(self):
        assert have_tags_changed(_shard(["A"]), _shard([" A ", "  "])) is False


@pytest.mark.unit
class TestRebuildCalendarTags:

    def test_rebuild_is_sorted_and_unique(self):
        shards = [_shard(["Risk", "Setup:Breakout"]), _shard(["Mistake:FOMO", "Risk"])]
        assert rebuild_calendar_tags(shards) == ["Mistake:FOMO", "Risk", "Setup:Breakout"]

    def test_rebuild_ignores_shard_order(self):
        shards = [_shard(["B"]), _shard(["A", "C"]), _shard([" D ", ""])]
        expected = rebuild_calendar_tags(shards)

        for permutation in itertools.permutations(shards):
            assert rebuild_calendar_tags(permutation) == expected
        assert expected == ["A", "B", "C", "D"]

    def test_rebuild_without_shards(self):
        assert rebuild_calendar_tags([]) == []
