"""Tests for dock_leaf / prune_leaf."""

import pytest

from dockwm.tiling.docking import (
    DockDirection,
    DockingRelationship,
    dock_leaf,
    parse_direction,
    prune_leaf,
    split_direction_for,
)
from dockwm.tiling.tree import DockTree, Leaf, Split, SplitDirection


class TestDirections:

    def test_axis_for_each_direction(self):
        assert split_direction_for(DockDirection.LEFT) is SplitDirection.HORIZONTAL
        assert split_direction_for(DockDirection.RIGHT) is SplitDirection.HORIZONTAL
        assert split_direction_for(DockDirection.TOP) is SplitDirection.VERTICAL
        assert split_direction_for(DockDirection.BOTTOM) is SplitDirection.VERTICAL

    def test_tab_has_no_axis(self):
        with pytest.raises(ValueError):
            split_direction_for(DockDirection.TAB)

    def test_parse_is_case_insensitive(self):
        assert parse_direction("Left") is DockDirection.LEFT
        assert parse_direction("TAB") is DockDirection.TAB

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match='Invalid docking direction "up"'):
            parse_direction("up")


class TestDockLeaf:

    @pytest.mark.parametrize(
        "direction, axis, first, second",
        [
            (DockDirection.LEFT, SplitDirection.HORIZONTAL, "new", "a"),
            (DockDirection.RIGHT, SplitDirection.HORIZONTAL, "a", "new"),
            (DockDirection.TOP, SplitDirection.VERTICAL, "new", "a"),
            (DockDirection.BOTTOM, SplitDirection.VERTICAL, "a", "new"),
        ],
    )
    def test_replaces_target_with_split(self, direction, axis, first, second):
        result = dock_leaf(Leaf("a"), "a", "new", direction, 0.4)
        assert result == Split(axis, 0.4, Leaf(first), Leaf(second))

    def test_default_ratio_is_half(self):
        assert dock_leaf(Leaf("a"), "a", "b", DockDirection.RIGHT).ratio == 0.5

    def test_tab_leaves_tree_untouched(self, sample_root):
        assert dock_leaf(sample_root, "topRight", "new", DockDirection.TAB) is sample_root

    def test_missing_target_returns_none(self, sample_root):
        assert dock_leaf(sample_root, "missing", "new", DockDirection.LEFT) is None

    def test_only_path_to_target_is_rebuilt(self, sample_root):
        result = dock_leaf(sample_root, "bottomRight", "new", DockDirection.RIGHT)
        # the untouched sibling subtree is shared
        assert result.first is sample_root.first
        assert result.second.first is sample_root.second.first
        assert result.second.second == Split(
            SplitDirection.HORIZONTAL, 0.5, Leaf("bottomRight"), Leaf("new")
        )
        # the input tree is not modified
        assert DockTree(sample_root).leaf_ids() == ["left", "topRight", "bottomRight"]

    def test_first_depth_first_match_wins(self):
        root = Split(SplitDirection.HORIZONTAL, 0.5, Leaf("dup"), Leaf("dup"))
        result = dock_leaf(root, "dup", "new", DockDirection.BOTTOM)
        assert result.first.kind == "split"
        assert result.second is root.second


class TestPruneLeaf:

    def test_matching_leaf_disappears(self):
        assert prune_leaf(Leaf("a"), "a") == (None, True)

    def test_other_leaf_is_kept(self):
        leaf = Leaf("a")
        node, pruned = prune_leaf(leaf, "b")
        assert node is leaf
        assert pruned is False

    def test_survivor_replaces_split(self, sample_root):
        node, pruned = prune_leaf(sample_root, "topRight")
        assert pruned is True
        assert node == Split(
            SplitDirection.HORIZONTAL, 0.5, Leaf("left"), Leaf("bottomRight")
        )

    def test_collapse_to_single_leaf(self):
        root = Split(SplitDirection.VERTICAL, 0.3, Leaf("a"), Leaf("b"))
        assert prune_leaf(root, "a") == (Leaf("b"), True)

    def test_unchanged_split_is_same_object(self, sample_root):
        node, pruned = prune_leaf(sample_root, "missing")
        assert node is sample_root
        assert pruned is False

    def test_rebuilt_split_reclamps_ratio(self):
        root = Split(
            SplitDirection.HORIZONTAL,
            0.02,
            Leaf("a"),
            Split(SplitDirection.VERTICAL, 0.5, Leaf("b"), Leaf("c")),
        )
        node, pruned = prune_leaf(root, "c")
        assert pruned is True
        assert node == Split(SplitDirection.HORIZONTAL, 0.1, Leaf("a"), Leaf("b"))

    def test_both_children_gone(self):
        root = Split(SplitDirection.HORIZONTAL, 0.5, Leaf("dup"), Leaf("dup"))
        assert prune_leaf(root, "dup") == (None, True)

    def test_every_duplicate_is_removed(self):
        root = Split(
            SplitDirection.HORIZONTAL,
            0.5,
            Leaf("dup"),
            Split(SplitDirection.VERTICAL, 0.5, Leaf("a"), Leaf("dup")),
        )
        assert prune_leaf(root, "dup") == (Leaf("a"), True)

    def test_dock_then_prune_restores_leaf_set(self, sample_root):
        before = set(DockTree(sample_root).leaf_ids())
        for direction in (DockDirection.LEFT, DockDirection.BOTTOM):
            docked = dock_leaf(sample_root, "topRight", "new", direction, 0.7)
            pruned, _ = prune_leaf(docked, "new")
            assert set(DockTree(pruned).leaf_ids()) == before


class TestRelationship:

    def test_dict_form_uses_camel_case(self):
        rel = DockingRelationship("a", "b", DockDirection.TOP)
        assert rel.to_dict() == {
            "sourceWindowId": "a",
            "targetWindowId": "b",
            "direction": "top",
        }
        assert DockingRelationship.from_dict(rel.to_dict()) == rel

    def test_hashing_deduplicates(self):
        rels = {
            DockingRelationship("a", "b", DockDirection.TAB),
            DockingRelationship("a", "b", DockDirection.TAB),
            DockingRelationship("a", "b", DockDirection.LEFT),
        }
        assert len(rels) == 2

    def test_involves(self):
        rel = DockingRelationship("a", "b", DockDirection.TAB)
        assert rel.involves("a") and rel.involves("b")
        assert not rel.involves("c")
