"""Tests for config.py and the core types."""

from __future__ import annotations

import dataclasses

import pytest

from research_tree.config import DEFAULT_CONFIG, MIN_TRUNK_SIZE, LayoutConfig
from research_tree.types import Node, Position, Tree


class TestLayoutConfig:
    def test_defaults(self):
        """The default config mirrors the module constants."""
        assert DEFAULT_CONFIG.min_trunk_size == MIN_TRUNK_SIZE == 2
        assert DEFAULT_CONFIG.nodes_per_row == int(DEFAULT_CONFIG.display_width / DEFAULT_CONFIG.column_width)

    def test_frozen(self):
        """Configs are immutable; use dataclasses.replace to derive one."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.min_trunk_size = 5  # type: ignore[misc]
        assert dataclasses.replace(DEFAULT_CONFIG, min_trunk_size=5).min_trunk_size == 5

    def test_nodes_per_row_at_least_one(self):
        """A display narrower than one node still fits one column."""
        assert LayoutConfig(display_width=10).nodes_per_row == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_trunk_size": 0},
            {"node_width": 0},
            {"node_height": -1},
            {"display_width": 0},
            {"margin_x": -5},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        """Non-positive sizes and empty trunks raise ValueError."""
        with pytest.raises(ValueError):
            LayoutConfig(**kwargs)


class TestTree:
    def make_nodes(self) -> list[Node]:
        return [
            Node(identity="a", label="a", category="T", depth=0),
            Node(identity="b", label="b", category="T", depth=1),
            Node(identity="c", label="c", category="X", depth=1),
            Node(identity="d", label="d", category="X", depth=3),
        ]

    def test_trunk_and_members(self):
        """Trunk nodes are members; leaves are members only."""
        a, b, c, d = self.make_nodes()
        tree = Tree("T", [a, b])
        tree.add_leaf(c)
        assert tree.trunk == [a, b]
        assert tree.members == [a, b, c]
        assert all(node.tree is tree for node in (a, b, c))
        assert d.tree is None

    def test_nodes_at_depth(self):
        """nodes_at_depth leaves the trunk out unless asked."""
        a, b, c, _ = self.make_nodes()
        tree = Tree("T", [a, b])
        tree.add_leaf(c)
        assert tree.nodes_at_depth(1) == [c]
        assert tree.nodes_at_depth(1, include_trunk=True) == [b, c]

    def test_depth_bounds(self):
        """min_depth and max_depth span the members."""
        a, b, c, d = self.make_nodes()
        tree = Tree("T", [b])
        tree.add_leaf(d)
        assert (tree.min_depth, tree.max_depth) == (1, 3)
        assert (Tree("empty", []).min_depth, Tree("empty", []).max_depth) == (0, 0)


class TestNode:
    def test_place_defaults_to_depth_column(self):
        """place() uses the node's depth as the column unless given one."""
        node = Node(identity="n", label="n", category="c", depth=2)
        assert not node.is_placed
        assert node.lane is None
        node.place(5)
        assert node.position == Position(2, 5)
        node.place(1, depth=4)
        assert node.position == Position(4, 1)

    def test_detached_node_has_no_links(self):
        """A node outside any forest has no parents or children."""
        node = Node(identity="n", label="n", category="c")
        assert node.parents == []
        assert node.children == []
