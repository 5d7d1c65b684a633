"""Tests for renderers/svg.py — connector geometry and SVG output."""

from __future__ import annotations

from research_tree.config import LayoutConfig
from research_tree.renderers import Renderer, SvgRenderer, connector_path
from research_tree.types import ClusterBand, Connection, LayoutResult, PositionedNode

RED = (1.0, 0.0, 0.0)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_node(identity: str, depth: int, lane: int, label: str = "", finished: bool = False) -> PositionedNode:
    return PositionedNode(
        identity=identity,
        label=label or identity,
        category="Weapons",
        depth=depth,
        lane=lane,
        tree="Weapons",
        color=RED,
        finished=finished,
    )


def make_result() -> LayoutResult:
    nodes = [make_node("A", 0, 0), make_node("B", 1, 0), make_node("C", 1, 1, label="C & <D>")]
    connections = [Connection("A", "B", RED), Connection("A", "C", RED)]
    clusters = [ClusterBand(name="Weapons", color=RED, start_y=0, width=2, min_depth=0, max_depth=1)]
    return LayoutResult(nodes=nodes, connections=connections, clusters=clusters)


# ─── connector_path ───────────────────────────────────────────────────────────


class TestConnectorPath:
    def test_same_level_is_straight(self):
        """Anchors at the same height give a single horizontal segment."""
        assert connector_path((0, 10), (100, 10), 40) == "M 0 10 H 100"

    def test_near_same_level_is_straight(self):
        """Differences under 0.1 still count as the same level."""
        assert connector_path((0, 10), (100, 10.05), 40) == "M 0 10 H 100"

    def test_points_ordered_left_to_right(self):
        """Swapping the anchors draws the same path."""
        assert connector_path((100, 10), (0, 10), 40) == connector_path((0, 10), (100, 10), 40)
        assert connector_path((100, 40), (0, 0), 40) == connector_path((0, 0), (100, 40), 40)

    def test_going_down(self):
        """Downward connector: clockwise bend, vertical run, counter-clockwise bend."""
        assert connector_path((0, 0), (100, 40), 40) == (
            "M 0 0 H 10 A 10 10 0 0 1 20 10 V 30 A 10 10 0 0 0 30 40 H 100"
        )

    def test_going_up(self):
        """Upward connector mirrors the sweep flags."""
        assert connector_path((0, 40), (100, 0), 40) == (
            "M 0 40 H 10 A 10 10 0 0 0 20 30 V 10 A 10 10 0 0 1 30 0 H 100"
        )


# ─── SvgRenderer ──────────────────────────────────────────────────────────────


class TestSvgRenderer:
    def test_satisfies_protocol(self):
        """SvgRenderer implements the Renderer protocol."""
        renderer: Renderer = SvgRenderer()
        assert callable(renderer.render)

    def test_empty_result_renders_nothing(self):
        """No nodes → empty string."""
        assert SvgRenderer().render(LayoutResult(nodes=[], connections=[], clusters=[])) == ""

    def test_node_rect_uses_grid(self):
        """Grid (depth, lane) maps through column width and row height."""
        config = LayoutConfig(node_width=100, node_height=20, margin_x=40, margin_y=10)
        renderer = SvgRenderer(config)
        assert renderer.node_rect(make_node("X", 2, 3)) == (20 + 2 * 140, 20 + 3 * 30, 100, 20)
        assert renderer.left_anchor(make_node("X", 0, 0)) == (20, 30)
        assert renderer.right_anchor(make_node("X", 0, 0)) == (120, 30)

    def test_document_structure(self):
        """The SVG has one path per connection and one box per node."""
        svg = SvgRenderer().render(make_result())
        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        assert svg.count("<path") == 2
        assert svg.count('rx="4"') == 3
        assert 'marker-end="url(#end)"' in svg
        assert "#ff0000" in svg

    def test_labels_escaped(self):
        """Labels are XML-escaped."""
        svg = SvgRenderer().render(make_result())
        assert "C &amp; &lt;D&gt;" in svg
        assert "<D>" not in svg

    def test_band_label_rendered(self):
        """Cluster bands are drawn with their name."""
        svg = SvgRenderer().render(make_result())
        assert ">Weapons</text>" in svg

    def test_connection_to_unknown_node_skipped(self):
        """Connections to nodes missing from the result are ignored."""
        result = make_result()
        result.connections.append(Connection("A", "ghost", RED))
        assert SvgRenderer().render(result).count("<path") == 2

    def test_deterministic(self):
        """Rendering twice gives the same document."""
        assert SvgRenderer().render(make_result()) == SvgRenderer().render(make_result())
