"""SVG renderer — renders a LayoutResult to an SVG string."""

from __future__ import annotations

from research_tree.colors import mix, to_hex
from research_tree.config import DEFAULT_CONFIG, LayoutConfig
from research_tree.types import ClusterBand, Connection, LayoutResult, PositionedNode

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 14
FONT_FAMILY = "sans-serif"
PADDING = 20  # canvas padding in pixels
LINE_WIDTH = 4
SAME_LEVEL_EPSILON = 0.1  # anchors closer than this vertically get a straight line

_WHITE = (1.0, 1.0, 1.0)
_BAND_OPACITY = 0.08


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def _num(value: float) -> str:
    return f"{value:g}"


# ─── Connectors ─────────────────────────────────────────────────────────────


def connector_path(a: tuple[float, float], b: tuple[float, float], margin: float) -> str:
    """SVG path data for a connector between two anchor points.

    The path always runs left to right. Anchors on the same level get a
    straight line; otherwise the line leaves horizontally, bends through a
    quarter circle of radius ``margin / 4`` into a vertical run in the middle
    of the gap, and bends back to horizontal on the far side.
    """
    left, right = (a, b) if a[0] < b[0] else (b, a)
    lx, ly = left
    rx, ry = right

    if abs(ly - ry) < SAME_LEVEL_EPSILON:
        return f"M {_num(lx)} {_num(ly)} H {_num(rx)}"

    r = margin / 4
    going_down = ly < ry
    step = r if going_down else -r
    # Turning east→south is clockwise on screen (y grows downwards).
    first_sweep = 1 if going_down else 0
    second_sweep = 1 - first_sweep

    return " ".join(
        [
            f"M {_num(lx)} {_num(ly)}",
            f"H {_num(lx + r)}",
            f"A {_num(r)} {_num(r)} 0 0 {first_sweep} {_num(lx + 2 * r)} {_num(ly + step)}",
            f"V {_num(ry - step)}",
            f"A {_num(r)} {_num(r)} 0 0 {second_sweep} {_num(lx + 3 * r)} {_num(ry)}",
            f"H {_num(rx)}",
        ]
    )


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a LayoutResult, produces an SVG string.

    Grid positions map to pixels through the config's column width (node
    width + horizontal margin) and row height (node height + vertical margin).
    """

    def __init__(self, config: LayoutConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    # Coordinate helpers

    def node_rect(self, node: PositionedNode) -> tuple[float, float, float, float]:
        """Return (x, y, width, height) in pixel coordinates."""
        cfg = self.config
        return (
            PADDING + node.depth * cfg.column_width,
            PADDING + node.lane * cfg.row_height,
            cfg.node_width,
            cfg.node_height,
        )

    def left_anchor(self, node: PositionedNode) -> tuple[float, float]:
        x, y, _w, h = self.node_rect(node)
        return (x, y + h / 2)

    def right_anchor(self, node: PositionedNode) -> tuple[float, float]:
        x, y, w, h = self.node_rect(node)
        return (x + w, y + h / 2)

    # Element rendering

    def _render_band(self, band: ClusterBand, canvas_w: float) -> str:
        if band.width == 0:
            return ""
        cfg = self.config
        y = PADDING + band.start_y * cfg.row_height - cfg.margin_y / 2
        h = band.width * cfg.row_height
        color = to_hex(band.color)
        font = _font(FONT_SIZE - 2)
        return "\n".join(
            [
                f'<rect x="0" y="{_num(y)}" width="{_num(canvas_w)}" height="{_num(h)}" '
                f'fill="{color}" fill-opacity="{_BAND_OPACITY}"/>',
                f'<text x="4" y="{_num(y + FONT_SIZE)}" {font} fill="{color}">{_escape(band.name)}</text>',
            ]
        )

    def _render_node(self, node: PositionedNode) -> str:
        x, y, w, h = self.node_rect(node)
        stroke = to_hex(node.color)
        fill = to_hex(mix(node.color, _WHITE, 0.5 if node.finished else 0.9))
        label = _escape(node.label)
        font = _font()
        return "\n".join(
            [
                f'<rect x="{_num(x)}" y="{_num(y)}" width="{_num(w)}" height="{_num(h)}" rx="4" '
                f'fill="{fill}" stroke="{stroke}" stroke-width="1.5"/>',
                f'<text x="{_num(x + w / 2)}" y="{_num(y + h / 2)}" dominant-baseline="central" '
                f'text-anchor="middle" {font}>{label}</text>',
            ]
        )

    def _render_connection(self, conn: Connection, nodes: dict[object, PositionedNode]) -> str:
        prerequisite = nodes.get(conn.prerequisite)
        dependent = nodes.get(conn.dependent)
        if prerequisite is None or dependent is None:
            return ""
        d = connector_path(self.right_anchor(prerequisite), self.left_anchor(dependent), self.config.margin_x)
        return (
            f'<path d="{d}" fill="none" stroke="{to_hex(conn.color)}" '
            f'stroke-width="{LINE_WIDTH}" marker-end="url(#end)"/>'
        )

    def render(self, result: LayoutResult) -> str:
        if not result.nodes:
            return ""

        cfg = self.config
        svg_w = PADDING * 2 + result.columns * cfg.column_width
        svg_h = PADDING * 2 + result.rows * cfg.row_height

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(svg_w)}" height="{_num(svg_h)}" '
            f'viewBox="0 0 {_num(svg_w)} {_num(svg_h)}">',
            "<defs>",
            '  <marker id="end" markerWidth="4" markerHeight="4" refX="4" refY="2" orient="auto">',
            '    <polygon points="0 0, 4 2, 0 4" fill="context-stroke"/>',
            "  </marker>",
            "</defs>",
            f'<rect width="{_num(svg_w)}" height="{_num(svg_h)}" fill="white"/>',
        ]

        for band in result.clusters:
            band_svg = self._render_band(band, svg_w)
            if band_svg:
                parts.append(band_svg)

        # Connectors (behind nodes), sorted for deterministic output
        by_identity = {node.identity: node for node in result.nodes}
        for conn in sorted(result.connections, key=lambda c: (repr(c.prerequisite), repr(c.dependent))):
            conn_svg = self._render_connection(conn, by_identity)
            if conn_svg:
                parts.append(conn_svg)

        # Nodes (on top)
        for node in result.nodes:
            parts.append(self._render_node(node))

        parts.append("</svg>")
        return "\n".join(parts)
