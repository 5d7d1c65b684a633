"""Layout configuration.

Module-level constants hold the defaults; ``LayoutConfig`` bundles them so a
caller can override individual values per run without touching module state.
Sizes are in display units (pixels for the SVG renderer).
"""

from __future__ import annotations

from dataclasses import dataclass

# ─── Defaults ─────────────────────────────────────────────────────────────────

MIN_TRUNK_SIZE: int = 2  # smallest same-category group that becomes a named tree
NODE_WIDTH: float = 200.0  # node box footprint
NODE_HEIGHT: float = 50.0
MARGIN_X: float = 50.0  # gap between depth columns; also drives connector bend radius
MARGIN_Y: float = 10.0  # gap between lanes
DISPLAY_WIDTH: float = 1920.0  # horizontal space available to the isolated-orphan grid


@dataclass(frozen=True)
class LayoutConfig:
    """Externally supplied constants consumed by the layout pipeline."""

    min_trunk_size: int = MIN_TRUNK_SIZE
    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    margin_x: float = MARGIN_X
    margin_y: float = MARGIN_Y
    display_width: float = DISPLAY_WIDTH

    def __post_init__(self) -> None:
        if self.min_trunk_size < 1:
            raise ValueError(f"min_trunk_size must be at least 1, got {self.min_trunk_size}")
        for name in ("node_width", "node_height", "display_width"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        for name in ("margin_x", "margin_y"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")

    @property
    def column_width(self) -> float:
        """Horizontal footprint of one depth column: node box plus margin."""
        return self.node_width + self.margin_x

    @property
    def row_height(self) -> float:
        """Vertical footprint of one lane: node box plus margin."""
        return self.node_height + self.margin_y

    @property
    def nodes_per_row(self) -> int:
        """Columns in the isolated-orphan grid; never less than one."""
        return max(1, int(self.display_width / self.column_width))


DEFAULT_CONFIG = LayoutConfig()
