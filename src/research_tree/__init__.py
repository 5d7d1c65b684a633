"""Grid layout for prerequisite graphs of research-style entities."""

from research_tree.api import layout_entities, render_entities, render_svg
from research_tree.config import DEFAULT_CONFIG, LayoutConfig
from research_tree.errors import CycleDetected, LayoutConflict, MalformedInput, ResearchTreeError
from research_tree.pipeline import ResearchTree, build_layout, run_session
from research_tree.types import (
    ORPHANS_NAME,
    ClusterBand,
    Connection,
    Entity,
    EntityLike,
    LayoutResult,
    Node,
    Position,
    PositionedNode,
    Tree,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ORPHANS_NAME",
    "ClusterBand",
    "Connection",
    "CycleDetected",
    "Entity",
    "EntityLike",
    "LayoutConfig",
    "LayoutConflict",
    "LayoutResult",
    "MalformedInput",
    "Node",
    "Position",
    "PositionedNode",
    "ResearchTree",
    "ResearchTreeError",
    "Tree",
    "build_layout",
    "layout_entities",
    "render_entities",
    "render_svg",
    "run_session",
]
