"""Public convenience entry points."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from research_tree.config import DEFAULT_CONFIG, LayoutConfig
from research_tree.pipeline import build_layout
from research_tree.renderers.base import Renderer
from research_tree.renderers.svg import SvgRenderer
from research_tree.types import LayoutResult


def layout_entities(entities: Iterable[Any], config: LayoutConfig | None = None) -> LayoutResult:
    """Lay out ``entities`` and return the renderer-facing result."""
    return build_layout(entities, config or DEFAULT_CONFIG)


def render_entities(entities: Iterable[Any], renderer: Renderer, config: LayoutConfig | None = None) -> str:
    """Lay out ``entities`` and hand the result to ``renderer``."""
    return renderer.render(build_layout(entities, config or DEFAULT_CONFIG))


def render_svg(entities: Iterable[Any], config: LayoutConfig | None = None) -> str:
    """Lay out ``entities`` and render the result as an SVG document."""
    config = config or DEFAULT_CONFIG
    return render_entities(entities, SvgRenderer(config), config)
