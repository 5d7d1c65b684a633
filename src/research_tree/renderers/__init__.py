"""Renderers that turn a LayoutResult into drawable output."""

from research_tree.renderers.base import Renderer
from research_tree.renderers.svg import SvgRenderer, connector_path

__all__ = ["Renderer", "SvgRenderer", "connector_path"]
