"""Renderer protocol shared by every output format."""

from __future__ import annotations

from typing import Protocol

from research_tree.types import LayoutResult


class Renderer(Protocol):
    """Anything that turns a finished layout into a document.

    Renderers read grid cells, cluster bands and connector colors from the
    ``LayoutResult``; they never run layout passes themselves.
    """

    def render(self, result: LayoutResult) -> str:
        """Return the whole document; an empty result may render as ``""``."""
        ...
