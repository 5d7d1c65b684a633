"""Tree colors: one evenly spaced hue per named tree, grey for orphans."""

from __future__ import annotations

import colorsys
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from research_tree.types import Tree

logger = logging.getLogger(__name__)

RGB = tuple[float, float, float]

GREY: RGB = (0.5, 0.5, 0.5)


def hue_to_rgb(hue: float, saturation: float = 1.0, value: float = 1.0) -> RGB:
    r, g, b = colorsys.hsv_to_rgb(hue, saturation, value)
    return (r, g, b)


def shade(color: RGB, factor: float) -> RGB:
    """Scale each channel by ``factor``, clamped to [0, 1]."""
    return tuple(min(1.0, max(0.0, c * factor)) for c in color)  # type: ignore[return-value]


def mix(a: RGB, b: RGB, t: float) -> RGB:
    """Linear blend from ``a`` (t=0) to ``b`` (t=1)."""
    return tuple(ca + (cb - ca) * t for ca, cb in zip(a, b))  # type: ignore[return-value]


def to_hex(color: RGB) -> str:
    """Render an RGB float triple as ``#rrggbb``."""
    return "#" + "".join(f"{round(min(1.0, max(0.0, c)) * 255):02x}" for c in color)


def assign_colors(trees: Sequence[Tree], orphans: Tree | None = None) -> None:
    """Give tree i (1-indexed) of n the hue i/n at full saturation and value.

    The orphans tree is grey and does not count towards n.
    """
    if orphans is not None:
        orphans.color = GREY
        orphans.hue = None

    n = len(trees)
    for i, tree in enumerate(trees, start=1):
        tree.hue = i / n
        tree.color = hue_to_rgb(tree.hue)
        logger.debug("tree %r: hue %.3f -> %s", tree.name, tree.hue, to_hex(tree.color))
