"""Full layout pipeline.

  entities → build_forest → extract_trees → order_trees → fix_positions
           → assign_colors → LayoutResult

``build_layout`` runs it once and propagates errors. ``ResearchTree`` is the
long-lived holder a host keeps around: it reruns the pipeline on demand and
keeps serving the last good layout when a run fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from research_tree.clusters import extract_trees
from research_tree.colors import assign_colors
from research_tree.config import DEFAULT_CONFIG, LayoutConfig
from research_tree.errors import ResearchTreeError
from research_tree.graph import build_forest
from research_tree.layout import fix_positions
from research_tree.ordering import order_trees
from research_tree.session import LayoutSession
from research_tree.types import LayoutResult

logger = logging.getLogger(__name__)


def run_session(entities: Iterable[Any], config: LayoutConfig = DEFAULT_CONFIG) -> LayoutSession:
    """Run every stage on a fresh session and return it."""
    session = LayoutSession(forest=build_forest(entities), config=config)

    trees, orphans = extract_trees(session.forest, config)
    session.trees = order_trees(trees)
    session.orphans = orphans

    fix_positions(session)
    assign_colors(session.trees, session.orphans)

    logger.info(
        "layout computed: %d node(s), %d tree(s), %d orphan(s), %d lane(s)",
        len(session.forest),
        len(session.trees),
        len(orphans.members),
        session.cur_y,
    )
    return session


def build_layout(entities: Iterable[Any], config: LayoutConfig = DEFAULT_CONFIG) -> LayoutResult:
    """Compute the layout for ``entities``.

    Raises:
        CycleDetected: the prerequisite data contains a cycle.
        LayoutConflict: an internal placement invariant was violated.
    """
    return run_session(entities, config).result()


class ResearchTree:
    """Holds the current layout for a host application.

    ``refresh`` recomputes from a fresh entity snapshot. A failed run is
    logged and leaves the previous layout (if any) in place.
    """

    def __init__(self, config: LayoutConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.result: LayoutResult | None = None

    @property
    def initialized(self) -> bool:
        return self.result is not None

    def refresh(self, entities: Iterable[Any]) -> bool:
        """Rebuild the layout; return False if the run failed."""
        try:
            result = build_layout(entities, self.config)
        except ResearchTreeError:
            logger.exception("layout run failed; keeping the previous layout")
            return False
        self.result = result
        return True
