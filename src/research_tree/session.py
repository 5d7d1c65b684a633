"""Per-run layout state."""

from __future__ import annotations

from dataclasses import dataclass, field

from research_tree.config import DEFAULT_CONFIG, LayoutConfig
from research_tree.graph import Forest
from research_tree.types import (
    ClusterBand,
    Connection,
    LayoutResult,
    PositionedNode,
    Tree,
)


@dataclass
class LayoutSession:
    """Everything one layout run reads and mutates.

    A session is built fresh for every run and dropped once its result has
    been extracted, so runs never share state.

    Attributes:
        forest: The pruned, depth-annotated graph.
        config: Sizes and thresholds for this run.
        trees: Named trees, in display order once ordering has run.
        orphans: The catch-all tree (None until extraction has run).
        cur_y: First free lane below everything placed so far.
    """

    forest: Forest
    config: LayoutConfig = DEFAULT_CONFIG
    trees: list[Tree] = field(default_factory=list)
    orphans: Tree | None = None
    cur_y: int = 0

    @property
    def all_trees(self) -> list[Tree]:
        """Named trees followed by the orphans tree."""
        return self.trees + ([self.orphans] if self.orphans is not None else [])

    @property
    def bump_limit(self) -> int:
        """Upper bound on downward lane bumps for a single placement."""
        return len(self.forest) + 1

    def result(self) -> LayoutResult:
        """Snapshot the session into renderer-facing records."""
        nodes: list[PositionedNode] = []
        for node in self.forest:
            if node.position is None or node.tree is None:
                continue
            nodes.append(
                PositionedNode(
                    identity=node.identity,
                    label=node.label,
                    category=node.category,
                    depth=node.position.depth,
                    lane=node.position.lane,
                    tree=node.tree.name,
                    color=node.tree.color,
                    finished=node.finished,
                )
            )

        connections: list[Connection] = []
        for prerequisite, dependent in self.forest.edges():
            tree = prerequisite.tree
            if tree is None:
                continue
            color = tree.medium_color if prerequisite.finished else tree.greyed_color
            connections.append(Connection(prerequisite.identity, dependent.identity, color))

        clusters: list[ClusterBand] = []
        for tree in self.all_trees:
            columns = [node.position.depth for node in tree.members if node.position is not None]
            clusters.append(
                ClusterBand(
                    name=tree.name,
                    color=tree.color,
                    start_y=tree.start_y,
                    width=tree.width,
                    min_depth=min(columns, default=0),
                    max_depth=max(columns, default=0),
                )
            )

        return LayoutResult(nodes=nodes, connections=connections, clusters=clusters)
