"""Core types shared by the layout stages and the renderers."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Protocol

from research_tree.colors import GREY, RGB, mix, shade

if TYPE_CHECKING:
    from research_tree.graph import Forest

ORPHANS_NAME = "orphans"

# ─── Input ────────────────────────────────────────────────────────────────────


class EntityLike(Protocol):
    """What the host entity database must expose for each record."""

    identity: Hashable
    label: str
    category: str
    prerequisites: Sequence[Hashable]
    finished: bool


@dataclass(frozen=True)
class Entity:
    """A plain input record, e.g. one research project.

    Listing its own identity among ``prerequisites`` hides the entity from the
    graph.
    """

    identity: Hashable
    label: str
    category: str
    prerequisites: tuple[Hashable, ...] = ()
    finished: bool = False


# ─── Graph ────────────────────────────────────────────────────────────────────


class Position(NamedTuple):
    """Integer grid coordinate: depth is the column, lane the row."""

    depth: int
    lane: int


@dataclass(eq=False)
class Node:
    """One visible entity in the forest.

    ``parents`` and ``children`` are looked up on the owning forest's graph on
    every access, so they always reflect the current (pruned) edge set.
    ``position`` is None until a layout pass places the node.
    """

    identity: Hashable
    label: str
    category: str
    finished: bool = False
    depth: int = 0
    position: Position | None = None
    tree: Tree | None = field(default=None, repr=False)
    forest: Forest | None = field(default=None, repr=False)

    @property
    def parents(self) -> list[Node]:
        """Direct prerequisites of this node."""
        if self.forest is None:
            return []
        return self.forest.parents(self)

    @property
    def children(self) -> list[Node]:
        """Direct dependents of this node."""
        if self.forest is None:
            return []
        return self.forest.children(self)

    # Names used by the data model; same lookups as parents/children.
    prerequisites = parents
    dependents = children

    @property
    def lane(self) -> int | None:
        return None if self.position is None else self.position.lane

    @property
    def is_placed(self) -> bool:
        return self.position is not None

    def place(self, lane: int, depth: int | None = None) -> None:
        """Set the node's lane; the column defaults to the node's depth."""
        self.position = Position(self.depth if depth is None else depth, lane)


class Tree:
    """A named cluster of nodes sharing one vertical band of lanes.

    Attributes:
        name: Category label, or ``ORPHANS_NAME`` for the catch-all tree.
        trunk: Same-category, directly linked nodes forming the backbone.
        members: Every node of the tree, trunk first, then attached leaves.
        color: RGB floats in [0, 1].
        hue: Hue the color was derived from; None for the orphans tree.
        start_y: First lane of the band.
        width: Number of lanes the band occupies.
    """

    def __init__(self, name: str, trunk: Sequence[Node], *, is_orphans: bool = False) -> None:
        self.name = name
        self.trunk: list[Node] = list(trunk)
        self.members: list[Node] = list(trunk)
        self.is_orphans = is_orphans
        self.color: RGB = GREY
        self.hue: float | None = None
        self.start_y = 0
        self.width = 0
        for node in self.trunk:
            node.tree = self

    def __repr__(self) -> str:
        return f"Tree({self.name!r}, members={len(self.members)}, trunk={len(self.trunk)})"

    def add_leaf(self, node: Node) -> None:
        """Attach a non-trunk node to this tree."""
        self.members.append(node)
        node.tree = self

    def nodes_at_depth(self, depth: int, include_trunk: bool = False) -> list[Node]:
        """Members at ``depth``, excluding the trunk unless asked for."""
        trunk = set() if include_trunk else set(self.trunk)
        return [node for node in self.members if node.depth == depth and node not in trunk]

    @property
    def min_depth(self) -> int:
        return min((node.depth for node in self.members), default=0)

    @property
    def max_depth(self) -> int:
        return max((node.depth for node in self.members), default=0)

    @property
    def medium_color(self) -> RGB:
        """Connector color for lines leaving a finished node."""
        return shade(self.color, 0.8)

    @property
    def greyed_color(self) -> RGB:
        """Connector color for lines leaving an unfinished node."""
        return mix(self.color, GREY, 0.75)


# ─── Output ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PositionedNode:
    """A placed node as handed to renderers."""

    identity: Hashable
    label: str
    category: str
    depth: int
    lane: int
    tree: str
    color: RGB
    finished: bool


@dataclass(frozen=True)
class Connection:
    """A prerequisite → dependent connector and the color to draw it in."""

    prerequisite: Hashable
    dependent: Hashable
    color: RGB


@dataclass(frozen=True)
class ClusterBand:
    """A tree's color and vertical band ``[start_y, start_y + width)``."""

    name: str
    color: RGB
    start_y: int
    width: int
    min_depth: int
    max_depth: int

    @property
    def end_y(self) -> int:
        return self.start_y + self.width


@dataclass
class LayoutResult:
    """Self-contained layout output — everything renderers need."""

    nodes: list[PositionedNode]
    connections: list[Connection]
    clusters: list[ClusterBand]
    _by_identity: dict[Hashable, PositionedNode] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._by_identity = {node.identity: node for node in self.nodes}

    def node(self, identity: Hashable) -> PositionedNode:
        """Look up a placed node; raises KeyError for hidden or unknown ids."""
        return self._by_identity[identity]

    def positions(self) -> dict[Hashable, tuple[int, int]]:
        """Identity → (depth, lane) for every placed node."""
        return {node.identity: (node.depth, node.lane) for node in self.nodes}

    @property
    def columns(self) -> int:
        return max((node.depth for node in self.nodes), default=-1) + 1

    @property
    def rows(self) -> int:
        return max((node.lane for node in self.nodes), default=-1) + 1
