"""Graph Builder — entities → pruned, depth-annotated forest.

Steps:
  1. Wrap every visible entity in a Node (self-prerequisite hides an entity).
  2. Link prerequisite → dependent edges, dropping dangling references.
  3. Reject genuine cycles.
  4. Remove transitively redundant prerequisites.
  5. Assign each node its longest-path depth from the roots.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Iterator
from typing import Any

import networkx as nx

from research_tree.errors import CycleDetected, MalformedInput
from research_tree.types import Node

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("identity", "label", "category", "prerequisites")


class Forest:
    """The visible entity graph.

    Wraps a ``networkx.DiGraph`` whose node keys are entity identities (each
    carrying its ``Node`` under the ``"node"`` attribute) and whose edges
    point from prerequisite to dependent. Parent/child lookups always go
    through the graph, never through copies stored on the nodes.
    """

    def __init__(self, digraph: nx.DiGraph) -> None:
        self.digraph = digraph
        self._nodes: list[Node] = [data["node"] for _, data in digraph.nodes(data=True)]
        for node in self._nodes:
            node.forest = self

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, identity: object) -> bool:
        return identity in self.digraph

    def __getitem__(self, identity: Hashable) -> Node:
        return self.digraph.nodes[identity]["node"]

    @property
    def nodes(self) -> list[Node]:
        """All nodes, in input order."""
        return list(self._nodes)

    def parents(self, node: Node) -> list[Node]:
        return [self[p] for p in self.digraph.predecessors(node.identity)]

    def children(self, node: Node) -> list[Node]:
        return [self[c] for c in self.digraph.successors(node.identity)]

    def edges(self) -> Iterator[tuple[Node, Node]]:
        """Yield (prerequisite, dependent) node pairs."""
        for src, tgt in self.digraph.edges():
            yield self[src], self[tgt]

    @property
    def max_depth(self) -> int:
        return max((node.depth for node in self._nodes), default=0)


# ─── Input Validation ─────────────────────────────────────────────────────────


def read_entity(entity: Any) -> tuple[Hashable, str, str, list[Hashable], bool]:
    """Extract (identity, label, category, prerequisites, finished) from a record.

    Raises MalformedInput when a required attribute is missing or unusable.
    Unhashable prerequisite ids are logged and dropped; the record survives.
    """
    missing = [name for name in _REQUIRED_FIELDS if not hasattr(entity, name)]
    identity = getattr(entity, "identity", repr(entity))
    if missing:
        raise MalformedInput(identity, f"missing attribute(s): {', '.join(missing)}")
    try:
        hash(identity)
    except TypeError as exc:
        raise MalformedInput(repr(identity), "identity is not hashable") from exc

    prerequisites = entity.prerequisites
    if prerequisites is None:
        prerequisites = []
    elif isinstance(prerequisites, (str, bytes)) or not isinstance(prerequisites, Iterable):
        raise MalformedInput(identity, "prerequisites must be a collection of identities")

    usable: list[Hashable] = []
    for prerequisite in prerequisites:
        try:
            hash(prerequisite)
        except TypeError:
            logger.warning(
                "%s; reference dropped",
                MalformedInput(identity, f"unhashable prerequisite {prerequisite!r}"),
            )
            continue
        usable.append(prerequisite)

    return (
        identity,
        str(entity.label),
        str(entity.category),
        usable,
        bool(getattr(entity, "finished", False)),
    )


# ─── Construction ─────────────────────────────────────────────────────────────


def link_entities(entities: Iterable[Any]) -> nx.DiGraph:
    """Build the unpruned prerequisite → dependent graph.

    Hidden entities (listing themselves as a prerequisite) are left out.
    Malformed records and duplicate identities are logged and skipped; so are
    prerequisite references that do not resolve to a visible entity.
    """
    records: list[tuple[Hashable, list[Hashable]]] = []
    hidden: set[Hashable] = set()
    seen: set[Hashable] = set()
    graph: nx.DiGraph = nx.DiGraph()

    for entity in entities:
        try:
            identity, label, category, prerequisites, finished = read_entity(entity)
        except MalformedInput as exc:
            logger.warning("skipping malformed entity: %s", exc)
            continue

        if identity in seen:
            logger.warning("duplicate entity %r ignored; keeping the first record", identity)
            continue
        seen.add(identity)

        if identity in prerequisites:
            logger.debug("entity %r lists itself as a prerequisite; hidden", identity)
            hidden.add(identity)
            continue

        node = Node(identity=identity, label=label, category=category, finished=finished)
        graph.add_node(identity, node=node)
        records.append((identity, prerequisites))

    for identity, prerequisites in records:
        for prerequisite in prerequisites:
            if prerequisite in graph:
                graph.add_edge(prerequisite, identity)
            elif prerequisite in hidden:
                logger.debug("dropping prerequisite %r of %r: entity is hidden", prerequisite, identity)
            else:
                logger.warning(
                    "%s; reference dropped",
                    MalformedInput(identity, f"unknown prerequisite {prerequisite!r}"),
                )

    return graph


def check_acyclic(graph: nx.DiGraph) -> None:
    """Raise CycleDetected naming the entities on a cycle, if there is one."""
    try:
        cycle = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return
    raise CycleDetected([src for src, _tgt in cycle])


def prune_redundant(graph: nx.DiGraph) -> list[tuple[Hashable, Hashable]]:
    """Remove prerequisites already reachable through another prerequisite.

    For each node, the ancestors of its direct prerequisites are collected;
    any direct prerequisite in that set is a transitive edge and is removed.
    The graph must be acyclic. Returns the removed (prerequisite, dependent)
    edges.
    """
    redundant: list[tuple[Hashable, Hashable]] = []
    for identity in graph.nodes:
        direct = list(graph.predecessors(identity))
        if len(direct) < 2:
            continue
        reachable: set[Hashable] = set()
        for prerequisite in direct:
            reachable |= nx.ancestors(graph, prerequisite)
        removed = [p for p in direct if p in reachable]
        if removed:
            logger.debug("redundant prerequisites for %r removed: %s", identity, removed)
            redundant.extend((p, identity) for p in removed)

    graph.remove_edges_from(redundant)
    return redundant


def assign_depths(graph: nx.DiGraph) -> None:
    """Set each node's depth to its longest path from any root."""
    for identity in nx.topological_sort(graph):
        node: Node = graph.nodes[identity]["node"]
        parent_depths = [graph.nodes[p]["node"].depth for p in graph.predecessors(identity)]
        node.depth = 1 + max(parent_depths) if parent_depths else 0


def build_forest(entities: Iterable[Any]) -> Forest:
    """Run the whole Graph Builder stage.

    Raises:
        CycleDetected: the prerequisite data contains a genuine cycle.
    """
    graph = link_entities(entities)
    check_acyclic(graph)
    removed = prune_redundant(graph)
    assign_depths(graph)
    forest = Forest(graph)
    logger.debug(
        "forest built: %d nodes, %d edges (%d redundant removed), max depth %d",
        len(forest),
        graph.number_of_edges(),
        len(removed),
        forest.max_depth,
    )
    return forest
