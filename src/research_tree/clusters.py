"""Cluster Extractor — partition the forest into named trees plus orphans.

A node joins its category's trunk only when it is directly linked to another
node of the same category, so unrelated entities that merely share a
category label do not end up in one tree. Groups below the minimum trunk
size are dissolved; their nodes and the unlinked ones become orphans, which
are then attached to the tree they share most edges with, or to the
catch-all orphans tree.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from research_tree.config import DEFAULT_CONFIG, LayoutConfig
from research_tree.graph import Forest
from research_tree.types import ORPHANS_NAME, Node, Tree

logger = logging.getLogger(__name__)


# ─── Affinity ─────────────────────────────────────────────────────────────────


def _links_into(node: Node, members: set[Node]) -> int:
    return sum(1 for other in node.parents + node.children if other in members)


def node_affinity(node: Node, tree: Tree) -> int:
    """Number of direct edges between ``node`` and the members of ``tree``."""
    return _links_into(node, set(tree.members))


def affinity(a: Tree, b: Tree) -> int:
    """Symmetric count of direct edges crossing between two trees' members."""
    if a is b:
        return 0
    b_members = set(b.members)
    return sum(_links_into(node, b_members) for node in a.members)


def closest_tree(node: Node, trees: Sequence[Tree]) -> Tree | None:
    """The tree ``node`` shares most edges with, or None when it shares none.

    Ties go to the earliest tree in ``trees``.
    """
    best: Tree | None = None
    best_score = 0
    for tree in trees:
        score = node_affinity(node, tree)
        if score > best_score:
            best, best_score = tree, score
    return best


# ─── Extraction ───────────────────────────────────────────────────────────────


def has_same_category_link(node: Node) -> bool:
    return any(other.category == node.category for other in node.parents + node.children)


def extract_trees(forest: Forest, config: LayoutConfig = DEFAULT_CONFIG) -> tuple[list[Tree], Tree]:
    """Partition ``forest`` into named trees and the orphans tree.

    Returns (named trees in first-seen category order, orphans tree). Every
    node ends up in exactly one of them, with ``node.tree`` set.
    """
    trunks: dict[str, list[Node]] = {}
    pool: list[Node] = []
    for node in forest:
        if has_same_category_link(node):
            trunks.setdefault(node.category, []).append(node)
        else:
            pool.append(node)

    trees: list[Tree] = []
    for category, nodes in trunks.items():
        if len(nodes) >= config.min_trunk_size:
            trees.append(Tree(category, nodes))
        else:
            logger.debug("trunk %r has %d node(s); dissolved into orphans", category, len(nodes))
            pool.extend(nodes)

    # Attachment runs in forest order.
    position = {node.identity: i for i, node in enumerate(forest)}
    pool.sort(key=lambda n: position[n.identity])

    orphans = Tree(ORPHANS_NAME, [], is_orphans=True)
    for node in pool:
        target = closest_tree(node, trees) or orphans
        target.add_leaf(node)
        if target is not orphans:
            logger.debug("orphan %r attached to tree %r", node.identity, target.name)

    logger.debug(
        "extracted %d tree(s); %d node(s) left in %r",
        len(trees),
        len(orphans.members),
        ORPHANS_NAME,
    )
    return trees, orphans
