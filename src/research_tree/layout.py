"""Grid Layout Engine — assign every node an integer (depth, lane) position.

Trees are laid out top to bottom in display order, each inside its own band
of lanes starting at ``session.cur_y``:

  1. Trunk placement: backbone nodes take the lowest free lane.
  2. Forward pass: remaining members, depth by depth, next to their parents.
  3. Sort members by (depth, lane).
  4. Reverse pass: pull parents towards their topmost child.
  5. Advance ``cur_y`` past the band.

Orphans follow: small orphan trees are walked depth-first from their roots,
then fully isolated nodes are packed into a row-major grid at the bottom.

Conflicts are always resolved by moving a node down one lane at a time, never
by swapping, so the output depends on input order but is deterministic.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from research_tree.errors import LayoutConflict
from research_tree.session import LayoutSession
from research_tree.types import Node, Position, Tree

logger = logging.getLogger(__name__)


def bump_down(lane: int, is_taken: Callable[[int], bool], limit: int, node: Node) -> int:
    """Return the first lane at or below ``lane`` for which ``is_taken`` is false.

    Raises LayoutConflict after ``limit`` bumps.
    """
    for _ in range(limit + 1):
        if not is_taken(lane):
            return lane
        lane += 1
    raise LayoutConflict(f"no free lane for {node.identity!r} after {limit} bumps")


def _lane_taken_by(peers: list[Node], node: Node) -> Callable[[int], bool]:
    """Predicate: is ``lane`` occupied by a placed peer other than ``node``?"""

    def is_taken(lane: int) -> bool:
        return any(other is not node and other.lane == lane for other in peers)

    return is_taken


# ─── Named Trees ──────────────────────────────────────────────────────────────


def place_trunk(tree: Tree, cur_y: int, limit: int) -> None:
    """Give each trunk node the lowest lane ≥ cur_y free among trunk peers at its depth."""
    for node in tree.trunk:
        peers = [other for other in tree.trunk if other.depth == node.depth]
        lane = bump_down(cur_y, _lane_taken_by(peers, node), limit, node)
        node.place(lane)
        tree.width = max(tree.width, lane - cur_y + 1)


def place_children(tree: Tree, cur_y: int, limit: int) -> None:
    """Forward pass: place non-trunk members next to their same-tree parents.

    Children of the trunk go first at each depth. A node without a parent in
    the tree starts one lane below the band's first lane; the first lane is
    never used by non-trunk members.
    """
    trunk = set(tree.trunk)
    for depth in range(tree.min_depth, tree.max_depth + 1):
        nodes = sorted(
            tree.nodes_at_depth(depth),
            key=lambda n: 0 if any(parent in trunk for parent in n.parents) else 1,
        )
        peers = tree.nodes_at_depth(depth, include_trunk=True)

        for node in nodes:
            parent_lanes = [p.lane for p in node.parents if p.tree is tree and p.lane is not None]
            lane = min(parent_lanes) if parent_lanes else cur_y + 1

            taken_by_peer = _lane_taken_by(peers, node)
            lane = bump_down(lane, lambda candidate: candidate == cur_y or taken_by_peer(candidate), limit, node)

            tree.width = max(tree.width, lane - tree.start_y + 1)
            node.place(lane)


def pull_parents(tree: Tree, limit: int) -> None:
    """Reverse pass: move non-trunk parents level with their topmost child.

    Only already placed children count. Children in trees laid out later have
    no lane yet, so they never move a parent: it keeps its forward-pass lane
    rather than jumping to ``start_y + 1``. The target lane never rises above
    ``start_y + 1``; on conflict the node is bumped further down.
    """
    for depth in range(tree.max_depth, tree.min_depth - 1, -1):
        peers = tree.nodes_at_depth(depth, include_trunk=True)

        for node in tree.nodes_at_depth(depth):
            placed = [child for child in node.children if child.lane is not None]
            if not placed:
                continue

            top_child = min(placed, key=lambda child: child.lane)
            lane = max(top_child.lane, tree.start_y + 1)
            if lane == node.lane:
                continue

            lane = bump_down(lane, _lane_taken_by(peers, node), limit, node)
            tree.width = max(tree.width, lane - tree.start_y + 1)
            node.place(lane)


def place_tree(tree: Tree, session: LayoutSession) -> None:
    """Lay out one named tree in the band starting at ``session.cur_y``."""
    cur_y = session.cur_y
    limit = session.bump_limit
    tree.start_y = cur_y
    tree.width = 0

    place_trunk(tree, cur_y, limit)
    place_children(tree, cur_y, limit)
    tree.members.sort(key=lambda n: (n.depth, n.lane))
    pull_parents(tree, limit)

    session.cur_y += tree.width
    logger.debug("tree %r: lanes [%d, %d)", tree.name, tree.start_y, session.cur_y)


# ─── Orphans ──────────────────────────────────────────────────────────────────


def is_isolated(node: Node) -> bool:
    return not node.parents and not node.children


def orphan_roots(orphans: Tree) -> list[Node]:
    """Linked orphans with no parent inside the orphans tree, shallowest first.

    Besides true roots this picks up orphans whose only parents live in named
    trees, so every linked orphan is reachable from some root.
    """
    members = set(orphans.members)
    return sorted(
        (
            node
            for node in orphans.members
            if not is_isolated(node) and not any(parent in members for parent in node.parents)
        ),
        key=lambda n: n.depth,
    )


def place_orphan_trees(orphans: Tree, cur_y: int) -> int:
    """Walk each orphan root's descendants depth-first and stack them in rows.

    Every root gets its own block of rows; inside a block, each depth hands
    out rows in visiting order. Returns the number of rows used.
    """
    roots = orphan_roots(orphans)

    offset = 0
    for root in roots:
        if root.is_placed:
            continue
        root.place(cur_y + offset)

        rows_at_depth: dict[int, int] = {}
        stack = list(root.children)
        while stack:
            child = stack.pop()
            if child.is_placed:
                continue

            row = rows_at_depth.get(child.depth, 0)
            rows_at_depth[child.depth] = row + 1
            child.place(cur_y + offset + row)
            stack.extend(child.children)

        offset += max(rows_at_depth.values(), default=1)

    return offset


def place_isolated(orphans: Tree, cur_y: int, nodes_per_row: int) -> int:
    """Pack unlinked orphans, sorted by label, into a row-major grid.

    The grid column is used as the node's position depth. Returns the number
    of rows used.
    """
    isolated = sorted((node for node in orphans.members if is_isolated(node)), key=lambda n: n.label)
    for i, node in enumerate(isolated):
        node.place(cur_y + i // nodes_per_row, depth=i % nodes_per_row)
    return math.ceil(len(isolated) / nodes_per_row)


def place_orphans(session: LayoutSession) -> None:
    """Lay out the orphans tree below every named tree."""
    orphans = session.orphans
    if orphans is None:
        return

    orphans.start_y = session.cur_y
    tree_rows = place_orphan_trees(orphans, session.cur_y)
    session.cur_y += tree_rows
    grid_rows = place_isolated(orphans, session.cur_y, session.config.nodes_per_row)
    session.cur_y += grid_rows
    orphans.width = tree_rows + grid_rows


# ─── Full Pass ────────────────────────────────────────────────────────────────


def verify_layout(session: LayoutSession) -> None:
    """Check the finished layout; raise LayoutConflict on any violation.

    Every node must be placed, no two nodes may share a position, and each
    node must sit inside its tree's band.
    """
    occupied: dict[Position, Node] = {}
    for node in session.forest:
        if node.position is None:
            raise LayoutConflict(f"node {node.identity!r} was never placed")
        other = occupied.setdefault(node.position, node)
        if other is not node:
            raise LayoutConflict(
                f"nodes {other.identity!r} and {node.identity!r} share position {tuple(node.position)}"
            )
        tree = node.tree
        if tree is not None and not tree.start_y <= node.position.lane < tree.start_y + tree.width:
            raise LayoutConflict(
                f"node {node.identity!r} at lane {node.position.lane} is outside band "
                f"[{tree.start_y}, {tree.start_y + tree.width}) of tree {tree.name!r}"
            )


def fix_positions(session: LayoutSession) -> None:
    """Position every node of the session; trees must already be ordered."""
    for node in session.forest:
        node.position = None
    session.cur_y = 0

    for tree in session.trees:
        place_tree(tree, session)
    place_orphans(session)

    verify_layout(session)
