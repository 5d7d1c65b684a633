"""Cluster Orderer — arrange trees so related ones sit next to each other.

Choosing the order that minimises the total distance between related trees
is a travelling-salesman problem; this module settles for a greedy
nearest-neighbour walk instead:

  1. Sort trees by size, largest first (stable).
  2. Start with the largest tree.
  3. Keep, for every unplaced tree, the sum of its affinities with all placed
     trees; append the unplaced tree with the highest sum (earliest on ties).
  4. Repeat until every tree is placed.

The result is deterministic for a given input order but not optimal.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from research_tree.clusters import affinity
from research_tree.types import Tree

logger = logging.getLogger(__name__)


def affinity_matrix(trees: Sequence[Tree]) -> list[list[int]]:
    """Pairwise affinities, indexed like ``trees``; symmetric, zero diagonal."""
    n = len(trees)
    matrix = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            matrix[i][j] = matrix[j][i] = affinity(trees[i], trees[j])
    return matrix


def order_trees(trees: Sequence[Tree]) -> list[Tree]:
    """Return ``trees`` in display order (see module docstring)."""
    if len(trees) < 3:
        return list(trees)

    remaining = sorted(trees, key=lambda tree: -len(tree.members))
    matrix = affinity_matrix(remaining)
    index = {tree: i for i, tree in enumerate(remaining)}

    first = remaining.pop(0)
    ordered = [first]
    weights = {tree: matrix[index[first]][index[tree]] for tree in remaining}

    while remaining:
        # max() keeps the first maximal element, i.e. the larger tree on ties.
        nxt = max(remaining, key=lambda tree: weights[tree])
        remaining.remove(nxt)
        ordered.append(nxt)
        for tree in remaining:
            weights[tree] += matrix[index[nxt]][index[tree]]

    logger.debug("tree order: %s", [tree.name for tree in ordered])
    return ordered
