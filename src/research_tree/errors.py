"""Exception taxonomy for the layout pipeline."""

from __future__ import annotations

from collections.abc import Hashable, Sequence


class ResearchTreeError(Exception):
    """Base class for every error raised by the layout pipeline."""


class MalformedInput(ResearchTreeError, ValueError):
    """An entity record cannot be used as given.

    The graph builder recovers from these locally (log and skip), so this is
    only raised to callers that validate a single record on its own.
    """

    def __init__(self, identity: Hashable, reason: str) -> None:
        super().__init__(f"entity {identity!r}: {reason}")
        self.identity = identity
        self.reason = reason


class CycleDetected(ResearchTreeError):
    """The prerequisite graph contains a genuine cycle."""

    def __init__(self, cycle: Sequence[Hashable]) -> None:
        path = " -> ".join(repr(identity) for identity in cycle)
        super().__init__(f"prerequisite cycle detected: {path}")
        self.cycle = list(cycle)


class LayoutConflict(ResearchTreeError):
    """An internal layout invariant was violated (a programming error)."""
