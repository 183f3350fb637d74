"""GraphSource protocol: every analyzer conforms to this interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from depscop.model import Node, NodeDependencies


class GraphSource(Protocol):
    """Two-phase producer of a dependency graph.

    All nodes are collected before any dependency is resolved; the indices
    in the returned adjacency list refer to the list given to
    :meth:`find_dependencies`.
    """

    analysis_type: str

    def collect_nodes(self, root: Path) -> list[Node]:
        """Discover the structural units below *root*."""
        ...

    def find_dependencies(self, root: Path, nodes: list[Node]) -> NodeDependencies:
        """Return the outgoing edges of each node in *nodes*."""
        ...
