"""Language-agnostic data model for dependency graphs."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

UNKNOWN_LAYER = "unknown"
DEFAULT_COLOR = "gray"


@dataclass(frozen=True)
class Node:
    """A discovered structural unit (project file, namespace, layer, ...)."""

    id: str  # canonical path for projects, qualified name for namespaces
    name: str
    node_type: str  # "project", "namespace", "layer", "folder", "class"
    layer: str = UNKNOWN_LAYER
    color: str = DEFAULT_COLOR

    @property
    def is_recognized(self) -> bool:
        return self.layer != UNKNOWN_LAYER


@dataclass(frozen=True)
class EdgeInfo:
    """A directed dependency to the node at index ``to``."""

    to: int
    allowed: bool
    label: str


NodeDependencies = list[list[EdgeInfo]]


@dataclass
class DependencyGraph:
    """Nodes plus an index-based adjacency list.

    ``edges[i]`` holds the outgoing edges of ``nodes[i]``.  Nodes are only
    ever referenced by their position in ``nodes``.
    """

    nodes: list[Node] = field(default_factory=list)
    edges: NodeDependencies = field(default_factory=list)
    _index: dict[str, int] = field(default_factory=dict, repr=False)

    @classmethod
    def from_nodes(cls, nodes: list[Node]) -> DependencyGraph:
        """Build a graph over a finished node list, deduplicating by id."""
        graph = cls()
        for node in nodes:
            graph.intern_node(node)
        return graph

    @classmethod
    def from_parts(cls, nodes: list[Node], edges: NodeDependencies) -> DependencyGraph:
        """Assemble a graph from analyzer output, checking every edge."""
        graph = cls.from_nodes(nodes)
        if len(graph.nodes) != len(nodes):
            raise ValueError("node list contains duplicate ids")
        if len(edges) != len(nodes):
            raise ValueError(
                f"adjacency list has {len(edges)} entries for {len(nodes)} nodes"
            )
        for from_index, entry in enumerate(edges):
            for edge in entry:
                graph.add_edge(from_index, edge.to, edge.allowed, edge.label)
        return graph

    def __len__(self) -> int:
        return len(self.nodes)

    def intern_node(self, node: Node) -> int:
        """Return the index of *node*, appending it if its id is new."""
        existing = self._index.get(node.id)
        if existing is not None:
            return existing
        index = len(self.nodes)
        self.nodes.append(node)
        self.edges.append([])
        self._index[node.id] = index
        return index

    def index_of(self, node_id: str) -> int | None:
        return self._index.get(node_id)

    def add_edge(self, from_index: int, to_index: int, allowed: bool, label: str) -> bool:
        """Add an edge; return False if it already existed."""
        if not (0 <= from_index < len(self.nodes) and 0 <= to_index < len(self.nodes)):
            raise IndexError(f"edge {from_index} -> {to_index} outside node list")
        entry = self.edges[from_index]
        if any(edge.to == to_index for edge in entry):
            return False
        entry.append(EdgeInfo(to=to_index, allowed=allowed, label=label))
        return True

    def iter_edges(self) -> Iterator[tuple[int, EdgeInfo]]:
        for from_index, entry in enumerate(self.edges):
            for edge in entry:
                yield from_index, edge

    def edge_count(self) -> int:
        return sum(len(entry) for entry in self.edges)
