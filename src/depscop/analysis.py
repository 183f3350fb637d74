"""Post-extraction graph analysis (cycle detection)."""

from __future__ import annotations

from depscop.model import DependencyGraph


def find_cycle(graph: DependencyGraph) -> list[int] | None:
    """Return one dependency cycle as a list of node indices, or None.

    Depth-first search with three colours.  Nodes on the current path are
    grey; fully explored nodes are black and shared across all traversal
    roots, so every node and edge is visited at most once.  The returned
    path starts and ends with the same node, e.g. ``[a, b, c, a]``.

    The search keeps its own stack of ``(node, edge iterator)`` frames, so
    long dependency chains do not hit the interpreter's recursion limit.
    """
    done: set[int] = set()

    for root in range(len(graph.nodes)):
        if root in done:
            continue
        path = [root]
        on_path = {root}
        frames = [(root, iter(graph.edges[root]))]

        while frames:
            v, edges = frames[-1]
            for edge in edges:
                w = edge.to
                if w in on_path:
                    return path[path.index(w):] + [w]
                if w in done:
                    continue
                path.append(w)
                on_path.add(w)
                frames.append((w, iter(graph.edges[w])))
                break
            else:
                frames.pop()
                path.pop()
                on_path.discard(v)
                done.add(v)
    return None


def has_cycle(graph: DependencyGraph) -> bool:
    return find_cycle(graph) is not None


def format_cycle(graph: DependencyGraph, path: list[int]) -> str:
    """Render a cycle path by node name: ``A -> B -> A``."""
    return " -> ".join(graph.nodes[i].name for i in path)


def find_cycle_groups(graph: DependencyGraph) -> list[list[int]]:
    """Return groups of mutually dependent nodes using Tarjan's algorithm.

    Each group is a strongly-connected component of size >= 2, or a single
    node that depends on itself.  Nodes that are not part of any cycle are
    omitted.
    """
    index: dict[int, int] = {}
    lowlink: dict[int, int] = {}
    on_stack: set[int] = set()
    stack: list[int] = []
    sccs: list[list[int]] = []

    def _open(v: int) -> None:
        index[v] = lowlink[v] = len(index)
        stack.append(v)
        on_stack.add(v)

    def _close(v: int) -> None:
        if lowlink[v] != index[v]:
            return
        scc: list[int] = []
        while True:
            w = stack.pop()
            on_stack.discard(w)
            scc.append(w)
            if w == v:
                break
        self_loop = any(edge.to == v for edge in graph.edges[v])
        if len(scc) >= 2 or self_loop:
            sccs.append(sorted(scc))

    for root in range(len(graph.nodes)):
        if root in index:
            continue
        _open(root)
        frames = [(root, iter(graph.edges[root]))]

        while frames:
            v, edges = frames[-1]
            for edge in edges:
                w = edge.to
                if w not in index:
                    _open(w)
                    frames.append((w, iter(graph.edges[w])))
                    break
                if w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])
            else:
                frames.pop()
                if frames:
                    parent = frames[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[v])
                _close(v)

    return sccs
