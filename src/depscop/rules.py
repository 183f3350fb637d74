"""Layer rule validation and the layer legend graph."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from depscop.model import DEFAULT_COLOR, DependencyGraph, EdgeInfo, Node

LayerRules = Mapping[str, Sequence[str]]


def is_allowed(from_layer: str, to_layer: str, rules: LayerRules) -> bool:
    """Return True if *from_layer* may depend on *to_layer*.

    A layer with no entry in *rules* may not depend on anything.
    """
    return to_layer in rules.get(from_layer, ())


def edge_label(source: Node, target: Node) -> str:
    return f"{source.name} -> {target.name}"


def layer_legend(
    layers: Sequence[str],
    colors: Mapping[str, str],
    rules: LayerRules,
) -> DependencyGraph:
    """Build a graph over the layers themselves showing what the rules permit.

    Rule targets that are not declared layers are left out.
    """
    legend = DependencyGraph()
    for layer in layers:
        legend.intern_node(
            Node(
                id=layer,
                name=layer,
                node_type="layer",
                layer=layer,
                color=colors.get(layer, DEFAULT_COLOR),
            )
        )

    for from_index, source in enumerate(list(legend.nodes)):
        for target_layer in rules.get(source.id, ()):
            to_index = legend.index_of(target_layer)
            if to_index is None:
                continue
            target = legend.nodes[to_index]
            legend.add_edge(from_index, to_index, True, edge_label(source, target))
    return legend


def violations(graph: DependencyGraph) -> list[tuple[Node, Node, EdgeInfo]]:
    """Return (source, target, edge) for every disallowed edge."""
    return [
        (graph.nodes[from_index], graph.nodes[edge.to], edge)
        for from_index, edge in graph.iter_edges()
        if not edge.allowed
    ]
