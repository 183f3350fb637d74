"""Plain-text renderings: listing, summary, Mermaid and Graphviz DOT."""

from __future__ import annotations

from collections import Counter

from depscop.config import Toggles
from depscop.model import DependencyGraph, EdgeInfo, Node
from depscop.rules import violations


def node_visible(node: Node, toggles: Toggles) -> bool:
    if node.is_recognized:
        return toggles.show_recognized_nodes
    return toggles.show_unrecognized_nodes


def edge_visible(edge: EdgeInfo, toggles: Toggles) -> bool:
    if edge.allowed:
        return toggles.show_valid_dependencies
    return toggles.show_invalid_dependencies


def _visible_edges(graph: DependencyGraph, toggles: Toggles):
    """Yield (from, edge) pairs whose edge and both endpoints are shown."""
    for from_index, edge in graph.iter_edges():
        if not edge_visible(edge, toggles):
            continue
        if not (
            node_visible(graph.nodes[from_index], toggles)
            and node_visible(graph.nodes[edge.to], toggles)
        ):
            continue
        yield from_index, edge


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def render_list(graph: DependencyGraph) -> str:
    lines = ["Found nodes:"]
    for i, node in enumerate(graph.nodes):
        lines.append(f"{i}: {node.name} [{node.layer}] {node.id}")
    lines.append("")
    lines.append("Node dependencies:")
    for i, entry in enumerate(graph.edges):
        targets = ", ".join(str(edge.to) for edge in entry)
        lines.append(f"{i}: {targets}")
    return "\n".join(lines) + "\n"


def render_summary(graph: DependencyGraph, cycle_groups: list[list[int]] | None = None) -> str:
    per_layer = Counter(node.layer for node in graph.nodes)
    bad = violations(graph)

    lines = [f"Nodes: {len(graph.nodes)}"]
    for layer, count in sorted(per_layer.items()):
        lines.append(f"  {layer}: {count}")
    lines.append(f"Dependencies: {graph.edge_count()}")
    lines.append(f"Violations: {len(bad)}")
    lines.extend(f"  {edge.label} ({src.layer} -> {dst.layer})" for src, dst, edge in bad)

    if cycle_groups is not None:
        lines.append(f"Cycle groups: {len(cycle_groups)}")
        for group in cycle_groups:
            lines.append("  " + ", ".join(graph.nodes[i].name for i in group))
    return "\n".join(lines) + "\n"


def render_mermaid(graph: DependencyGraph, toggles: Toggles | None = None) -> str:
    """Render a Mermaid flowchart; disallowed edges are dotted."""
    toggles = toggles or Toggles()
    lines = ["```mermaid", "graph TD;"]
    for i, node in enumerate(graph.nodes):
        if node_visible(node, toggles):
            lines.append(f'    P{i + 1}["{node.name.replace(chr(34), "#quot;")}"]')
    for from_index, edge in _visible_edges(graph, toggles):
        arrow = "-->" if edge.allowed else "-.->"
        lines.append(f"    P{from_index + 1} {arrow} P{edge.to + 1}")
    lines.append("```")
    return "\n".join(lines) + "\n"


def render_graphviz(
    graph: DependencyGraph,
    legend: DependencyGraph | None = None,
    toggles: Toggles | None = None,
) -> str:
    """Render DOT text with the layer rules drawn as a key cluster."""
    toggles = toggles or Toggles()
    lines = [
        "digraph G {",
        "    node [color=grey, style=filled];",
        '    node [fontname="Verdana", size="30,30"];',
    ]
    for i, node in enumerate(graph.nodes):
        if node_visible(node, toggles):
            lines.append(
                f'    P{i + 1} [label="{_quote(node.name)}", style=filled, '
                f'fillcolor="{_quote(node.color)}"]'
            )
    for from_index, edge in _visible_edges(graph, toggles):
        if edge.allowed:
            lines.append(f"    P{from_index + 1} -> P{edge.to + 1}")
        else:
            lines.append(
                f'    P{from_index + 1} -> P{edge.to + 1} [color="red" style=dashed penwidth=2]'
            )

    if legend is not None and legend.nodes:
        lines.append("    subgraph cluster_key {")
        lines.append('        label="Layer Rules";')
        for i, layer in enumerate(legend.nodes):
            lines.append(
                f'        L{i + 1} [label="{_quote(layer.name)}", style=filled, '
                f'fillcolor="{_quote(layer.color)}"]'
            )
        for from_index, edge in legend.iter_edges():
            lines.append(f"        L{from_index + 1} -> L{edge.to + 1}")
        lines.append("    }")

    lines.append("}")
    return "\n".join(lines) + "\n"
