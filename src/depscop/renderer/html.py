"""Render a dependency graph to a standalone HTML file."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from string import Template

from depscop.config import Toggles
from depscop.model import DependencyGraph
from depscop.renderer.text import edge_visible, node_visible, render_graphviz

VIEWERS = ("graphviz", "d3")

_TEMPLATE_DIR = Path(__file__).parent


def _to_script_json(data: object) -> str:
    # Keep "</script>" inside names from closing the script element.
    return json.dumps(data).replace("</", "<\\/")


def _d3_data(graph: DependencyGraph, toggles: Toggles) -> dict:
    shown = {i for i, node in enumerate(graph.nodes) if node_visible(node, toggles)}
    nodes = [
        {"id": node.id, "name": node.name, "layer": node.layer, "color": node.color}
        for i, node in enumerate(graph.nodes)
        if i in shown
    ]
    links = [
        {
            "source": graph.nodes[from_index].id,
            "target": graph.nodes[edge.to].id,
            "allowed": edge.allowed,
            "label": edge.label,
        }
        for from_index, edge in graph.iter_edges()
        if from_index in shown and edge.to in shown and edge_visible(edge, toggles)
    ]
    return {"nodes": nodes, "links": links}


def render_html(
    graph: DependencyGraph,
    output_path: Path,
    *,
    legend: DependencyGraph | None = None,
    toggles: Toggles | None = None,
    viewer: str = "graphviz",
    title: str = "Dependencies Analyzer",
) -> None:
    """Write the interactive HTML visualization to *output_path*."""
    if viewer not in VIEWERS:
        raise ValueError(f"Unknown viewer {viewer!r} (expected one of {', '.join(VIEWERS)})")
    toggles = toggles or Toggles()

    if viewer == "graphviz":
        data = render_graphviz(graph, legend, toggles)
    else:
        data = _d3_data(graph, toggles)

    template = Template((_TEMPLATE_DIR / f"{viewer}.html").read_text(encoding="utf-8"))
    html = template.safe_substitute(
        TITLE=escape(title),
        DATA_JSON=_to_script_json(data),
        GENERATED_AT=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
