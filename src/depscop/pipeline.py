"""Orchestrator: load config, analyze, check rules and cycles, render."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from depscop.analysis import find_cycle, find_cycle_groups, format_cycle
from depscop.analyzers import GraphSource, get_analyzer
from depscop.config import Config, load_config
from depscop.errors import AnalysisError
from depscop.model import DependencyGraph
from depscop.renderer.html import render_html
from depscop.renderer.text import render_graphviz, render_list, render_mermaid, render_summary
from depscop.rules import layer_legend

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("list", "summary", "mermaid", "graphviz", "html")
DEFAULT_HTML_NAME = "depscop.html"


@dataclass
class AnalysisResult:
    """Everything a renderer or caller needs from one run."""

    analysis_type: str
    graph: DependencyGraph
    legend: DependencyGraph
    cycle: list[int] | None = None

    @property
    def has_cycle(self) -> bool:
        return self.cycle is not None


def build_graph(source: GraphSource, root: Path) -> DependencyGraph:
    """Run both phases of *source*: collect every node, then resolve edges."""
    nodes = source.collect_nodes(root)
    edges = source.find_dependencies(root, nodes)
    try:
        return DependencyGraph.from_parts(nodes, edges)
    except (IndexError, ValueError) as e:
        raise AnalysisError(f"Inconsistent {source.analysis_type} graph: {e}", path=root) from e


def analyze(
    root: Path,
    config: Config,
    analysis_type: str = "projects",
    *,
    check_cycles: bool = False,
) -> AnalysisResult:
    """Build the graph for *root* and the layer legend from *config*."""
    source = get_analyzer(analysis_type, config)
    graph = build_graph(source, root)
    logger.debug(
        "%s graph: %d nodes, %d edges", analysis_type, len(graph), graph.edge_count()
    )

    g = config.global_
    legend = layer_legend(g.layers, g.colors, g.rules)

    result = AnalysisResult(analysis_type=analysis_type, graph=graph, legend=legend)
    if check_cycles:
        result.cycle = find_cycle(graph)
        if result.cycle is None:
            logger.info("No circular dependencies detected.")
        else:
            logger.error("Cycle detected: %s", format_cycle(graph, result.cycle))
    return result


def render(
    result: AnalysisResult,
    config: Config,
    output_format: str,
    *,
    root: Path,
    output: Path | None = None,
    viewer: str = "graphviz",
) -> Path | None:
    """Render *result*; return the written file, or None for stdout."""
    toggles = config.global_.toggles
    graph = result.graph

    if output_format == "html":
        out_path = output or (root / DEFAULT_HTML_NAME)
        render_html(graph, out_path, legend=result.legend, toggles=toggles, viewer=viewer)
        logger.info("Generated %s", out_path)
        return out_path

    if output_format == "list":
        text = render_list(graph)
    elif output_format == "summary":
        text = render_summary(graph, find_cycle_groups(graph))
    elif output_format == "mermaid":
        text = render_mermaid(graph, toggles)
    elif output_format == "graphviz":
        text = render_graphviz(graph, result.legend, toggles)
    else:
        raise ValueError(
            f"Unknown output format {output_format!r} (expected one of {', '.join(OUTPUT_FORMATS)})"
        )

    if output is None:
        sys.stdout.write(text)
        return None
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info("Generated %s", output)
    return output


def run(
    root: Path,
    *,
    analysis_type: str = "projects",
    output_format: str = "summary",
    output: Path | None = None,
    config_path: Path | None = None,
    viewer: str = "graphviz",
    check_cycles: bool = False,
    open_browser: bool = False,
) -> int:
    """Run the full depscop pipeline and return the process exit status.

    The status is 1 when cycle checking was requested and a cycle exists,
    otherwise 0.  Fatal errors propagate as :class:`~depscop.errors.DepscopError`.
    """
    root = root.resolve()
    config = load_config(root, config_path)

    result = analyze(root, config, analysis_type, check_cycles=check_cycles)
    out_path = render(result, config, output_format, root=root, output=output, viewer=viewer)

    if open_browser and out_path is not None and output_format == "html":
        import webbrowser

        webbrowser.open(out_path.resolve().as_uri())

    return 1 if result.has_cycle else 0
