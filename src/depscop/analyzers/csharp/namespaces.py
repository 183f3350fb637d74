"""Build a dependency graph from namespace and using lines in ``.cs`` files.

Each line is looked at on its own; there is no syntax tree.  A file's
current namespace is simply the last ``namespace X`` line seen so far, and
``using`` lines before any declaration belong to ``global::namespace``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from depscop.analyzers.csharp import iter_files, read_source
from depscop.config import Config
from depscop.errors import AnalysisError
from depscop.model import UNKNOWN_LAYER, DependencyGraph, Node, NodeDependencies
from depscop.patterns import classify, exclude_namespace
from depscop.rules import edge_label, is_allowed

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".cs"
GLOBAL_NAMESPACE = "global::namespace"

DECLARATION = "namespace"
IMPORT = "using"

_IDENT = r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*"
_DECLARATION_RE = re.compile(rf"^\s*namespace\s+({_IDENT})\s*;?\s*$")
_IMPORT_RE = re.compile(rf"^\s*using\s+({_IDENT})\s*;?\s*$")


def scan_lines(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(DECLARATION | IMPORT, qualified_name)`` for matching lines."""
    for line in text.splitlines():
        m = _DECLARATION_RE.match(line)
        if m:
            yield DECLARATION, m.group(1)
            continue
        m = _IMPORT_RE.match(line)
        if m:
            yield IMPORT, m.group(1)


class CSharpNamespaceAnalyzer:
    """One node per namespace, edges from declaring namespace to used namespace."""

    analysis_type = "namespaces"

    def __init__(self, config: Config):
        self._config = config
        self._settings = config.csharp

    def _is_excluded(self, name: str) -> bool:
        s = self._settings
        return exclude_namespace(name, s.exclude, s.pattern, s.case_sensitive)

    def _make_node(self, name: str) -> Node:
        s = self._settings
        layer = classify(
            name, s.namespaces, s.case_sensitive, s.pattern, order=self._config.global_.layers
        )
        return Node(
            id=name,
            name=name,
            node_type="namespace",
            layer=layer,
            color=self._config.color_for(layer),
        )

    def collect_nodes(self, root: Path) -> list[Node]:
        graph = DependencyGraph()
        graph.intern_node(
            Node(
                id=GLOBAL_NAMESPACE,
                name=GLOBAL_NAMESPACE,
                node_type="namespace",
                layer=UNKNOWN_LAYER,
                color=self._config.color_for(UNKNOWN_LAYER),
            )
        )

        for path in iter_files(root, SOURCE_SUFFIX, self._settings):
            try:
                text = read_source(path)
            except OSError as e:
                logger.warning("Could not read %s: %s", path, e)
                continue
            for _kind, name in scan_lines(text):
                if graph.index_of(name) is not None or self._is_excluded(name):
                    continue
                graph.intern_node(self._make_node(name))

        logger.debug("Collected %d namespace(s) under %s", len(graph), root)
        return graph.nodes

    def find_dependencies(self, root: Path, nodes: list[Node]) -> NodeDependencies:
        graph = DependencyGraph.from_nodes(nodes)
        rules = self._config.global_.rules
        global_index = graph.index_of(GLOBAL_NAMESPACE)

        for path in iter_files(root, SOURCE_SUFFIX, self._settings):
            try:
                text = read_source(path)
            except OSError as e:
                raise AnalysisError(f"Could not read {path}: {e}", path=path) from e

            context = global_index
            for kind, name in scan_lines(text):
                if kind == DECLARATION:
                    # None for excluded namespaces: their imports are dropped.
                    context = graph.index_of(name)
                    continue
                if context is None:
                    continue
                to_index = graph.index_of(name)
                if to_index is None:
                    continue
                source = graph.nodes[context]
                target = graph.nodes[to_index]
                graph.add_edge(
                    context,
                    to_index,
                    is_allowed(source.layer, target.layer, rules),
                    edge_label(source, target),
                )

        logger.debug("Resolved %d namespace dependency edge(s)", graph.edge_count())
        return graph.edges
