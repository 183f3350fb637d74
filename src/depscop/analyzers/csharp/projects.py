"""Build a dependency graph from ``.csproj`` project references."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from depscop.analyzers.csharp import iter_files, read_source
from depscop.config import Config
from depscop.errors import AnalysisError
from depscop.model import DependencyGraph, Node, NodeDependencies
from depscop.patterns import classify, exclude_unit_name
from depscop.rules import edge_label, is_allowed

logger = logging.getLogger(__name__)

PROJECT_SUFFIX = ".csproj"


def _local_name(tag: str) -> str:
    """Drop an XML namespace prefix: ``{uri}ItemGroup`` -> ``ItemGroup``."""
    return tag.rsplit("}", 1)[-1]


def parse_project(path: Path) -> ET.Element:
    """Read and parse a project file; raises OSError or ET.ParseError."""
    return ET.fromstring(read_source(path))


def is_legacy_project(project: ET.Element) -> bool:
    """Old-style (pre-SDK) MSBuild files declare a ToolsVersion."""
    return "ToolsVersion" in project.attrib


def project_references(project: ET.Element) -> list[str]:
    """Return the ``Include`` value of every ItemGroup/ProjectReference."""
    includes: list[str] = []
    for group in project:
        if _local_name(group.tag) != "ItemGroup":
            continue
        for item in group:
            if _local_name(item.tag) != "ProjectReference":
                continue
            include = item.get("Include")
            if include:
                includes.append(include)
    return includes


def resolve_reference(project_dir: Path, include: str) -> Path | None:
    """Resolve a reference relative to its project, or None if it is dangling.

    References may use either ``\\`` or ``/`` as separator.
    """
    normalized = include.strip().replace("\\", "/")
    try:
        return (project_dir / normalized).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        logger.debug("Dropping unresolvable reference %s from %s: %s", include, project_dir, e)
        return None


class CSharpProjectAnalyzer:
    """One node per ``.csproj`` file, one edge per ProjectReference."""

    analysis_type = "projects"

    def __init__(self, config: Config):
        self._config = config
        self._settings = config.csharp

    def collect_nodes(self, root: Path) -> list[Node]:
        settings = self._settings
        nodes: list[Node] = []
        seen: set[str] = set()

        for path in iter_files(root, PROJECT_SUFFIX, settings):
            node_id = str(path.resolve())
            if node_id in seen:
                logger.debug("Skipping %s: same project as %s", path, node_id)
                continue

            try:
                project = parse_project(path)
            except OSError as e:
                logger.warning("Could not read %s: %s", path, e)
                continue
            except ET.ParseError as e:
                logger.warning(
                    "Failed to parse .csproj file, possible incompatible file: %s, error: %s",
                    path,
                    e,
                )
                continue

            if _local_name(project.tag) != "Project":
                logger.warning("Skipping %s: root element is not <Project>", path)
                continue
            if is_legacy_project(project):
                logger.warning(
                    "Skipping %s: legacy project format (ToolsVersion=%s), possible incompatible file",
                    path,
                    project.get("ToolsVersion"),
                )
                continue

            name = path.name
            if exclude_unit_name(name, settings.exclude, settings.pattern, settings.case_sensitive):
                logger.debug("Skipping excluded project %s", name)
                continue

            layer = classify(
                name,
                settings.projects,
                settings.case_sensitive,
                settings.pattern,
                order=self._config.global_.layers,
            )
            seen.add(node_id)
            nodes.append(
                Node(
                    id=node_id,
                    name=name,
                    node_type="project",
                    layer=layer,
                    color=self._config.color_for(layer),
                )
            )

        logger.debug("Collected %d project(s) under %s", len(nodes), root)
        return nodes

    def find_dependencies(self, root: Path, nodes: list[Node]) -> NodeDependencies:
        graph = DependencyGraph.from_nodes(nodes)
        rules = self._config.global_.rules

        for from_index, source in enumerate(graph.nodes):
            path = Path(source.id)
            try:
                project = parse_project(path)
            except (OSError, ET.ParseError) as e:
                raise AnalysisError(f"Failed to parse .csproj file {path}: {e}", path=path) from e

            for include in project_references(project):
                target_path = resolve_reference(path.parent, include)
                if target_path is None:
                    continue
                to_index = graph.index_of(str(target_path))
                if to_index is None:
                    logger.debug("%s references %s outside the analysed projects", source.name, include)
                    continue
                target = graph.nodes[to_index]
                graph.add_edge(
                    from_index,
                    to_index,
                    is_allowed(source.layer, target.layer, rules),
                    edge_label(source, target),
                )

        logger.debug("Resolved %d project reference(s)", graph.edge_count())
        return graph.edges
