"""Command-line interface for depscop."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from depscop.analyzers import ANALYSIS_TYPES
from depscop.errors import DepscopError
from depscop.pipeline import OUTPUT_FORMATS, run
from depscop.renderer.html import VIEWERS

logger = logging.getLogger("depscop")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="depscop",
        description="Check a C# code base's dependencies against layered-architecture rules.",
    )
    parser.add_argument(
        "root",
        type=Path,
        help="Root directory to analyze",
    )
    parser.add_argument(
        "-a",
        "--analysis",
        choices=ANALYSIS_TYPES,
        default="projects",
        help="Build the graph from .csproj references or from namespace usage (default: projects)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default="summary",
        dest="output_format",
        help="Output format (default: summary)",
    )
    parser.add_argument(
        "--viewer",
        choices=VIEWERS,
        default="graphviz",
        help="Renderer used by the html format (default: graphviz)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write output to this file (default: stdout, or ROOT/depscop.html for html)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Config file (default: depscoprc.json, .depscop.toml, pyproject.toml "
        "or depscoprc.yaml in ROOT)",
    )
    parser.add_argument(
        "--check-cycles",
        action="store_true",
        help="Exit with status 1 if a circular dependency is found",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        dest="open_browser",
        help="Open the generated HTML in a browser",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        return run(
            args.root,
            analysis_type=args.analysis,
            output_format=args.output_format,
            output=args.output,
            config_path=args.config,
            viewer=args.viewer,
            check_cycles=args.check_cycles,
            open_browser=args.open_browser,
        )
    except DepscopError as e:
        logger.error("depscop: %s", e)
        return 2
