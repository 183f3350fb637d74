"""Analyzers, selected by analysis type."""

from __future__ import annotations

from depscop.analyzers.base import GraphSource
from depscop.analyzers.csharp.namespaces import CSharpNamespaceAnalyzer
from depscop.analyzers.csharp.projects import CSharpProjectAnalyzer
from depscop.config import Config

__all__ = [
    "ANALYSIS_TYPES",
    "CSharpNamespaceAnalyzer",
    "CSharpProjectAnalyzer",
    "GraphSource",
    "get_analyzer",
]

_ANALYZERS = {
    CSharpProjectAnalyzer.analysis_type: CSharpProjectAnalyzer,
    CSharpNamespaceAnalyzer.analysis_type: CSharpNamespaceAnalyzer,
}

ANALYSIS_TYPES = tuple(_ANALYZERS)


def get_analyzer(analysis_type: str, config: Config) -> GraphSource:
    """Return the analyzer registered for *analysis_type*."""
    try:
        cls = _ANALYZERS[analysis_type]
    except KeyError:
        raise ValueError(
            f"Unknown analysis type {analysis_type!r} "
            f"(expected one of {', '.join(ANALYSIS_TYPES)})"
        ) from None
    return cls(config)
