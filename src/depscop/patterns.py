"""Name matching, layer classification and exclusion filtering."""

from __future__ import annotations

import fnmatch
import functools
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from depscop.model import UNKNOWN_LAYER

if TYPE_CHECKING:
    from depscop.config import Exclude

logger = logging.getLogger(__name__)

REGEX = "regex"
WILDCARD = "wildcard"
PATTERN_KINDS = (REGEX, WILDCARD)

LayerPatterns = Mapping[str, "str | Sequence[str]"]


@functools.lru_cache(maxsize=1024)
def _compile(pattern: str, kind: str) -> re.Pattern[str] | None:
    if kind == REGEX:
        source = pattern
    elif kind == WILDCARD:
        source = fnmatch.translate(pattern)
    else:
        logger.debug("Unknown pattern kind %r", kind)
        return None
    try:
        return re.compile(source)
    except re.error as e:
        logger.debug("Ignoring invalid %s pattern %r: %s", kind, pattern, e)
        return None


def matches(candidate: str, pattern: str, kind: str, case_sensitive: bool) -> bool:
    """Return True if *candidate* matches *pattern*.

    Without case sensitivity both sides are lower-cased first.  Regex
    patterns match anywhere in the candidate; wildcard patterns must cover
    all of it.  A pattern that does not compile never matches.
    """
    if not case_sensitive:
        candidate = candidate.lower()
        pattern = pattern.lower()
    compiled = _compile(pattern, kind)
    if compiled is None:
        return False
    if kind == WILDCARD:
        return compiled.match(candidate) is not None
    return compiled.search(candidate) is not None


def matches_any(
    candidate: str, patterns: Iterable[str], kind: str, case_sensitive: bool
) -> bool:
    return any(matches(candidate, p, kind, case_sensitive) for p in patterns)


def as_pattern_list(value: str | Sequence[str]) -> list[str]:
    """Normalise a "one or many" pattern value to a list."""
    if isinstance(value, str):
        return [value]
    return list(value)


def _layer_order(layer_patterns: LayerPatterns, order: Sequence[str] | None) -> list[str]:
    ordered = [layer for layer in (order or ()) if layer in layer_patterns]
    ordered.extend(layer for layer in layer_patterns if layer not in ordered)
    return ordered


def classify(
    name: str,
    layer_patterns: LayerPatterns,
    case_sensitive: bool,
    kind: str,
    order: Sequence[str] | None = None,
) -> str:
    """Return the first layer whose patterns match *name*, else ``unknown``.

    Layers listed in *order* are tried first, in that order; any other
    layers follow in mapping order.
    """
    for layer in _layer_order(layer_patterns, order):
        patterns = as_pattern_list(layer_patterns[layer])
        if matches_any(name, patterns, kind, case_sensitive):
            return layer
    return UNKNOWN_LAYER


def exclude_path(path: Path | str, exclude: Exclude, kind: str, case_sensitive: bool) -> bool:
    """True if *path* matches any excluded folder or file pattern."""
    path_str = str(path)
    return matches_any(path_str, exclude.folders, kind, case_sensitive) or matches_any(
        path_str, exclude.files, kind, case_sensitive
    )


def exclude_namespace(name: str, exclude: Exclude, kind: str, case_sensitive: bool) -> bool:
    return matches_any(name, exclude.namespaces, kind, case_sensitive)


def exclude_unit_name(name: str, exclude: Exclude, kind: str, case_sensitive: bool) -> bool:
    return matches_any(name, exclude.projects, kind, case_sensitive)
