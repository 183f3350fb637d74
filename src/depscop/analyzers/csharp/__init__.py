"""Helpers shared by the C# analyzers."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from depscop.config import CSharpConfig
from depscop.errors import AnalysisError
from depscop.patterns import exclude_path

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def remove_bom(text: str) -> str:
    """Strip byte-order-mark characters from the start of *text*."""
    return text.lstrip(BOM)


def read_source(path: Path) -> str:
    """Read a source or project file as text, without its BOM."""
    return remove_bom(path.read_text(encoding="utf-8", errors="replace"))


def iter_files(root: Path, suffix: str, settings: CSharpConfig) -> Iterator[Path]:
    """Yield files under *root* ending in *suffix*, in a stable order.

    Paths are checked against the folder and file exclusions relative to
    *root*; excluded directories are not descended into.
    """
    if not root.is_dir():
        raise AnalysisError(f"Not a directory: {root}", path=root)

    def _fail(err: OSError) -> None:
        raise AnalysisError(f"Could not walk {err.filename}: {err.strerror}", path=root) from err

    kind = settings.pattern
    case_sensitive = settings.case_sensitive

    def _excluded(path: Path) -> bool:
        return exclude_path(path.relative_to(root).as_posix(), settings.exclude, kind, case_sensitive)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_fail):
        current = Path(dirpath)
        kept = []
        for d in sorted(dirnames):
            if _excluded(current / d):
                logger.debug("Skipping excluded folder %s", current / d)
            else:
                kept.append(d)
        dirnames[:] = kept

        for name in sorted(filenames):
            if not name.endswith(suffix):
                continue
            path = current / name
            if _excluded(path):
                logger.debug("Skipping excluded file %s", path)
                continue
            yield path
