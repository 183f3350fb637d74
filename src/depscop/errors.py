"""Exceptions raised by depscop."""

from __future__ import annotations

from pathlib import Path


class DepscopError(Exception):
    """Base exception for depscop."""


class ConfigError(DepscopError):
    """Configuration file missing or unusable."""


class AnalysisError(DepscopError):
    """A graph could not be built; the run must stop."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path
