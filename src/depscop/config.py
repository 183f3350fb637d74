"""Configuration model, defaults and config-file discovery.

Settings are read from the first file found in the analysed root:

1. ``depscoprc.json``
2. ``.depscop.toml`` (a ``[depscop]`` table, or top-level keys)
3. ``pyproject.toml`` (``[tool.depscop]``)
4. ``depscoprc.yaml`` / ``depscoprc.yml``

and merged over the built-in defaults.  A file that cannot be parsed is
reported and ignored.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from depscop.errors import ConfigError
from depscop.model import DEFAULT_COLOR
from depscop.patterns import PATTERN_KINDS, REGEX

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "depscoprc.json",
    ".depscop.toml",
    "pyproject.toml",
    "depscoprc.yaml",
    "depscoprc.yml",
)

# Sections merged key by key; anything else from a config file replaces the default.
_MERGED_SECTIONS = {
    ("global",),
    ("global", "toggles"),
    ("csharp",),
    ("csharp", "exclude"),
}

_DEFAULTS: dict[str, Any] = {
    "global": {
        "layers": ["core", "io", "usecase"],
        "colors": {"core": "#FBFDB8", "io": "#A7D7FD", "usecase": "#FEA29C"},
        "rules": {
            "core": ["core"],
            "io": ["core", "io", "usecase"],
            "usecase": ["core", "usecase"],
        },
        "toggles": {
            "show_valid_dependencies": True,
            "show_invalid_dependencies": True,
            "show_recognized_nodes": True,
            "show_unrecognized_nodes": True,
        },
    },
    "csharp": {
        "pattern": REGEX,
        "case_sensitive": True,
        "exclude": {
            "folders": ["bin", "obj"],
            "files": [],
            "projects": [],
            "namespaces": [],
        },
        "projects": {
            "core": r".*\.Entities.*\.csproj$",
            "io": r".*\.IO.*\.csproj$",
            "usecase": r".*\.UseCases.*\.csproj$",
        },
        "namespaces": {
            "core": r".*\.Entities(\..*)?$",
            "io": r".*\.IO(\..*)?$",
            "usecase": r".*\.UseCases(\..*)?$",
        },
    },
}


@dataclass
class Toggles:
    """Which nodes and edges renderers should draw."""

    show_valid_dependencies: bool = True
    show_invalid_dependencies: bool = True
    show_recognized_nodes: bool = True
    show_unrecognized_nodes: bool = True


@dataclass
class GlobalConfig:
    layers: list[str] = field(default_factory=list)
    colors: dict[str, str] = field(default_factory=dict)
    rules: dict[str, list[str]] = field(default_factory=dict)
    toggles: Toggles = field(default_factory=Toggles)


@dataclass
class Exclude:
    folders: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    namespaces: list[str] = field(default_factory=list)


@dataclass
class CSharpConfig:
    """Settings for the ``.csproj`` and ``.cs`` analyzers."""

    pattern: str = REGEX
    case_sensitive: bool = True
    exclude: Exclude = field(default_factory=Exclude)
    projects: dict[str, str | list[str]] = field(default_factory=dict)
    namespaces: dict[str, str | list[str]] = field(default_factory=dict)


@dataclass
class Config:
    global_: GlobalConfig = field(default_factory=GlobalConfig)
    csharp: CSharpConfig = field(default_factory=CSharpConfig)
    source: Path | None = None  # file the settings were read from, if any

    def color_for(self, layer: str) -> str:
        return self.global_.colors.get(layer, DEFAULT_COLOR)

    @classmethod
    def default(cls) -> Config:
        return cls.from_dict({})

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> Config:
        """Build a Config from raw settings merged over the defaults."""
        merged = merge_settings(_DEFAULTS, data)
        glob = merged["global"]
        cs = merged["csharp"]

        pattern = str(cs["pattern"])
        if pattern not in PATTERN_KINDS:
            logger.warning(
                "Unknown pattern kind %r (expected one of %s); no pattern will match.",
                pattern,
                ", ".join(PATTERN_KINDS),
            )

        return cls(
            global_=GlobalConfig(
                layers=_str_list(glob["layers"]),
                colors={str(k): str(v) for k, v in glob["colors"].items()},
                rules={str(k): _str_list(v) for k, v in glob["rules"].items()},
                toggles=Toggles(**{k: bool(v) for k, v in glob["toggles"].items()}),
            ),
            csharp=CSharpConfig(
                pattern=pattern,
                case_sensitive=bool(cs["case_sensitive"]),
                exclude=Exclude(
                    **{k: _str_list(v) for k, v in cs["exclude"].items()}
                ),
                projects=_layer_patterns(cs["projects"]),
                namespaces=_layer_patterns(cs["namespaces"]),
            ),
            source=source,
        )


def _str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value or []]


def _layer_patterns(value: dict[str, Any]) -> dict[str, str | list[str]]:
    return {
        str(layer): pat if isinstance(pat, str) else _str_list(pat)
        for layer, pat in value.items()
    }


def merge_settings(
    base: dict[str, Any], override: dict[str, Any], _path: tuple[str, ...] = ()
) -> dict[str, Any]:
    """Return *base* updated with *override*, recursing into merged sections.

    Unknown keys are dropped with a warning so typos do not go unnoticed.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        path = (*_path, key)
        if key not in base:
            logger.warning("Ignoring unknown config key %r", ".".join(path))
            continue
        if path in _MERGED_SECTIONS:
            if not isinstance(value, dict):
                logger.warning("Config key %r must be a table; ignoring", ".".join(path))
                continue
            result[key] = merge_settings(base[key], value, path)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    with open(path, "rb") as f:
        return tomllib.load(f)


def _load_yaml(path: Path) -> Any:
    import yaml

    with open(path, encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(str(e)) from e


def _read_settings(path: Path) -> dict[str, Any] | None:
    """Parse a config file; None means "no depscop settings in this file"."""
    name = path.name
    if name.endswith(".json"):
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    elif name == "pyproject.toml":
        data = _load_toml(path).get("tool", {}).get("depscop")
    elif name.endswith(".toml"):
        data = _load_toml(path)
        data = data.get("depscop", data)
    elif name.endswith((".yaml", ".yml")):
        data = _load_yaml(path)
    else:
        raise ConfigError(f"Unsupported config file type: {path}")

    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"top level of {path.name} must be a mapping")
    return data


def load_config(root: Path, config_path: Path | None = None) -> Config:
    """Load settings for *root*, falling back to the defaults."""
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        candidates: Sequence[Path] = [config_path]
    else:
        candidates = [root / name for name in CONFIG_FILE_NAMES if (root / name).is_file()]

    for path in candidates:
        try:
            data = _read_settings(path)
        except (OSError, ValueError) as e:
            logger.warning("Could not parse %s, using default settings: %s", path, e)
            return Config.default()
        if data is None:
            logger.debug("No depscop settings in %s", path)
            continue
        logger.debug("Using settings from %s", path)
        try:
            return Config.from_dict(data, source=path)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Invalid settings in %s, using defaults: %s", path, e)
            return Config.default()

    return Config.default()
