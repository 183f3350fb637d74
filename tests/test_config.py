"""Tests for configuration loading and merging."""

import json
import logging

import pytest

from depscop.config import Config, load_config, merge_settings
from depscop.errors import ConfigError
from depscop.patterns import WILDCARD


class TestDefaults:
    """Tests for the built-in defaults."""

    def test_layers_and_rules(self, config):
        assert config.global_.layers == ["core", "io", "usecase"]
        assert config.global_.rules["core"] == ["core"]
        assert config.global_.rules["usecase"] == ["core", "usecase"]

    def test_csharp_settings(self, config):
        assert config.csharp.pattern == "regex"
        assert config.csharp.case_sensitive is True
        assert config.csharp.exclude.folders == ["bin", "obj"]
        assert set(config.csharp.projects) == {"core", "io", "usecase"}
        assert config.source is None

    def test_color_for(self, config):
        assert config.color_for("core") == "#FBFDB8"
        assert config.color_for("unknown") == "gray"

    def test_toggles_all_on(self, config):
        t = config.global_.toggles
        assert t.show_valid_dependencies and t.show_invalid_dependencies
        assert t.show_recognized_nodes and t.show_unrecognized_nodes


class TestMergeSettings:
    """Tests for merge_settings() and Config.from_dict()."""

    def test_missing_keys_keep_defaults(self):
        config = Config.from_dict({"global": {"toggles": {"show_valid_dependencies": False}}})
        assert config.global_.toggles.show_valid_dependencies is False
        assert config.global_.toggles.show_invalid_dependencies is True
        assert config.global_.layers == ["core", "io", "usecase"]

    def test_layer_maps_replaced_wholesale(self):
        config = Config.from_dict({"csharp": {"projects": {"domain": r"\.Domain\.csproj$"}}})
        assert config.csharp.projects == {"domain": r"\.Domain\.csproj$"}
        assert config.csharp.namespaces["core"] == r".*\.Entities(\..*)?$"

    def test_exclude_merged_key_wise(self):
        config = Config.from_dict({"csharp": {"exclude": {"files": ["Generated"]}}})
        assert config.csharp.exclude.files == ["Generated"]
        assert config.csharp.exclude.folders == ["bin", "obj"]

    def test_string_or_list_patterns(self):
        config = Config.from_dict(
            {"csharp": {"namespaces": {"core": "Core$", "io": ["IO$", "Data$"]}}}
        )
        assert config.csharp.namespaces == {"core": "Core$", "io": ["IO$", "Data$"]}

    def test_single_string_exclusion_becomes_list(self):
        config = Config.from_dict({"csharp": {"exclude": {"folders": "tests"}}})
        assert config.csharp.exclude.folders == ["tests"]

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="depscop"):
            merged = merge_settings({"a": 1}, {"b": 2})
        assert merged == {"a": 1}
        assert "'b'" in caplog.text

    def test_does_not_mutate_base(self):
        base = {"global": {"layers": ["x"]}}
        merge_settings(base, {"global": {"layers": ["y"]}})
        assert base == {"global": {"layers": ["x"]}}

    def test_unknown_pattern_kind_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="depscop"):
            config = Config.from_dict({"csharp": {"pattern": "glob"}})
        assert config.csharp.pattern == "glob"
        assert "Unknown pattern kind" in caplog.text


class TestLoadConfig:
    """Tests for load_config() file discovery."""

    def test_no_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config == Config.default()

    def test_json(self, tmp_path):
        path = tmp_path / "depscoprc.json"
        path.write_text(json.dumps({"csharp": {"pattern": "wildcard"}}), encoding="utf-8")
        config = load_config(tmp_path)
        assert config.csharp.pattern == WILDCARD
        assert config.source == path

    def test_json_with_bom(self, tmp_path):
        (tmp_path / "depscoprc.json").write_text(
            "\ufeff" + json.dumps({"csharp": {"case_sensitive": False}}), encoding="utf-8"
        )
        assert load_config(tmp_path).csharp.case_sensitive is False

    def test_dot_toml(self, tmp_path):
        (tmp_path / ".depscop.toml").write_text(
            '[depscop.global]\nlayers = ["domain"]\n', encoding="utf-8"
        )
        assert load_config(tmp_path).global_.layers == ["domain"]

    def test_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.depscop.csharp.exclude]\nfolders = ["gen"]\n',
            encoding="utf-8",
        )
        assert load_config(tmp_path).csharp.exclude.folders == ["gen"]

    def test_pyproject_without_section_is_skipped(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        (tmp_path / "depscoprc.yaml").write_text(
            "global:\n  layers: [a, b]\n", encoding="utf-8"
        )
        config = load_config(tmp_path)
        assert config.global_.layers == ["a", "b"]
        assert config.source == tmp_path / "depscoprc.yaml"

    def test_yml(self, tmp_path):
        (tmp_path / "depscoprc.yml").write_text(
            "csharp:\n  exclude:\n    projects: ['\\.Tests\\.csproj$']\n", encoding="utf-8"
        )
        assert load_config(tmp_path).csharp.exclude.projects == [r"\.Tests\.csproj$"]

    def test_json_wins_over_yaml(self, tmp_path):
        (tmp_path / "depscoprc.json").write_text('{"global": {"layers": ["json"]}}')
        (tmp_path / "depscoprc.yaml").write_text("global:\n  layers: [yaml]\n")
        assert load_config(tmp_path).global_.layers == ["json"]

    def test_invalid_json_falls_back_to_defaults(self, tmp_path, caplog):
        (tmp_path / "depscoprc.json").write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="depscop"):
            config = load_config(tmp_path)
        assert config == Config.default()
        assert "using default settings" in caplog.text

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "depscoprc.yaml").write_text("global: [unclosed\n", encoding="utf-8")
        assert load_config(tmp_path) == Config.default()

    def test_non_mapping_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "depscoprc.json").write_text("[1, 2]", encoding="utf-8")
        assert load_config(tmp_path) == Config.default()

    def test_bad_value_type_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "depscoprc.json").write_text('{"global": {"colors": "red"}}', encoding="utf-8")
        assert load_config(tmp_path) == Config.default()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom" / "settings.json"
        path.parent.mkdir()
        path.write_text('{"global": {"layers": ["only"]}}', encoding="utf-8")
        assert load_config(tmp_path, path).global_.layers == ["only"]

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path, tmp_path / "nope.json")

    def test_explicit_path_unsupported_type(self, tmp_path):
        path = tmp_path / "settings.ini"
        path.write_text("[x]\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Unsupported"):
            load_config(tmp_path, path)
