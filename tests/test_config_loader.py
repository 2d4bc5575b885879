"""Tests for git_ext_tree.config_loader: hierarchical config loading."""

import textwrap

import pytest
import yaml

from git_ext_tree.config_loader import (
    _interpolate_recursive,
    discover_config_files,
    interpolate_env_vars,
    load_hierarchical_config,
)

# -------------------------------------------------------------------------
# Env var interpolation
# -------------------------------------------------------------------------


class TestInterpolateEnvVars:
    """Tests for ${VAR} and ${VAR:-default} substitution."""

    def test_replaces_set_var(self, monkeypatch):
        monkeypatch.setenv("MY_LEVEL", "DEBUG")
        assert interpolate_env_vars("${MY_LEVEL}") == "DEBUG"

    def test_unset_var_replaced_with_empty(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert interpolate_env_vars("${UNSET_VAR_XYZ}") == ""

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert interpolate_env_vars("${UNSET_VAR_XYZ:-host}") == "host"

    def test_empty_env_var_uses_default(self, monkeypatch):
        monkeypatch.setenv("EMPTY_VAR", "")
        assert interpolate_env_vars("${EMPTY_VAR:-fallback}") == "fallback"

    def test_literal_dollar_brace_no_closing(self):
        assert interpolate_env_vars("${NO_CLOSE") == "${NO_CLOSE"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("LOG_PATH", "/var/log/ext-tree.log")
        data = {"logging": {"file": "${LOG_PATH}", "extra": ["${LOG_PATH}", 3]}}

        assert _interpolate_recursive(data) == {
            "logging": {
                "file": "/var/log/ext-tree.log",
                "extra": ["/var/log/ext-tree.log", 3],
            }
        }


# -------------------------------------------------------------------------
# Discovery and merge
# -------------------------------------------------------------------------


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


class TestDiscovery:
    def test_no_files(self, tmp_path):
        assert discover_config_files(tmp_path / "project") == []

    def test_precedence_order(self, tmp_path, monkeypatch):
        explicit = _write(tmp_path / "explicit.yml", "ext_tree: {}\n")
        project = _write(
            tmp_path / "project" / ".git_ext_tree" / "config.yml", "{}\n"
        )
        user = _write(
            tmp_path / "home" / ".config" / "git_ext_tree" / "config.yml", "{}\n"
        )
        monkeypatch.setenv("GIT_EXT_TREE_CONFIG", str(explicit))

        found = discover_config_files(tmp_path / "project")

        assert found == [explicit.resolve(), project, user]


class TestLoadHierarchicalConfig:
    def test_zero_config(self, tmp_path):
        assert load_hierarchical_config(tmp_path) == {}

    def test_project_wins_per_top_level_key(self, tmp_path):
        _write(
            tmp_path / "home" / ".config" / "git_ext_tree" / "config.yml",
            """
            ext_tree:
              yes: true
            logging:
              level: DEBUG
            """,
        )
        _write(
            tmp_path / "project" / ".git_ext_tree" / "config.yml",
            """
            ext_tree:
              quiet: true
            """,
        )

        merged = load_hierarchical_config(tmp_path / "project")

        # Top-level keys are replaced, not deep-merged
        assert merged["ext_tree"] == {"quiet": True}
        assert merged["logging"] == {"level": "DEBUG"}

    def test_interpolates_after_merge(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EXT_TREE_LEVEL", "ERROR")
        _write(
            tmp_path / ".git_ext_tree" / "config.yml",
            "logging:\n  level: ${EXT_TREE_LEVEL:-INFO}\n",
        )

        assert load_hierarchical_config(tmp_path) == {
            "logging": {"level": "ERROR"}
        }

    def test_non_dict_root_is_skipped(self, tmp_path):
        _write(tmp_path / ".git_ext_tree" / "config.yml", "- a\n- b\n")

        assert load_hierarchical_config(tmp_path) == {}

    def test_invalid_yaml_raises(self, tmp_path):
        _write(tmp_path / ".git_ext_tree" / "config.yml", "ext_tree: [\n")

        with pytest.raises(yaml.YAMLError):
            load_hierarchical_config(tmp_path)
