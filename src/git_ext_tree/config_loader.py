"""
Hierarchical configuration loader for git_ext_tree.

Discovers YAML config files by convention, merges them with "project
wins" semantics and interpolates environment variables.

Usage:
    from git_ext_tree.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GIT_EXT_TREE_CONFIG"
CONFIG_DIR_NAME = ".git_ext_tree"

# ---------------------------------------------------------------------------
# 1. Env var interpolation
# ---------------------------------------------------------------------------

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` with environment values.

    An unset or empty variable falls back to *default*, or to the empty
    string when there is none.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# 2. Convention-based file discovery
# ---------------------------------------------------------------------------


def discover_config_files(start: Path | None = None) -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. ``GIT_EXT_TREE_CONFIG`` env var (explicit single path).
        2. ``.git_ext_tree/config.yml`` in *start* (default: CWD).
        3. ``~/.config/git_ext_tree/config.yml`` (XDG global).

    Only paths that exist on disk are returned.
    """
    candidates: list[Path] = []

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    base = start or Path.cwd()
    candidates.append(base / CONFIG_DIR_NAME / "config.yml")
    candidates.append(Path.home() / ".config" / "git_ext_tree" / "config.yml")

    return [p for p in candidates if p.exists()]


def _load_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


# ---------------------------------------------------------------------------
# 3. Hierarchical merge
# ---------------------------------------------------------------------------


def load_hierarchical_config(start: Path | None = None) -> dict[str, Any]:
    """Load and merge all discovered config files.

    Files are loaded from lowest precedence to highest; each file's
    top-level keys **replace** (not deep-merge) those from earlier files.
    Env var interpolation runs after the merge.

    Returns an empty dict when no config files exist (zero-config).
    """
    paths = discover_config_files(start)

    if not paths:
        logger.debug("No config files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = _load_yaml(path)
        except yaml.YAMLError:
            logger.exception("Failed to load config file %s", path)
            raise

        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
