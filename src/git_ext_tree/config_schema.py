"""Unified configuration schema for git_ext_tree.

Pydantic models for the YAML config structure, one section per concern:

    ext_tree:
      yes: false
      no_edit: false
      quiet: false
      alignment_priority: external
    logging:
      level: INFO
      file: null
      format: text

Usage:
    from git_ext_tree.config_loader import load_hierarchical_config
    from git_ext_tree.config_schema import build_config

    unified = build_config(load_hierarchical_config())
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .sync.models import AlignmentPriority

# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class ExtTreeConfig(BaseModel):
    """Defaults for the import commands.

    Every field can be overridden by environment variables or CLI flags.
    """

    yes: bool = Field(
        default=False, description="Skip confirmation prompts"
    )
    no_edit: bool = Field(
        default=False, description="Do not open an editor on messages"
    )
    quiet: bool = Field(
        default=False, description="Suppress progress output"
    )
    alignment_priority: AlignmentPriority = Field(
        default=AlignmentPriority.EXTERNAL,
        description="History whose recency breaks alignment ties",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` or ``json``.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log record format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration; ``UnifiedConfig()`` is always valid."""

    ext_tree: ExtTreeConfig = Field(default_factory=ExtTreeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged YAML dict.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: If a value has the wrong type.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
