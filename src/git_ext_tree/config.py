"""Runtime configuration for git-ext-tree.

Reads settings from CLI flags, environment variables, .env files and the
YAML config files found by ``config_loader``.

Precedence (highest to lowest):
    CLI flags > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    GIT_EXT_TREE_YES: Skip confirmation prompts (true/false)
    GIT_EXT_TREE_NO_EDIT: Do not open an editor on messages (true/false)
    GIT_EXT_TREE_QUIET: Suppress progress output (true/false)
    GIT_EXT_TREE_PRIORITY: Alignment tie-break, "external" or "host"
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import logging
import os
from dataclasses import dataclass

from .config_schema import UnifiedConfig
from .sync.models import AlignmentPriority

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    yes: bool = False
    no_edit: bool = False
    quiet: bool = False
    debug: bool = False
    alignment_priority: AlignmentPriority = AlignmentPriority.EXTERNAL
    log_level: str = "INFO"
    log_file: str | None = None
    log_format: str = "text"


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Raises:
        ValueError: If the log level or log format is unknown.
    """
    config.log_level = config.log_level.strip().upper()
    if config.log_level not in _LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{config.log_level}': must be one of {', '.join(_LOG_LEVELS)}"
        )

    if config.log_format not in ("text", "json"):
        raise ValueError(
            f"Invalid log format '{config.log_format}': must be 'text' or 'json'"
        )

    if config.quiet and config.debug:
        logger.warning("Both --quiet and --debug given; --debug wins")


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def _resolve_flag(cli_value: bool, env_key: str, fallback: bool) -> bool:
    if cli_value:
        return True
    env_value = _get_bool_env(env_key)
    if env_value is not None:
        return env_value
    return fallback


def load_config(
    yes: bool = False,
    no_edit: bool = False,
    quiet: bool = False,
    debug: bool = False,
    log_file: str | None = None,
    log_format: str | None = None,
    unified: UnifiedConfig | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI flag > env var / .env > unified (YAML) config > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        yes: ``-y/--yes`` flag.
        no_edit: ``-c/--no-edit`` flag.
        quiet: ``-q/--quiet`` flag.
        debug: ``--debug`` flag.
        log_file: ``--log-file`` value.
        log_format: ``--log-format`` value.
        unified: Config built from YAML files.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If a value is invalid after checking all sources.
    """
    fb = unified or UnifiedConfig()

    priority_raw = os.getenv("GIT_EXT_TREE_PRIORITY")
    if priority_raw is not None:
        try:
            priority = AlignmentPriority(priority_raw.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid GIT_EXT_TREE_PRIORITY '{priority_raw}': must be 'external' or 'host'"
            ) from None
    else:
        priority = fb.ext_tree.alignment_priority

    config = Config(
        yes=_resolve_flag(yes, "GIT_EXT_TREE_YES", fb.ext_tree.yes),
        no_edit=_resolve_flag(
            no_edit, "GIT_EXT_TREE_NO_EDIT", fb.ext_tree.no_edit
        ),
        quiet=_resolve_flag(quiet, "GIT_EXT_TREE_QUIET", fb.ext_tree.quiet),
        debug=debug,
        alignment_priority=priority,
        log_level=os.getenv("LOG_LEVEL") or fb.logging.level,
        log_file=log_file or fb.logging.file,
        log_format=log_format or fb.logging.format,
    )

    validate_config(config)

    return config
