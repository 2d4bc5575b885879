import json
import logging
import sys

TEXT_FORMAT = "%(message)s"
DEBUG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Single-line JSON formatter for structured debug output.

    Produces one JSON object per log record with fields: ts, level, logger, msg.
    Exception info is included as an "exc" field when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _make_formatter(debug: bool, debug_format: str) -> logging.Formatter:
    if debug_format == "json":
        return JsonFormatter(datefmt=DATE_FORMAT)
    if debug:
        return logging.Formatter(DEBUG_FORMAT, datefmt=DATE_FORMAT)
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(
    level: str = "INFO",
    debug: bool = False,
    quiet: bool = False,
    log_file: str | None = None,
    debug_format: str = "text",
) -> None:
    """
    Configure logging for the command line.

    Progress messages are INFO records on stderr, so stdout stays free
    for ``--json`` output.

    Args:
        level: Base level name, usually from LOG_LEVEL or the config file.
        debug: If True, overrides the level to DEBUG and adds timestamps.
        quiet: If True, raises the level to WARNING (ignored with debug).
        log_file: Also append records to this file.
        debug_format: "text" (default) or "json" for structured output.
    """
    if debug:
        log_level = logging.DEBUG
    elif quiet:
        log_level = logging.WARNING
    else:
        log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_make_formatter(debug, debug_format))
    handlers.append(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        if debug_format == "json":
            file_handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
        else:
            file_handler.setFormatter(
                logging.Formatter(DEBUG_FORMAT, datefmt=DATE_FORMAT)
            )
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,
    )
