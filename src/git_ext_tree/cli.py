"""Command line entry point for ``git-ext-tree`` (``git ext-tree``)."""

import argparse
import json
import logging
import sys

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import load_config
from .config_loader import load_hierarchical_config
from .config_schema import build_config
from .core.git import GitCommandError, GitRepository
from .logger import setup_logging
from .sync.engine import ExtTreeEngine
from .sync.errors import ExtTreeError
from .sync.models import Command
from .sync.prompts import create_confirmer, create_editor
from .sync.reporter import format_import_report, report_to_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git ext-tree",
        description="Creates point-in-time tree object imports from an "
        "external tree or repository.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  init  creates an initial import of a commit's tree object and merges
        the new commit into the current branch
  sync  imports a commit's tree object onto the first ancestor commit
        that has a common tree shared with the external tree and then
        merges the new commit into the current branch

Examples:
  # First import of a template repository
  git ext-tree init https://example.com/template.git main

  # Later, pull in the template's current tree
  git ext-tree sync https://example.com/template.git main

  # Import from a ref that is already available locally
  git ext-tree -y -c sync vendor/main
        """,
    )
    parser.add_argument(
        "-c",
        "--no-edit",
        action="store_true",
        help="skip editing message before commit",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="suppress unnecessary output",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="don't ask for confirmation before performing actions",
    )
    parser.add_argument(
        "--debug", action="store_true", help="enable debug logging"
    )
    parser.add_argument("--log-file", help="also append log records to this file")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="log record format on stderr (default: text)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print the run report as JSON on stdout",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"git-ext-tree version {__version__}",
    )
    parser.add_argument(
        "command", choices=[c.value for c in Command], help="init or sync"
    )
    parser.add_argument(
        "repository",
        nargs="?",
        help="repository to fetch <ref> from (default: use a local ref)",
    )
    parser.add_argument("ref", help="external ref whose tree is imported")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    try:
        unified = build_config(load_hierarchical_config())
        config = load_config(
            yes=args.yes,
            no_edit=args.no_edit,
            quiet=args.quiet,
            debug=args.debug,
            log_file=args.log_file,
            log_format=args.log_format,
            unified=unified,
        )
    except (ValueError, ValidationError, yaml.YAMLError) as exc:
        print(f"fatal: invalid configuration: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        level=config.log_level,
        debug=config.debug,
        quiet=config.quiet,
        log_file=config.log_file,
        debug_format=config.log_format,
    )

    repo = GitRepository()
    engine = ExtTreeEngine(
        repo,
        confirmer=create_confirmer(config.yes),
        editor=create_editor(repo, config.no_edit),
        priority=config.alignment_priority,
        edit_merge=not config.no_edit,
    )

    try:
        report = engine.run(
            Command(args.command), args.ref, repository=args.repository
        )
    except ExtTreeError as exc:
        logger.debug("Run failed", exc_info=True)
        print(f"fatal: {exc.message}", file=sys.stderr)
        return exc.exit_code
    except GitCommandError as exc:
        logger.debug("git failed", exc_info=True)
        print(f"fatal: {exc}", file=sys.stderr)
        return exc.returncode or 1

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    else:
        logger.debug("%s", format_import_report(report))
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
