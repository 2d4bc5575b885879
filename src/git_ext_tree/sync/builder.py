"""Compose and write the import commit.

The import commit carries the external tree unchanged and has at most one
parent: none for an initial import, the host-side alignment commit for a
resync.  It is written with ``git commit-tree`` and is unreferenced until
the merge step records it.
"""

from __future__ import annotations

import logging

from git_ext_tree.core.git import GitCommandError, GitRepository
from git_ext_tree.sync.errors import AbortedEmptyMessage, WriteFailure
from git_ext_tree.sync.models import ImportPlan

logger = logging.getLogger(__name__)

FETCH_HEAD = "FETCH_HEAD"


def describe_source(repo: GitRepository, rev: str) -> str:
    """Describe where an external revision came from.

    For ``FETCH_HEAD`` this reuses the wording of ``git fmt-merge-msg``
    (e.g. ``branch 'main' of https://host/repo``); any other revision is
    described as ``ref '<rev>'``.
    """
    if rev != FETCH_HEAD:
        return f"ref '{rev}'"

    fetch_head = repo.git_path(FETCH_HEAD)
    text = repo.output("fmt-merge-msg", "-F", str(fetch_head))
    first_line = text.splitlines()[0] if text else ""
    return first_line.removeprefix("Merge ")


def compose_import_message(repo: GitRepository, rev: str) -> str:
    """Draft message for the import commit, before any user editing."""
    lines = [
        f"Import tree object from {describe_source(repo, rev)}",
        "",
        f"  Latest commit: {repo.reference(rev)}",
        "",
    ]
    return "\n".join(lines)


def build_import_commit(
    repo: GitRepository,
    tree: str,
    plan: ImportPlan,
    message: str,
) -> str:
    """Write the import commit and return its hash.

    Args:
        repo: Repository to write into.
        tree: Tree hash of the external revision.
        plan: ``InitialImport`` (no parent) or ``Resync`` (one parent).
        message: Final commit message.

    Raises:
        AbortedEmptyMessage: If *message* is empty or only whitespace.
            Nothing is written in that case.
        WriteFailure: If ``git commit-tree`` fails; carries git's stderr.
    """
    if not message.strip():
        raise AbortedEmptyMessage()

    args = ["commit-tree"]
    for parent in plan.parents:
        args += ["-p", parent]
    args += ["-m", message, tree]

    try:
        commit = repo.output(*args)
    except GitCommandError as exc:
        raise WriteFailure(exc.stderr) from exc

    logger.debug(
        "Wrote import commit %s (tree %s, parents %s)",
        commit,
        tree,
        plan.parents,
    )
    return commit
