"""Merge the import commit into the current branch.

The merge is always a true merge (``--no-ff``).  An initial import has no
ancestor in common with the host branch, so only that case passes
``--allow-unrelated-histories``.  Conflicts are left for the user exactly
as ``git merge`` leaves them; a merge git refuses to start leaves the
import commit unmerged.
"""

from __future__ import annotations

import logging

from git_ext_tree.core.git import GitRepository
from git_ext_tree.sync.builder import describe_source
from git_ext_tree.sync.errors import MergeConflict, MergeRefused
from git_ext_tree.sync.models import ImportPlan

logger = logging.getLogger(__name__)


def compose_merge_message(repo: GitRepository, rev: str) -> str:
    return f"Merge ext-tree import from {describe_source(repo, rev)}"


def merge_import(
    repo: GitRepository,
    commit: str,
    plan: ImportPlan,
    message: str,
    *,
    edit: bool = False,
    reflog_action: str | None = None,
) -> str:
    """Merge *commit* into HEAD and return the new HEAD hash.

    Args:
        repo: Host repository.
        commit: The import commit.
        plan: Import plan; decides ``--allow-unrelated-histories``.
        message: Merge commit message.
        edit: Open the editor on the merge message.
        reflog_action: Value for ``GIT_REFLOG_ACTION``.

    Raises:
        MergeConflict: If ``git merge`` stopped with the merge in progress.
        MergeRefused: If ``git merge`` exited non-zero before merging.
    """
    args = ["merge", "--no-ff"]
    if plan.allow_unrelated_histories:
        args.append("--allow-unrelated-histories")
    args.append("--edit" if edit else "--no-edit")
    args += ["--log=1", "-m", message, commit]

    env = {"GIT_REFLOG_ACTION": reflog_action} if reflog_action else None
    # Output goes to the terminal so conflicts are reported by git itself
    result = repo.run(*args, check=False, env=env, capture=False)
    if result.returncode != 0:
        logger.error(
            "git merge exited with status %d for %s",
            result.returncode,
            commit,
        )
        if repo.merge_in_progress():
            raise MergeConflict(commit, result.returncode)
        raise MergeRefused(commit, result.returncode)

    return repo.output("rev-parse", "HEAD")
