"""Lazy ``(commit, tree)`` streams over a commit history.

``git rev-list --topo-order`` guarantees that a descendant is never listed
after one of its ancestors.  Lines are parsed as they come off the pipe,
so a consumer that stops at its first match never makes us hold the
whole history in memory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from git_ext_tree.core.git import GitRepository
from git_ext_tree.sync.errors import UnresolvableRef
from git_ext_tree.sync.models import HistoryEntry

logger = logging.getLogger(__name__)

_HEADER_PREFIX = "commit "


def iter_history(repo: GitRepository, rev: str) -> Iterator[HistoryEntry]:
    """Stream the history reachable from *rev*, most recent first.

    The revision is resolved eagerly, so a bad revision fails here rather
    than on the first ``next()``.

    Raises:
        UnresolvableRef: If *rev* does not name a commit.
    """
    commit = repo.verify_commit(rev)
    if commit is None:
        raise UnresolvableRef(rev)
    logger.debug("Walking history of %s (%s)", rev, commit)
    return _walk(repo, commit)


def _walk(repo: GitRepository, commit: str) -> Iterator[HistoryEntry]:
    lines = repo.stream_lines(
        "rev-list", "--topo-order", "--format=%H %T", commit
    )
    for line in lines:
        # rev-list prints a "commit <hash>" header before each format line
        if not line or line.startswith(_HEADER_PREFIX):
            continue
        commit_hash, _, tree = line.partition(" ")
        yield HistoryEntry(commit_hash, tree)
