"""Find the last point where host and external histories were aligned.

Alignment is decided purely by tree identity: two commits are aligned when
they carry the same tree hash, whatever their ancestry, author or date.

One stream is buffered into a ``tree -> commit`` map and the other is
scanned lazily until the first hit, keeping the search linear in history
size.  Which stream is buffered depends on which side's recency order
decides ties:

- ``AlignmentPriority.EXTERNAL``: the most recent external commit with any
  match wins.  The host stream is buffered and the external one scanned.
- ``AlignmentPriority.HOST``: the most recent host commit with any match
  wins.  The external stream is buffered and the host one scanned.

When a tree repeats inside the buffered stream, its first occurrence in
that stream's traversal order is kept.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from git_ext_tree.sync.models import Alignment, AlignmentPriority, HistoryEntry

logger = logging.getLogger(__name__)


def _index_trees(stream: Iterable[HistoryEntry]) -> dict[str, str]:
    index: dict[str, str] = {}
    for entry in stream:
        index.setdefault(entry.tree, entry.commit)
    return index


def find_alignment(
    host: Iterable[HistoryEntry],
    external: Iterable[HistoryEntry],
    priority: AlignmentPriority = AlignmentPriority.EXTERNAL,
) -> Alignment | None:
    """Return the alignment point of two history streams.

    Args:
        host: History stream of the host branch.
        external: History stream of the external revision.
        priority: Which stream's recency order breaks ties.

    Returns:
        The ``Alignment`` found, or ``None`` if the streams share no tree.
    """
    if priority == AlignmentPriority.EXTERNAL:
        host_trees = _index_trees(host)
        logger.debug("Indexed %d distinct host trees", len(host_trees))
        for entry in external:
            host_commit = host_trees.get(entry.tree)
            if host_commit is not None:
                return Alignment(
                    host_commit=host_commit,
                    external_commit=entry.commit,
                    tree=entry.tree,
                )
        return None

    external_trees = _index_trees(external)
    logger.debug("Indexed %d distinct external trees", len(external_trees))
    for entry in host:
        external_commit = external_trees.get(entry.tree)
        if external_commit is not None:
            return Alignment(
                host_commit=entry.commit,
                external_commit=external_commit,
                tree=entry.tree,
            )
    return None
