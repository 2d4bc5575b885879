"""Point-in-time tree imports into a host branch.

Public API for importing the tree of an external revision into the
current branch without importing the external history.

Architecture
------------
Each run re-derives everything from the commit graph; no state is kept
between runs.  The last synchronization point is found by **tree
identity**, not ancestry: the import commit is attached to the host
commit whose tree equals a tree in the external history.

Modules:

- ``history``    -- ``iter_history``: lazy ``(commit, tree)`` streams.
- ``resolver``   -- ``find_alignment``: first shared tree of two streams.
- ``freshness``  -- ``check_freshness``/``plan_import``: is an import needed.
- ``builder``    -- ``build_import_commit``: writes the import commit.
- ``merge``      -- ``merge_import``: ``--no-ff`` merge into HEAD.
- ``engine``     -- ``ExtTreeEngine``: runs the stages in order.
- ``prompts``    -- confirmation and message-editing collaborators.
- ``models``     -- data contracts.
- ``errors``     -- fatal conditions and their exit codes.
- ``reporter``   -- human-readable and JSON reports.

Usage example
-------------
::

    from git_ext_tree.core.git import GitRepository
    from git_ext_tree.sync import (
        AutoConfirmer,
        Command,
        ExtTreeEngine,
        NoEdit,
        format_import_report,
    )

    repo = GitRepository(".")
    engine = ExtTreeEngine(repo, AutoConfirmer(), NoEdit())

    report = engine.run(
        Command.SYNC, "main", repository="https://example.com/template.git"
    )
    print(format_import_report(report))
"""

from .engine import ExtTreeEngine
from .errors import ExtTreeError
from .models import (
    Alignment,
    AlignmentPriority,
    Command,
    Freshness,
    HistoryEntry,
    ImportReport,
    InitialImport,
    Outcome,
    Resync,
)
from .prompts import AutoConfirmer, GitEditor, NoEdit, TerminalConfirmer
from .reporter import format_import_report, report_to_json
from .resolver import find_alignment

__all__ = [
    "Alignment",
    "AlignmentPriority",
    "AutoConfirmer",
    "Command",
    "ExtTreeEngine",
    "ExtTreeError",
    "Freshness",
    "GitEditor",
    "HistoryEntry",
    "ImportReport",
    "InitialImport",
    "NoEdit",
    "Outcome",
    "Resync",
    "TerminalConfirmer",
    "find_alignment",
    "format_import_report",
    "report_to_json",
]
