"""Data contracts shared by the tree import stages.

- ``Command``: ``init`` (first import) or ``sync`` (resynchronize).
- ``HistoryEntry``: one ``(commit, tree)`` pair of a history stream.
- ``Alignment``: the last point where host and external trees matched.
- ``InitialImport`` / ``Resync``: the import plan variant that decides
  the parents of the import commit and whether the merge must allow
  unrelated histories.
- ``Freshness``: verdict of the freshness gate.
- ``ImportReport``: outcome of one run.

Pydantic models are frozen (immutable).  ``HistoryEntry`` is a plain
named tuple since one is built per commit while walking history.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, NamedTuple, Union

from pydantic import BaseModel, Field


class Command(str, Enum):
    """Top-level operations."""

    INIT = "init"
    SYNC = "sync"


class AlignmentPriority(str, Enum):
    """Which history decides the winner when several trees match.

    ``external`` picks the most recent matching external commit;
    ``host`` picks the most recent matching host commit.
    """

    EXTERNAL = "external"
    HOST = "host"


class Freshness(str, Enum):
    """Whether an import is needed."""

    UP_TO_DATE = "up_to_date"
    NEEDS_IMPORT = "needs_import"
    NO_COMMON_HISTORY = "no_common_history"
    ALREADY_IMPORTED = "already_imported"


class Outcome(str, Enum):
    """How a run ended without a fatal error."""

    MERGED = "merged"
    UP_TO_DATE = "up_to_date"
    DECLINED = "declined"
    MERGE_SKIPPED = "merge_skipped"


class HistoryEntry(NamedTuple):
    commit: str
    tree: str


class Alignment(BaseModel):
    """Host and external commits sharing the same tree.

    Attributes:
        host_commit: Commit in host history the import attaches to.
        external_commit: Matching commit in the external history.
        tree: The tree hash both commits carry.
    """

    host_commit: str
    external_commit: str
    tree: str

    model_config = {"frozen": True}


class InitialImport(BaseModel):
    """First import: no parent, merged as an unrelated history."""

    kind: Literal["initial"] = "initial"

    model_config = {"frozen": True}

    @property
    def parents(self) -> list[str]:
        return []

    @property
    def allow_unrelated_histories(self) -> bool:
        return True


class Resync(BaseModel):
    """Re-import on top of the last alignment point."""

    kind: Literal["resync"] = "resync"
    alignment: Alignment

    model_config = {"frozen": True}

    @property
    def parents(self) -> list[str]:
        return [self.alignment.host_commit]

    @property
    def allow_unrelated_histories(self) -> bool:
        return False


ImportPlan = Annotated[
    Union[InitialImport, Resync], Field(discriminator="kind")
]


class ImportReport(BaseModel):
    """Result of a single ``init`` or ``sync`` run.

    Attributes:
        command: The command that was run.
        outcome: How the run ended.
        head_ref: Short name of the host branch (or detached hash).
        external_ref: The external revision as given or ``FETCH_HEAD``.
        source: Human description of the external source.
        external_tree: Tree hash imported (or already present).
        alignment: Alignment point found, if any.
        import_commit: Hash of the import commit, if one was written.
        merge_commit: Hash of the merge commit, if the merge ran.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run ended.
    """

    command: Command
    outcome: Outcome
    head_ref: str
    external_ref: str
    source: str | None = None
    external_tree: str
    alignment: Alignment | None = None
    import_commit: str | None = None
    merge_commit: str | None = None
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def wrote_commit(self) -> bool:
        return self.import_commit is not None

    def summary(self) -> str:
        """One-line summary of the run."""
        text = f"{self.command.value}: {self.outcome.value}"
        if self.import_commit:
            text += f" (import {self.import_commit[:12]})"
        return text
