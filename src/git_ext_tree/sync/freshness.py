"""Decide whether an import is needed and which import plan to run."""

from __future__ import annotations

from git_ext_tree.sync.models import (
    Alignment,
    Command,
    Freshness,
    ImportPlan,
    InitialImport,
    Resync,
)


def check_freshness(
    command: Command,
    alignment: Alignment | None,
    external_tree: str,
) -> Freshness:
    """Compare the external tree with the alignment point.

    ``init`` tolerates a missing alignment but refuses to run when the
    external history has already been imported.  ``sync`` requires one.
    """
    if command == Command.INIT:
        if alignment is None:
            return Freshness.NEEDS_IMPORT
        return Freshness.ALREADY_IMPORTED

    if alignment is None:
        return Freshness.NO_COMMON_HISTORY
    if alignment.tree == external_tree:
        return Freshness.UP_TO_DATE
    return Freshness.NEEDS_IMPORT


def plan_import(command: Command, alignment: Alignment | None) -> ImportPlan:
    """Build the import plan for a run that needs an import."""
    if command == Command.INIT or alignment is None:
        return InitialImport()
    return Resync(alignment=alignment)
