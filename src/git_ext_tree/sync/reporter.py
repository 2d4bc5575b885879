"""Import report formatting.

- ``format_import_report`` -- human-readable post-run summary.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .models import Outcome

if TYPE_CHECKING:
    from .models import ImportReport

_OUTCOME_TEXT = {
    Outcome.MERGED: "import merged",
    Outcome.UP_TO_DATE: "already up to date",
    Outcome.DECLINED: "import declined",
    Outcome.MERGE_SKIPPED: "import written, merge skipped",
}


def format_import_report(report: ImportReport) -> str:
    """Format a completed run as human-readable text.

    Lines for the alignment, import and merge commits are only included
    when the run produced them.
    """
    lines = [
        f"ext-tree {report.command.value} '{report.head_ref}' "
        f"<- '{report.external_ref}': {_OUTCOME_TEXT[report.outcome]}",
    ]
    if report.source:
        lines.append(f"  Source:          {report.source}")
    lines.append(f"  External tree:   {report.external_tree}")
    if report.alignment is not None:
        lines.append(f"  Aligned at:      {report.alignment.host_commit}")
    if report.import_commit:
        lines.append(f"  Import commit:   {report.import_commit}")
    if report.merge_commit:
        lines.append(f"  Merge commit:    {report.merge_commit}")
    if report.outcome == Outcome.MERGE_SKIPPED and report.import_commit:
        lines.append("")
        lines.append(f"  To merge manually run: git merge {report.import_commit}")
    return "\n".join(lines)


def report_to_json(report: ImportReport) -> dict[str, Any]:
    """Convert a report to a JSON-serialisable dict."""
    data = report.model_dump(mode="json")
    data["summary"] = report.summary()
    return data
