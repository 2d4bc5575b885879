"""Run one ``init`` or ``sync`` tree import end to end.

The ``ExtTreeEngine`` drives the stages in order:

1. Check preconditions (work tree, clean index, no merge in progress).
2. Fetch ``<repository> <ref>`` into ``FETCH_HEAD`` when a repository is
   given, then resolve the external revision and its tree.
3. Stream both histories and find the alignment point.
4. Ask the freshness gate whether an import is needed.
5. Compose and edit the message, then write the import commit.
6. Merge the import commit into the current branch.

Fatal conditions raise an ``ExtTreeError`` subclass and stop the run at
once.  Non-fatal endings (up to date, declined, merge skipped) are
reported through ``ImportReport.outcome``.

Nothing is cached between runs: every run walks the histories again.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from git_ext_tree.core.git import GitRepository
from git_ext_tree.sync.builder import (
    FETCH_HEAD,
    build_import_commit,
    compose_import_message,
    describe_source,
)
from git_ext_tree.sync.errors import (
    AlreadyImported,
    BadRefName,
    DirtyWorkingTree,
    FetchFailure,
    MergeInProgress,
    NoCommonHistory,
    NotAGitRepository,
    UnresolvableRef,
)
from git_ext_tree.sync.freshness import check_freshness, plan_import
from git_ext_tree.sync.history import iter_history
from git_ext_tree.sync.merge import compose_merge_message, merge_import
from git_ext_tree.sync.models import (
    AlignmentPriority,
    Command,
    Freshness,
    ImportReport,
    Outcome,
    Resync,
)
from git_ext_tree.sync.prompts import Confirmer, MessageEditor
from git_ext_tree.sync.resolver import find_alignment

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ExtTreeEngine:
    """Import an external tree into the current branch of a repository.

    Args:
        repo: Host repository.
        confirmer: Yes/no gate before importing (sync) and before merging.
        editor: Turns the drafted import message into the final one.
        priority: Which history breaks ties in the alignment search.
        edit_merge: Open the editor on the merge commit message.
    """

    def __init__(
        self,
        repo: GitRepository,
        confirmer: Confirmer,
        editor: MessageEditor,
        priority: AlignmentPriority = AlignmentPriority.EXTERNAL,
        edit_merge: bool = False,
    ) -> None:
        self.repo = repo
        self.confirmer = confirmer
        self.editor = editor
        self.priority = priority
        self.edit_merge = edit_merge

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(
        self,
        command: Command,
        ref: str,
        repository: str | None = None,
    ) -> ImportReport:
        """Run *command* against *ref*, optionally fetched from *repository*.

        Returns:
            An ``ImportReport`` for runs that end without a fatal error.

        Raises:
            ExtTreeError: On any fatal condition.
        """
        started_at = _now()
        self.check_preconditions(command)

        external_ref = self._resolve_external(ref, repository)
        head_ref = self.repo.head_name()
        external_commit = self.repo.verify_commit(external_ref)
        if external_commit is None:
            raise UnresolvableRef(ref)
        external_tree = self.repo.tree_of(external_commit)
        source = describe_source(self.repo, external_ref)

        def report(outcome: Outcome, **fields) -> ImportReport:
            return ImportReport(
                command=command,
                outcome=outcome,
                head_ref=head_ref,
                external_ref=external_ref,
                source=source,
                external_tree=external_tree,
                started_at=started_at,
                completed_at=_now(),
                **fields,
            )

        # Find sync point
        alignment = find_alignment(
            iter_history(self.repo, "HEAD"),
            iter_history(self.repo, external_commit),
            self.priority,
        )
        freshness = check_freshness(command, alignment, external_tree)
        logger.debug("Alignment %s, freshness %s", alignment, freshness.value)

        if freshness == Freshness.ALREADY_IMPORTED and alignment is not None:
            raise AlreadyImported(
                external_ref, head_ref, self.repo.oneline(alignment.host_commit)
            )
        if freshness == Freshness.NO_COMMON_HISTORY:
            raise NoCommonHistory(head_ref, external_ref)
        if freshness == Freshness.UP_TO_DATE:
            logger.info(
                "'%s' already up to date with '%s', no new changes to synchronize",
                head_ref,
                external_ref,
            )
            return report(Outcome.UP_TO_DATE, alignment=alignment)

        plan = plan_import(command, alignment)
        if isinstance(plan, Resync):
            host_commit = plan.alignment.host_commit
            logger.info(
                "Last synchronization commit to '%s':  %s",
                head_ref,
                self.repo.oneline(host_commit),
            )
            prompt = (
                "Import tree as new descendant of commit "
                f"{self.repo.short_hash(host_commit)}?"
            )
            if not self.confirmer.confirm(prompt):
                logger.info("Import declined, nothing was written")
                return report(Outcome.DECLINED, alignment=alignment)

        # Create commit with the external tree
        draft = compose_import_message(self.repo, external_ref)
        message = self.editor.edit(draft)
        new_commit = build_import_commit(
            self.repo, external_tree, plan, message
        )
        logger.info("Successfully imported tree as new commit %s", new_commit)

        # Merge created commit into HEAD
        short = self.repo.short_hash(new_commit)
        if not self.confirmer.confirm(
            f"Merge imported commit {short} into '{self.repo.head_name()}'?"
        ):
            logger.info(
                "Merge skipped! To merge the new commit manually run:\n\n"
                "  git merge %s\n",
                short,
            )
            return report(
                Outcome.MERGE_SKIPPED,
                alignment=alignment,
                import_commit=new_commit,
            )

        logger.info("Merging...")
        merge_commit = merge_import(
            self.repo,
            new_commit,
            plan,
            compose_merge_message(self.repo, external_ref),
            edit=self.edit_merge,
            reflog_action=f"ext-tree: {command.value} tree {external_tree}",
        )
        logger.info("%s complete!", command.value)
        return report(
            Outcome.MERGED,
            alignment=alignment,
            import_commit=new_commit,
            merge_commit=merge_commit,
        )

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def check_preconditions(self, command: Command) -> None:
        """Refuse to run unless the repository is safe to modify.

        These are checks, not locks: a concurrent run can still race.
        """
        if not self.repo.is_inside_work_tree():
            raise NotAGitRepository(str(self.repo.path))
        if self.repo.verify_commit("HEAD") is None:
            raise UnresolvableRef("HEAD")
        if self.repo.merge_in_progress():
            raise MergeInProgress(command.value)
        if self.repo.has_unstaged_changes():
            raise DirtyWorkingTree(command.value, staged=False)
        if self.repo.has_staged_changes():
            raise DirtyWorkingTree(command.value, staged=True)

    # ------------------------------------------------------------------
    # External ref resolution
    # ------------------------------------------------------------------

    def _resolve_external(self, ref: str, repository: str | None) -> str:
        """Return a locally resolvable revision for the external source."""
        if repository is None:
            return ref

        normalized = self.repo.run(
            "check-ref-format", "--normalize", "--allow-onelevel", ref,
            check=False,
        )
        if normalized.returncode != 0:
            raise BadRefName(ref)
        ref = normalized.stdout.strip()

        logger.info("Fetching '%s' from %s", ref, repository)
        result = self.repo.run(
            "fetch", "--no-recurse-submodules", repository, ref,
            check=False,
            capture=False,
        )
        if result.returncode != 0:
            raise FetchFailure(repository, ref)
        return FETCH_HEAD
