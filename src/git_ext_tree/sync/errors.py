"""Fatal conditions of a tree import run.

Every error carries the process exit code the CLI reports.  All of them
halt the run immediately; nothing is retried.
"""

from __future__ import annotations


class ExtTreeError(Exception):
    """Base class for fatal import errors."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class NotAGitRepository(ExtTreeError):
    def __init__(self, path: str) -> None:
        super().__init__(f"not a git work tree: {path}")


class UnresolvableRef(ExtTreeError):
    def __init__(self, rev: str) -> None:
        self.rev = rev
        super().__init__(f"bad revision '{rev}'")


class BadRefName(ExtTreeError):
    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"bad ref '{ref}'")


class FetchFailure(ExtTreeError):
    def __init__(self, repository: str, ref: str) -> None:
        super().__init__(
            f"fetch of '{ref}' from '{repository}' returned an error"
        )


class DirtyWorkingTree(ExtTreeError):
    def __init__(self, command: str, staged: bool) -> None:
        what = (
            "Your index contains uncommitted changes"
            if staged
            else "You have unstaged changes"
        )
        super().__init__(f"Cannot {command}: {what}.")


class MergeInProgress(ExtTreeError):
    def __init__(self, command: str) -> None:
        super().__init__(
            f"Cannot {command}: a merge is in progress. "
            "Conclude it with 'git commit' or 'git merge --abort'."
        )


class NoCommonHistory(ExtTreeError):
    def __init__(self, head_ref: str, external_ref: str) -> None:
        super().__init__(
            f"'{head_ref}' has no history in common with '{external_ref}'"
        )


class AlreadyImported(ExtTreeError):
    def __init__(self, external_ref: str, head_ref: str, commit: str) -> None:
        self.commit = commit
        super().__init__(
            f"found existing import from '{external_ref}' in '{head_ref}':  {commit}"
        )


class EditorFailure(ExtTreeError):
    def __init__(self, returncode: int) -> None:
        super().__init__(
            f"There was a problem with the editor (exit status {returncode})."
        )


class AbortedEmptyMessage(ExtTreeError):
    def __init__(self) -> None:
        super().__init__("Aborting commit due to empty commit message.")


class WriteFailure(ExtTreeError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        msg = "failed to create import commit"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class MergeConflict(ExtTreeError):
    """``git merge`` stopped; the working tree is left as git left it."""

    def __init__(self, commit: str, returncode: int) -> None:
        self.commit = commit
        super().__init__(
            f"merge of import commit {commit} failed; resolve the conflicts "
            "and run 'git commit', or 'git merge --abort'",
            exit_code=returncode or 1,
        )


class MergeRefused(ExtTreeError):
    """``git merge`` refused to start; nothing was merged."""

    def __init__(self, commit: str, returncode: int) -> None:
        self.commit = commit
        super().__init__(
            f"git refused to merge import commit {commit}; fix the problem "
            f"reported above, then run 'git merge {commit}'",
            exit_code=returncode or 1,
        )
