import logging
import os
import subprocess
from collections.abc import Iterator, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

# stdout is reserved for machine-readable output
STDERR_FILENO = 2


class GitCommandError(Exception):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str = ""):
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(
            f"'git {' '.join(args)}' exited with status {returncode}{detail}"
        )


class GitRepository:
    def __init__(self, path: Path | str | None = None, git: str = "git"):
        self.path = Path(path) if path is not None else Path.cwd()
        self.git = git

    def _env(self, extra: Mapping[str, str] | None) -> dict[str, str] | None:
        if not extra:
            return None
        env = dict(os.environ)
        env.update(extra)
        return env

    def run(
        self,
        *args: str,
        check: bool = True,
        input: str | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = True,
    ) -> subprocess.CompletedProcess:
        """
        Run a git command in the repository and wait for it to finish.

        With ``capture=False`` the command talks to the terminal directly,
        which is what interactive commands (merge, fetch progress) need.
        Its stdout is sent to our stderr so stdout only carries reports.
        """
        cmd = [self.git, *args]
        logger.debug("Running %s", cmd)
        result = subprocess.run(
            cmd,
            cwd=str(self.path),
            input=input,
            env=self._env(env),
            stdout=subprocess.PIPE if capture else STDERR_FILENO,
            stderr=subprocess.PIPE if capture else None,
            text=True,
        )
        if check and result.returncode != 0:
            raise GitCommandError(
                list(args), result.returncode, result.stderr or ""
            )
        return result

    def output(self, *args: str, input: str | None = None) -> str:
        """
        Run a git command and return its stdout without the trailing newline.
        """
        return self.run(*args, input=input).stdout.rstrip("\n")

    def stream_lines(self, *args: str) -> Iterator[str]:
        """
        Yield stdout lines of a git command as they are produced.

        The child process is terminated if the consumer stops early.
        """
        cmd = [self.git, *args]
        logger.debug("Streaming %s", cmd)
        proc = subprocess.Popen(
            cmd,
            cwd=str(self.path),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        finished = False
        try:
            for line in proc.stdout:  # type: ignore[union-attr]
                yield line.rstrip("\n")
            finished = True
        finally:
            if not finished and proc.poll() is None:
                proc.terminate()
            proc.stdout.close()  # type: ignore[union-attr]
            stderr = proc.stderr.read() if proc.stderr else ""
            if proc.stderr:
                proc.stderr.close()
            returncode = proc.wait()
        if returncode != 0:
            raise GitCommandError(list(args), returncode, stderr)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_inside_work_tree(self) -> bool:
        result = self.run("rev-parse", "--is-inside-work-tree", check=False)
        return result.returncode == 0 and result.stdout.strip() == "true"

    def verify_commit(self, rev: str) -> str | None:
        """
        Return the full hash of the commit *rev* names, or None.
        """
        result = self.run(
            "rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}", check=False
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def tree_of(self, rev: str) -> str:
        return self.output("rev-parse", f"{rev}^{{tree}}")

    def short_hash(self, rev: str) -> str:
        return self.output("rev-parse", "--short", rev)

    def head_name(self) -> str:
        """
        Short branch name of HEAD, or its short hash when detached.
        """
        result = self.run("symbolic-ref", "--short", "--quiet", "HEAD", check=False)
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
        return self.short_hash("HEAD")

    def git_dir(self) -> Path:
        return self._resolve(self.output("rev-parse", "--git-dir"))

    def git_path(self, name: str) -> Path:
        return self._resolve(self.output("rev-parse", "--git-path", name))

    def _resolve(self, raw: str) -> Path:
        path = Path(raw)
        if not path.is_absolute():
            path = self.path / path
        return path

    def refresh_index(self) -> None:
        """
        Update stat information in the index so that files whose content
        is unchanged are not reported as modified.
        """
        self.run("update-index", "-q", "--ignore-submodules", "--refresh", check=False)

    def has_unstaged_changes(self) -> bool:
        self.refresh_index()
        result = self.run(
            "diff-files", "--quiet", "--ignore-submodules", check=False
        )
        return result.returncode != 0

    def has_staged_changes(self) -> bool:
        result = self.run(
            "diff-index",
            "--cached",
            "--quiet",
            "--ignore-submodules",
            "HEAD",
            "--",
            check=False,
        )
        return result.returncode != 0

    def merge_in_progress(self) -> bool:
        return self.git_path("MERGE_HEAD").exists()

    def oneline(self, rev: str) -> str:
        """
        ``git log --oneline --decorate`` summary of a single commit.
        """
        return self.output(
            "log", "--oneline", "--decorate", "--no-color", "-n", "1", rev
        )

    def reference(self, rev: str) -> str:
        """
        Commit reference in ``<hash> (<subject>, <date>)`` form.
        """
        return self.output("log", "--no-color", "--format=reference", "-n", "1", rev)
