"""Shared pytest fixtures for git-ext-tree tests.

Repository fixtures build real throwaway git repositories under
``tmp_path``.  Tests that use them are skipped when ``git`` is missing.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from git_ext_tree.core.git import GitRepository

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available"
)


def git(cwd: Path, *args: str) -> str:
    """Run git in *cwd* and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def init_repo(path: Path) -> Path:
    """Create an empty repository whose unborn branch is ``main``."""
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    return path


def commit_files(
    path: Path,
    files: dict[str, str],
    message: str,
    remove: tuple[str, ...] = (),
) -> str:
    """Write *files*, delete *remove*, commit everything and return HEAD."""
    for rel_path, content in files.items():
        fp = path / rel_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        fp.write_text(content, encoding="utf-8")
    for rel_path in remove:
        (path / rel_path).unlink()
    git(path, "add", "-A")
    git(path, "commit", "-q", "--allow-empty", "-m", message)
    return git(path, "rev-parse", "HEAD")


def parents_of(path: Path, rev: str) -> list[str]:
    line = git(path, "rev-list", "--parents", "-n", "1", rev)
    return line.split()[1:]


@pytest.fixture(autouse=True)
def isolated_git_env(tmp_path, monkeypatch):
    """Keep user/system git config out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Committer")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "committer@example.com")
    monkeypatch.setenv("GIT_EDITOR", "true")
    monkeypatch.delenv("GIT_EXT_TREE_CONFIG", raising=False)
    for key in (
        "GIT_EXT_TREE_YES",
        "GIT_EXT_TREE_NO_EDIT",
        "GIT_EXT_TREE_QUIET",
        "GIT_EXT_TREE_PRIORITY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def host_path(tmp_path) -> Path:
    """Host repository with a single commit containing ``host.txt``."""
    path = init_repo(tmp_path / "host")
    commit_files(path, {"host.txt": "host project\n"}, "Host initial")
    return path


@pytest.fixture
def upstream_path(tmp_path) -> Path:
    """External repository with two commits under ``lib/``."""
    path = init_repo(tmp_path / "upstream")
    commit_files(path, {"lib/a.txt": "one\ntwo\nthree\n"}, "Add a.txt")
    commit_files(path, {"lib/b.txt": "bee\n"}, "Add b.txt")
    return path


@pytest.fixture
def host_repo(host_path) -> GitRepository:
    return GitRepository(host_path)
