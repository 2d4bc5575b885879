"""User-facing collaborators injected into the import engine.

- ``Confirmer``: yes/no gate before importing and before merging.
  ``TerminalConfirmer`` asks on the terminal, ``AutoConfirmer`` always
  agrees (``--yes``).
- ``MessageEditor``: turns the drafted import message into the final one.
  ``GitEditor`` opens the user's configured git editor, ``NoEdit`` keeps
  the draft (``--no-edit``).

The ``create_confirmer()`` and ``create_editor()`` factories map CLI
flags to implementations.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import tempfile
from collections.abc import Callable
from typing import Protocol

from git_ext_tree.core.git import GitRepository
from git_ext_tree.sync.errors import EditorFailure

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class Confirmer(Protocol):
    """Protocol for yes/no confirmation gates."""

    def confirm(self, prompt: str) -> bool:
        """Return ``True`` to proceed, ``False`` to stop."""
        ...  # pragma: no cover


class MessageEditor(Protocol):
    """Protocol for commit message editing."""

    def edit(self, draft: str) -> str:
        """Return the final message.  An empty string means abort."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Confirmers
# ---------------------------------------------------------------------------


def read_answer(prompt: str) -> str:
    """Like ``input()``, but the prompt goes to stderr, keeping stdout clean."""
    sys.stderr.write(prompt)
    sys.stderr.flush()
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line


class TerminalConfirmer:
    """Ask ``<prompt> (y/N)`` and accept only ``y`` or ``Y``."""

    def __init__(self, input_func: Callable[[str], str] = read_answer) -> None:
        self._input = input_func

    def confirm(self, prompt: str) -> bool:
        try:
            key = self._input(f"{prompt} (y/N) ")
        except EOFError:
            return False
        return key.strip() in ("y", "Y")


class AutoConfirmer:
    """Confirm everything without asking."""

    def confirm(self, prompt: str) -> bool:
        logger.debug("Auto-confirmed: %s", prompt)
        return True


# ---------------------------------------------------------------------------
# Message editors
# ---------------------------------------------------------------------------


class NoEdit:
    """Use the drafted message as is."""

    def edit(self, draft: str) -> str:
        return draft


class GitEditor:
    """Edit the message with the editor git itself would launch.

    The draft goes to a temporary file inside the git directory; the
    editor comes from ``git var GIT_EDITOR`` and is run through the shell
    like git does.  The result is cleaned with ``git stripspace -s``, which
    drops comment lines and surplus blank lines.
    """

    def __init__(self, repo: GitRepository) -> None:
        self.repo = repo

    def edit(self, draft: str) -> str:
        editor = self.repo.output("var", "GIT_EDITOR")
        fd, path = tempfile.mkstemp(
            prefix="EXT_TREE_EDITMSG", dir=str(self.repo.git_dir())
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(draft + "\n")

            result = subprocess.run(
                ["sh", "-c", f'{editor} "$@"', editor, path],
                cwd=str(self.repo.path),
            )
            if result.returncode != 0:
                raise EditorFailure(result.returncode)

            with open(path, encoding="utf-8") as fh:
                edited = fh.read()
        finally:
            os.unlink(path)

        return self.repo.run("stripspace", "-s", input=edited).stdout


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def create_confirmer(yes: bool) -> Confirmer:
    return AutoConfirmer() if yes else TerminalConfirmer()


def create_editor(repo: GitRepository, no_edit: bool) -> MessageEditor:
    return NoEdit() if no_edit else GitEditor(repo)
