"""Thin wrapper over the git executable shared by every sync stage."""

from .git import GitCommandError, GitRepository

__all__ = ["GitCommandError", "GitRepository"]
