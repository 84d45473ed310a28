"""Version control initialisation for a finished working tree."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from .errors import ToolFailedError, VcsError
from .toolchain import run_tool

__all__ = ["GitVersionControl", "VersionControl", "commit_baseline"]


LOGGER = logging.getLogger(__name__)


class VersionControl(ABC):
    """Creates a repository and records commits in it."""

    @abstractmethod
    def init(self, tree: Path) -> None:
        """Initialise an empty repository rooted at ``tree``."""

    @abstractmethod
    def commit_all(self, tree: Path, message: str) -> str:
        """Stage every file under ``tree``, commit, and return the commit id."""


class GitVersionControl(VersionControl):
    """:class:`VersionControl` backed by the ``git`` command line."""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def _git(self, tree: Path, *args: str) -> str:
        try:
            result = run_tool([self.executable, *args], tree, capture=True)
        except ToolFailedError as exc:
            raise VcsError(f"git {args[0]} failed in {tree}: {exc}") from exc
        return result.stdout.strip()

    def init(self, tree: Path) -> None:
        self._git(tree, "init", "-q")

    def commit_all(self, tree: Path, message: str) -> str:
        self._git(tree, "add", "-A")
        self._git(tree, "commit", "-q", "-m", message)
        return self._git(tree, "rev-parse", "HEAD")


def commit_baseline(vcs: VersionControl, tree: str | Path, message: str) -> str:
    """Create a fresh repository in ``tree`` holding exactly one commit.

    Raises :class:`VcsError` when the repository cannot be created or the
    commit cannot be recorded, for instance when no author identity is
    configured.
    """

    tree = Path(tree)
    LOGGER.info("Creating initial commit in %s", tree)
    vcs.init(tree)
    commit_id = vcs.commit_all(tree, message)
    LOGGER.debug("Committed %s as %s", tree, commit_id)
    return commit_id
