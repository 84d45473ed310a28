"""External tool capabilities used to bootstrap a materialised project."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .errors import FilesystemError, ToolFailedError

__all__ = [
    "COMMAND_NOT_FOUND",
    "NpmInstaller",
    "PackageInitializer",
    "PackageInstaller",
    "SpagoInitializer",
    "Toolchain",
    "run_tool",
]


LOGGER = logging.getLogger(__name__)

# Exit status a POSIX shell reports for a command missing from PATH.
COMMAND_NOT_FOUND = 127


def run_tool(
    argv: Sequence[str],
    cwd: Path,
    *,
    capture: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run ``argv`` in ``cwd`` and block until it exits.

    Raises :class:`FilesystemError` when ``cwd`` is not a directory and
    :class:`ToolFailedError` when the executable cannot be started or exits
    with a non-zero status. No timeout is applied.
    """

    cwd = Path(cwd)
    if not cwd.is_dir():
        raise FilesystemError("working directory not found", cwd)

    tool = argv[0]
    LOGGER.debug("+ (%s) %s", cwd, " ".join(argv))
    try:
        result = subprocess.run(
            list(argv),
            cwd=str(cwd),
            text=True,
            check=False,
            capture_output=capture,
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError as exc:
        raise ToolFailedError(tool, COMMAND_NOT_FOUND, "command not found on PATH") from exc
    except OSError as exc:
        raise ToolFailedError(tool, COMMAND_NOT_FOUND, str(exc)) from exc

    if result.returncode != 0:
        detail = (result.stderr or "").strip() if capture else ""
        raise ToolFailedError(tool, result.returncode, detail)
    return result


class PackageInitializer(ABC):
    """Generates a fresh dependency descriptor and package set in a directory."""

    name: str = "initializer"

    @abstractmethod
    def initialize(self, directory: Path) -> None:
        """Run the package manager's project initialiser inside ``directory``."""


class PackageInstaller(ABC):
    """Installs the dependencies declared in a directory."""

    name: str = "installer"

    @abstractmethod
    def install(self, directory: Path) -> None:
        """Install declared dependencies non-interactively."""


class SpagoInitializer(PackageInitializer):
    """Run ``spago init`` to fetch the latest PureScript package set."""

    name = "spago"

    def __init__(self, executable: str = "spago") -> None:
        self.executable = executable

    def initialize(self, directory: Path) -> None:
        # -C: generate the dhall files without tutorial comments.
        run_tool([self.executable, "init", "-C"], directory)


class NpmInstaller(PackageInstaller):
    """Run ``npm install`` with its progress output silenced."""

    name = "npm"

    def __init__(self, executable: str = "npm") -> None:
        self.executable = executable

    def install(self, directory: Path) -> None:
        run_tool([self.executable, "install", "--silent"], directory)


@dataclass(slots=True)
class Toolchain:
    """Bundle of the package capabilities a bootstrap step may need."""

    initializer: PackageInitializer
    installer: PackageInstaller

    @classmethod
    def default(cls) -> "Toolchain":
        return cls(initializer=SpagoInitializer(), installer=NpmInstaller())
