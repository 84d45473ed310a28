"""Custom exception types raised while scaffolding a project."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "BlueprintNotFoundError",
    "BootstrapError",
    "DestinationExistsError",
    "EmptyProjectNameError",
    "FilesystemError",
    "InvalidProjectNameError",
    "MaterializeError",
    "MeeseeksError",
    "ProjectNameError",
    "ToolFailedError",
    "VcsError",
]


class MeeseeksError(RuntimeError):
    """Base class for every failure the scaffolding pipeline reports."""


class ProjectNameError(MeeseeksError, ValueError):
    """Raised when a user supplied project name cannot be accepted."""


class EmptyProjectNameError(ProjectNameError):
    def __init__(self) -> None:
        super().__init__("project name is required")


class InvalidProjectNameError(ProjectNameError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"invalid project name {name!r}: it must start with a lowercase letter and "
            "contain only lowercase letters, digits, and hyphens"
        )
        self.name = name


class BlueprintNotFoundError(MeeseeksError):
    """Raised when a blueprint variant or its template directory is unknown."""


class MaterializeError(MeeseeksError):
    """Raised when the blueprint cannot be copied into the working tree."""


class DestinationExistsError(MaterializeError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"directory '{path}' already exists")
        self.path = path


class FilesystemError(MaterializeError):
    """Raised when a copy, rename or write fails part way through."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class BootstrapError(MeeseeksError):
    """Raised when the toolchain bootstrap of a working tree fails."""


class ToolFailedError(BootstrapError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, tool: str, exit_code: int, detail: str = "") -> None:
        message = f"{tool} failed with exit code {exit_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.tool = tool
        self.exit_code = exit_code


class VcsError(MeeseeksError):
    """Raised when the working tree cannot be committed to version control."""
