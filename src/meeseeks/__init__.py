"""Create new projects from curated blueprints.

A blueprint is an ordinary directory tree that uses ``rambutan`` (and
``Rambutan``) as a stand-in for the project name. The package copies that tree,
renames paths and rewrites text files for a chosen project name, runs the
blueprint's toolchain bootstrap steps, and records an initial commit.
"""

from __future__ import annotations

from .blueprints import BLUEPRINTS, BlueprintVariant, get_variant
from .bootstrap import Bootstrapper
from .config import ProjectConfig
from .errors import (
    BootstrapError,
    DestinationExistsError,
    FilesystemError,
    MaterializeError,
    MeeseeksError,
    ProjectNameError,
    ToolFailedError,
    VcsError,
)
from .naming import derive_module_name, validate_project_name
from .scaffold import ProjectScaffolder, ScaffoldResult
from .template import PlaceholderMap, SniffingClassifier, TemplateMaterializer, TextClassifier
from .vcs import GitVersionControl, commit_baseline

__all__ = [
    "BLUEPRINTS",
    "BlueprintVariant",
    "BootstrapError",
    "Bootstrapper",
    "DestinationExistsError",
    "FilesystemError",
    "GitVersionControl",
    "MaterializeError",
    "MeeseeksError",
    "PlaceholderMap",
    "ProjectConfig",
    "ProjectNameError",
    "ProjectScaffolder",
    "ScaffoldResult",
    "SniffingClassifier",
    "TemplateMaterializer",
    "TextClassifier",
    "ToolFailedError",
    "VcsError",
    "commit_baseline",
    "derive_module_name",
    "get_variant",
    "validate_project_name",
]

__version__ = "0.1.0"
