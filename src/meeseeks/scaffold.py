"""Project scaffolding pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .blueprints import BlueprintVariant
from .bootstrap import Bootstrapper
from .config import ProjectConfig
from .template import PlaceholderMap, TemplateMaterializer
from .vcs import GitVersionControl, VersionControl, commit_baseline

__all__ = ["ProjectScaffolder", "ScaffoldResult"]


LOGGER = logging.getLogger(__name__)


class ScaffoldResult(BaseModel):
    """Summary of a successfully created project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: Path = Field(..., description="Root of the created project.")
    name: str = Field(..., description="Validated project name.")
    module_name: str = Field(..., description="Identifier derived from the project name.")
    variant: str = Field(..., description="Blueprint variant the project was created from.")
    commit_id: str = Field(..., description="Identifier of the initial commit.")
    next_steps: List[str] = Field(default_factory=list, description="Suggested follow-up commands.")


class ProjectScaffolder:
    """Materialise, bootstrap and commit a new project from a blueprint."""

    def __init__(
        self,
        materializer: TemplateMaterializer | None = None,
        bootstrapper: Bootstrapper | None = None,
        vcs: VersionControl | None = None,
    ) -> None:
        self.materializer = materializer or TemplateMaterializer()
        self.bootstrapper = bootstrapper or Bootstrapper()
        self.vcs = vcs or GitVersionControl()

    def create(
        self,
        config: ProjectConfig,
        variant: BlueprintVariant,
        parent_dir: str | Path,
        *,
        template_root: str | Path | None = None,
    ) -> ScaffoldResult:
        """Create ``config.name`` inside ``parent_dir`` from ``variant``.

        Each stage runs only when the previous one succeeded. Nothing is
        cleaned up on failure: a tree that was materialised but failed to
        bootstrap or commit stays on disk.
        """

        target_path = Path(parent_dir).expanduser() / config.name
        blueprint = variant.template_dir(template_root)
        placeholders = PlaceholderMap.for_project(config)

        self.materializer.materialize(blueprint, target_path, placeholders)
        self.bootstrapper.run(target_path, variant)
        commit_id = commit_baseline(self.vcs, target_path, variant.commit_message)

        LOGGER.debug("Project %s created at %s", config.name, target_path)
        return ScaffoldResult(
            path=target_path,
            name=config.name,
            module_name=config.module_name,
            variant=variant.name,
            commit_id=commit_id,
            next_steps=[f"cd {config.name}", *variant.next_steps],
        )
