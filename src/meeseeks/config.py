"""Configuration helpers shared by the project scaffolder and CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .naming import PLACEHOLDER, PLACEHOLDER_MODULE, derive_module_name, validate_project_name

__all__ = ["BUNDLED_TEMPLATES", "TEMPLATES_ENV_VAR", "ProjectConfig", "resolve_template_root"]


TEMPLATES_ENV_VAR = "MEESEEKS_TEMPLATES"
BUNDLED_TEMPLATES = Path(__file__).resolve().parent / "templates"


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Identifiers describing a new project.

    Attributes
    ----------
    name:
        The validated project name. It is used verbatim for the destination
        directory and wherever the lowercase placeholder appears.
    module_name:
        The capitalised identifier derived from :attr:`name`, used wherever the
        capitalised placeholder appears.
    """

    name: str
    module_name: str

    @classmethod
    def from_name(cls, name: str) -> "ProjectConfig":
        """Validate ``name`` and derive the module identifier from it."""

        validated = validate_project_name(name)
        return cls(name=validated, module_name=derive_module_name(validated))

    def substitutions(self) -> Mapping[str, str]:
        """Return placeholder replacements, capitalised token first."""

        return {
            PLACEHOLDER_MODULE: self.module_name,
            PLACEHOLDER: self.name,
        }


def resolve_template_root(
    override: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the directory holding one sub-directory per blueprint variant.

    ``override`` wins, then the ``MEESEEKS_TEMPLATES`` environment variable,
    then the templates bundled with the package.
    """

    if override is not None:
        return Path(override).expanduser()

    env = os.environ if environ is None else environ
    configured = env.get(TEMPLATES_ENV_VAR, "").strip()
    if configured:
        return Path(configured).expanduser()

    return BUNDLED_TEMPLATES
