"""Blueprint variant definitions."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import resolve_template_root
from .errors import BlueprintNotFoundError


class PackageSetStep(BaseModel):
    """Regenerate a package set while keeping the hand-written descriptor."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["package-set"] = "package-set"
    directory: str = Field(..., description="Directory, relative to the project root, to initialise.")
    descriptor: str = Field(..., description="Hand-authored dependency descriptor to preserve.")
    stash_suffix: str = Field(default=".custom", description="Suffix used while the descriptor is set aside.")


class InstallStep(BaseModel):
    """Install locally declared tooling dependencies."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["install"] = "install"
    directory: str = Field(..., description="Directory, relative to the project root, to install in.")


BootstrapStep = Annotated[Union[PackageSetStep, InstallStep], Field(discriminator="kind")]


class BlueprintVariant(BaseModel):
    """A named blueprint and everything needed to turn it into a project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Variant name, also the template sub-directory.")
    description: str = Field(..., description="One line summary shown by ``meeseeks list``.")
    bootstrap: List[BootstrapStep] = Field(default_factory=list, description="Ordered toolchain steps.")
    next_steps: List[str] = Field(default_factory=list, description="Commands suggested once the project exists.")

    @property
    def commit_message(self) -> str:
        return f"Initial commit from meeseeks {self.name} template"

    def template_dir(self, root: str | Path | None = None) -> Path:
        """Return the blueprint directory for this variant under ``root``."""

        return resolve_template_root(root) / self.name


HASKELL = BlueprintVariant(
    name="haskell",
    description="Haskell project with GHC2024, HLS, fourmolu, hlint, hspec, and Nix flake",
    next_steps=["nix develop", "just build", "just run"],
)

FULLSTACK = BlueprintVariant(
    name="fullstack",
    description="Servant backend with a PureScript frontend, browser-sync dev server, and Nix flake",
    bootstrap=[
        PackageSetStep(directory="frontend", descriptor="spago.dhall"),
        InstallStep(directory="frontend"),
    ],
    next_steps=[
        "nix develop",
        "just build",
        "just run-backend",
        "just watch-frontend  # in another terminal",
    ],
)

BLUEPRINTS: Dict[str, BlueprintVariant] = {variant.name: variant for variant in (HASKELL, FULLSTACK)}


def get_variant(name: str) -> BlueprintVariant:
    try:
        return BLUEPRINTS[name]
    except KeyError as exc:
        known = ", ".join(sorted(BLUEPRINTS))
        raise BlueprintNotFoundError(f"unknown blueprint '{name}' (available: {known})") from exc


__all__ = [
    "BLUEPRINTS",
    "BlueprintVariant",
    "BootstrapStep",
    "FULLSTACK",
    "HASKELL",
    "InstallStep",
    "PackageSetStep",
    "get_variant",
]
