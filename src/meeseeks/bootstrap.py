"""Run a blueprint's toolchain steps against a materialised working tree."""

from __future__ import annotations

import logging
from pathlib import Path

from .blueprints import BlueprintVariant, BootstrapStep, InstallStep, PackageSetStep
from .errors import BootstrapError, FilesystemError
from .toolchain import Toolchain

__all__ = ["Bootstrapper"]


LOGGER = logging.getLogger(__name__)


def _move(source: Path, target: Path) -> None:
    try:
        source.rename(target)
    except OSError as exc:
        raise FilesystemError(f"failed to move to {target.name}", source) from exc


def _discard(path: Path) -> None:
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as exc:
        raise FilesystemError("failed to discard generated descriptor", path) from exc


class Bootstrapper:
    """Execute bootstrap steps in order, stopping at the first failure."""

    def __init__(self, toolchain: Toolchain | None = None) -> None:
        self.toolchain = toolchain or Toolchain.default()

    def run(self, tree: str | Path, variant: BlueprintVariant) -> None:
        tree = Path(tree)
        if not variant.bootstrap:
            LOGGER.debug("Blueprint %s has no bootstrap steps", variant.name)
            return

        for step in variant.bootstrap:
            self.run_step(tree, step)

    def run_step(self, tree: Path, step: BootstrapStep) -> None:
        if isinstance(step, PackageSetStep):
            self._refresh_package_set(tree, step)
        elif isinstance(step, InstallStep):
            self._install(tree, step)
        else:  # pragma: no cover - guarded by the discriminated union
            raise BootstrapError(f"unsupported bootstrap step: {step!r}")

    def _refresh_package_set(self, tree: Path, step: PackageSetStep) -> None:
        """Let the initialiser write a fresh package set, keeping our descriptor.

        The initialiser also generates its own default descriptor. That file
        is thrown away and the blueprint's descriptor is put back; only the
        package set written next to it is kept.
        """

        directory = tree / step.directory
        descriptor = directory / step.descriptor
        stash = directory / f"{step.descriptor}{step.stash_suffix}"

        LOGGER.info("Refreshing package set in %s", directory)
        if not descriptor.is_file():
            raise FilesystemError("dependency descriptor not found", descriptor)
        if stash.exists():
            raise FilesystemError("stash path already exists", stash)

        _move(descriptor, stash)
        try:
            self.toolchain.initializer.initialize(directory)
        except BootstrapError:
            _discard(descriptor)
            _move(stash, descriptor)
            raise

        _discard(descriptor)
        _move(stash, descriptor)

    def _install(self, tree: Path, step: InstallStep) -> None:
        directory = tree / step.directory
        LOGGER.info("Installing dependencies in %s", directory)
        self.toolchain.installer.install(directory)
