"""Blueprint materialisation: copy, rename and placeholder substitution."""

from __future__ import annotations

import logging
import os
import re
import shutil
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping

from .config import ProjectConfig
from .errors import BlueprintNotFoundError, DestinationExistsError, FilesystemError

__all__ = [
    "PlaceholderMap",
    "RenameManifest",
    "SniffingClassifier",
    "TemplateMaterializer",
    "TextClassifier",
]


LOGGER = logging.getLogger(__name__)

VCS_METADATA = ".git"

# C0 controls and DEL, minus tab, newline, form feed, carriage return, backspace and escape.
_CONTROL_BYTES = bytes(
    byte for byte in [*range(0x20), 0x7F] if byte not in b"\t\n\f\r\b\x1b"
)


@dataclass(frozen=True, slots=True)
class PlaceholderMap:
    """Ordered, case-sensitive token replacements.

    Tokens are matched in a single left-to-right scan and earlier entries win
    when two tokens could match at the same position, so the capitalised
    placeholder is always handled before the lowercase one. Replacement text
    is never rescanned.
    """

    pairs: tuple[tuple[str, str], ...]

    def __post_init__(self) -> None:
        tokens = [token for token, _ in self.pairs]
        if not tokens or any(not token for token in tokens):
            raise ValueError("placeholder tokens must be non-empty")
        if len(set(tokens)) != len(tokens):
            raise ValueError("placeholder tokens must be unique")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "PlaceholderMap":
        return cls(tuple(mapping.items()))

    @classmethod
    def for_project(cls, config: ProjectConfig) -> "PlaceholderMap":
        """Return the capitalised-then-lowercase map for ``config``."""

        return cls.from_mapping(config.substitutions())

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(token for token, _ in self.pairs)

    def _text_pattern(self) -> re.Pattern[str]:
        return re.compile("|".join(re.escape(token) for token in self.tokens))

    def _bytes_pattern(self) -> re.Pattern[bytes]:
        return re.compile(b"|".join(re.escape(token.encode("utf-8")) for token in self.tokens))

    def render_string(self, text: str) -> str:
        """Return ``text`` with every placeholder token replaced."""

        replacements = dict(self.pairs)
        return self._text_pattern().sub(lambda match: replacements[match.group(0)], text)

    def render_bytes(self, data: bytes) -> bytes:
        """Return ``data`` with every UTF-8 encoded placeholder token replaced."""

        replacements = {
            token.encode("utf-8"): value.encode("utf-8") for token, value in self.pairs
        }
        return self._bytes_pattern().sub(lambda match: replacements[match.group(0)], data)

    def matches(self, text: str) -> bool:
        return any(token in text for token in self.tokens)


class TextClassifier(ABC):
    """Decide whether a file's content is text that may be rewritten."""

    @abstractmethod
    def is_text(self, path: Path) -> bool:
        """Return ``True`` when ``path`` holds text content."""


class SniffingClassifier(TextClassifier):
    """Classify files by sniffing the leading bytes of their content.

    A NUL byte in the sample, or a sample made up mostly of control bytes,
    marks the file as binary. Any 8-bit encoding (UTF-8, Latin-1, ...) counts
    as text. Empty files are text.
    """

    def __init__(self, sample_size: int = 8192, max_control_ratio: float = 0.3) -> None:
        if sample_size <= 0:
            raise ValueError("sample_size must be positive")
        self.sample_size = sample_size
        self.max_control_ratio = max_control_ratio

    def is_text(self, path: Path) -> bool:
        with path.open("rb") as handle:
            sample = handle.read(self.sample_size)

        if not sample:
            return True
        if b"\x00" in sample:
            return False

        control = len(sample) - len(sample.translate(None, _CONTROL_BYTES))
        return control / len(sample) <= self.max_control_ratio


def _walk(root: Path) -> Iterator[tuple[Path, list[str], list[str]]]:
    def _raise(error: OSError) -> None:
        raise error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        yield Path(dirpath), dirnames, filenames


@dataclass(frozen=True, slots=True)
class RenameManifest:
    """Ordered ``(old, new)`` structural renames inside a working tree.

    Entries are ordered deepest path first. A child is therefore always
    renamed while its ancestors still carry their original names, and every
    ``old`` path is valid at the moment it is applied.
    """

    entries: tuple[tuple[Path, Path], ...]

    @classmethod
    def plan(cls, root: Path, placeholders: PlaceholderMap) -> "RenameManifest":
        """Collect every path under ``root`` whose name a placeholder changes.

        Names that render to themselves, such as every placeholder path when
        the project is called ``rambutan``, are left out.
        """

        candidates: list[tuple[Path, Path]] = []
        for directory, dirnames, filenames in _walk(root):
            for name in [*dirnames, *filenames]:
                if not placeholders.matches(name):
                    continue
                rendered = placeholders.render_string(name)
                if rendered != name:
                    candidates.append((directory / name, directory / rendered))

        candidates.sort(key=lambda entry: (-len(entry[0].parts), str(entry[0])))
        return cls(tuple(candidates))

    def __len__(self) -> int:
        return len(self.entries)

    def apply(self) -> None:
        for old, new in self.entries:
            if not old.exists() and not old.is_symlink():
                raise FilesystemError("rename source does not exist", old)
            if new.exists() or new.is_symlink():
                raise FilesystemError("rename target already exists", new)
            LOGGER.debug("Renaming %s -> %s", old, new.name)
            try:
                old.rename(new)
            except OSError as exc:
                raise FilesystemError("failed to rename", old) from exc


class TemplateMaterializer:
    """Copy a blueprint tree into a fresh working tree and personalise it."""

    def __init__(self, classifier: TextClassifier | None = None) -> None:
        self.classifier = classifier or SniffingClassifier()

    def materialize(
        self,
        blueprint: str | Path,
        destination: str | Path,
        placeholders: PlaceholderMap,
    ) -> Path:
        """Materialise ``blueprint`` at ``destination`` and return the new tree.

        ``destination`` must not exist. The blueprint is never modified. When a
        step fails after the copy has started the partial tree is left on disk
        for the caller to inspect or remove.

        Raises
        ------
        BlueprintNotFoundError
            When ``blueprint`` is not a directory.
        DestinationExistsError
            When ``destination`` already exists.
        FilesystemError
            When copying, renaming or rewriting fails.
        """

        blueprint = Path(blueprint)
        destination = Path(destination)

        if not blueprint.is_dir():
            raise BlueprintNotFoundError(f"blueprint directory not found: {blueprint}")
        if destination.exists() or destination.is_symlink():
            raise DestinationExistsError(destination)

        LOGGER.info("Materialising %s into %s", blueprint, destination)
        self._copy(blueprint, destination)
        self._make_writable(destination)
        self._purge_history(destination)

        manifest = RenameManifest.plan(destination, placeholders)
        LOGGER.debug("Applying %d structural renames", len(manifest))
        manifest.apply()

        self._substitute(destination, placeholders)
        return destination

    def _copy(self, source: Path, destination: Path) -> None:
        try:
            shutil.copytree(source, destination, symlinks=True)
        except shutil.Error as exc:
            raise FilesystemError(f"failed to copy blueprint ({exc})", destination) from exc
        except OSError as exc:
            failed = Path(exc.filename) if exc.filename else destination
            raise FilesystemError("failed to copy blueprint", failed) from exc

    def _make_writable(self, root: Path) -> None:
        """Add the owner-write bit to everything copied from the blueprint."""

        def _chmod(path: Path) -> None:
            if path.is_symlink():
                return
            try:
                mode = path.stat().st_mode
                if not mode & stat.S_IWUSR:
                    path.chmod(mode | stat.S_IWUSR)
            except OSError as exc:
                raise FilesystemError("failed to make writable", path) from exc

        _chmod(root)
        try:
            for directory, dirnames, filenames in _walk(root):
                for name in [*dirnames, *filenames]:
                    _chmod(directory / name)
        except OSError as exc:
            raise FilesystemError("failed to walk working tree", root) from exc

    def _purge_history(self, root: Path) -> None:
        try:
            for directory, dirnames, filenames in _walk(root):
                if VCS_METADATA in dirnames:
                    dirnames.remove(VCS_METADATA)
                    self._remove(directory / VCS_METADATA)
                if VCS_METADATA in filenames:
                    self._remove(directory / VCS_METADATA)
        except OSError as exc:
            raise FilesystemError("failed to walk working tree", root) from exc

    def _remove(self, path: Path) -> None:
        LOGGER.debug("Removing inherited history %s", path)
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise FilesystemError("failed to remove inherited history", path) from exc

    def _substitute(self, root: Path, placeholders: PlaceholderMap) -> None:
        try:
            for directory, _, filenames in _walk(root):
                for name in filenames:
                    self._substitute_file(directory / name, placeholders)
        except OSError as exc:
            raise FilesystemError("failed to walk working tree", root) from exc

    def _substitute_file(self, path: Path, placeholders: PlaceholderMap) -> None:
        try:
            if not stat.S_ISREG(path.lstat().st_mode):
                return
            if not self.classifier.is_text(path):
                LOGGER.debug("Leaving binary file untouched: %s", path)
                return
            original = path.read_bytes()
            rendered = placeholders.render_bytes(original)
            if rendered != original:
                LOGGER.debug("Substituted placeholders in %s", path)
                path.write_bytes(rendered)
        except OSError as exc:
            raise FilesystemError("failed to rewrite", path) from exc
