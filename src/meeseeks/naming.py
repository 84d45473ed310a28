"""Project name validation and identifier derivation."""

from __future__ import annotations

import re

from .errors import EmptyProjectNameError, InvalidProjectNameError

__all__ = [
    "PLACEHOLDER",
    "PLACEHOLDER_MODULE",
    "derive_module_name",
    "validate_project_name",
]


_PROJECT_NAME = re.compile(r"[a-z][a-z0-9-]*")
_SEGMENT_SEPARATOR = "-"


def validate_project_name(raw: str) -> str:
    """Return ``raw`` unchanged when it is an acceptable project name.

    A project name starts with a lowercase ASCII letter and continues with
    lowercase letters, digits, or hyphens. The same string ends up in file
    names, cabal package names, nix attributes and npm manifests, so the
    grammar is the intersection of what those accept.

    Raises
    ------
    EmptyProjectNameError
        When ``raw`` is the empty string.
    InvalidProjectNameError
        When ``raw`` does not match the project name grammar.
    """

    if not raw:
        raise EmptyProjectNameError()
    if _PROJECT_NAME.fullmatch(raw) is None:
        raise InvalidProjectNameError(raw)
    return raw


def derive_module_name(name: str) -> str:
    """Return the capitalised module identifier for ``name``.

    ``"my-app"`` becomes ``"MyApp"`` and ``"myapp"`` becomes ``"Myapp"``.
    """

    segments = name.split(_SEGMENT_SEPARATOR)
    return "".join(segment[:1].upper() + segment[1:] for segment in segments if segment)


PLACEHOLDER = "rambutan"
PLACEHOLDER_MODULE = derive_module_name(PLACEHOLDER)
