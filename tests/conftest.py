from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Mapping

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


BlueprintFactory = Callable[[Mapping[str, "str | bytes"]], Path]


@pytest.fixture()
def make_blueprint(tmp_path: Path) -> BlueprintFactory:
    """Build a blueprint directory from a ``{relative_path: content}`` mapping."""

    counter = iter(range(1000))

    def _make(files: Mapping[str, str | bytes]) -> Path:
        root = tmp_path / f"blueprint-{next(counter)}"
        root.mkdir()
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture()
def git_identity(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git a throwaway author identity and isolate it from user config."""

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")
