from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from meeseeks.blueprints import FULLSTACK, HASKELL
from meeseeks.bootstrap import Bootstrapper
from meeseeks.config import BUNDLED_TEMPLATES, ProjectConfig
from meeseeks.errors import DestinationExistsError, ToolFailedError
from meeseeks.scaffold import ProjectScaffolder
from meeseeks.template import TemplateMaterializer
from meeseeks.toolchain import Toolchain
from meeseeks.vcs import GitVersionControl
from tests.fixtures.fake_tools import (
    RecordingInitializer,
    RecordingInstaller,
    RecordingVersionControl,
    recording_toolchain,
)


def _scaffolder(calls: list, vcs=None) -> ProjectScaffolder:
    return ProjectScaffolder(
        TemplateMaterializer(),
        Bootstrapper(recording_toolchain(calls)),
        vcs or RecordingVersionControl(),
    )


def _walk_names(root: Path) -> list[str]:
    names = []
    for _, dirnames, filenames in os.walk(root):
        names.extend(dirnames)
        names.extend(filenames)
    return names


def test_haskell_scenario(tmp_path: Path):
    calls: list = []
    vcs = RecordingVersionControl(commit_id="c0ffee")
    config = ProjectConfig.from_name("rambutan")

    result = _scaffolder(calls, vcs).create(config, HASKELL, tmp_path)

    project = tmp_path / "rambutan"
    assert result.path == project
    assert result.module_name == "Rambutan"
    assert result.commit_id == "c0ffee"
    assert (project / "src" / "Rambutan.hs").is_file()
    assert (project / "rambutan.cabal").is_file()
    assert calls == []
    assert vcs.commits == [(project, "Initial commit from meeseeks haskell template")]
    assert result.next_steps[0] == "cd rambutan"


def test_fullstack_scenario(tmp_path: Path):
    calls: list = []
    vcs = RecordingVersionControl()
    config = ProjectConfig.from_name("my-cool-app")
    custom_descriptor = (BUNDLED_TEMPLATES / "fullstack" / "frontend" / "spago.dhall").read_text(encoding="utf-8")

    result = _scaffolder(calls, vcs).create(config, FULLSTACK, tmp_path)

    project = tmp_path / "my-cool-app"
    assert result.module_name == "MyCoolApp"
    assert (project / "backend" / "my-cool-app.cabal").is_file()
    assert (project / "backend" / "src" / "MyCoolApp.hs").is_file()
    assert (project / "backend" / "test" / "MyCoolApp" / "MyCoolAppSpec.hs").is_file()
    assert calls == [("initialize", project / "frontend"), ("install", project / "frontend")]
    assert (project / "frontend" / "spago.dhall").read_text(encoding="utf-8") == custom_descriptor.replace(
        "rambutan", "my-cool-app"
    )
    assert (project / "frontend" / "packages.dhall").is_file()
    assert vcs.commits == [(project, "Initial commit from meeseeks fullstack template")]

    for name in _walk_names(project):
        assert "rambutan" not in name.lower()
    for path in project.rglob("*"):
        if path.is_file():
            content = path.read_text(encoding="utf-8")
            assert "rambutan" not in content
            assert "Rambutan" not in content


def test_existing_destination_is_not_touched(tmp_path: Path):
    existing = tmp_path / "demo"
    existing.mkdir()
    (existing / "notes.txt").write_text("mine", encoding="utf-8")
    calls: list = []
    vcs = RecordingVersionControl()

    with pytest.raises(DestinationExistsError):
        _scaffolder(calls, vcs).create(ProjectConfig.from_name("demo"), HASKELL, tmp_path)

    assert [path.name for path in existing.iterdir()] == ["notes.txt"]
    assert vcs.inits == []


def test_bootstrap_failure_skips_commit(tmp_path: Path):
    vcs = RecordingVersionControl()
    toolchain = Toolchain(initializer=RecordingInitializer(exit_code=2), installer=RecordingInstaller())
    scaffolder = ProjectScaffolder(TemplateMaterializer(), Bootstrapper(toolchain), vcs)

    with pytest.raises(ToolFailedError):
        scaffolder.create(ProjectConfig.from_name("demo"), FULLSTACK, tmp_path)

    assert (tmp_path / "demo" / "backend" / "demo.cabal").is_file()
    assert vcs.inits == []


def test_custom_template_root(tmp_path: Path, make_blueprint):
    blueprint = make_blueprint({"Rambutan.txt": "rambutan"})
    root = tmp_path / "templates"
    root.mkdir()
    blueprint.rename(root / "haskell")
    output = tmp_path / "out"
    output.mkdir()

    _scaffolder([]).create(ProjectConfig.from_name("fig"), HASKELL, output, template_root=root)

    assert (output / "fig" / "Fig.txt").read_text(encoding="utf-8") == "fig"


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_end_to_end_with_git_replaces_inherited_history(tmp_path: Path, make_blueprint, git_identity):
    blueprint = make_blueprint(
        {
            "rambutan.cabal": "name: rambutan\n",
            "src/Rambutan.hs": "module Rambutan where\n",
            ".git/HEAD": "ref: refs/heads/stale\n",
        }
    )
    root = tmp_path / "templates"
    root.mkdir()
    blueprint.rename(root / "haskell")
    output = tmp_path / "out"
    output.mkdir()
    scaffolder = ProjectScaffolder(TemplateMaterializer(), Bootstrapper(recording_toolchain()), GitVersionControl())

    result = scaffolder.create(ProjectConfig.from_name("rambutan"), HASKELL, output, template_root=root)

    def git(*args: str) -> str:
        return subprocess.run(
            ["git", *args], cwd=result.path, capture_output=True, text=True, check=True
        ).stdout.strip()

    assert git("rev-list", "--count", "HEAD") == "1"
    assert git("rev-parse", "HEAD") == result.commit_id
    assert sorted(git("ls-files").splitlines()) == ["rambutan.cabal", "src/Rambutan.hs"]
