"""Shared pytest fixtures and test helpers for cargo-groups tests."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import pytest
from click.testing import CliRunner

from cargo_groups.config.settings import GroupsSettings
from cargo_groups.domain.packages import Package

# name, workspace-relative path, direct dependencies
WORKSPACE_CRATES: list[tuple[str, str, list[str]]] = [
    ("app", "apps/app", ["core-api", "util", "clap"]),
    ("cli-tool", "apps/cli-tool", ["core-types"]),
    ("core-api", "crates/core-api", ["core-types"]),
    ("core-types", "crates/core-types", ["serde"]),
    ("util", "crates/util", []),
]

ROOT_MANIFEST = """\
[workspace]
members = ["apps/*", "crates/*"]

[workspace.metadata.groups]
core = ["pkg:core-*"]
crates = ["crates/*"]
apps = ["path:apps/*"]
all = ["**"]
nothing = ["pkg:missing-*"]
"""


def metadata_json(root: Path, crates: Iterable[tuple[str, str, list[str]]]) -> str:
    """Build ``cargo metadata --no-deps`` output for a fake workspace."""
    packages = []
    members = []
    for name, rel, deps in crates:
        pkg_id = f"path+file://{root}/{rel}#{name}@0.1.0"
        members.append(pkg_id)
        packages.append(
            {
                "name": name,
                "version": "0.1.0",
                "id": pkg_id,
                "manifest_path": str(root / rel / "Cargo.toml"),
                "dependencies": [
                    {"name": dep, "source": None, "req": "*", "kind": None} for dep in deps
                ],
            }
        )
    return json.dumps(
        {
            "packages": packages,
            "workspace_members": members,
            "workspace_root": str(root),
            "target_directory": str(root / "target"),
            "version": 1,
        }
    )


def packages(*specs: tuple[str, str, list[str]]) -> list[Package]:
    """Build domain packages from ``(name, path, deps)`` tuples."""
    return [Package(identifier=n, path=p, dependencies=frozenset(d)) for n, p, d in specs]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CARGO_GROUPS_* environment out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("CARGO_GROUPS_"):
            monkeypatch.delenv(key)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary cargo workspace with a root Cargo.toml declaring groups."""
    (tmp_path / "Cargo.toml").write_text(ROOT_MANIFEST, encoding="utf-8")
    for _name, rel, _deps in WORKSPACE_CRATES:
        (tmp_path / rel).mkdir(parents=True)
    return tmp_path


@pytest.fixture
def fake_metadata(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    """Replace ``cargo metadata`` with canned output; records each call."""
    calls: list[list[str]] = []

    def _run(cargo: str, manifest_path: Path) -> str:
        calls.append([cargo, str(manifest_path)])
        return metadata_json(workspace_root, WORKSPACE_CRATES)

    monkeypatch.setattr("cargo_groups.infrastructure.workspace.run_cargo_metadata", _run)
    return calls


@pytest.fixture
def settings(workspace_root: Path, fake_metadata: list[list[str]]) -> GroupsSettings:
    """Settings pointing at the temporary workspace."""
    return GroupsSettings.from_cli(cwd=workspace_root)


@pytest.fixture
def _isolated_workspace(
    workspace_root: Path,
    fake_metadata: list[list[str]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Change CWD into the temporary workspace with cargo metadata faked.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace_root)
