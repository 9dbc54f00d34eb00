"""Workspace metadata via ``cargo metadata``.

Runs ``cargo metadata --no-deps`` once per invocation and keeps only the
workspace members: their names, their directories relative to the
workspace root, and the names of their direct dependencies.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

METADATA_FORMAT_VERSION = "1"


class WorkspaceError(RuntimeError):
    """cargo could not be run, or its metadata could not be read."""


# --- cargo metadata JSON (only the fields we read) ---


class _Dependency(BaseModel):
    name: str


class _Package(BaseModel):
    name: str
    id: str
    manifest_path: str
    dependencies: list[_Dependency] = Field(default_factory=list)


class _Metadata(BaseModel):
    packages: list[_Package]
    workspace_members: list[str]
    workspace_root: str


# --- Parsed workspace ---


class MemberCrate(BaseModel):
    """A workspace member as reported by cargo."""

    model_config = {"frozen": True}

    name: str
    relative_path: str
    dependency_names: frozenset[str] = Field(default_factory=frozenset)


class WorkspaceMetadata(BaseModel):
    """All members of one cargo workspace."""

    model_config = {"frozen": True}

    root: Path
    members: list[MemberCrate] = Field(default_factory=list)


def _relative_dir(manifest_path: str, workspace_root: str) -> str:
    """Directory of *manifest_path* relative to *workspace_root*, posix style."""
    manifest = Path(manifest_path)
    try:
        rel = manifest.parent.relative_to(workspace_root)
    except ValueError as exc:
        msg = f"Package manifest {manifest_path} is outside workspace root {workspace_root}"
        raise WorkspaceError(msg) from exc
    posix = PurePosixPath(*rel.parts).as_posix()
    return "" if posix == "." else posix


def parse_metadata(raw_json: str) -> WorkspaceMetadata:
    """Parse ``cargo metadata --format-version 1`` output.

    Raises:
        WorkspaceError: If the JSON does not look like cargo metadata.
    """
    try:
        meta = _Metadata.model_validate_json(raw_json)
    except ValidationError as exc:
        msg = f"Unexpected cargo metadata output: {exc}"
        raise WorkspaceError(msg) from exc

    member_ids = set(meta.workspace_members)
    members = [
        MemberCrate(
            name=pkg.name,
            relative_path=_relative_dir(pkg.manifest_path, meta.workspace_root),
            dependency_names=frozenset(dep.name for dep in pkg.dependencies),
        )
        for pkg in meta.packages
        if pkg.id in member_ids
    ]
    return WorkspaceMetadata(root=Path(meta.workspace_root), members=members)


def run_cargo_metadata(cargo: str, manifest_path: Path) -> str:
    """Run ``cargo metadata`` and return its stdout.

    Raises:
        WorkspaceError: If cargo is missing or exits non-zero.
    """
    cmd = [
        cargo,
        "metadata",
        "--format-version",
        METADATA_FORMAT_VERSION,
        "--no-deps",
        "--manifest-path",
        str(manifest_path),
    ]
    logger.debug("Running %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        msg = f"Failed to run {cargo}: {exc}"
        raise WorkspaceError(msg) from exc
    if proc.returncode != 0:
        msg = f"cargo metadata failed ({proc.returncode}): {proc.stderr.strip()}"
        raise WorkspaceError(msg)
    return proc.stdout


def load_workspace(cargo: str, manifest_path: Path) -> WorkspaceMetadata:
    """Load the members of the workspace rooted at *manifest_path*."""
    workspace = parse_metadata(run_cargo_metadata(cargo, manifest_path))
    logger.debug(
        "Loaded workspace %s with %d members",
        workspace.root,
        len(workspace.members),
    )
    return workspace
