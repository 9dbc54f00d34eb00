"""Workspace manifest discovery and loading.

Walk-up finder locates the workspace ``Cargo.toml``, the same way cargo
does.  The CARGO_GROUPS_MANIFEST env var overrides the search; an
explicit ``--manifest-path`` skips it (see settings).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cargo_groups.config.models import RootManifest

MANIFEST_FILENAME = "Cargo.toml"
MANIFEST_ENV_VAR = "CARGO_GROUPS_MANIFEST"


class ManifestError(ValueError):
    """The workspace manifest is missing or cannot be parsed."""


def _declares_workspace(path: Path) -> bool:
    try:
        return "workspace" in tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return False


def find_manifest(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for the workspace Cargo.toml.

    Like cargo, a member crate's manifest is skipped in favour of an
    ancestor that declares ``[workspace]``; a lone package manifest is
    returned when no ancestor does.  Returns None if nothing is found.
    Checks CARGO_GROUPS_MANIFEST env var first.

    Raises:
        ManifestError: If CARGO_GROUPS_MANIFEST names a missing file.
    """
    env_path = os.environ.get(MANIFEST_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            msg = f"{MANIFEST_ENV_VAR} points to a missing file: {p}"
            raise ManifestError(msg)
        return p

    nearest: Path | None = None
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / MANIFEST_FILENAME
        if candidate.is_file():
            if _declares_workspace(candidate):
                return candidate
            nearest = nearest or candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return nearest


def load_manifest(path: Path) -> RootManifest:
    """Load and validate the group definitions from a ``Cargo.toml``.

    Raises:
        ManifestError: If the file is unreadable, not TOML, or its
            ``[workspace.metadata.groups]`` table has the wrong shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ManifestError(msg) from exc

    try:
        data: dict[str, Any] = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ManifestError(msg) from exc

    try:
        return RootManifest.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid [workspace.metadata.groups] in {path}: {exc}"
        raise ManifestError(msg) from exc
