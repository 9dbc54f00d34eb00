"""Workspace package model.

Packages are read-only inputs supplied by the workspace metadata loader.
INVARIANT: identifiers are unique within a workspace.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


def normalize_path(raw: str) -> str:
    """Normalize a workspace-relative path for glob matching.

    Uses forward slashes, drops a leading ``./`` and any trailing slash.
    The workspace root itself normalizes to the empty string.

    Examples:
        >>> normalize_path("./crates/core/")
        'crates/core'
        >>> normalize_path(".")
        ''
    """
    path = raw.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    path = path.rstrip("/")
    return "" if path == "." else path


class Package(BaseModel):
    """A buildable crate in the workspace.

    Attributes:
        identifier: Crate name, unique within the workspace.
        path: Workspace-relative directory of the crate manifest.
        dependencies: Names of direct dependencies. Names that do not
            belong to the workspace are carried along but never matter
            to resolution.
    """

    model_config = {"frozen": True}

    identifier: str
    path: str = ""
    dependencies: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("path")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_path(value)
