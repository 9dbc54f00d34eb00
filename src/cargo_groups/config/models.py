"""Pydantic models for the workspace manifest and tool defaults.

Sparse TOML contract: only ``[workspace.metadata.groups]`` is read from
the root ``Cargo.toml``; every other table is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Root Cargo.toml ---


class WorkspaceMetadataTable(BaseModel):
    """[workspace.metadata] table."""

    model_config = {"frozen": True}

    groups: dict[str, list[str]] = Field(default_factory=dict)


class WorkspaceSection(BaseModel):
    """[workspace] table."""

    model_config = {"frozen": True}

    metadata: WorkspaceMetadataTable = Field(default_factory=WorkspaceMetadataTable)


class RootManifest(BaseModel):
    """The parts of the root ``Cargo.toml`` that cargo-groups reads."""

    model_config = {"frozen": True}

    workspace: WorkspaceSection = Field(default_factory=WorkspaceSection)

    @property
    def groups(self) -> dict[str, list[str]]:
        return self.workspace.metadata.groups


# --- Tool settings sections ---


class TopLevelConfig(BaseModel):
    """Which subcommands reduce a group to its top-level crates.

    Tests run per crate, so every matched crate is passed to ``cargo test``.
    """

    model_config = {"frozen": True}

    build: bool = True
    check: bool = True
    clippy: bool = True
    test: bool = False

    def for_subcommand(self, subcommand: str) -> bool:
        return bool(getattr(self, subcommand, False))
