"""BaseService — shared workspace access for cargo-groups services.

Every service receives the frozen settings at construction time.  The
group table and the workspace package list are loaded lazily, once per
service, so ``list`` without a workspace still reports a clean error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from cargo_groups.config.discovery import MANIFEST_FILENAME, ManifestError, load_manifest
from cargo_groups.domain.packages import Package
from cargo_groups.infrastructure.workspace import WorkspaceMetadata, load_workspace

if TYPE_CHECKING:
    from cargo_groups.config.settings import GroupsSettings

logger = logging.getLogger(__name__)

WorkspaceLoader: TypeAlias = Callable[[str, Path], WorkspaceMetadata]


class BaseService:
    """Base for service-layer classes.

    Usage::

        class GroupService(BaseService):
            def show_group(self, name: str) -> ServiceResult:
                packages = self.packages
                ...
    """

    def __init__(
        self,
        settings: GroupsSettings,
        *,
        workspace_loader: WorkspaceLoader = load_workspace,
    ) -> None:
        self._settings = settings
        self._workspace_loader = workspace_loader
        self._groups: dict[str, list[str]] | None = None
        self._packages: list[Package] | None = None

    @property
    def manifest_path(self) -> Path:
        """The root manifest, or ManifestError if none was found."""
        path = self._settings.manifest_path
        if path is None:
            msg = f"{MANIFEST_FILENAME} not found"
            raise ManifestError(msg)
        return path

    @property
    def groups(self) -> dict[str, list[str]]:
        """Group name -> raw patterns from ``[workspace.metadata.groups]``."""
        if self._groups is None:
            self._groups = load_manifest(self.manifest_path).groups
        return self._groups

    @property
    def packages(self) -> list[Package]:
        """Every workspace member as a domain Package."""
        if self._packages is None:
            workspace = self._workspace_loader(self._settings.cargo, self.manifest_path)
            self._packages = [
                Package(
                    identifier=member.name,
                    path=member.relative_path,
                    dependencies=member.dependency_names,
                )
                for member in workspace.members
            ]
        return self._packages
