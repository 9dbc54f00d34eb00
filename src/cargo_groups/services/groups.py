"""GroupService — list, resolve, and run cargo on package groups."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from cargo_groups.config.discovery import ManifestError
from cargo_groups.domain.errors import GroupNotFoundError, PatternError
from cargo_groups.domain.options import OptionSet, build_cargo_args
from cargo_groups.domain.packages import Package
from cargo_groups.domain.resolver import resolve_group
from cargo_groups.infrastructure.runner import find_cargo, format_command, run_cargo
from cargo_groups.infrastructure.workspace import WorkspaceError
from cargo_groups.services.base import BaseService
from cargo_groups.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def _package_rows(packages: Iterable[Package]) -> list[dict[str, str]]:
    ordered = sorted(packages, key=lambda p: p.identifier)
    return [{"name": p.identifier, "path": p.path} for p in ordered]


def _failure(op: str, exc: Exception) -> ServiceResult:
    """Convert a resolution or workspace exception into a failed result."""
    if isinstance(exc, GroupNotFoundError):
        error = ServiceError(
            code="GROUP_NOT_FOUND",
            message=str(exc),
            detail={"group": exc.group, "available": exc.available},
        )
    elif isinstance(exc, PatternError):
        error = ServiceError(
            code="INVALID_PATTERN",
            message=str(exc),
            detail={"pattern": exc.pattern, "reason": exc.reason},
        )
    elif isinstance(exc, ManifestError):
        error = ServiceError(code="MANIFEST_ERROR", message=str(exc))
    else:
        error = ServiceError(code="WORKSPACE_ERROR", message=str(exc))
    return ServiceResult(ok=False, op=op, error=error)


_EXPECTED_ERRORS = (GroupNotFoundError, PatternError, ManifestError, WorkspaceError)


class GroupService(BaseService):
    """Resolves groups against the workspace and drives cargo."""

    def _resolve(self, group: str, *, top_level: bool) -> list[Package]:
        groups = self.groups
        if group not in groups:
            # Fail before asking cargo for metadata.
            raise GroupNotFoundError(group, list(groups))
        return resolve_group(groups, group, self.packages, top_level=top_level)

    def list_groups(self) -> ServiceResult:
        """Every group with the packages it matches (no reduction)."""
        op = "list_groups"
        try:
            groups = self.groups
            rows: list[dict[str, Any]] = []
            for name in sorted(groups):
                rows.append(
                    {
                        "name": name,
                        "patterns": groups[name],
                        "packages": _package_rows(self._resolve(name, top_level=False)),
                    }
                )
        except _EXPECTED_ERRORS as exc:
            return _failure(op, exc)

        warnings = [] if rows else ["No groups found"]
        return ServiceResult(
            ok=True,
            op=op,
            data={"groups": rows, "count": len(rows)},
            warnings=warnings,
        )

    def show_group(self, group: str) -> ServiceResult:
        """The packages one group matches (no reduction)."""
        op = "show_group"
        try:
            packages = self._resolve(group, top_level=False)
            patterns = self.groups[group]
        except _EXPECTED_ERRORS as exc:
            return _failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": group,
                "patterns": patterns,
                "packages": _package_rows(packages),
                "count": len(packages),
            },
        )

    def plan(
        self,
        subcommand: str,
        group: str,
        option_sets: Sequence[OptionSet] = (),
        *,
        top_level: bool | None = None,
    ) -> ServiceResult:
        """Compute the cargo command for *subcommand* on *group* without running it.

        *top_level* defaults to the ``top_level`` setting for the subcommand.
        """
        op = "plan"
        if top_level is None:
            top_level = self._settings.top_level.for_subcommand(subcommand)
        try:
            packages = self._resolve(group, top_level=top_level)
        except _EXPECTED_ERRORS as exc:
            return _failure(op, exc)

        args = build_cargo_args(subcommand, packages, option_sets)
        warnings: list[str] = []
        if not packages:
            warnings.append(f"Group {group} matches no packages")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "subcommand": subcommand,
                "group": group,
                "top_level": top_level,
                "packages": sorted(p.identifier for p in packages),
                "args": args,
                "command": format_command(self._settings.cargo, args),
            },
            warnings=warnings,
        )

    def run(
        self,
        subcommand: str,
        group: str,
        option_sets: Sequence[OptionSet] = (),
        *,
        top_level: bool | None = None,
    ) -> ServiceResult:
        """Run cargo on the resolved group.

        An empty group is a no-op: cargo without ``-p`` would fall back
        to the workspace default members, which is never what was asked.
        The result carries cargo's exit code as ``data["exit_code"]``.
        """
        planned = self.plan(subcommand, group, option_sets, top_level=top_level)
        if not planned.ok:
            return planned.model_copy(update={"op": "run"})

        data = dict(planned.data)
        if not data["packages"]:
            data["exit_code"] = 0
            return ServiceResult(ok=True, op="run", data=data, warnings=planned.warnings)

        try:
            cargo = find_cargo(self._settings.cargo)
            exit_code = run_cargo(cargo, data["args"], self._settings.cwd)
        except WorkspaceError as exc:
            return _failure("run", exc)

        if exit_code != 0:
            logger.debug("cargo %s exited with %d", subcommand, exit_code)
        data["exit_code"] = exit_code
        return ServiceResult(ok=True, op="run", data=data)
