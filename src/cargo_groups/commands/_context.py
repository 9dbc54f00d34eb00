"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Configures logging, provides lazy service access,
and centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cargo_groups.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from cargo_groups.config.settings import GroupsSettings
    from cargo_groups.services.groups import GroupService
    from cargo_groups.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The group service is created lazily so ``--help`` and ``--version``
    never read the manifest or run ``cargo metadata``.
    """

    def __init__(self, settings: GroupsSettings) -> None:
        self.settings = settings
        self._service: GroupService | None = None

        from cargo_groups.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def service(self) -> GroupService:
        """The group service (created lazily on first access)."""
        if self._service is None:
            from cargo_groups.services.groups import GroupService

            self._service = GroupService(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
