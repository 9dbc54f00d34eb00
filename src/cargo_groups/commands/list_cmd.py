"""Command: list groups and the crates they match."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cargo_groups.commands._base import GroupsCommand

if TYPE_CHECKING:
    from cargo_groups.commands._context import AppContext


@click.command(
    "list",
    cls=GroupsCommand,
    examples="""\
  cargo groups list
  cargo groups list core
  cargo groups --json list core""",
)
@click.argument("group", required=False)
@click.pass_obj
def list_cmd(app: AppContext, group: str | None) -> None:
    """List the groups in the workspace. Add a group name to list the crates in that group."""
    if group is None:
        app.emit(app.service.list_groups())
    else:
        app.emit(app.service.show_group(group))
