"""Subcommand modules for cargo-groups.

Provides register_commands() which uses deferred imports to keep
``cargo groups --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the cargo subcommands and ``list`` on the root CLI group."""
    from cargo_groups.commands.cargo import build, check, clippy, test_cmd
    from cargo_groups.commands.list_cmd import list_cmd

    cli.add_command(test_cmd)
    cli.add_command(build)
    cli.add_command(check)
    cli.add_command(clippy)
    cli.add_command(list_cmd)
