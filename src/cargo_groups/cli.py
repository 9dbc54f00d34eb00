"""Root CLI group for cargo-groups with global flags and command registration."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from cargo_groups import __version__
from cargo_groups.commands import register_commands
from cargo_groups.commands._base import GroupsGroup
from cargo_groups.commands._context import AppContext
from cargo_groups.config.settings import GroupsSettings

# cargo runs external subcommands as ``cargo-groups groups <args>``.
CARGO_SUBCOMMAND = "groups"


@click.group(cls=GroupsGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cargo-groups")
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory to run cargo in (default: current directory).",
)
@click.option(
    "--manifest-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the workspace Cargo.toml.",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    cwd: Path | None,
    manifest_path: Path | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
) -> None:
    """Run cargo commands on a group of crates in a workspace."""
    settings = GroupsSettings.from_cli(
        cwd=cwd,
        manifest_path=manifest_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point; drops the ``groups`` word cargo inserts."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args[:1] == [CARGO_SUBCOMMAND]:
        args = args[1:]
    cli.main(args=args, prog_name="cargo groups")
