"""Commands: run cargo test/build/check/clippy on a group of crates."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from cargo_groups.commands._base import GroupsCommand
from cargo_groups.domain.options import (
    ClippyFixOptions,
    FeatureOptions,
    OptionSet,
    ReleaseOptions,
)

if TYPE_CHECKING:
    from cargo_groups.commands._context import AppContext

_FEATURE_SPLIT_RE = re.compile(r"[\s,]+")

SELECT_TOP_LEVEL = "top-level"
SELECT_ALL = "all"


def _split_features(values: tuple[str, ...]) -> tuple[str, ...]:
    """Accept ``-F a,b``, ``-F "a b"``, and repeated ``-F`` like cargo does."""
    return tuple(f for value in values for f in _FEATURE_SPLIT_RE.split(value) if f)


def _top_level(selection: str | None) -> bool | None:
    """Map ``--select`` to the service flag; None defers to settings."""
    if selection is None:
        return None
    return selection == SELECT_TOP_LEVEL


def _cargo_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every cargo subcommand."""
    decorators = [
        click.argument("group"),
        click.option(
            "-F",
            "--features",
            multiple=True,
            help="Space or comma separated list of features to activate.",
        ),
        click.option("--all-features", is_flag=True, help="Activate all available features."),
        click.option(
            "--no-default-features",
            is_flag=True,
            help="Do not activate the `default` feature.",
        ),
        click.option("--release", is_flag=True, help="Build artifacts in release mode."),
        click.option(
            "--select",
            "selection",
            type=click.Choice([SELECT_TOP_LEVEL, SELECT_ALL]),
            default=None,
            help="Pass only top-level crates or every matched crate (default per subcommand).",
        ),
        click.option("--dry-run", is_flag=True, help="Print the cargo command without running it."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _execute(
    app: AppContext,
    subcommand: str,
    group: str,
    option_sets: list[OptionSet],
    *,
    top_level: bool | None,
    dry_run: bool,
) -> None:
    if dry_run:
        app.emit(app.service.plan(subcommand, group, option_sets, top_level=top_level))
        return

    result = app.service.run(subcommand, group, option_sets, top_level=top_level)
    app.emit(result)
    exit_code = result.data.get("exit_code", 0)
    if exit_code:
        raise SystemExit(exit_code)


def _common_option_sets(
    features: tuple[str, ...],
    all_features: bool,
    no_default_features: bool,
    release: bool,
) -> list[OptionSet]:
    return [
        FeatureOptions(
            features=_split_features(features),
            all_features=all_features,
            no_default_features=no_default_features,
        ),
        ReleaseOptions(release=release),
    ]


@click.command(
    "test",
    cls=GroupsCommand,
    examples="""\
  cargo groups test core
  cargo groups test core --release
  cargo groups test core -F serde,tracing""",
)
@_cargo_options
@click.pass_obj
def test_cmd(
    app: AppContext,
    group: str,
    features: tuple[str, ...],
    all_features: bool,
    no_default_features: bool,
    release: bool,
    selection: str | None,
    dry_run: bool,
) -> None:
    """Test a group of crates."""
    option_sets = _common_option_sets(features, all_features, no_default_features, release)
    _execute(app, "test", group, option_sets, top_level=_top_level(selection), dry_run=dry_run)


@click.command(
    cls=GroupsCommand,
    examples="""\
  cargo groups build core
  cargo groups build core --release --all-features
  cargo groups build core --dry-run""",
)
@_cargo_options
@click.pass_obj
def build(
    app: AppContext,
    group: str,
    features: tuple[str, ...],
    all_features: bool,
    no_default_features: bool,
    release: bool,
    selection: str | None,
    dry_run: bool,
) -> None:
    """Build a group of crates."""
    option_sets = _common_option_sets(features, all_features, no_default_features, release)
    _execute(app, "build", group, option_sets, top_level=_top_level(selection), dry_run=dry_run)


@click.command(
    cls=GroupsCommand,
    examples="""\
  cargo groups check core
  cargo groups check core --no-default-features""",
)
@_cargo_options
@click.pass_obj
def check(
    app: AppContext,
    group: str,
    features: tuple[str, ...],
    all_features: bool,
    no_default_features: bool,
    release: bool,
    selection: str | None,
    dry_run: bool,
) -> None:
    """Check a group of crates."""
    option_sets = _common_option_sets(features, all_features, no_default_features, release)
    _execute(app, "check", group, option_sets, top_level=_top_level(selection), dry_run=dry_run)


@click.command(
    cls=GroupsCommand,
    examples="""\
  cargo groups clippy core
  cargo groups clippy core --fix --allow-dirty""",
)
@_cargo_options
@click.option("--fix", is_flag=True, help="Automatically apply lint suggestions.")
@click.option(
    "--allow-dirty",
    is_flag=True,
    help="Fix code even if the working directory has changes.",
)
@click.pass_obj
def clippy(
    app: AppContext,
    group: str,
    features: tuple[str, ...],
    all_features: bool,
    no_default_features: bool,
    release: bool,
    selection: str | None,
    dry_run: bool,
    fix: bool,
    allow_dirty: bool,
) -> None:
    """Run clippy on a group of crates."""
    option_sets = _common_option_sets(features, all_features, no_default_features, release)
    option_sets.append(ClippyFixOptions(fix=fix, allow_dirty=allow_dirty))
    _execute(app, "clippy", group, option_sets, top_level=_top_level(selection), dry_run=dry_run)
