"""Option sets appended to a cargo command line.

Each option set is a frozen model with a single ``apply(args)`` method.
Subcommand-specific flags (``clippy --fix --allow-dirty``) live in their
own option set so the shared command builder never special-cases them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal, TypeAlias

from pydantic import BaseModel, Field

from cargo_groups.domain.packages import Package


class ReleaseOptions(BaseModel):
    """Flags shared by every cargo subcommand."""

    model_config = {"frozen": True}

    kind: Literal["release"] = "release"
    release: bool = False

    def apply(self, args: list[str]) -> None:
        if self.release:
            args.append("--release")


class FeatureOptions(BaseModel):
    """Cargo feature selection, mirroring cargo's own flags."""

    model_config = {"frozen": True}

    kind: Literal["features"] = "features"
    features: tuple[str, ...] = Field(default_factory=tuple)
    all_features: bool = False
    no_default_features: bool = False

    def apply(self, args: list[str]) -> None:
        if self.no_default_features:
            args.append("--no-default-features")
        if self.all_features:
            args.append("--all-features")
        if self.features:
            args.extend(["--features", ",".join(self.features)])


class ClippyFixOptions(BaseModel):
    """``cargo clippy`` auto-fix flags."""

    model_config = {"frozen": True}

    kind: Literal["clippy_fix"] = "clippy_fix"
    fix: bool = False
    allow_dirty: bool = False

    def apply(self, args: list[str]) -> None:
        if self.fix:
            args.append("--fix")
        if self.allow_dirty:
            args.append("--allow-dirty")


OptionSet: TypeAlias = ReleaseOptions | FeatureOptions | ClippyFixOptions


def build_cargo_args(
    subcommand: str,
    packages: Iterable[Package],
    option_sets: Iterable[OptionSet] = (),
) -> list[str]:
    """Build the argument list for ``cargo <subcommand>``.

    Packages are passed as ``-p <name>`` sorted by name so the command
    line is stable across runs.
    """
    args = [subcommand]
    for options in option_sets:
        options.apply(args)
    for identifier in sorted(p.identifier for p in packages):
        args.extend(["-p", identifier])
    return args
