"""Unified settings — CLI flags, env vars, and manifest config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CARGO_GROUPS_*`` prefix
  3. TOML table   — ``[workspace.metadata.cargo-groups]`` in the root Cargo.toml
  4. Code defaults — baked into the models

Uses Pydantic Settings v2 with a custom :class:`ManifestSettingsSource`
that reuses the walk-up discovery from :mod:`cargo_groups.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cargo_groups.config.discovery import ManifestError, find_manifest
from cargo_groups.config.models import TopLevelConfig

SETTINGS_TABLE = "cargo-groups"
ENV_PREFIX = "CARGO_GROUPS_"


class ManifestSettingsSource(PydanticBaseSettingsSource):
    """Read settings from ``[workspace.metadata.cargo-groups]``."""

    def __init__(self, settings_cls: type[BaseSettings], manifest_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if manifest_path and manifest_path.is_file():
            raw = manifest_path.read_text(encoding="utf-8")
            try:
                doc = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {manifest_path}: {exc}"
                raise click.ClickException(msg) from exc
            table = doc.get("workspace", {}).get("metadata", {}).get(SETTINGS_TABLE, {})
            if isinstance(table, dict):
                self._data = {k.replace("-", "_"): v for k, v in table.items()}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full table for Pydantic to merge."""
        return self._data


# Thread-local storage for the manifest path during construction.
_tls = threading.local()


class GroupsSettings(BaseSettings):
    """Unified settings for the cargo-groups CLI.

    Stored on the :class:`~cargo_groups.commands._context.AppContext`
    created by the root CLI group.

    Attributes:
        cwd: Directory cargo runs in, and where manifest discovery starts.
        manifest_path: The discovered (or explicit) root ``Cargo.toml``,
            None if none was found.
        cargo: Name or path of the cargo binary.
    """

    model_config = {
        "frozen": True,
        "env_prefix": ENV_PREFIX,
        "env_nested_delimiter": "__",
        # The metadata table is shared with other tools.
        "extra": "ignore",
    }

    # --- Resolved paths ---
    cwd: Path = Field(default_factory=Path.cwd)
    manifest_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Tool config ---
    cargo: str = "cargo"
    top_level: TopLevelConfig = Field(default_factory=TopLevelConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the manifest source between env vars and defaults."""
        manifest_path = getattr(_tls, "manifest_path", None)
        return (
            init_settings,
            env_settings,
            ManifestSettingsSource(settings_cls, manifest_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        cwd: Path | None = None,
        manifest_path: Path | None = None,
        **cli_flags: Any,
    ) -> GroupsSettings:
        """Construct settings from a CLI invocation.

        Discovers the root ``Cargo.toml`` (explicit *manifest_path*, env
        var, or walk-up from *cwd*) and merges CLI flags as the
        highest-priority overrides.

        Raises:
            click.ClickException: If discovery fails or a configured value
                has the wrong type.
        """
        resolved_cwd = cwd or Path.cwd()
        try:
            found = manifest_path or find_manifest(resolved_cwd)
        except ManifestError as exc:
            raise click.ClickException(str(exc)) from exc

        _tls.manifest_path = found
        try:
            return cls(cwd=resolved_cwd, manifest_path=found, **cli_flags)
        except ValidationError as exc:
            where = f" (manifest: {found})" if found else ""
            msg = (
                f"Invalid [workspace.metadata.{SETTINGS_TABLE}] or {ENV_PREFIX}* "
                f"setting{where}: {exc}"
            )
            raise click.ClickException(msg) from exc
        finally:
            _tls.manifest_path = None
