"""Tests for manifest discovery and loading."""

from pathlib import Path

import pytest

from cargo_groups.config.discovery import (
    MANIFEST_ENV_VAR,
    MANIFEST_FILENAME,
    ManifestError,
    find_manifest,
    load_manifest,
)
from cargo_groups.config.models import RootManifest


class TestFindManifest:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text("[workspace]\n")
        assert find_manifest(tmp_path) == manifest

    def test_walks_up(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text("[workspace]\n")
        child = tmp_path / "crates" / "core" / "src"
        child.mkdir(parents=True)
        assert find_manifest(child) == manifest

    def test_skips_member_manifest_for_workspace_root(self, tmp_path: Path) -> None:
        root = tmp_path / MANIFEST_FILENAME
        root.write_text("[workspace]\n")
        crate = tmp_path / "crates" / "core"
        (crate / "src").mkdir(parents=True)
        (crate / MANIFEST_FILENAME).write_text('[package]\nname = "core"\n')
        assert find_manifest(crate / "src") == root

    def test_lone_package_manifest(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text('[package]\nname = "solo"\n')
        assert find_manifest(tmp_path) == manifest

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_manifest(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        manifest = tmp_path / "elsewhere.toml"
        manifest.write_text("[workspace]\n")
        monkeypatch.setenv(MANIFEST_ENV_VAR, str(manifest))
        assert find_manifest(tmp_path / "nowhere") == manifest

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(MANIFEST_ENV_VAR, str(tmp_path / "missing.toml"))
        (tmp_path / MANIFEST_FILENAME).write_text("[workspace]\n")
        with pytest.raises(ManifestError, match=MANIFEST_ENV_VAR) as excinfo:
            find_manifest(tmp_path)
        assert "missing.toml" in str(excinfo.value)


class TestLoadManifest:
    def test_loads_groups(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text(
            '[workspace]\nmembers = ["crates/*"]\n\n'
            '[workspace.metadata.groups]\ncore = ["pkg:core-*", "crates/util"]\n'
        )
        loaded = load_manifest(manifest)
        assert loaded.groups == {"core": ["pkg:core-*", "crates/util"]}

    def test_group_order_preserved(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text('[workspace.metadata.groups]\ng = ["c", "a", "b"]\n')
        assert load_manifest(manifest).groups["g"] == ["c", "a", "b"]

    def test_missing_tables_default_empty(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text('[package]\nname = "solo"\n')
        loaded = load_manifest(manifest)
        assert loaded == RootManifest()
        assert loaded.groups == {}

    def test_other_metadata_ignored(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text('[workspace.metadata.dist]\nci = ["github"]\n')
        assert load_manifest(manifest).groups == {}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text("[workspace\n")
        with pytest.raises(ManifestError, match="Invalid TOML"):
            load_manifest(manifest)

    def test_wrong_group_shape(self, tmp_path: Path) -> None:
        manifest = tmp_path / MANIFEST_FILENAME
        manifest.write_text('[workspace.metadata.groups]\ncore = "pkg:core-*"\n')
        with pytest.raises(ManifestError, match="workspace.metadata.groups"):
            load_manifest(manifest)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Cannot read"):
            load_manifest(tmp_path / "missing" / MANIFEST_FILENAME)
