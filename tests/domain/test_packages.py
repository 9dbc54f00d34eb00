"""Tests for the Package model and path normalization."""

from __future__ import annotations

import pytest

from cargo_groups.domain.packages import Package, normalize_path


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("crates/core", "crates/core"),
        ("./crates/core", "crates/core"),
        ("crates/core/", "crates/core"),
        ("crates\\core", "crates/core"),
        (".", ""),
        ("", ""),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_package_normalizes_path() -> None:
    pkg = Package(identifier="core", path="./crates/core/")
    assert pkg.path == "crates/core"


def test_package_is_frozen() -> None:
    pkg = Package(identifier="core")
    with pytest.raises(Exception):
        pkg.identifier = "other"  # type: ignore[misc]


def test_dependencies_default_empty() -> None:
    assert Package(identifier="core").dependencies == frozenset()
