"""Tests for ServiceResult and ServiceError."""

import pytest

from cargo_groups.services.result import ServiceError, ServiceResult


def test_success_defaults() -> None:
    result = ServiceResult(ok=True, op="show_group")
    assert result.data == {}
    assert result.warnings == []
    assert result.error is None


def test_error_payload() -> None:
    result = ServiceResult(
        ok=False,
        op="show_group",
        error=ServiceError(code="GROUP_NOT_FOUND", message="Group x not found"),
    )
    assert result.error is not None
    assert result.error.detail == {}


def test_frozen() -> None:
    result = ServiceResult(ok=True, op="plan")
    with pytest.raises(Exception):
        result.ok = False  # type: ignore[misc]
