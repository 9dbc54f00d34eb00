"""Tests for the format_result dispatcher and OutputSettings."""

import json

from cargo_groups.output.formatters import OutputSettings, format_result
from cargo_groups.services.result import ServiceError, ServiceResult


def _show(packages: list[dict[str, str]]) -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="show_group",
        data={"name": "core", "patterns": ["pkg:core-*"], "packages": packages, "count": 2},
    )


def _err(op: str = "show_group", msg: str = "Group x not found") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="GROUP_NOT_FOUND",
            message=msg,
            detail={"group": "x", "available": ["core", "apps"]},
        ),
    )


PACKAGES = [
    {"name": "core-api", "path": "crates/core-api"},
    {"name": "core-types", "path": "crates/core-types"},
]


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        output = format_result(_show(PACKAGES), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"]["packages"][0]["name"] == "core-api"

    def test_json_mode_error(self) -> None:
        data = json.loads(format_result(_err(), json_output=True))
        assert data["ok"] is False
        assert data["error"]["code"] == "GROUP_NOT_FOUND"

    def test_settings_overrides_legacy_kwarg(self) -> None:
        output = format_result(_show(PACKAGES), settings=OutputSettings(), json_output=True)
        assert not output.startswith("{")


class TestFormatResultQuiet:
    def test_quiet_show_group_lists_names(self) -> None:
        output = format_result(_show(PACKAGES), settings=OutputSettings(quiet=True))
        assert output == "core-api\ncore-types"

    def test_quiet_error(self) -> None:
        output = format_result(_err(), settings=OutputSettings(quiet=True))
        assert output.startswith("ERROR")
        assert "Group x not found" in output

    def test_quiet_plan_is_command(self) -> None:
        result = ServiceResult(ok=True, op="plan", data={"command": "cargo build -p a"})
        assert format_result(result, settings=OutputSettings(quiet=True)) == "cargo build -p a"


class TestFormatResultHuman:
    def test_show_group_block(self) -> None:
        output = format_result(_show(PACKAGES))
        lines = output.splitlines()
        assert lines[0] == "[core]"
        assert lines[1] == "  core-api crates/core-api"
        assert lines[2] == "  core-types crates/core-types"

    def test_root_crate_shown_as_dot(self) -> None:
        output = format_result(_show([{"name": "root", "path": ""}]))
        assert "  root ." in output

    def test_list_groups_empty(self) -> None:
        result = ServiceResult(ok=True, op="list_groups", data={"groups": [], "count": 0})
        assert format_result(result) == "No groups found"

    def test_error_lists_available_groups(self) -> None:
        output = format_result(_err())
        assert "ERROR" in output
        assert "Group x not found" in output
        assert "available groups: core, apps" in output

    def test_run_is_silent_unless_verbose(self) -> None:
        result = ServiceResult(
            ok=True,
            op="run",
            data={
                "group": "core",
                "top_level": True,
                "packages": ["core-api"],
                "command": "cargo build -p core-api",
                "exit_code": 0,
            },
        )
        assert format_result(result) == ""
        verbose = format_result(result, settings=OutputSettings(verbose=True))
        assert "cargo build -p core-api" in verbose
        assert "exit_code: 0" in verbose

    def test_unknown_op_uses_generic_renderer(self) -> None:
        result = ServiceResult(ok=True, op="other", data={"count": 2, "names": ["a", "b"]})
        output = format_result(result)
        assert "OK" in output
        assert "count: 2" in output
        assert 'names: ["a","b"]' in output
