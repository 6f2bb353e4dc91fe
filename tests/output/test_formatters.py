"""Tests for the format_result dispatcher and OutputSettings."""

import json

from groovyrules.output.formatters import OutputSettings, format_result
from groovyrules.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResult:
    def test_json_mode(self) -> None:
        output = format_result(_ok("build", target="app"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"]["target"] == "app"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_err(), settings=settings))["ok"] is False

    def test_quiet_ids_only(self) -> None:
        result = _ok("closure", items=[{"id": "a.jar"}, {"id": "b.jar"}])
        assert format_result(result, settings=OutputSettings(quiet=True)) == "a.jar\nb.jar"

    def test_quiet_without_items(self) -> None:
        assert format_result(_ok("build"), settings=OutputSettings(quiet=True)) == "OK: build"

    def test_quiet_error(self) -> None:
        output = format_result(_err("build", "Bad"), settings=OutputSettings(quiet=True))
        assert output == "ERROR: build - Bad"

    def test_default_is_rich(self) -> None:
        output = format_result(_ok("build", target="app"))
        assert output.startswith("OK")
        assert "build" in output
