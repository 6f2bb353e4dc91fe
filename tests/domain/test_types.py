"""Tests for enums and the error hierarchy."""

import pytest

from groovyrules.domain.errors import (
    ConfigurationError,
    DependencyCycleError,
    GroovyRulesError,
    MissingInputError,
    ToolchainError,
)
from groovyrules.domain.types import Stage, UnitKind


class TestEnums:
    def test_unit_kinds(self) -> None:
        assert {k.value for k in UnitKind} == {
            "raw_files",
            "compiled_library",
            "composite_library",
            "test",
        }

    def test_stage_tokens_in_merge_order(self) -> None:
        assert [s.value for s in Stage] == ["java", "groovy", "res"]


class TestErrors:
    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (ConfigurationError, "CONFIG_ERROR"),
            (MissingInputError, "MISSING_INPUT"),
            (DependencyCycleError, "DEPENDENCY_CYCLE"),
            (ToolchainError, "TOOLCHAIN_FAILED"),
        ],
    )
    def test_default_codes(self, cls: type[GroovyRulesError], code: str) -> None:
        err = cls("boom")
        assert err.code == code
        assert isinstance(err, GroovyRulesError)

    def test_code_override_and_detail(self) -> None:
        err = ConfigurationError("No specs found", code="NO_SPECS", target="t")
        assert err.code == "NO_SPECS"
        assert err.detail == {"target": "t"}
        assert str(err) == "No specs found"

    def test_override_does_not_leak_to_class(self) -> None:
        ConfigurationError("x", code="NO_TESTS")
        assert ConfigurationError.code == "CONFIG_ERROR"
