"""DeclarationService — load BUILD.toml into the workspace.

Declarations are ordered by dependency first, then each one is handed to
the rule service that implements it. Loading stops at the first target
that fails; targets declared before it stay committed.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, StrictBool, ValidationError

from groovyrules.domain.errors import ConfigurationError, GroovyRulesError
from groovyrules.domain.types import Stage
from groovyrules.domain.units import stage_unit_name
from groovyrules.infrastructure.loader import order_declarations, read_build_file
from groovyrules.services._helpers import error_result
from groovyrules.services.base import BaseService
from groovyrules.services.library import LibraryService, stage_names
from groovyrules.services.macros import MacroService
from groovyrules.services.macros import generated_names as macro_targets
from groovyrules.services.result import ServiceError, ServiceResult
from groovyrules.services.telemetry import traced
from groovyrules.services.testing import TestService

if TYPE_CHECKING:
    from pathlib import Path

    from groovyrules.infrastructure.loader import Declaration


def _no_generated(_name: str) -> list[str]:
    return []


@dataclass(frozen=True)
class Rule:
    """How one build-file rule is declared."""

    service: type[BaseService]
    method: str
    # intermediate target names the rule declares for a given name
    generated: Callable[[str], list[str]] = _no_generated


RULES: dict[str, Rule] = {
    "java_import": Rule(LibraryService, "java_import"),
    "java_library": Rule(
        LibraryService,
        "java_library",
        lambda name: [stage_unit_name(name, Stage.RESOURCES)],
    ),
    "groovy_jar": Rule(LibraryService, "groovy_jar"),
    "groovy_library": Rule(LibraryService, "groovy_library", stage_names),
    "groovy_test": Rule(TestService, "groovy_test"),
    "spock_test": Rule(MacroService, "spock_test", macro_targets),
    "groovy_junit_test": Rule(MacroService, "groovy_junit_test", macro_targets),
}


class RuleAttributes(BaseModel):
    """Value types of every attribute a build-file rule accepts.

    Which attributes a given rule accepts is checked against its method
    signature; this model checks that each value has the right shape.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    srcs: list[str] = []
    deps: list[str] = []
    jars: list[str] = []
    resources: list[str] = []
    data: list[str] = []
    visibility: list[str] = []
    tags: list[str] = []
    jvm_flags: list[str] = []
    testonly: StrictBool = False
    size: str | None = None


def generated_targets(decl: Declaration) -> list[str]:
    """Intermediate target names *decl* declares besides its own."""
    return RULES[decl.rule].generated(decl.name)


class DeclarationService(BaseService):
    """Reads build files and declares their targets."""

    @traced
    def load(self, path: Path | None = None) -> ServiceResult:
        """Declare every target in *path* (default: the workspace build file)."""
        build_file = path or self._workspace.root / self._settings.layout.build_file
        if not build_file.is_file():
            return ServiceResult(
                ok=False,
                op="load",
                error=ServiceError(
                    code="NO_BUILD_FILE",
                    message=f"No build file at {build_file}",
                    detail={"path": str(build_file)},
                ),
            )

        try:
            declarations = order_declarations(
                read_build_file(build_file, RULES.keys()),
                generated=generated_targets,
            )
        except GroovyRulesError as exc:
            return error_result("load", exc)

        warnings: list[str] = []
        declared: list[str] = []
        for decl in declarations:
            result = self.declare(decl)
            warnings.extend(result.warnings)
            if not result.ok:
                detail = dict(result.error.detail) if result.error else {}
                detail.setdefault("target", decl.name)
                return ServiceResult(
                    ok=False,
                    op="load",
                    warnings=warnings,
                    error=ServiceError(
                        code=result.error.code if result.error else "ERROR",
                        message=f"{decl.rule} '{decl.name}': "
                        + (result.error.message if result.error else "failed"),
                        detail=detail,
                    ),
                )
            declared.append(decl.name)

        self._workspace.loaded = True
        return ServiceResult(
            ok=True,
            op="load",
            data={"build_file": str(build_file), "count": len(declared), "targets": declared},
            warnings=warnings,
        )

    def declare(self, decl: Declaration) -> ServiceResult:
        """Dispatch one declaration to its rule method."""
        rule = RULES[decl.rule]
        method: Callable[..., ServiceResult] = getattr(rule.service(self._workspace), rule.method)
        try:
            self._check_attrs(method, decl.name, decl.attrs)
        except ConfigurationError as exc:
            return error_result(decl.rule, exc)
        return method(decl.name, **decl.attrs)

    @staticmethod
    def _check_attrs(method: Callable[..., Any], name: str, attrs: dict[str, Any]) -> None:
        try:
            inspect.signature(method).bind(name, **attrs)
        except TypeError as exc:
            msg = f"Invalid attributes for '{name}': {exc}"
            raise ConfigurationError(msg, code="INVALID_ATTRIBUTE", target=name) from exc
        try:
            RuleAttributes.model_validate(attrs)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            msg = f"Invalid attribute '{field}' for '{name}': {first['msg']}"
            raise ConfigurationError(
                msg, code="INVALID_ATTRIBUTE", target=name, attribute=field
            ) from exc
