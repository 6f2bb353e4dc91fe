"""Exception hierarchy raised by the domain and build graph.

Every error carries a stable ``code`` that the service layer copies into
:class:`~groovyrules.services.result.ServiceError`.
"""

from __future__ import annotations

from typing import Any


class GroovyRulesError(Exception):
    """Base class for all groovyrules failures."""

    code = "ERROR"

    def __init__(self, message: str, *, code: str | None = None, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.detail = detail


class ConfigurationError(GroovyRulesError):
    """A target declaration is invalid. Raised before any action is scheduled."""

    code = "CONFIG_ERROR"


class MissingInputError(GroovyRulesError):
    """A declared dependency or input file cannot be found."""

    code = "MISSING_INPUT"


class DependencyCycleError(GroovyRulesError):
    """Target declarations depend on each other in a cycle."""

    code = "DEPENDENCY_CYCLE"


class ToolchainError(GroovyRulesError):
    """A compiler, archiver or test runner exited non-zero."""

    code = "TOOLCHAIN_FAILED"
