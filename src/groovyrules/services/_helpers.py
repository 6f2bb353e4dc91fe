"""Shared service-layer helper functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from groovyrules.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from groovyrules.domain.errors import GroovyRulesError


def error_result(
    op: str,
    exc: GroovyRulesError,
    *,
    warnings: list[str] | None = None,
) -> ServiceResult:
    """Convert a domain exception into a failed ServiceResult."""
    return ServiceResult(
        ok=False,
        op=op,
        warnings=warnings or [],
        error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
    )


def dedupe(refs: list[str] | tuple[str, ...]) -> list[str]:
    """Drop repeated references, keeping the first occurrence.

    Examples:
        >>> dedupe(["a", "b", "a"])
        ['a', 'b']
    """
    seen: set[str] = set()
    result: list[str] = []
    for ref in refs:
        if ref not in seen:
            seen.add(ref)
            result.append(ref)
    return result
