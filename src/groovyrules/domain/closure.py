"""Dependency closure resolution.

Single-level propagation: a closure is the union of each direct
dependency's own artifacts and, for dependencies that recorded one, their
``runtime_closure``. Libraries record their closure when they are built,
so closures compose bottom-up along the dependency DAG. Cycles are the
build graph's concern, not this module's.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel

from groovyrules.domain.units import Artifact, Unit


class DependencyClosure(BaseModel):
    """An order-independent set of artifacts needed to compile or run a unit."""

    model_config = {"frozen": True}

    artifacts: frozenset[Artifact] = frozenset()

    def __len__(self) -> int:
        return len(self.artifacts)

    def __contains__(self, item: object) -> bool:
        return item in self.artifacts

    def ordered(self) -> list[Artifact]:
        """Artifacts sorted by exec path, the serialization order."""
        return sorted(self.artifacts, key=lambda a: (a.path, a.short_path))

    def union(self, *others: Iterable[Artifact]) -> DependencyClosure:
        merged = set(self.artifacts)
        for other in others:
            merged.update(other)
        return DependencyClosure(artifacts=frozenset(merged))

    def classpath(self, *, separator: str = ":", short: bool = False) -> str:
        """Join artifact paths into a classpath string.

        Args:
            separator: Path separator (``:`` on POSIX).
            short: Use runfiles-relative short paths instead of exec paths.
        """
        return separator.join(a.short_path if short else a.path for a in self.ordered())


def resolve_closure(deps: Iterable[Unit | Artifact]) -> DependencyClosure:
    """Compute the closure of *deps*.

    Plain :class:`Artifact` values count as raw-file dependencies, so
    ``resolve_closure(resolve_closure(deps).artifacts) == resolve_closure(deps)``.
    """
    artifacts: set[Artifact] = set()
    for dep in deps:
        if isinstance(dep, Artifact):
            artifacts.add(dep)
            continue
        artifacts.update(dep.artifacts)
        if dep.runtime_closure is not None:
            artifacts.update(dep.runtime_closure)
    return DependencyClosure(artifacts=frozenset(artifacts))
