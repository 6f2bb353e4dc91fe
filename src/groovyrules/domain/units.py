"""Unit and Artifact models.

A :class:`Unit` is declared once and never mutated afterwards. Its
``runtime_closure`` is computed at construction time, bottom-up, so
consumers only ever look one level down.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from groovyrules.domain.types import Stage, UnitKind


class Artifact(BaseModel):
    """A single file produced or consumed by the build.

    Attributes:
        path: Exec path, relative to the workspace root.
        short_path: Path inside a runfiles tree (what test scripts reference).
    """

    model_config = {"frozen": True}

    path: str
    short_path: str

    @classmethod
    def source(cls, path: str) -> Artifact:
        """An input file that already exists in the workspace."""
        return cls(path=path, short_path=path)

    @classmethod
    def output(cls, output_dir: str, filename: str) -> Artifact:
        """A file produced under *output_dir*."""
        prefix = output_dir.rstrip("/")
        return cls(path=f"{prefix}/{filename}" if prefix else filename, short_path=filename)


def stage_jar_name(unit_name: str, stage: Stage | None = None) -> str:
    """Deterministic jar filename for *unit_name* and an optional stage token.

    Examples:
        >>> stage_jar_name("core", Stage.GROOVY)
        'libcore-groovy.jar'
        >>> stage_jar_name("core-java")
        'libcore-java.jar'
    """
    if stage is None:
        return f"lib{unit_name}.jar"
    return f"lib{unit_name}-{stage.value}.jar"


def stage_unit_name(unit_name: str, stage: Stage) -> str:
    """Name of the per-stage unit a library composer derives from *unit_name*."""
    return f"{unit_name}-{stage.value}"


class Unit(BaseModel):
    """A named build node.

    ``runtime_closure`` is ``None`` for raw-file units: they expose their
    files but record no transitive dependencies.
    """

    model_config = {"frozen": True}

    name: str
    kind: UnitKind
    deps: tuple[str, ...] = ()
    artifacts: tuple[Artifact, ...] = ()
    runtime_closure: frozenset[Artifact] | None = None
    runfiles: frozenset[Artifact] = frozenset()
    visibility: tuple[str, ...] = ()
    testonly: bool = False
    attrs: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_raw(self) -> bool:
        return self.runtime_closure is None

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly summary used in service payloads."""
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "deps": list(self.deps),
            "artifacts": [a.path for a in self.artifacts],
        }
        if self.testonly:
            data["testonly"] = True
        if self.visibility:
            data["visibility"] = list(self.visibility)
        if self.attrs:
            data["attrs"] = self.attrs
        return data
