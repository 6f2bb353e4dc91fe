"""Source classification by filename convention.

Classification is a pure, total function: every path maps to exactly one
:class:`SourceKind` and nothing touches the filesystem. Rules and macros
partition their ``srcs`` through :func:`partition_sources`.
"""

from __future__ import annotations

from pydantic import BaseModel

from groovyrules.domain.types import SourceKind


class SourceConventions(BaseModel):
    """Filename conventions used to classify sources."""

    model_config = {"frozen": True}

    compiled_ext: str = ".java"
    scripting_ext: str = ".groovy"
    spec_suffix: str = "Spec.groovy"
    test_suffix: str = "Test.groovy"
    resource_roots: tuple[str, ...] = ("src/main/resources/", "src/test/resources/")


class SourceFile(BaseModel):
    """A source path plus its inferred kind."""

    model_config = {"frozen": True}

    path: str
    kind: SourceKind


class SourcePartition(BaseModel):
    """Sources split by kind, each subset in declaration order.

    ``scripting`` holds every scripting-language file, entry points included;
    ``entry_points`` is the subset matching the entry-point suffix.
    """

    model_config = {"frozen": True}

    compiled: tuple[str, ...] = ()
    scripting: tuple[str, ...] = ()
    entry_points: tuple[str, ...] = ()
    resources: tuple[str, ...] = ()
    unclassified: tuple[str, ...] = ()


def classify_source(
    path: str,
    conventions: SourceConventions | None = None,
    *,
    entry_suffix: str | None = None,
) -> SourceKind:
    """Classify *path* by its filename.

    Entry points must be scripting-language files ending in *entry_suffix*.
    Files under a resource root that are not code are resources.

    Examples:
        >>> classify_source("src/test/java/a/FooSpec.groovy", entry_suffix="Spec.groovy")
        <SourceKind.ENTRY_POINT: 'entry_point'>
        >>> classify_source("src/main/java/a/Foo.java")
        <SourceKind.COMPILED: 'compiled'>
        >>> classify_source("README.md")
        <SourceKind.UNCLASSIFIED: 'unclassified'>
    """
    conv = conventions or SourceConventions()
    if path.endswith(conv.scripting_ext):
        if entry_suffix and path.endswith(entry_suffix):
            return SourceKind.ENTRY_POINT
        return SourceKind.SCRIPTING
    if path.endswith(conv.compiled_ext):
        return SourceKind.COMPILED
    if any(root in path for root in conv.resource_roots):
        return SourceKind.RESOURCE
    return SourceKind.UNCLASSIFIED


def classify_sources(
    paths: list[str] | tuple[str, ...],
    conventions: SourceConventions | None = None,
    *,
    entry_suffix: str | None = None,
) -> list[SourceFile]:
    """Classify every path, preserving order."""
    return [
        SourceFile(path=p, kind=classify_source(p, conventions, entry_suffix=entry_suffix))
        for p in paths
    ]


def partition_sources(
    paths: list[str] | tuple[str, ...],
    conventions: SourceConventions | None = None,
    *,
    entry_suffix: str | None = None,
) -> SourcePartition:
    """Split *paths* into compiled, scripting, entry-point, resource and unclassified sets."""
    buckets: dict[SourceKind, list[str]] = {kind: [] for kind in SourceKind}
    for src in classify_sources(paths, conventions, entry_suffix=entry_suffix):
        buckets[src.kind].append(src.path)
        if src.kind == SourceKind.ENTRY_POINT:
            buckets[SourceKind.SCRIPTING].append(src.path)
    return SourcePartition(
        compiled=tuple(buckets[SourceKind.COMPILED]),
        scripting=tuple(buckets[SourceKind.SCRIPTING]),
        entry_points=tuple(buckets[SourceKind.ENTRY_POINT]),
        resources=tuple(buckets[SourceKind.RESOURCE]),
        unclassified=tuple(buckets[SourceKind.UNCLASSIFIED]),
    )
