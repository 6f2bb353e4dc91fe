"""Unit and source classification enums."""

from __future__ import annotations

from enum import StrEnum


class UnitKind(StrEnum):
    """Kinds of declared build nodes."""

    RAW_FILES = "raw_files"
    COMPILED_LIBRARY = "compiled_library"
    COMPOSITE_LIBRARY = "composite_library"
    TEST = "test"


class SourceKind(StrEnum):
    """Classification of a single source file by its filename."""

    COMPILED = "compiled"
    SCRIPTING = "scripting"
    RESOURCE = "resource"
    ENTRY_POINT = "entry_point"
    UNCLASSIFIED = "unclassified"


class Stage(StrEnum):
    """Per-library build stages, in merge precedence order.

    The value doubles as the artifact name token: ``lib<name>-<stage>.jar``.
    """

    JAVA = "java"
    GROOVY = "groovy"
    RESOURCES = "res"


class StepKind(StrEnum):
    """Typed steps that make up a build action."""

    PREPARE_SCRATCH = "prepare_scratch"
    COMPILE = "compile"
    COPY = "copy"
    ARCHIVE = "archive"
    CLEANUP = "cleanup"
    WRITE_FILE = "write_file"
