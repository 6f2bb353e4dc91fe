"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, groovyrules.toml only contains
overrides. A workspace with stock Java/Groovy tooling on ``PATH`` needs no
config file at all beyond an ``[external]`` table for the test framework.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from groovyrules.domain.sources import SourceConventions

# --- groovyrules.toml sections ---


class ToolchainConfig(BaseModel):
    """[toolchain] section."""

    model_config = {"frozen": True}

    javac: str = "javac"
    groovyc: str = "groovyc"
    jar: str = "jar"
    java: str = "java"
    shell: str = "sh"
    path_separator: str = ":"


class LayoutConfig(BaseModel):
    """[layout] section."""

    model_config = {"frozen": True}

    output_dir: str = "build-out"
    build_file: str = "BUILD.toml"
    test_root: str = "src/test/java/"
    resource_roots: tuple[str, ...] = ("src/main/resources/", "src/test/resources/")


class LanguagesConfig(BaseModel):
    """[languages] section."""

    model_config = {"frozen": True}

    compiled_ext: str = ".java"
    scripting_ext: str = ".groovy"
    spec_suffix: str = "Spec.groovy"
    test_suffix: str = "Test.groovy"


class TestConfig(BaseModel):
    """[test] section.

    ``implicit_deps`` are added to every ``groovy_test``; ``framework_deps``
    are added by the ``spock_test`` and ``groovy_junit_test`` macros. Both
    name units, typically declared in ``[external]``.
    """

    __test__ = False

    model_config = {"frozen": True}

    runner: str = "org.junit.runner.JUnitCore"
    implicit_deps: tuple[str, ...] = ("groovy", "hamcrest", "junit")
    framework_deps: tuple[str, ...] = ("spock",)
    default_size: str = "small"


class GroovyRulesConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    languages: LanguagesConfig = Field(default_factory=LanguagesConfig)
    test: TestConfig = Field(default_factory=TestConfig)
    external: dict[str, list[str]] = Field(default_factory=dict)


def source_conventions(languages: LanguagesConfig, layout: LayoutConfig) -> SourceConventions:
    """Build the domain-level classification conventions from config sections."""
    return SourceConventions(
        compiled_ext=languages.compiled_ext,
        scripting_ext=languages.scripting_ext,
        spec_suffix=languages.spec_suffix,
        test_suffix=languages.test_suffix,
        resource_roots=layout.resource_roots,
    )
