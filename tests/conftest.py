"""Shared pytest fixtures and test helpers for groovyrules tests."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from groovyrules.config.settings import GroovyRulesSettings
from groovyrules.infrastructure.workspace import Workspace
from groovyrules.plugins.manager import PluginManager

EXTERNALS: dict[str, list[str]] = {
    "groovy": ["third_party/groovy-all.jar"],
    "hamcrest": ["third_party/hamcrest-core.jar"],
    "junit": ["third_party/junit.jar"],
    "spock": ["third_party/spock-core.jar"],
}

SAMPLE_BUILD = """\
[[groovy_library]]
name = "app"
srcs = ["src/main/java/app/Model.java", "src/main/groovy/app/Dsl.groovy"]
resources = ["src/main/resources/app/messages.properties"]

[[spock_test]]
name = "app-spec"
srcs = [
    "src/test/java/app/Fixtures.java",
    "src/test/java/app/Helper.groovy",
    "src/test/java/app/DslSpec.groovy",
]
deps = ["app"]

[[groovy_junit_test]]
name = "app-junit"
srcs = ["src/test/java/app/ModelTest.groovy"]
deps = ["app"]
data = ["src/test/resources/app/data.json"]
"""


class FakeRunner:
    """Stands in for the toolchain.

    Records every argv. ``jar cf OUT ...`` creates OUT so archive steps
    publish an output; any tool listed in ``failing`` exits non-zero; the
    configured shell exits with ``script_exit_code``.
    """

    def __init__(self, *, shell: str = "sh") -> None:
        self.shell = shell
        self.calls: list[list[str]] = []
        self.cwds: list[Path] = []
        self.failing: set[str] = set()
        self.script_exit_code = 0

    def __call__(self, argv: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        args = list(argv)
        self.calls.append(args)
        self.cwds.append(cwd)
        tool = args[0]
        if tool in self.failing:
            return subprocess.CompletedProcess(args, 1, "", f"{tool}: compilation failed")
        if tool == self.shell:
            code = self.script_exit_code
            out = "OK (1 test)\n" if code == 0 else "FAILURES!!!\n"
            return subprocess.CompletedProcess(args, code, out, "")
        if len(args) >= 3 and args[1] == "cf":
            output = cwd / args[2]
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(b"PK\x03\x04")
        return subprocess.CompletedProcess(args, 0, "", "")

    def tools(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary workspace with third-party jars and a sample source tree.

    This is the single source of truth for the workspace layout. All
    workspace fixtures (workspace, _isolated_workspace) build on this.
    """
    for jars in EXTERNALS.values():
        for jar in jars:
            path = tmp_path / jar
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"PK\x03\x04")
    sources = {
        "src/main/java/app/Model.java": "package app; public class Model {}\n",
        "src/main/groovy/app/Dsl.groovy": "package app\nclass Dsl {}\n",
        "src/main/resources/app/messages.properties": "greeting=hello\n",
        "src/test/java/app/Fixtures.java": "package app; public class Fixtures {}\n",
        "src/test/java/app/Helper.groovy": "package app\nclass Helper {}\n",
        "src/test/java/app/DslSpec.groovy": "package app\nclass DslSpec {}\n",
        "src/test/java/app/ModelTest.groovy": "package app\nclass ModelTest {}\n",
        "src/test/resources/app/data.json": "{}\n",
    }
    for rel, text in sources.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return tmp_path


@pytest.fixture
def workspace(workspace_root: Path, fake_runner: FakeRunner) -> Workspace:
    """Workspace with the shared externals declared and a fake toolchain."""
    return Workspace(
        make_settings(workspace_root),
        runner=fake_runner,
        plugins=PluginManager(),
    )


@pytest.fixture
def _isolated_workspace(
    workspace_root: Path,
    fake_runner: FakeRunner,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Change CWD to a temp workspace and route the toolchain to the fake runner.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes. Writes a ``groovyrules.toml`` declaring the externals and
    the sample ``BUILD.toml``.
    """
    lines = ["[external]"]
    lines += [f'{name} = ["{jars[0]}"]' for name, jars in EXTERNALS.items()]
    (workspace_root / "groovyrules.toml").write_text("\n".join(lines) + "\n", encoding="utf-8")
    write_build_file(workspace_root, SAMPLE_BUILD)
    monkeypatch.delenv("GROOVYRULES_CONFIG", raising=False)
    monkeypatch.chdir(workspace_root)
    monkeypatch.setattr("groovyrules.infrastructure.executor.subprocess_runner", fake_runner)


# ---------------------------------------------------------------------------
# Shared test helpers (used across test modules)
# ---------------------------------------------------------------------------


def make_settings(root: Path, **overrides: Any) -> GroovyRulesSettings:
    """Settings rooted at *root* with the shared externals unless overridden."""
    overrides.setdefault("external", EXTERNALS)
    return GroovyRulesSettings.from_cli(workspace_root=root, **overrides)


def write_build_file(root: Path, text: str) -> Path:
    path = root / "BUILD.toml"
    path.write_text(text, encoding="utf-8")
    return path


def load_sample(workspace: Workspace) -> None:
    """Declare the sample targets into *workspace*, asserting success."""
    from groovyrules.services.declarations import DeclarationService

    write_build_file(workspace.root, SAMPLE_BUILD)
    result = DeclarationService(workspace).load()
    assert result.ok, result.error
