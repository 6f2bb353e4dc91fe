"""Tests for GroovyRulesSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from groovyrules.config.settings import GroovyRulesSettings


class TestSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        assert settings.workspace_root == tmp_path
        assert settings.json_output is False
        assert settings.toolchain.groovyc == "groovyc"
        assert settings.layout.test_root == "src/test/java/"
        assert settings.test.runner == "org.junit.runner.JUnitCore"
        assert settings.test.implicit_deps == ("groovy", "hamcrest", "junit")
        assert settings.external == {}

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_output_root(self, tmp_path: Path) -> None:
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        assert settings.output_root == tmp_path / "build-out"

    def test_conventions_follow_config(self, tmp_path: Path) -> None:
        (tmp_path / "groovyrules.toml").write_text('[languages]\nspec_suffix = "Suite.groovy"\n')
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        assert settings.conventions.spec_suffix == "Suite.groovy"
        assert settings.conventions.compiled_ext == ".java"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "groovyrules.toml").write_text(
            '[toolchain]\njavac = "/opt/jdk/bin/javac"\n'
            '[external]\njunit = ["third_party/junit.jar"]\n'
        )
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        assert settings.toolchain.javac == "/opt/jdk/bin/javac"
        assert settings.toolchain.jar == "jar"  # default preserved
        assert settings.external == {"junit": ["third_party/junit.jar"]}

    def test_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "groovyrules.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = GroovyRulesSettings.from_cli()
        assert settings.workspace_root.resolve() == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        config = tmp_path / "ci.toml"
        config.write_text('[layout]\noutput_dir = "out"\n')
        settings = GroovyRulesSettings.from_cli(config_path=str(config), workspace_root=tmp_path)
        assert settings.config_path == config
        assert settings.layout.output_dir == "out"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "groovyrules.toml").write_text("[toolchain\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            GroovyRulesSettings.from_cli(workspace_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "groovyrules.toml").write_text("verbose = false\n")
        monkeypatch.setenv("GROOVYRULES_VERBOSE", "true")
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        assert settings.verbose is True

    def test_cli_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GROOVYRULES_QUIET", "false")
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path, quiet=True)
        assert settings.quiet is True

    def test_nested_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GROOVYRULES_TOOLCHAIN__SHELL", "bash")
        settings = GroovyRulesSettings.from_cli(workspace_root=tmp_path)
        assert settings.toolchain.shell == "bash"
