"""Tests for BuildGraph — unit and action graphs over NetworkX."""

import pytest

from groovyrules.domain.actions import BuildAction, CompileStep, write_file_action
from groovyrules.domain.errors import ConfigurationError, DependencyCycleError, MissingInputError
from groovyrules.domain.types import UnitKind
from groovyrules.domain.units import Artifact, Unit
from groovyrules.infrastructure.graph.engine import BuildGraph


def _action(owner: str, output: str, inputs: tuple[str, ...] = ()) -> BuildAction:
    return BuildAction(
        mnemonic="Javac",
        owner=owner,
        inputs=inputs,
        outputs=(output,),
        steps=(CompileStep(argv=("javac",)),),
    )


@pytest.fixture
def chain() -> BuildGraph:
    """a.jar <- b.jar <- c.jar, plus an unrelated z.jar."""
    g = BuildGraph()
    g.add_action(_action("a", "out/a.jar", ("src/A.java",)))
    g.add_action(_action("b", "out/b.jar", ("src/B.java", "out/a.jar")))
    g.add_action(_action("c", "out/c.jar", ("out/b.jar", "third_party/x.jar")))
    g.add_action(_action("z", "out/z.jar"))
    return g


class TestRegistration:
    def test_duplicate_unit(self) -> None:
        g = BuildGraph()
        g.add_unit(Unit(name="a", kind=UnitKind.RAW_FILES))
        with pytest.raises(ConfigurationError) as exc_info:
            g.add_unit(Unit(name="a", kind=UnitKind.RAW_FILES))
        assert exc_info.value.code == "DUPLICATE_TARGET"

    def test_duplicate_output(self) -> None:
        g = BuildGraph()
        g.add_action(_action("a", "out/a.jar"))
        with pytest.raises(ConfigurationError) as exc_info:
            g.add_action(_action("b", "out/a.jar"))
        assert exc_info.value.code == "DUPLICATE_OUTPUT"

    def test_get_unknown_unit(self) -> None:
        with pytest.raises(MissingInputError):
            BuildGraph().get_unit("nope")

    def test_copy_is_independent(self) -> None:
        g = BuildGraph()
        clone = g.copy()
        clone.add_unit(Unit(name="a", kind=UnitKind.RAW_FILES))
        assert "a" in clone
        assert "a" not in g

    def test_producer_of(self, chain: BuildGraph) -> None:
        producer = chain.producer_of("out/b.jar")
        assert producer is not None
        assert producer.owner == "b"
        assert chain.producer_of("src/A.java") is None


class TestGraphViews:
    def test_unit_graph_edges(self) -> None:
        g = BuildGraph()
        g.add_unit(Unit(name="lib", kind=UnitKind.COMPILED_LIBRARY))
        g.add_unit(Unit(name="app", kind=UnitKind.COMPOSITE_LIBRARY, deps=("lib", "x.jar")))
        ug = g.unit_graph()
        assert list(ug.edges) == [("app", "lib")]
        assert ug.nodes["app"]["kind"] == "composite_library"

    def test_action_graph_edges(self, chain: BuildGraph) -> None:
        ag = chain.action_graph()
        assert set(ag.edges) == {("out/a.jar", "out/b.jar"), ("out/b.jar", "out/c.jar")}


class TestActionsFor:
    def test_includes_ancestors_in_order(self, chain: BuildGraph) -> None:
        owners = [a.owner for a in chain.actions_for(["out/c.jar"])]
        assert owners == ["a", "b", "c"]

    def test_excludes_unrelated(self, chain: BuildGraph) -> None:
        owners = [a.owner for a in chain.actions_for(["out/b.jar"])]
        assert owners == ["a", "b"]

    def test_source_paths_need_nothing(self, chain: BuildGraph) -> None:
        assert chain.actions_for(["src/A.java"]) == []

    def test_cycle(self) -> None:
        g = BuildGraph()
        g.add_action(_action("a", "out/a.jar", ("out/b.jar",)))
        g.add_action(_action("b", "out/b.jar", ("out/a.jar",)))
        with pytest.raises(DependencyCycleError):
            g.actions_for(["out/a.jar"])


class TestRequiredPaths:
    def test_artifacts_closure_and_runfiles(self) -> None:
        g = BuildGraph()
        script = Artifact.output("out", "t.sh")
        jar = Artifact.output("out", "liba.jar")
        data = Artifact.source("data/x.json")
        g.add_unit(
            Unit(
                name="t",
                kind=UnitKind.TEST,
                artifacts=(script,),
                runtime_closure=frozenset({jar}),
                runfiles=frozenset({jar, data}),
            )
        )
        g.add_action(write_file_action(mnemonic="GroovyTestScript", owner="t", output=script.path, content=""))
        assert g.required_paths("t") == {"out/t.sh", "out/liba.jar", "data/x.json"}
