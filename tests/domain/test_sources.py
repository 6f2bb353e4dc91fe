"""Tests for source classification and partitioning."""

import pytest

from groovyrules.domain.sources import (
    SourceConventions,
    classify_source,
    classify_sources,
    partition_sources,
)
from groovyrules.domain.types import SourceKind


class TestClassifySource:
    @pytest.mark.parametrize(
        ("path", "kind"),
        [
            ("src/main/java/a/Foo.java", SourceKind.COMPILED),
            ("src/main/groovy/a/Dsl.groovy", SourceKind.SCRIPTING),
            ("src/main/resources/a/app.properties", SourceKind.RESOURCE),
            ("README.md", SourceKind.UNCLASSIFIED),
        ],
    )
    def test_by_extension(self, path: str, kind: SourceKind) -> None:
        assert classify_source(path) == kind

    def test_entry_point_requires_suffix(self) -> None:
        path = "src/test/java/a/FooSpec.groovy"
        assert classify_source(path, entry_suffix="Spec.groovy") == SourceKind.ENTRY_POINT
        assert classify_source(path, entry_suffix="Test.groovy") == SourceKind.SCRIPTING
        assert classify_source(path) == SourceKind.SCRIPTING

    def test_java_named_like_spec_is_not_entry_point(self) -> None:
        """Entry points must be scripting files, whatever the stem says."""
        kind = classify_source("src/test/java/a/FooSpec.java", entry_suffix="Spec.java")
        assert kind == SourceKind.COMPILED

    def test_code_under_resource_root_is_code(self) -> None:
        assert classify_source("src/main/resources/Gen.groovy") == SourceKind.SCRIPTING

    def test_custom_conventions(self) -> None:
        conv = SourceConventions(compiled_ext=".kt", resource_roots=("res/",))
        assert classify_source("a/B.kt", conv) == SourceKind.COMPILED
        assert classify_source("a/B.java", conv) == SourceKind.UNCLASSIFIED
        assert classify_source("res/x.txt", conv) == SourceKind.RESOURCE

    def test_classify_sources_preserves_order(self) -> None:
        files = classify_sources(["b.groovy", "a.java"])
        assert [f.path for f in files] == ["b.groovy", "a.java"]
        assert [f.kind for f in files] == [SourceKind.SCRIPTING, SourceKind.COMPILED]


class TestPartitionSources:
    def test_mixed_sources(self) -> None:
        part = partition_sources(
            [
                "src/test/java/a/Util.java",
                "src/test/java/a/Helper.groovy",
                "src/test/java/a/FooSpec.groovy",
                "notes.txt",
            ],
            entry_suffix="Spec.groovy",
        )
        assert part.compiled == ("src/test/java/a/Util.java",)
        assert part.entry_points == ("src/test/java/a/FooSpec.groovy",)
        assert part.scripting == (
            "src/test/java/a/Helper.groovy",
            "src/test/java/a/FooSpec.groovy",
        )
        assert part.unclassified == ("notes.txt",)

    def test_every_path_lands_in_one_bucket(self) -> None:
        paths = ["a.java", "b.groovy", "c.txt", "src/main/resources/d.xml"]
        part = partition_sources(paths)
        buckets = [*part.compiled, *part.scripting, *part.resources, *part.unclassified]
        assert sorted(buckets) == sorted(paths)

    def test_empty(self) -> None:
        part = partition_sources([])
        assert part.compiled == part.scripting == part.entry_points == ()
