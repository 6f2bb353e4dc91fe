"""BUILD.toml reading and declaration ordering.

A build file holds one array of tables per rule::

    [[groovy_library]]
    name = "core"
    srcs = ["src/main/java/app/Model.java", "src/main/groovy/app/Dsl.groovy"]
    deps = ["guava"]

    [[spock_test]]
    name = "core-test"
    srcs = ["src/test/java/app/DslSpec.groovy"]
    deps = ["core"]

Declarations may appear in any order; :func:`order_declarations` sorts
them so that every target is declared after the targets it depends on,
including intermediate targets another declaration generates.
"""

from __future__ import annotations

import tomllib
from collections.abc import Callable, Collection, Iterable
from pathlib import Path
from typing import Any

import networkx as nx
from pydantic import BaseModel, Field

from groovyrules.domain.errors import ConfigurationError, DependencyCycleError

class Declaration(BaseModel):
    """One rule invocation read from a build file."""

    model_config = {"frozen": True}

    rule: str
    name: str
    attrs: dict[str, Any] = Field(default_factory=dict)

    @property
    def deps(self) -> list[str]:
        """Dependency names; malformed values are left for attribute validation."""
        deps = self.attrs.get("deps", [])
        if not isinstance(deps, list):
            return []
        return [d for d in deps if isinstance(d, str)]


def read_build_file(path: Path, rules: Collection[str]) -> list[Declaration]:
    """Parse *path* into declarations of the given *rules*, in file order per rule.

    Raises:
        ConfigurationError: Invalid TOML, an unknown rule, or a table
            without a ``name``.
    """
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigurationError(msg, code="INVALID_BUILD_FILE", path=str(path)) from exc

    declarations: list[Declaration] = []
    for rule, tables in data.items():
        if rule not in rules:
            msg = f"Unknown rule '{rule}' in {path.name}"
            raise ConfigurationError(msg, code="UNKNOWN_RULE", rule=rule)
        if not isinstance(tables, list):
            msg = f"'{rule}' must be an array of tables ([[{rule}]])"
            raise ConfigurationError(msg, code="INVALID_BUILD_FILE", rule=rule)
        for table in tables:
            attrs = dict(table)
            name = attrs.pop("name", None)
            if not name:
                msg = f"A '{rule}' declaration in {path.name} has no name"
                raise ConfigurationError(msg, code="INVALID_BUILD_FILE", rule=rule)
            declarations.append(Declaration(rule=rule, name=name, attrs=attrs))
    return declarations


def order_declarations(
    declarations: list[Declaration],
    *,
    generated: Callable[[Declaration], Iterable[str]] | None = None,
) -> list[Declaration]:
    """Sort *declarations* so dependencies come first.

    *generated* lists the intermediate targets a declaration creates (for
    example ``core-java`` for ``core``); a dependency on one of them orders
    after the declaration that creates it. Ties keep file order. References
    to names that are not declared here (externals, raw jars, typos) are
    left for dependency resolution.

    Raises:
        ConfigurationError: The same name is declared twice.
        DependencyCycleError: Declarations depend on each other in a cycle.
    """
    by_name: dict[str, Declaration] = {}
    for decl in declarations:
        if decl.name in by_name:
            msg = f"Target '{decl.name}' is declared more than once"
            raise ConfigurationError(msg, code="DUPLICATE_TARGET", target=decl.name)
        by_name[decl.name] = decl
    position = {d.name: i for i, d in enumerate(declarations)}

    # target name -> declaration that creates it
    owners = {name: name for name in by_name}
    if generated is not None:
        for decl in declarations:
            for alias in generated(decl):
                owners.setdefault(alias, decl.name)

    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(by_name)
    for decl in declarations:
        for dep in decl.deps:
            owner = owners.get(dep)
            if owner is not None and owner != decl.name:
                g.add_edge(owner, decl.name)

    try:
        order = list(nx.lexicographical_topological_sort(g, key=position.__getitem__))
    except nx.NetworkXUnfeasible:
        cycle = [edge[0] for edge in nx.find_cycle(g)]
        msg = f"Targets depend on each other in a cycle: {' -> '.join(cycle)}"
        raise DependencyCycleError(msg, cycle=cycle) from None
    return [by_name[name] for name in order]
