"""BuildGraph — declared units and actions backed by NetworkX.

Two graphs are derived on demand from the registered units and actions:

- the *unit graph*: ``unit -> dependency`` edges between declared targets;
- the *action graph*: ``producer -> consumer`` edges, where a consumer
  lists one of the producer's outputs among its inputs.

Execution order for a target is a topological sort of the action subgraph
it needs. Cycles are reported here, never by the closure resolver.
"""

from __future__ import annotations

from collections.abc import Iterable

import networkx as nx

from groovyrules.domain.actions import BuildAction
from groovyrules.domain.errors import ConfigurationError, DependencyCycleError, MissingInputError
from groovyrules.domain.units import Unit

type _Graph = nx.DiGraph


class BuildGraph:
    """Registry of units and the actions that produce their artifacts."""

    def __init__(self) -> None:
        self._units: dict[str, Unit] = {}
        self._actions: dict[str, BuildAction] = {}
        self._producers: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_unit(self, unit: Unit) -> None:
        if unit.name in self._units:
            msg = f"Target '{unit.name}' is already declared"
            raise ConfigurationError(msg, code="DUPLICATE_TARGET", target=unit.name)
        self._units[unit.name] = unit

    def add_action(self, action: BuildAction) -> None:
        for output in action.outputs:
            if output in self._producers:
                msg = f"Output '{output}' is produced by more than one action"
                raise ConfigurationError(msg, code="DUPLICATE_OUTPUT", output=output)
        key = action.outputs[0]
        self._actions[key] = action
        for output in action.outputs:
            self._producers[output] = key

    def copy(self) -> BuildGraph:
        clone = BuildGraph()
        clone._units = dict(self._units)
        clone._actions = dict(self._actions)
        clone._producers = dict(self._producers)
        return clone

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def get_unit(self, name: str) -> Unit:
        try:
            return self._units[name]
        except KeyError:
            msg = f"No target named '{name}'"
            raise MissingInputError(msg, target=name) from None

    def units(self) -> list[Unit]:
        return list(self._units.values())

    def actions(self) -> list[BuildAction]:
        return list(self._actions.values())

    def producer_of(self, path: str) -> BuildAction | None:
        key = self._producers.get(path)
        return self._actions[key] if key is not None else None

    # ------------------------------------------------------------------
    # Graph views
    # ------------------------------------------------------------------

    def unit_graph(self) -> _Graph:
        """Targets as nodes, ``target -> dependency`` edges for declared deps."""
        g: _Graph = nx.DiGraph()
        for unit in self._units.values():
            g.add_node(unit.name, kind=unit.kind.value)
        for unit in self._units.values():
            for dep in unit.deps:
                if dep in self._units:
                    g.add_edge(unit.name, dep)
        return g

    def action_graph(self) -> _Graph:
        """Actions keyed by first output, ``producer -> consumer`` edges."""
        g: _Graph = nx.DiGraph()
        for key, action in self._actions.items():
            g.add_node(key, mnemonic=action.mnemonic, owner=action.owner)
        for key, action in self._actions.items():
            for path in action.inputs:
                producer = self._producers.get(path)
                if producer is not None and producer != key:
                    g.add_edge(producer, key)
        return g

    def required_paths(self, name: str) -> set[str]:
        """Every file that must exist for target *name* to be built or run."""
        unit = self.get_unit(name)
        paths = {a.path for a in unit.artifacts}
        paths.update(a.path for a in unit.runtime_closure or ())
        paths.update(a.path for a in unit.runfiles)
        return paths

    def actions_for(self, paths: Iterable[str]) -> list[BuildAction]:
        """Actions producing *paths* and everything they need, in execution order.

        Raises:
            DependencyCycleError: If the needed actions depend on each other
                in a cycle.
        """
        g = self.action_graph()
        needed: set[str] = set()
        for path in paths:
            key = self._producers.get(path)
            if key is None:
                continue
            needed.add(key)
            needed.update(nx.ancestors(g, key))

        sub = g.subgraph(needed)
        try:
            order = list(nx.lexicographical_topological_sort(sub))
        except nx.NetworkXUnfeasible:
            cycle = [edge[0] for edge in nx.find_cycle(sub)]
            msg = f"Build actions form a cycle: {' -> '.join(cycle)}"
            raise DependencyCycleError(msg, cycle=cycle) from None
        return [self._actions[key] for key in order]
