"""Dependency graph over declared resources."""

import heapq
from typing import Dict, Iterable, List, Mapping, Optional, Set

from config import Config
from errors import DependencyCycleError
from references import find_references


class DependencyGraph:
    """Resources keyed by local name, each pointing at the names it needs first.

    ``priorities`` only orders resources that are ready at the same time;
    lower values come out first.
    """

    def __init__(
        self,
        nodes: Iterable[str],
        dependencies: Mapping[str, Iterable[str]],
        priorities: Optional[Mapping[str, int]] = None,
    ):
        self._nodes = set(nodes)
        self._priorities = priorities or {}
        # edges to undeclared names are dropped here and reported by validation
        self._deps: Dict[str, Set[str]] = {
            node: {d for d in dependencies.get(node, []) if d in self._nodes}
            for node in self._nodes
        }

    def dependencies_of(self, node: str) -> Set[str]:
        return set(self._deps.get(node, set()))

    def _ready(self, node: str):
        return (self._priorities.get(node, 0), node)

    def topological_order(self) -> List[str]:
        """Creation order: a resource always follows everything it needs."""
        waiting_on = {node: len(deps) for node, deps in self._deps.items()}
        needed_by: Dict[str, Set[str]] = {node: set() for node in self._nodes}
        for node, deps in self._deps.items():
            for dep in deps:
                needed_by[dep].add(node)

        queue = [self._ready(node) for node, count in waiting_on.items() if count == 0]
        heapq.heapify(queue)

        order: List[str] = []
        while queue:
            _, node = heapq.heappop(queue)
            order.append(node)
            for dependent in needed_by[node]:
                waiting_on[dependent] -= 1
                if not waiting_on[dependent]:
                    heapq.heappush(queue, self._ready(dependent))

        if len(order) < len(self._nodes):
            # whatever never became ready sits on or behind a cycle
            raise DependencyCycleError(sorted(self._nodes.difference(order)))

        return order

    def reverse_topological_order(self) -> List[str]:
        """Destruction order."""
        return self.topological_order()[::-1]


def resource_dependencies(config: Config) -> Dict[str, Set[str]]:
    """Map each resource to the names it references or explicitly depends on."""
    deps: Dict[str, Set[str]] = {}
    for resource in config.aws_resources:
        names = {ref.resource for ref in find_references(resource.args)}
        names.update(resource.depends_on)
        deps[resource.name] = names
    return deps


def build_dependency_graph(config: Config) -> DependencyGraph:
    """Graph of the declared resources, ties broken by declaration order."""
    names = [r.name for r in config.aws_resources]
    return DependencyGraph(
        nodes=names,
        dependencies=resource_dependencies(config),
        priorities={name: index for index, name in enumerate(names)},
    )
