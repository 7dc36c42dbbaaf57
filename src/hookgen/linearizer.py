"""
Linearization of selected components.

Produces one total order in which every component appears once and after all
of its declared parents. Parents are pulled in transitively, so a utility
required by two components (a diamond) is still listed once.

Ties between unconstrained components are broken by tier
(hook, access, pausable, shares, utility), then by registry declaration
order. A parent inherits the highest priority of anything that depends on
it, so a utility pulled in by the hook base sorts with the hook base rather
than after every other tier.
"""

from __future__ import annotations

import heapq
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .components import build_default_registry
from .exceptions import LinearizationError
from .registry import ComponentRegistry

logger = logging.getLogger(__name__)


def _find_cycles_dfs(graph: Dict[str, List[str]], start: str, visited: Set[str],
                     rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in graph.get(start, []):
        if neighbor not in visited:
            cycle = _find_cycles_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


def _closure(component_ids: Iterable[str], registry: ComponentRegistry) -> Set[str]:
    """All selected components plus their transitive parents."""
    seen: Set[str] = set()
    stack = sorted(component_ids)
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        for parent in registry.get(node).parents:
            if parent not in seen:
                stack.append(parent)
    return seen


def _priorities(nodes: Set[str], dependents: Dict[str, List[str]],
                registry: ComponentRegistry) -> Dict[str, Tuple[int, int]]:
    """(tier, declaration index) per node, lowered to the best priority of any dependent."""
    priority = {n: (int(registry.get(n).tier), registry.declaration_index(n)) for n in nodes}
    # Relax until stable; bounded by the number of nodes since priorities only decrease.
    for _ in range(len(nodes)):
        changed = False
        for node in nodes:
            for dependent in dependents.get(node, []):
                tier = priority[dependent][0]
                if tier < priority[node][0]:
                    priority[node] = (tier, priority[node][1])
                    changed = True
        if not changed:
            break
    return priority


def linearize(component_ids: Iterable[str], registry: ComponentRegistry | None = None) -> Tuple[str, ...]:
    """
    Order components so that every parent precedes its dependents.

    Args:
        component_ids: Selected component ids (any order, duplicates ignored)
        registry: Component registry (defaults to the built-in one)

    Returns:
        Tuple of component ids, each exactly once; depends only on the set
        of ids, never on the order they were given in

    Raises:
        LinearizationError: the registry's parent graph contains a cycle
        RegistryError: an id is not in the registry
    """
    if registry is None:
        registry = build_default_registry()
    nodes = _closure(component_ids, registry)

    # parent -> components that must come after it
    dependents: Dict[str, List[str]] = defaultdict(list)
    in_degree: Dict[str, int] = {n: 0 for n in nodes}
    for node in sorted(nodes):
        for parent in registry.get(node).parents:
            dependents[parent].append(node)
            in_degree[node] += 1

    priority = _priorities(nodes, dependents, registry)
    ready = [(priority[n], n) for n in nodes if in_degree[n] == 0]
    heapq.heapify(ready)

    order: List[str] = []
    while ready:
        _, node = heapq.heappop(ready)
        order.append(node)
        for dependent in dependents.get(node, []):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, (priority[dependent], dependent))

    if len(order) != len(nodes):
        remaining = sorted(n for n in nodes if n not in order)
        parents_of = {n: list(registry.get(n).parents) for n in remaining}
        cycle = None
        visited: Set[str] = set()
        for node in remaining:
            if node not in visited:
                cycle = _find_cycles_dfs(parents_of, node, visited, set(), [])
                if cycle:
                    break
        detail = " -> ".join(cycle) if cycle else ", ".join(remaining)
        raise LinearizationError(f"Component dependency cycle: {detail}", cycle=cycle or remaining)

    logger.debug("Linearized components: %s", ", ".join(order))
    return tuple(order)
