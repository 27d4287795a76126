"""
Graph preprocessing utilities.

This module provides reusable functions for layering a directed graph
whose nodes are identified by arbitrary hashable keys:
- Cycle detection
- Topological ordering (Kahn) with residual reporting
- Longest-path layer assignment
- Crossing counting between ordered layers

They are used by both the top-level layered pipeline and the layered
sub-layout of group interiors.
"""

from __future__ import annotations

from collections import deque
from typing import Hashable, Iterable, Mapping, Optional, Sequence, TypeVar

K = TypeVar("K", bound=Hashable)


# =============================================================================
# Cycle Detection
# =============================================================================


def detect_cycle(
    keys: Sequence[K],
    successors: Mapping[K, Sequence[K]],
) -> Optional[list[K]]:
    """
    Detect if a directed graph contains a cycle.

    Uses iterative DFS. Returns the first cycle found, or None if the
    graph is acyclic. Successors outside ``keys`` are ignored.

    Args:
        keys: Node keys
        successors: Key -> successor keys

    Returns:
        List of keys forming a cycle (first key repeated at the end), or None.

    Example:
        >>> detect_cycle([1, 2, 3], {1: [2], 2: [3], 3: [1]})
        [1, 2, 3, 1]
    """
    known = set(keys)
    # DFS states: 0=unvisited, 1=visiting, 2=visited
    state: dict[K, int] = {key: 0 for key in keys}

    for start in keys:
        if state[start] != 0:
            continue
        path: list[K] = [start]
        stack = [iter(successors.get(start, ()))]
        state[start] = 1
        while stack:
            advanced = False
            for neighbor in stack[-1]:
                if neighbor not in known:
                    continue
                if state[neighbor] == 1:
                    cycle_start = path.index(neighbor)
                    return path[cycle_start:] + [neighbor]
                if state[neighbor] == 0:
                    state[neighbor] = 1
                    path.append(neighbor)
                    stack.append(iter(successors.get(neighbor, ())))
                    advanced = True
                    break
            if not advanced:
                state[path.pop()] = 2
                stack.pop()

    return None


def has_cycle(keys: Sequence[K], successors: Mapping[K, Sequence[K]]) -> bool:
    """Check if a directed graph contains any cycle."""
    return detect_cycle(keys, successors) is not None


# =============================================================================
# Topological Order
# =============================================================================


def topological_order(
    keys: Sequence[K],
    successors: Mapping[K, Sequence[K]],
) -> tuple[list[K], list[K]]:
    """
    Compute a topological ordering with Kahn's algorithm.

    Nodes that never reach in-degree zero (members of cycles or nodes
    downstream of one) are returned separately, in ``keys`` order, so that
    callers can append them instead of failing.

    Args:
        keys: Node keys; their order seeds the queue
        successors: Key -> successor keys (duplicates count once per entry)

    Returns:
        (order, residual) where order + residual covers every key once.

    Example:
        >>> topological_order(["a", "b", "c"], {"a": ["b"], "b": ["c"]})
        (['a', 'b', 'c'], [])
    """
    known = set(keys)
    in_degree: dict[K, int] = {key: 0 for key in keys}
    for key in keys:
        for succ in successors.get(key, ()):
            if succ in known:
                in_degree[succ] += 1

    queue: deque[K] = deque(key for key in keys if in_degree[key] == 0)
    order: list[K] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for succ in successors.get(node, ()):
            if succ not in known:
                continue
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                queue.append(succ)

    placed = set(order)
    residual = [key for key in keys if key not in placed]
    return order, residual


# =============================================================================
# Layer Assignment
# =============================================================================


def longest_path_layers(
    order: Iterable[K],
    predecessors: Mapping[K, Sequence[K]],
) -> dict[K, int]:
    """
    Assign each node the length of the longest path reaching it.

    Nodes are visited in ``order``. A node's layer is one more than the
    deepest predecessor already visited; nodes with no visited predecessor
    land in layer 0. Given a topological order this is exact; residual
    cycle members appended at the end degrade gracefully.

    Args:
        order: Visiting order, normally from topological_order()
        predecessors: Key -> predecessor keys

    Returns:
        Key -> layer index

    Example:
        >>> longest_path_layers([0, 1, 2], {1: [0], 2: [0, 1]})
        {0: 0, 1: 1, 2: 2}
    """
    layer: dict[K, int] = {}
    for key in order:
        assigned = [layer[pred] for pred in predecessors.get(key, ()) if pred in layer]
        layer[key] = max(assigned) + 1 if assigned else 0
    return layer


def group_by_layer(layer: Mapping[K, int]) -> list[list[K]]:
    """Group keys by layer index, preserving mapping order within a layer."""
    if not layer:
        return []
    result: list[list[K]] = [[] for _ in range(max(layer.values()) + 1)]
    for key, index in layer.items():
        result[index].append(key)
    return result


# =============================================================================
# Graph Metrics
# =============================================================================


def count_crossings(
    layers: Sequence[Sequence[K]],
    edges: Iterable[tuple[K, K]],
) -> int:
    """
    Count the number of edge crossings in a layered layout.

    Args:
        layers: Ordered layers, each containing node keys
        edges: (source, target) pairs

    Returns:
        Number of edge crossings.
    """
    node_layer: dict[K, int] = {}
    node_pos: dict[K, int] = {}
    for layer_idx, layer in enumerate(layers):
        for pos, node in enumerate(layer):
            node_layer[node] = layer_idx
            node_pos[node] = pos

    # Group edges by layer pairs
    layer_edges: dict[tuple[int, int], list[tuple[int, int]]] = {}
    for src, tgt in edges:
        if src in node_layer and tgt in node_layer:
            l1, l2 = node_layer[src], node_layer[tgt]
            if l1 > l2:
                l1, l2 = l2, l1
                src, tgt = tgt, src
            layer_edges.setdefault((l1, l2), []).append((node_pos[src], node_pos[tgt]))

    total = 0
    for pairs in layer_edges.values():
        for i, (s1, t1) in enumerate(pairs):
            for s2, t2 in pairs[i + 1 :]:
                # Two edges cross if one is "above" on the left and "below" on the right
                if (s1 < s2 and t1 > t2) or (s1 > s2 and t1 < t2):
                    total += 1

    return total


__all__ = [
    "detect_cycle",
    "has_cycle",
    "topological_order",
    "longest_path_layers",
    "group_by_layer",
    "count_crossings",
]
