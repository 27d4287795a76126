"""
Crossing minimization within layers.

Size-aware barycenter heuristic: a node's position is the vertical centre
it would have if its layer were stacked top to bottom with the vertical
gap, so tall neighbours pull harder than short ones. Sweeps alternate
forward (predecessors) and backward (successors) and stop early once an
iteration changes nothing.
"""

from __future__ import annotations

import logging

from ..preprocessing import count_crossings
from .session import Layer, LayoutNode, LayoutSession, NodeKey

logger = logging.getLogger(__name__)


def _height_positions(layer: Layer, vertical_gap: float, positions: dict[NodeKey, float]) -> None:
    y = 0.0
    for node in layer.nodes:
        positions[node.key] = y + node.height / 2
        y += node.height + vertical_gap


def _reorder(
    layer: Layer,
    adjacent: Layer,
    use_predecessors: bool,
    positions: dict[NodeKey, float],
) -> bool:
    adjacent_keys = {node.key for node in adjacent.nodes}

    def barycenter(node: LayoutNode) -> float:
        neighbours = node.predecessors if use_predecessors else node.successors
        values = [positions[key] for key in neighbours if key in adjacent_keys]
        if not values:
            return positions[node.key]
        return sum(values) / len(values)

    reordered = sorted(layer.nodes, key=lambda node: (barycenter(node), node.key))
    changed = [node.key for node in reordered] != [node.key for node in layer.nodes]
    layer.nodes = reordered
    return changed


def _crossings(session: LayoutSession) -> int:
    edges = [(node.key, succ) for node in session.nodes.values() for succ in node.successors]
    return count_crossings([[node.key for node in layer.nodes] for layer in session.layers], edges)


def minimize_crossings(session: LayoutSession) -> int:
    """
    Order the nodes of every layer to reduce edge crossings.

    Each layer starts tallest first. Even iterations sweep forward using
    predecessors in the previous layer, odd iterations sweep backward using
    successors in the next layer; ties are broken by key.

    Args:
        session: Session with assigned layers

    Returns:
        Number of iterations run.
    """
    layers = session.layers
    vertical_gap = session.config.vertical_gap
    for layer in layers:
        layer.nodes.sort(key=lambda node: -node.height)

    iterations = 0
    if len(layers) >= 2:
        positions: dict[NodeKey, float] = {}
        for layer in layers:
            _height_positions(layer, vertical_gap, positions)
        before = _crossings(session)

        for iteration in range(session.config.max_iterations):
            iterations += 1
            changed = False
            if iteration % 2 == 0:
                for i in range(1, len(layers)):
                    changed |= _reorder(layers[i], layers[i - 1], True, positions)
                    _height_positions(layers[i], vertical_gap, positions)
            else:
                for i in range(len(layers) - 2, -1, -1):
                    changed |= _reorder(layers[i], layers[i + 1], False, positions)
                    _height_positions(layers[i], vertical_gap, positions)
            if not changed:
                break

        logger.debug(
            "Crossing minimization: %d -> %d crossing(s) in %d iteration(s)",
            before,
            _crossings(session),
            iterations,
        )

    for layer in layers:
        for order, node in enumerate(layer.nodes):
            node.order = order
    return iterations


__all__ = ["minimize_crossings"]
