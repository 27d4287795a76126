"""
Layer assignment.

Longest-path layering of the condensed graph: sources take layer 0 and
every other node sits one layer right of its deepest predecessor. Cycles
are not rejected; their residual nodes are appended to the topological
order and layered from whichever predecessors were already placed.
"""

from __future__ import annotations

import logging
import warnings

from ..config import MIN_LAYER_WIDTH
from ..preprocessing import detect_cycle, group_by_layer, longest_path_layers, topological_order
from ..validation import GraphStructureWarning
from .session import Layer, LayoutSession

logger = logging.getLogger(__name__)


def assign_layers(session: LayoutSession) -> list[Layer]:
    """
    Assign every layout node a layer and build the session's layers.

    Nodes start each layer sorted by key.

    Args:
        session: Session with nodes and edges

    Returns:
        The layers, also stored on the session.
    """
    nodes = session.nodes
    keys = sorted(nodes)
    successors = {key: nodes[key].successors for key in keys}
    predecessors = {key: nodes[key].predecessors for key in keys}

    order, residual = topological_order(keys, successors)
    if residual:
        cycle = detect_cycle(residual, successors) or []
        path = " -> ".join(f"{kind} {ident}" for kind, ident in cycle)
        warnings.warn(
            f"Link graph contains a cycle ({path}); "
            f"{len(residual)} node(s) were layered from their already placed predecessors only.",
            GraphStructureWarning,
            stacklevel=3,
        )

    layer_of = longest_path_layers(order + residual, predecessors)
    layers: list[Layer] = []
    for index, layer_keys in enumerate(group_by_layer({key: layer_of[key] for key in keys})):
        layer = Layer(index, [nodes[key] for key in layer_keys])
        for node in layer.nodes:
            node.layer = index
        layer.max_width = max([node.width for node in layer.nodes] + [MIN_LAYER_WIDTH])
        layers.append(layer)

    session.layers = layers
    logger.debug("Assigned %d layer(s) to %d node(s)", len(layers), len(keys))
    return layers


__all__ = ["assign_layers"]
