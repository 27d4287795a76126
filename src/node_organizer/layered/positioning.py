"""
Coordinate assignment.

Turns layers and orders into coordinates and writes them back:
- Disconnected zone reserved left of layer 0
- Layer x offsets, then per-layer y offsets (group representatives stacked
  first, standalone nodes bin-packed below them)
- Layer x recomputation after packing widened a layer
- Vertical compaction against the tallest standalone layer
- Write-back: standalone elements, group interiors, disconnected zone,
  grouped reroute chains
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import ColumnPolicy, LayoutConfig
from ..groups.contents import place_group, translate_group
from ..packing import PackItem, pack_rows, packed_width
from .reroutes import restore_reroute_chains
from .session import LayoutNode, LayoutSession

logger = logging.getLogger(__name__)


def disconnected_zone_width(session: LayoutSession) -> float:
    """
    Width reserved left of layer 0.

    The widest ungrouped disconnected element or empty top-level group plus
    the zone gap, or 0 if there is none.
    """
    widths = [e.width for e in session.standalone_disconnected()]
    widths += [lg.group.width for lg in session.empty_top_level_groups()]  # type: ignore[misc]
    if not widths:
        return 0.0
    return max(widths) + session.config.disconnected_gap


def assign_layer_x(session: LayoutSession) -> None:
    """Place layers left to right after the disconnected zone."""
    config = session.config
    x = config.start_x + session.disconnected_zone_width
    for layer in session.layers:
        layer.x = x
        x += layer.max_width + config.horizontal_gap


def _layer_config(config: LayoutConfig, nodes: list[LayoutNode]) -> LayoutConfig:
    # Auto rows never grow a layer past its widest node
    if config.column_policy is not ColumnPolicy.AUTO:
        return config
    widest = max(node.width for node in nodes)
    if widest <= 0:
        return config
    return config.replace(max_row_width=min(config.max_row_width, widest))


def assign_node_y(session: LayoutSession) -> None:
    """
    Place the nodes of every layer from the top.

    Group representatives come first, one per band; standalone nodes are
    packed into rows below them. A layer's width grows when its rows are
    wider than its widest node.
    """
    config = session.config
    for layer in session.layers:
        y = config.start_y
        standalone: list[LayoutNode] = []
        for node in layer.nodes:
            if node.is_group_representative:
                node.x, node.y = layer.x, y
                y += node.height + config.vertical_gap
            else:
                standalone.append(node)

        if not standalone:
            continue

        by_key = {node.key: node for node in standalone}
        rows = pack_rows(
            [(node.key, node.width, node.height) for node in standalone],
            _layer_config(config, standalone),
        )
        for row in rows:
            x = layer.x
            for key, width, _ in row.items:
                node = by_key[key]  # type: ignore[index]
                node.x, node.y = x, y + row.y_offset
                x += width + config.horizontal_gap
        layer.max_width = max(layer.max_width, packed_width(rows))


def recalculate_layer_x(session: LayoutSession) -> None:
    """Re-space layers after packing, keeping node offsets within each layer."""
    config = session.config
    x = config.start_x + session.disconnected_zone_width
    for layer in session.layers:
        offset = x - layer.x
        if offset:
            for node in layer.nodes:
                node.x += offset
        layer.x = x
        x += layer.max_width + config.horizontal_gap


def _vertical_span(nodes: list[LayoutNode]) -> Optional[float]:
    if not nodes:
        return None
    return max(n.y + n.height for n in nodes) - min(n.y for n in nodes)


def compact_vertically(session: LayoutSession) -> None:
    """
    Centre every layer against the tallest standalone layer.

    Group representatives are left out of the reference height so a single
    oversized group cannot push every other layer down.
    """
    spans = [
        _vertical_span([n for n in layer.nodes if not n.is_group_representative])
        for layer in session.layers
    ]
    max_height = max((span for span in spans if span is not None), default=0.0)
    if max_height <= 0:
        return

    for layer in session.layers:
        span = _vertical_span(layer.nodes)
        if span is None:
            continue
        offset = (max_height - span) / 2
        for node in layer.nodes:
            node.y += offset


def place_disconnected(session: LayoutSession) -> int:
    """
    Stack the disconnected zone in one column at the layout origin.

    Movable ungrouped disconnected elements come first, by id, followed by
    empty top-level groups, which move with their nested groups.

    Returns:
        Number of elements and groups placed.
    """
    config = session.config
    movable = [e for e in session.standalone_disconnected() if not e.is_fixed]
    empty_groups = session.empty_top_level_groups()
    items: list[PackItem] = [(("element", e.id), e.width, e.height) for e in movable]
    items += [(lg.key, lg.group.width, lg.group.height) for lg in empty_groups]  # type: ignore[misc]

    groups = {lg.key: lg for lg in empty_groups}
    for row in pack_rows(items, config, max_columns=1):
        for key, _, _ in row.items:
            x, y = config.start_x, config.start_y + row.y_offset
            kind, ident = key  # type: ignore[misc]
            if kind == "element":
                session.elements[ident].move_to(x, y)
            else:
                lg = groups[key]  # type: ignore[index]
                dx, dy = x - lg.group.x, y - lg.group.y  # type: ignore[operator]
                translate_group(lg, dx, dy, session.elements)
    return len(items)


def apply_positions(session: LayoutSession) -> None:
    """
    Write layout coordinates back to the document.

    Fixed elements keep their positions. Top-level groups are placed from
    their representative's corner; grouped reroute chains are restored
    afterwards so that group resizing can enclose them.
    """
    for node in session.nodes.values():
        if node.element is not None:
            if not node.element.is_fixed:
                node.element.move_to(node.x, node.y)
        elif node.group is not None:
            place_group(node.group, node.x, node.y, session.elements, session.config)

    placed = place_disconnected(session)
    restore_reroute_chains(session, grouped=True)
    logger.debug(
        "Applied %d layout node(s), %d disconnected zone item(s)", len(session.nodes), placed
    )


__all__ = [
    "disconnected_zone_width",
    "assign_layer_x",
    "assign_node_y",
    "recalculate_layer_x",
    "compact_vertically",
    "place_disconnected",
    "apply_positions",
]
