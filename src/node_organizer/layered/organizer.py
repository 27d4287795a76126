"""
Full-graph layered layout.

GraphLayout runs the whole organizer pipeline over a graph:

1. Build the condensed layering graph (reroutes collapsed, groups planned)
2. Longest-path layering
3. Barycenter crossing minimization
4. Layer x offsets and per-layer packing
5. Layer re-spacing and vertical compaction
6. Write-back, group resizing and overlap resolution
7. Restoration of ungrouped reroute chains

Each completed phase fires a tick event carrying the phase name.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, cast

from ..base import ConfigLike, StaticLayout
from ..graph import Graph
from ..groups.resize import resize_groups_to_fit
from ..types import LayoutResult
from .builder import build_layout_session
from .layering import assign_layers
from .ordering import minimize_crossings
from .overlap import resolve_overlaps
from .positioning import (
    apply_positions,
    assign_layer_x,
    assign_node_y,
    compact_vertically,
    disconnected_zone_width,
    recalculate_layer_x,
)
from .reroutes import restore_reroute_chains

logger = logging.getLogger(__name__)


class GraphLayout(StaticLayout):
    """
    Layered left-to-right layout of a whole graph.

    Data flows left to right: every link's target ends up in a later layer
    than its origin, unless the links form a cycle. Groups move as single
    boxes with their interiors arranged by their title tokens or their
    internal links, and elements without links are stacked in a zone left
    of the first layer.

    Example:
        graph = Graph.from_workflow(workflow)
        layout = GraphLayout(graph, config={"max_columns": 2})
        result = layout.run().result
        print(result.layer_count)
    """

    def _compute(self, **kwargs: Any) -> LayoutResult:
        graph = self._graph
        if graph is None or not graph.all_elements():
            return LayoutResult()

        config = self._config
        session = build_layout_session(graph, config)
        self._phase("build")

        assign_layers(session)
        self._phase("layers")

        iterations = minimize_crossings(session)
        self._phase("order")

        session.disconnected_zone_width = disconnected_zone_width(session)
        assign_layer_x(session)
        assign_node_y(session)
        self._phase("position")

        recalculate_layer_x(session)
        compact_vertically(session)
        self._phase("compact")

        apply_positions(session)
        self._phase("apply")

        resized = resize_groups_to_fit(session.layout_groups, session.elements, config)
        self._phase("resize")

        moved = resolve_overlaps(session)
        self._phase("overlap")

        restore_reroute_chains(session, grouped=False)
        self._phase("reroutes")

        graph.set_dirty_canvas()
        logger.info(
            "Organized %d element(s) into %d layer(s); %d group(s) resized, "
            "%d overlap move(s), %d ordering iteration(s)",
            len(session.elements),
            len(session.layers),
            resized,
            moved,
            iterations,
        )
        return LayoutResult(
            node_count=len(session.elements),
            layer_count=len(session.layers),
            group_count=resized,
        )


def layout_graph(graph: Optional[Graph], config: ConfigLike = None) -> LayoutResult:
    """
    Organize a whole graph in place.

    Args:
        graph: Graph to mutate
        config: LayoutConfig, mapping of overrides, or None for defaults

    Returns:
        Element, layer and resized-group counts plus timing. A missing or empty
        graph yields a zero result and is not marked dirty.

    Raises:
        InvalidConfigError: If the configuration is invalid
        InvalidGroupError: If group containment is not a forest
    """
    layout = GraphLayout(graph, config=config).run()
    return cast(LayoutResult, layout.result)


__all__ = ["GraphLayout", "layout_graph"]
