"""
Full-graph layered layout.

This module provides the stages of the left-to-right layout pipeline:
- Element classification and reroute chain collapsing
- Layering graph construction with groups as single boxes
- Longest-path layering and barycenter crossing minimization
- Coordinate assignment, compaction and overlap resolution
- GraphLayout: The full pipeline as a layout class
"""

from .builder import build_layout_session
from .classify import Classification, classify_elements, linked_element_ids
from .layering import assign_layers
from .ordering import minimize_crossings
from .organizer import GraphLayout, layout_graph
from .overlap import OverlapEntity, collect_entities, resolve_overlaps
from .positioning import (
    apply_positions,
    assign_layer_x,
    assign_node_y,
    compact_vertically,
    disconnected_zone_width,
    place_disconnected,
    recalculate_layer_x,
)
from .reroutes import (
    ChainTarget,
    RerouteChain,
    find_reroute_chains,
    restore_reroute_chains,
    virtual_edges,
)
from .session import Layer, LayoutNode, LayoutSession, NodeKey

__all__ = [
    "GraphLayout",
    "layout_graph",
    "LayoutSession",
    "LayoutNode",
    "Layer",
    "NodeKey",
    "Classification",
    "classify_elements",
    "linked_element_ids",
    "ChainTarget",
    "RerouteChain",
    "find_reroute_chains",
    "virtual_edges",
    "restore_reroute_chains",
    "build_layout_session",
    "assign_layers",
    "minimize_crossings",
    "disconnected_zone_width",
    "assign_layer_x",
    "assign_node_y",
    "recalculate_layer_x",
    "compact_vertically",
    "place_disconnected",
    "apply_positions",
    "OverlapEntity",
    "collect_entities",
    "resolve_overlaps",
]
