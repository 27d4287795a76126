"""
Per-run layout state.

One LayoutSession is created per full-graph layout and passed explicitly
through every pipeline stage; nothing is kept between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import MIN_LAYER_WIDTH, LayoutConfig
from ..graph import Graph
from ..groups.hierarchy import LayoutGroup
from ..types import Element, Link
from .classify import Classification
from .reroutes import RerouteChain

NodeKey = tuple[str, int]
"""("element", element_id) or ("group", group_index)."""


@dataclass(eq=False)
class LayoutNode:
    """
    Node of the condensed layering graph.

    Attributes:
        key: Stable identity, also the tie-breaker for ordering
        width: Element width, or the planned box width of a group
        height: Element height, or the planned box height of a group
        element: Standalone element represented, if any
        group: Top-level group represented, if any
        layer: Layer index (-1 until assigned)
        order: Position within the layer after crossing minimization
        predecessors: Keys of nodes with an edge into this one
        successors: Keys of nodes this one has an edge into
        x: Left edge
        y: Top edge
    """

    key: NodeKey
    width: float
    height: float
    element: Optional[Element] = None
    group: Optional[LayoutGroup] = None
    layer: int = -1
    order: int = 0
    predecessors: list[NodeKey] = field(default_factory=list)
    successors: list[NodeKey] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0

    @property
    def is_group_representative(self) -> bool:
        return self.group is not None


@dataclass
class Layer:
    """A column of layout nodes."""

    index: int
    nodes: list[LayoutNode] = field(default_factory=list)
    x: float = 0.0
    max_width: float = MIN_LAYER_WIDTH


@dataclass
class LayoutSession:
    """
    State shared by the pipeline stages of one run.

    Attributes:
        graph: Graph being laid out
        config: Resolved configuration
        elements: Element id -> element (boundary records included)
        links: Links whose endpoints both exist
        classification: Connected/disconnected/reroute sets
        chains: Collapsed reroute chains
        collapsed: Ids of reroutes removed from the layering graph
        layout_groups: Bounded groups as a containment forest
        group_of: Element id -> owning group
        nodes: Layering graph
        layers: Layers, by index
        disconnected_zone_width: Width reserved left of layer 0
    """

    graph: Graph
    config: LayoutConfig
    elements: dict[int, Element]
    links: list[Link]
    classification: Classification
    chains: list[RerouteChain] = field(default_factory=list)
    collapsed: set[int] = field(default_factory=set)
    layout_groups: list[LayoutGroup] = field(default_factory=list)
    group_of: dict[int, LayoutGroup] = field(default_factory=dict)
    nodes: dict[NodeKey, LayoutNode] = field(default_factory=dict)
    layers: list[Layer] = field(default_factory=list)
    disconnected_zone_width: float = 0.0

    def top_level_groups(self) -> list[LayoutGroup]:
        return [lg for lg in self.layout_groups if lg.parent is None]

    def empty_top_level_groups(self) -> list[LayoutGroup]:
        """Top-level groups owning no element, in document order."""
        return [lg for lg in self.top_level_groups() if not lg.has_content]

    def standalone_disconnected(self) -> list[Element]:
        """Disconnected elements owned by no group, by id."""
        return sorted(
            (
                self.elements[eid]
                for eid in self.classification.disconnected
                if eid not in self.group_of and eid in self.elements
            ),
            key=lambda e: e.id,
        )


__all__ = ["NodeKey", "LayoutNode", "Layer", "LayoutSession"]
