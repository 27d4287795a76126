"""
node-organizer: Automatic layout for node-graph editor documents.

This package computes deterministic, idempotent positions and sizes for the
elements, reroutes and groups of a directed node graph.

Entry points:
- layout_graph / GraphLayout: Layered left-to-right layout of a whole graph
- layout_selected_groups / SelectedGroupsLayout: Re-arrange selected groups only

Group titles may carry a layout token ([HORIZONTAL], [VERTICAL], [2ROW],
[3COL], ...) that overrides the arrangement of the group's contents.
"""

import logging

__version__ = "0.1.0"

# Base classes for building layouts
from .base import BaseLayout, ConfigLike, StaticLayout

# Configuration
from .config import (
    DEFAULT_ELEMENT_HEIGHT,
    DEFAULT_ELEMENT_WIDTH,
    GROUP_TITLE_HEIGHT,
    MIN_LAYER_WIDTH,
    ColumnPolicy,
    LayoutConfig,
)

# Document model
from .graph import Graph

# Group layout
from .groups import (
    SelectedGroupsLayout,
    build_group_hierarchy,
    layout_selected_groups,
    parse_layout_token,
    resize_groups_to_fit,
)

# Full-graph layout
from .layered import GraphLayout, layout_graph

# Metrics for layout quality evaluation
from .metrics import (
    bounding_box,
    edge_crossings,
    layout_compactness,
    layout_quality_summary,
)

# Packing
from .packing import PackedRow, pack_rows

# Preprocessing utilities
from .preprocessing import (
    count_crossings,
    detect_cycle,
    has_cycle,
    longest_path_layers,
    topological_order,
)
from .types import (
    Element,
    ElementKind,
    Event,
    EventType,
    Group,
    InputSlot,
    LayoutMode,
    LayoutResult,
    LayoutToken,
    Link,
    OutputSlot,
    SelectedLayoutResult,
)

# Validation utilities
from .validation import (
    GraphStructureWarning,
    InvalidConfigError,
    InvalidGroupError,
    InvalidLinkError,
    ValidationError,
    validate_config,
    validate_link_endpoints,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Document model
    "Element",
    "ElementKind",
    "InputSlot",
    "OutputSlot",
    "Link",
    "Group",
    "Graph",
    "EventType",
    "Event",
    "LayoutMode",
    "LayoutToken",
    "LayoutResult",
    "SelectedLayoutResult",
    # Configuration
    "LayoutConfig",
    "ColumnPolicy",
    "ConfigLike",
    "GROUP_TITLE_HEIGHT",
    "DEFAULT_ELEMENT_WIDTH",
    "DEFAULT_ELEMENT_HEIGHT",
    "MIN_LAYER_WIDTH",
    # Base classes
    "BaseLayout",
    "StaticLayout",
    # Layouts
    "GraphLayout",
    "layout_graph",
    "SelectedGroupsLayout",
    "layout_selected_groups",
    # Groups
    "build_group_hierarchy",
    "parse_layout_token",
    "resize_groups_to_fit",
    # Packing
    "PackedRow",
    "pack_rows",
    # Preprocessing
    "detect_cycle",
    "has_cycle",
    "topological_order",
    "longest_path_layers",
    "count_crossings",
    # Metrics
    "edge_crossings",
    "bounding_box",
    "layout_compactness",
    "layout_quality_summary",
    # Validation
    "ValidationError",
    "InvalidConfigError",
    "InvalidLinkError",
    "InvalidGroupError",
    "GraphStructureWarning",
    "validate_config",
    "validate_link_endpoints",
]
