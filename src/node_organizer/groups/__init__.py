"""
Group hierarchy and group-interior layout.

This module provides:
- Containment forest construction and element ownership
- Layout tokens in group titles
- Content planning, placement and resizing of groups
- SelectedGroupsLayout: Layout restricted to selected groups
"""

from .contents import (
    ContentPlan,
    internal_edges,
    member_layers,
    place_group,
    plan_group_contents,
    plan_groups,
    translate_group,
)
from .hierarchy import (
    LayoutGroup,
    assign_group_members,
    build_group_hierarchy,
    element_in_group,
    group_contains_group,
    groups_by_depth,
)
from .resize import fit_group_to_contents, resize_groups_to_fit
from .selected import SelectedGroupsLayout, layout_selected_groups
from .tokens import ArrangeItem, arrange_by_token, parse_layout_token, split_evenly

__all__ = [
    "LayoutGroup",
    "build_group_hierarchy",
    "assign_group_members",
    "element_in_group",
    "group_contains_group",
    "groups_by_depth",
    "ContentPlan",
    "internal_edges",
    "member_layers",
    "plan_group_contents",
    "plan_groups",
    "place_group",
    "translate_group",
    "fit_group_to_contents",
    "resize_groups_to_fit",
    "ArrangeItem",
    "arrange_by_token",
    "parse_layout_token",
    "split_evenly",
    "SelectedGroupsLayout",
    "layout_selected_groups",
]
