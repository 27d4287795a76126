"""
Group content planning and placement.

Each group's interior is planned once per run, bottom-up, as offsets from
the group's content origin (inside padding, below the title bar):

- Token mode: movable members and nested groups (as units) arranged by the
  title token, connectivity ignored
- Layered mode: members with internal links get a longest-path sub-layout,
  one column per layer
- Stacked mode: members without internal links are packed into rows

In the two topology-driven modes nested groups are stacked below the
members. The plan's extent gives the group its box size; placing the group
replays the plan at a concrete position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from ..config import GROUP_TITLE_HEIGHT, LayoutConfig
from ..packing import pack_rows
from ..preprocessing import group_by_layer, longest_path_layers, topological_order
from ..types import Element, LayoutMode, Link
from .hierarchy import LayoutGroup, groups_by_depth
from .tokens import ArrangeItem, arrange_by_token, parse_layout_token


@dataclass
class ContentPlan:
    """Planned arrangement of one group's contents."""

    mode: LayoutMode = LayoutMode.DEFAULT
    width: float = 0.0  # Content extent, excluding padding
    height: float = 0.0  # Content extent, excluding padding and title bar
    element_offsets: dict[int, tuple[float, float]] = field(default_factory=dict)
    child_offsets: dict[int, tuple[float, float]] = field(default_factory=dict)  # By group index


def internal_edges(member_ids: Iterable[int], links: Iterable[Link]) -> list[tuple[int, int]]:
    """Distinct (origin, target) pairs of links running between members, in link order."""
    members = set(member_ids)
    edges: list[tuple[int, int]] = []
    seen: set[tuple[int, int]] = set()
    for link in links:
        edge = (link.origin_id, link.target_id)
        if edge[0] == edge[1] or edge in seen:
            continue
        if edge[0] in members and edge[1] in members:
            seen.add(edge)
            edges.append(edge)
    return edges


def member_layers(members: Sequence[Element], edges: Sequence[tuple[int, int]]) -> list[list[Element]]:
    """
    Longest-path layers of a group's members.

    Within a layer members are ordered tallest first, then by id.
    """
    keys = [member.id for member in members]
    successors: dict[int, list[int]] = {key: [] for key in keys}
    predecessors: dict[int, list[int]] = {key: [] for key in keys}
    for src, tgt in edges:
        successors[src].append(tgt)
        predecessors[tgt].append(src)

    order, residual = topological_order(keys, successors)
    layer_of = longest_path_layers(order + residual, predecessors)
    by_id = {member.id: member for member in members}
    return [
        sorted((by_id[key] for key in layer), key=lambda e: (-e.height, e.id))
        for layer in group_by_layer({key: layer_of[key] for key in keys})
    ]


def _plan_layered(
    members: Sequence[Element], edges: Sequence[tuple[int, int]], config: LayoutConfig
) -> dict[int, tuple[float, float]]:
    offsets: dict[int, tuple[float, float]] = {}
    x = 0.0
    for layer in member_layers(members, edges):
        y = 0.0
        for member in layer:
            offsets[member.id] = (x, y)
            y += member.height + config.vertical_gap
        x += max(member.width for member in layer) + config.horizontal_gap
    return offsets


def _plan_stacked(members: Sequence[Element], config: LayoutConfig) -> dict[int, tuple[float, float]]:
    # Auto packing falls back to a single column inside groups
    columns = config.max_columns if config.max_columns >= 1 else 1
    ordered = sorted(members, key=lambda e: (-e.height, e.id))
    rows = pack_rows([(e.id, e.width, e.height) for e in ordered], config, max_columns=columns)
    offsets: dict[int, tuple[float, float]] = {}
    for row in rows:
        x = 0.0
        for key, width, _ in row.items:
            offsets[key] = (x, row.y_offset)  # type: ignore[index]
            x += width + config.horizontal_gap
    return offsets


def _extent(boxes: Iterable[tuple[float, float, float, float]]) -> tuple[float, float]:
    width = height = 0.0
    for dx, dy, w, h in boxes:
        width = max(width, dx + w)
        height = max(height, dy + h)
    return width, height


def plan_group_contents(
    layout_group: LayoutGroup,
    elements: Mapping[int, Element],
    links: Sequence[Link],
    config: LayoutConfig,
) -> ContentPlan:
    """
    Plan one group's interior.

    Nested groups must already carry their planned ``width``/``height``.
    Fixed (pinned or locked) members are left out of the plan and keep
    their positions.

    Args:
        layout_group: Group to plan
        elements: Element id -> element
        links: Links of the graph
        config: Gaps and packing policy

    Returns:
        The content plan
    """
    members = [
        elements[eid]
        for eid in layout_group.member_ids
        if eid in elements and not elements[eid].is_fixed
    ]
    children = layout_group.children
    token = parse_layout_token(layout_group.group.title)
    plan = ContentPlan(mode=token.mode)

    if not token.is_default:
        items = [ArrangeItem(("element", e.id), e.x, e.y, e.width, e.height) for e in members]
        items += [
            ArrangeItem(child.key, child.group.x, child.group.y, child.width, child.height)
            for child in children
        ]
        for (kind, ident), offset in arrange_by_token(items, token, config).items():  # type: ignore[misc]
            if kind == "element":
                plan.element_offsets[ident] = offset
            else:
                plan.child_offsets[ident] = offset
    else:
        edges = internal_edges((e.id for e in members), links)
        if edges:
            plan.element_offsets = _plan_layered(members, edges, config)
        else:
            plan.element_offsets = _plan_stacked(members, config)

        _, members_height = _extent(
            (dx, dy, elements[eid].width, elements[eid].height)
            for eid, (dx, dy) in plan.element_offsets.items()
        )
        y = members_height + config.vertical_gap if members else 0.0
        for child in sorted(children, key=lambda c: (c.group.y, c.group.x, c.index)):
            plan.child_offsets[child.index] = (0.0, y)
            y += child.height + config.vertical_gap

    child_sizes = {child.index: (child.width, child.height) for child in children}
    plan.width, plan.height = _extent(
        [
            (dx, dy, elements[eid].width, elements[eid].height)
            for eid, (dx, dy) in plan.element_offsets.items()
        ]
        + [(dx, dy) + child_sizes[index] for index, (dx, dy) in plan.child_offsets.items()]
    )
    return plan


def plan_groups(
    layout_groups: Iterable[LayoutGroup],
    elements: Mapping[int, Element],
    links: Sequence[Link],
    config: LayoutConfig,
) -> None:
    """Plan every group deepest first, setting ``plan``, ``width`` and ``height``."""
    padding = config.group_padding
    for lg in groups_by_depth(layout_groups):
        lg.plan = plan_group_contents(lg, elements, links, config)
        lg.width = lg.plan.width + 2 * padding
        lg.height = lg.plan.height + 2 * padding + GROUP_TITLE_HEIGHT


def place_group(
    layout_group: LayoutGroup,
    x: float,
    y: float,
    elements: Mapping[int, Element],
    config: LayoutConfig,
) -> None:
    """
    Place a planned group with its box's top-left corner at (x, y).

    Writes the planned box to the group, moves planned members and places
    nested groups recursively.
    """
    plan = layout_group.plan
    if plan is None:
        raise ValueError(f"Group {layout_group.group.id} has not been planned")

    layout_group.group.set_bounds(x, y, layout_group.width, layout_group.height)
    origin_x = x + config.group_padding
    origin_y = y + config.group_padding + GROUP_TITLE_HEIGHT

    for eid, (dx, dy) in plan.element_offsets.items():
        elements[eid].move_to(origin_x + dx, origin_y + dy)
    for child in layout_group.children:
        dx, dy = plan.child_offsets[child.index]
        place_group(child, origin_x + dx, origin_y + dy, elements, config)


def translate_group(
    layout_group: LayoutGroup,
    dx: float,
    dy: float,
    elements: Mapping[int, Element],
) -> None:
    """Shift a group, its movable members and all nested groups by (dx, dy)."""
    for lg in layout_group.subtree():
        lg.group.translate(dx, dy)
        for eid in lg.member_ids:
            element = elements.get(eid)
            if element is not None and not element.is_fixed:
                element.move_to(element.x + dx, element.y + dy)


__all__ = [
    "ContentPlan",
    "internal_edges",
    "member_layers",
    "plan_group_contents",
    "plan_groups",
    "place_group",
    "translate_group",
]
