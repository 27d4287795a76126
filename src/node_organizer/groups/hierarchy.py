"""
Group containment hierarchy.

Groups own elements and other groups purely by geometry. This module turns
the flat group list into a forest of LayoutGroup records and assigns each
element to its innermost enclosing group.
"""

from __future__ import annotations

import logging
import warnings
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, Optional, Sequence

from ..config import GROUP_TITLE_HEIGHT
from ..types import Element, Group
from ..validation import GraphStructureWarning, validate_containment

if TYPE_CHECKING:
    from .contents import ContentPlan

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class LayoutGroup:
    """
    Per-run view of a group inside the containment forest.

    Attributes:
        group: The document group (bounds are written back to it)
        index: Position among the bounded groups, in document order
        member_ids: Ids of the elements this group directly owns
        children: Directly nested groups, in document order
        parent: Directly enclosing group
        depth: Distance from the root of the forest
        width: Planned box width, including padding
        height: Planned box height, including padding and title bar
        plan: Planned arrangement of the contents
    """

    group: Group
    index: int
    member_ids: list[int] = field(default_factory=list)
    children: list[LayoutGroup] = field(default_factory=list)
    parent: Optional[LayoutGroup] = None
    depth: int = 0
    width: float = 0.0
    height: float = 0.0
    plan: Optional[ContentPlan] = None

    @property
    def key(self) -> tuple[str, int]:
        return ("group", self.index)

    @property
    def has_content(self) -> bool:
        """True when this group or any nested group owns an element."""
        return bool(self.member_ids) or any(child.has_content for child in self.children)

    def top_level(self) -> LayoutGroup:
        current = self
        while current.parent is not None:
            current = current.parent
        return current

    def ancestors(self) -> Iterator[LayoutGroup]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def subtree(self) -> Iterator[LayoutGroup]:
        """This group and every nested group, parents before children."""
        yield self
        for child in self.children:
            yield from child.subtree()

    def __repr__(self) -> str:
        return f"LayoutGroup(id={self.group.id}, depth={self.depth}, members={len(self.member_ids)})"


# -------------------------------------------------------------------------
# Geometric predicates
# -------------------------------------------------------------------------


def group_contains_group(outer: Group, inner: Group) -> bool:
    """True when ``outer``'s rectangle fully encloses ``inner``'s."""
    return (
        outer.x <= inner.x
        and outer.y <= inner.y
        and inner.x + inner.width <= outer.x + outer.width
        and inner.y + inner.height <= outer.y + outer.height
    )


def element_in_group(element: Element, group: Group) -> bool:
    """True when the element's origin lies in the group's content area (below the title bar)."""
    return (
        group.x <= element.x < group.x + group.width
        and group.y + GROUP_TITLE_HEIGHT <= element.y < group.y + group.height
    )


def _encloses(outer: LayoutGroup, inner: LayoutGroup) -> bool:
    if not group_contains_group(outer.group, inner.group):
        return False
    # Identical rectangles: the earlier group is the outer one
    return outer.group.area > inner.group.area or outer.index < inner.index


def _is_tighter(candidate: LayoutGroup, best: LayoutGroup) -> bool:
    if candidate.group.area != best.group.area:
        return candidate.group.area < best.group.area
    return candidate.index > best.index


# -------------------------------------------------------------------------
# Forest construction
# -------------------------------------------------------------------------


def build_group_hierarchy(groups: Sequence[Group]) -> list[LayoutGroup]:
    """
    Build the containment forest of the bounded groups.

    A group's parent is the smallest other group enclosing its rectangle.
    Groups without complete bounds are skipped with a warning.

    Args:
        groups: Document groups

    Returns:
        LayoutGroup records in document order, with parent, children and depth set.

    Raises:
        InvalidGroupError: If containment does not form a forest.
    """
    bounded = [group for group in groups if group.has_bounds]
    skipped = len(groups) - len(bounded)
    if skipped:
        warnings.warn(
            f"Skipping {skipped} group(s) without complete bounds.",
            GraphStructureWarning,
            stacklevel=3,
        )

    layout_groups = [LayoutGroup(group, index) for index, group in enumerate(bounded)]

    for inner in layout_groups:
        best: Optional[LayoutGroup] = None
        for outer in layout_groups:
            if outer is inner or not _encloses(outer, inner):
                continue
            if best is None or _is_tighter(outer, best):
                best = outer
        inner.parent = best

    validate_containment(
        {lg.index: (lg.parent.index if lg.parent is not None else None) for lg in layout_groups}
    )

    for lg in layout_groups:
        if lg.parent is not None:
            lg.parent.children.append(lg)

    queue: deque[LayoutGroup] = deque(lg for lg in layout_groups if lg.parent is None)
    while queue:
        current = queue.popleft()
        for child in current.children:
            child.depth = current.depth + 1
            queue.append(child)

    logger.debug(
        "Built group forest: %d group(s), %d root(s)",
        len(layout_groups),
        sum(1 for lg in layout_groups if lg.parent is None),
    )
    return layout_groups


def assign_group_members(
    layout_groups: Sequence[LayoutGroup],
    elements: Iterable[Element],
) -> dict[int, LayoutGroup]:
    """
    Assign each element to the deepest group whose content area holds it.

    Args:
        layout_groups: Forest from build_group_hierarchy()
        elements: Elements to assign

    Returns:
        Element id -> owning LayoutGroup, for grouped elements only.
    """
    owner: dict[int, LayoutGroup] = {}
    for element in elements:
        best: Optional[LayoutGroup] = None
        for lg in layout_groups:
            if not element_in_group(element, lg.group):
                continue
            if (
                best is None
                or lg.depth > best.depth
                or (lg.depth == best.depth and lg.group.area < best.group.area)
            ):
                best = lg
        if best is not None:
            best.member_ids.append(element.id)
            owner[element.id] = best
    return owner


def groups_by_depth(layout_groups: Iterable[LayoutGroup]) -> list[LayoutGroup]:
    """Deepest groups first; document order within a depth."""
    return sorted(layout_groups, key=lambda lg: (-lg.depth, lg.index))


__all__ = [
    "LayoutGroup",
    "group_contains_group",
    "element_in_group",
    "build_group_hierarchy",
    "assign_group_members",
    "groups_by_depth",
]
