"""
Overlap resolution.

Final safety net after placement and group resizing. Top-level groups and
ungrouped elements are treated as rectangles and separated by scanline
sweeps, first along x and then along y. When two rectangles conflict the
one with the lower priority is pushed past the other:

- top-level groups: 100
- connected elements: 50
- disconnected elements: 10

Fixed (pinned or locked) elements take part as obstacles but never move,
and neither do groups holding one. Collapsed reroutes are left out: chain
restoration re-places them, or leaves dead ends where they were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..groups.contents import translate_group
from ..groups.hierarchy import LayoutGroup
from ..types import Element
from .session import LayoutSession, NodeKey

logger = logging.getLogger(__name__)

GROUP_PRIORITY = 100
CONNECTED_PRIORITY = 50
DISCONNECTED_PRIORITY = 10

_MIN_SHIFT = 0.01


@dataclass(eq=False)
class OverlapEntity:
    """A rectangle taking part in overlap resolution."""

    key: NodeKey
    x: float
    y: float
    width: float
    height: float
    priority: int
    movable: bool = True
    element: Optional[Element] = None
    group: Optional[LayoutGroup] = None

    def __post_init__(self) -> None:
        self.origin = (self.x, self.y)


def _holds_fixed(layout_group: LayoutGroup, elements: Mapping[int, Element]) -> bool:
    # Pinned members cannot follow their group
    return any(
        elements[eid].is_fixed
        for lg in layout_group.subtree()
        for eid in lg.member_ids
        if eid in elements
    )


def collect_entities(session: LayoutSession) -> list[OverlapEntity]:
    """Top-level groups with bounds and ungrouped elements, in key order."""
    entities: list[OverlapEntity] = []
    for lg in session.top_level_groups():
        g = lg.group
        entities.append(
            OverlapEntity(
                lg.key,
                g.x,  # type: ignore[arg-type]
                g.y,  # type: ignore[arg-type]
                g.width,  # type: ignore[arg-type]
                g.height,  # type: ignore[arg-type]
                GROUP_PRIORITY,
                movable=not _holds_fixed(lg, session.elements),
                group=lg,
            )
        )

    connected = session.classification.connected
    for element in session.elements.values():
        if element.id in session.group_of or element.id in session.collapsed:
            continue
        entities.append(
            OverlapEntity(
                ("element", element.id),
                element.x,
                element.y,
                element.width,
                element.height,
                CONNECTED_PRIORITY if element.id in connected else DISCONNECTED_PRIORITY,
                movable=not element.is_fixed,
                element=element,
            )
        )
    entities.sort(key=lambda e: e.key)
    return entities


# -------------------------------------------------------------------------
# Sweeps
# -------------------------------------------------------------------------


def _conflict(a: OverlapEntity, b: OverlapEntity, hgap: float, vgap: float) -> bool:
    return (
        a.x < b.x + b.width + hgap
        and b.x < a.x + a.width + hgap
        and a.y < b.y + b.height + vgap
        and b.y < a.y + a.height + vgap
    )


def _pick_mover(
    first: OverlapEntity, second: OverlapEntity
) -> Optional[tuple[OverlapEntity, OverlapEntity]]:
    # Lower priority moves; on a tie the later entity in sweep order moves
    if first.priority < second.priority:
        mover, anchor = first, second
    else:
        mover, anchor = second, first
    if not mover.movable:
        mover, anchor = anchor, mover
    if not mover.movable:
        return None
    return mover, anchor


def _sweep(entities: list[OverlapEntity], axis: str, hgap: float, vgap: float) -> int:
    moves = 0
    for _ in range(2 * len(entities)):
        if axis == "x":
            ordered = sorted(entities, key=lambda e: (e.x, -e.priority, e.key))
        else:
            ordered = sorted(entities, key=lambda e: (e.y, -e.priority, e.key))

        changed = False
        for i, first in enumerate(ordered):
            for second in ordered[i + 1 :]:
                if not _conflict(first, second, hgap, vgap):
                    continue
                picked = _pick_mover(first, second)
                if picked is None:
                    continue
                mover, anchor = picked
                if axis == "x":
                    mover.x = anchor.x + anchor.width + hgap
                else:
                    mover.y = anchor.y + anchor.height + vgap
                moves += 1
                changed = True
        if not changed:
            break
    return moves


def resolve_overlaps(session: LayoutSession) -> int:
    """
    Separate overlapping top-level groups and ungrouped elements.

    Groups are moved together with their members and nested groups.

    Args:
        session: Session after placement and group resizing

    Returns:
        Number of entities that ended up moved.
    """
    config = session.config
    entities = collect_entities(session)
    hgap, vgap = config.horizontal_gap, config.vertical_gap

    moves = _sweep(entities, "x", hgap, vgap)
    moves += _sweep(entities, "y", hgap, vgap)

    moved = 0
    for entity in entities:
        dx = entity.x - entity.origin[0]
        dy = entity.y - entity.origin[1]
        if abs(dx) < _MIN_SHIFT and abs(dy) < _MIN_SHIFT:
            continue
        moved += 1
        if entity.group is not None:
            translate_group(entity.group, dx, dy, session.elements)
        elif entity.element is not None:
            entity.element.move_to(entity.x, entity.y)

    if moved:
        logger.debug("Overlap resolution moved %d entit(ies) in %d step(s)", moved, moves)
    return moved


__all__ = [
    "GROUP_PRIORITY",
    "CONNECTED_PRIORITY",
    "DISCONNECTED_PRIORITY",
    "OverlapEntity",
    "collect_entities",
    "resolve_overlaps",
]
