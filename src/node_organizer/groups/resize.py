"""
Group resizing.

Shrinks or grows each group box to the padded bounding box of its direct
members and nested groups, deepest groups first so that parents see their
children's final boxes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

import numpy as np

from ..config import GROUP_TITLE_HEIGHT, LayoutConfig
from ..types import Element
from .hierarchy import LayoutGroup, groups_by_depth

logger = logging.getLogger(__name__)


def fit_group_to_contents(
    layout_group: LayoutGroup,
    elements: Mapping[int, Element],
    config: LayoutConfig,
) -> bool:
    """
    Resize one group around its direct members and nested groups.

    Returns:
        False when the group owns no element, directly or through nested
        groups (left unchanged).
    """
    if not layout_group.has_content:
        return False

    boxes = [
        (e.x, e.y, e.right, e.bottom)
        for e in (elements.get(eid) for eid in layout_group.member_ids)
        if e is not None
    ]
    for child in layout_group.children:
        g = child.group
        boxes.append((g.x, g.y, g.x + g.width, g.y + g.height))  # type: ignore[operator]
    if not boxes:
        return False

    bounds = np.asarray(boxes, dtype=float)
    min_x, min_y = bounds[:, 0].min(), bounds[:, 1].min()
    max_x, max_y = bounds[:, 2].max(), bounds[:, 3].max()
    padding = config.group_padding

    layout_group.group.set_bounds(
        min_x - padding,
        min_y - padding - GROUP_TITLE_HEIGHT,
        (max_x - min_x) + 2 * padding,
        (max_y - min_y) + 2 * padding + GROUP_TITLE_HEIGHT,
    )
    return True


def resize_groups_to_fit(
    layout_groups: Iterable[LayoutGroup],
    elements: Mapping[int, Element],
    config: LayoutConfig,
) -> int:
    """
    Resize every group deepest first.

    Args:
        layout_groups: Groups to resize (a whole forest or a subtree)
        elements: Element id -> element
        config: Supplies the padding

    Returns:
        Number of groups resized.
    """
    resized = 0
    for lg in groups_by_depth(layout_groups):
        if fit_group_to_contents(lg, elements, config):
            resized += 1
    logger.debug("Resized %d group(s)", resized)
    return resized


__all__ = ["fit_group_to_contents", "resize_groups_to_fit"]
