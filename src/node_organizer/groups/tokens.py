"""
Layout tokens in group titles.

A bracketed, case-insensitive keyword in a group title overrides the
topology-driven arrangement of the group's contents:

- ``[HORIZONTAL]``: one row, left to right
- ``[VERTICAL]``: one column, top to bottom
- ``[kROW]``: k rows (k = 1..9; ``[1ROW]`` is horizontal)
- ``[kCOL]``: k columns (k = 1..9; ``[1COL]`` is vertical)

The first match in that order wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Hashable, Optional, Sequence, TypeVar

from ..config import LayoutConfig
from ..types import LayoutMode, LayoutToken

T = TypeVar("T")

_ROW_PATTERN = re.compile(r"\[([1-9])ROW\]")
_COL_PATTERN = re.compile(r"\[([1-9])COL\]")


def parse_layout_token(title: Optional[str]) -> LayoutToken:
    """
    Parse the layout token of a group title.

    Example:
        >>> parse_layout_token("Samplers [2col]")
        LayoutToken(mode=<LayoutMode.COLUMNS: 'columns'>, count=2)
    """
    if not title:
        return LayoutToken()
    upper = title.upper()

    if "[HORIZONTAL]" in upper:
        return LayoutToken(LayoutMode.HORIZONTAL)
    if "[VERTICAL]" in upper:
        return LayoutToken(LayoutMode.VERTICAL)

    match = _ROW_PATTERN.search(upper)
    if match:
        count = int(match.group(1))
        return LayoutToken(LayoutMode.HORIZONTAL) if count == 1 else LayoutToken(LayoutMode.ROWS, count)

    match = _COL_PATTERN.search(upper)
    if match:
        count = int(match.group(1))
        return LayoutToken(LayoutMode.VERTICAL) if count == 1 else LayoutToken(LayoutMode.COLUMNS, count)

    return LayoutToken()


@dataclass
class ArrangeItem:
    """A movable box, positioned by its original top-left corner."""

    key: Hashable
    x: float
    y: float
    width: float
    height: float


def split_evenly(items: Sequence[T], parts: int) -> list[list[T]]:
    """
    Split items into contiguous runs of near-equal length, longer runs first.

    Example:
        >>> split_evenly([1, 2, 3, 4], 3)
        [[1, 2], [3], [4]]
    """
    parts = min(parts, len(items))
    if parts <= 0:
        return []
    base, extra = divmod(len(items), parts)
    result: list[list[T]] = []
    start = 0
    for i in range(parts):
        size = base + (1 if i < extra else 0)
        result.append(list(items[start : start + size]))
        start += size
    return result


def arrange_by_token(
    items: Sequence[ArrangeItem],
    token: LayoutToken,
    config: LayoutConfig,
) -> dict[Hashable, tuple[float, float]]:
    """
    Arrange boxes as the token requests, ignoring connectivity.

    Items are ordered by their original position (left-to-right for
    horizontal and column modes, top-to-bottom for vertical and row modes)
    and dealt into contiguous rows or columns, so re-running on the result
    yields the same order.

    Args:
        items: Boxes to arrange
        token: Requested arrangement (must not be DEFAULT)
        config: Supplies the gaps

    Returns:
        Item key -> (dx, dy) offset of its top-left corner from the content origin.
    """
    hgap, vgap = config.horizontal_gap, config.vertical_gap
    order = {id(item): i for i, item in enumerate(items)}
    by_x = sorted(items, key=lambda it: (it.x, it.y, order[id(it)]))
    by_y = sorted(items, key=lambda it: (it.y, it.x, order[id(it)]))
    offsets: dict[Hashable, tuple[float, float]] = {}

    if token.mode is LayoutMode.HORIZONTAL:
        x = 0.0
        for item in by_x:
            offsets[item.key] = (x, 0.0)
            x += item.width + hgap

    elif token.mode is LayoutMode.VERTICAL:
        y = 0.0
        for item in by_y:
            offsets[item.key] = (0.0, y)
            y += item.height + vgap

    elif token.mode is LayoutMode.ROWS:
        y = 0.0
        for row in split_evenly(by_y, token.count):
            x = 0.0
            for item in row:
                offsets[item.key] = (x, y)
                x += item.width + hgap
            y += max(item.height for item in row) + vgap

    elif token.mode is LayoutMode.COLUMNS:
        x = 0.0
        for column in split_evenly(by_x, token.count):
            y = 0.0
            for item in column:
                offsets[item.key] = (x, y)
                y += item.height + vgap
            x += max(item.width for item in column) + hgap

    else:
        raise ValueError(f"No token arrangement for mode {token.mode.value!r}")

    return offsets


__all__ = [
    "parse_layout_token",
    "ArrangeItem",
    "split_evenly",
    "arrange_by_token",
]
