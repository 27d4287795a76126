"""
Row bin packing.

Packs sized items into horizontal rows according to the configured column
policy:
- single-column: One item per row, in the given order
- fixed-N: Rows of N items in the given order (round-robin over N columns)
- auto: First-fit-decreasing-height bounded by a row width budget
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Optional, Sequence

from .config import ColumnPolicy, LayoutConfig

PackItem = tuple[Hashable, float, float]
"""(key, width, height) of one item to pack."""

MIN_HEIGHT_RATIO = 0.5
MAX_HEIGHT_RATIO = 2.0


@dataclass
class PackedRow:
    """One packed row; items run left to right."""

    items: list[PackItem] = field(default_factory=list)
    height: float = 0.0
    width: float = 0.0  # Includes the gaps between items
    y_offset: float = 0.0  # Top of the row relative to the first row

    @property
    def keys(self) -> list[Hashable]:
        return [item[0] for item in self.items]

    def add(self, item: PackItem, gap: float) -> None:
        _, width, height = item
        self.width = width if not self.items else self.width + gap + width
        self.height = max(self.height, height)
        self.items.append(item)


def pack_rows(
    items: Sequence[PackItem],
    config: LayoutConfig,
    max_columns: Optional[int] = None,
) -> list[PackedRow]:
    """
    Pack items into rows.

    Args:
        items: (key, width, height) triples
        config: Supplies gaps, the row width budget and the default policy
        max_columns: Overrides ``config.max_columns`` when given

    Returns:
        Rows with ``y_offset`` filled in, stacked with ``vertical_gap``.

    Example:
        >>> rows = pack_rows([("a", 200, 100), ("b", 200, 100)], LayoutConfig())
        >>> [row.keys for row in rows]
        [['a', 'b']]
    """
    if not items:
        return []

    columns = config.max_columns if max_columns is None else max_columns
    policy = ColumnPolicy.from_max_columns(columns)

    if policy is ColumnPolicy.SINGLE_COLUMN:
        rows = _pack_single_column(items, config)
    elif policy is ColumnPolicy.FIXED:
        rows = _pack_fixed_columns(items, columns, config)
    else:
        rows = _pack_by_width(items, config)

    y = 0.0
    for row in rows:
        row.y_offset = y
        y += row.height + config.vertical_gap
    return rows


def _pack_single_column(items: Sequence[PackItem], config: LayoutConfig) -> list[PackedRow]:
    rows = []
    for item in items:
        row = PackedRow()
        row.add(item, config.horizontal_gap)
        rows.append(row)
    return rows


def _pack_fixed_columns(
    items: Sequence[PackItem], columns: int, config: LayoutConfig
) -> list[PackedRow]:
    rows: list[PackedRow] = []
    for start in range(0, len(items), columns):
        row = PackedRow()
        for item in items[start : start + columns]:
            row.add(item, config.horizontal_gap)
        rows.append(row)
    return rows


def _fits(row: PackedRow, item: PackItem, config: LayoutConfig) -> bool:
    _, width, height = item
    if row.width + config.horizontal_gap + width > config.max_row_width:
        return False
    if row.height <= 0:
        return height <= 0
    ratio = height / row.height
    return MIN_HEIGHT_RATIO <= ratio <= MAX_HEIGHT_RATIO


def _pack_by_width(items: Sequence[PackItem], config: LayoutConfig) -> list[PackedRow]:
    # First-fit decreasing height
    rows: list[PackedRow] = []
    for item in sorted(items, key=lambda it: -it[2]):
        for row in rows:
            if _fits(row, item, config):
                row.add(item, config.horizontal_gap)
                break
        else:
            row = PackedRow()
            row.add(item, config.horizontal_gap)
            rows.append(row)

    rows.sort(key=lambda r: -r.height)
    return rows


def packed_height(rows: Sequence[PackedRow], vertical_gap: float) -> float:
    """Total height of stacked rows."""
    if not rows:
        return 0.0
    return sum(row.height for row in rows) + vertical_gap * (len(rows) - 1)


def packed_width(rows: Sequence[PackedRow]) -> float:
    """Width of the widest row."""
    return max((row.width for row in rows), default=0.0)


__all__ = [
    "PackItem",
    "PackedRow",
    "pack_rows",
    "packed_height",
    "packed_width",
]
