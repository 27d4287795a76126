"""
Common types for the node organizer.

This module provides the document model shared by every layout stage:
- ElementKind: Tagged kind of a graph element, resolved once at construction
- InputSlot / OutputSlot: Connection slots of an element
- Element: Node, reroute or subgraph boundary record with position and size
- Link: Directed edge between two element slots
- Group: Titled rectangular container
- LayoutMode / LayoutToken: Manual arrangement requested by a group title
- LayoutResult / SelectedLayoutResult: Summary records returned by entry points
- EventType / Event: Layout lifecycle events
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, TypedDict

from .config import DEFAULT_ELEMENT_HEIGHT, DEFAULT_ELEMENT_WIDTH, GROUP_TITLE_HEIGHT

REROUTE_TYPE = "Reroute"


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout pipeline has begun
    - tick: Fired once per completed pipeline phase
    - end: Layout has finished and positions are written back
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    phase: str
    elapsed_ms: float


class ElementKind(Enum):
    """
    Kind of a graph element.

    - NODE: Ordinary node
    - REROUTE: Pass-through connector with no function beyond routing
    - BOUNDARY: Subgraph input/output record
    """

    NODE = "node"
    REROUTE = "reroute"
    BOUNDARY = "boundary"

    @classmethod
    def from_type_name(cls, type_name: Optional[str]) -> ElementKind:
        """Resolve the kind of an element from its editor type name."""
        if type_name and (type_name == REROUTE_TYPE or type_name.startswith(REROUTE_TYPE + " ")):
            return cls.REROUTE
        return cls.NODE


def _finite_or(value: Optional[float], default: float) -> float:
    if value is None:
        return default
    value = float(value)
    return value if math.isfinite(value) else default


def _size_or(value: Optional[float], default: float) -> float:
    size = _finite_or(value, default)
    return size if size > 0 else default


@dataclass
class InputSlot:
    """Input slot bound to at most one incoming link."""

    name: str = ""
    type: str = ""
    link: Optional[int] = None


@dataclass
class OutputSlot:
    """Output slot bound to zero or more outgoing links."""

    name: str = ""
    type: str = ""
    links: list[int] = field(default_factory=list)


@dataclass
class Element:
    """
    Graph element with position and size.

    Position and size are the only layout state written back by the
    organizer. Missing, non-finite or non-positive sizes fall back to the
    default element size and missing positions to the origin.

    Attributes:
        id: Element identifier, unique within a graph
        kind: Element kind, derived from ``type`` when not given
        x: Left edge
        y: Top edge
        width: Box width
        height: Box height
        title: Display title
        type: Editor type name
        inputs: Ordered input slots
        outputs: Ordered output slots
        pinned: Pinned elements are never moved
        locked: Locked elements are never moved
    """

    id: int
    kind: Optional[ElementKind] = None
    x: float = 0.0
    y: float = 0.0
    width: float = DEFAULT_ELEMENT_WIDTH
    height: float = DEFAULT_ELEMENT_HEIGHT
    title: str = ""
    type: str = ""
    inputs: list[InputSlot] = field(default_factory=list)
    outputs: list[OutputSlot] = field(default_factory=list)
    pinned: bool = False
    locked: bool = False

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = ElementKind.from_type_name(self.type)
        self.x = _finite_or(self.x, 0.0)
        self.y = _finite_or(self.y, 0.0)
        self.width = _size_or(self.width, DEFAULT_ELEMENT_WIDTH)
        self.height = _size_or(self.height, DEFAULT_ELEMENT_HEIGHT)

    @property
    def is_reroute(self) -> bool:
        return self.kind is ElementKind.REROUTE

    @property
    def is_boundary(self) -> bool:
        return self.kind is ElementKind.BOUNDARY

    @property
    def is_fixed(self) -> bool:
        """True for pinned or locked elements, which layout never moves."""
        return self.pinned or self.locked

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def __repr__(self) -> str:
        return f"Element(id={self.id}, kind={self.kind.value}, x={self.x:.2f}, y={self.y:.2f})"


@dataclass
class Link:
    """
    Directed edge from an output slot to an input slot.

    Attributes:
        id: Link identifier
        origin_id: Source element id
        origin_slot: Source output slot index
        target_id: Target element id
        target_slot: Target input slot index
        type: Payload type tag (ignored by layout)
    """

    id: int
    origin_id: int
    origin_slot: int
    target_id: int
    target_slot: int
    type: str = ""

    def __repr__(self) -> str:
        return f"Link({self.origin_id}:{self.origin_slot} -> {self.target_id}:{self.target_slot})"


@dataclass
class Group:
    """
    Titled rectangular container.

    Membership is never stored: it is derived from geometry on every run.
    A group missing any bound is ignored by layout.
    """

    id: int
    title: str = ""
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def has_bounds(self) -> bool:
        bounds = (self.x, self.y, self.width, self.height)
        return all(v is not None and math.isfinite(v) for v in bounds)

    @property
    def area(self) -> float:
        if not self.has_bounds:
            return 0.0
        return self.width * self.height  # type: ignore[operator]

    @property
    def content_top(self) -> float:
        """Top of the content area, below the title bar."""
        return self.y + GROUP_TITLE_HEIGHT  # type: ignore[operator]

    def set_bounds(self, x: float, y: float, width: float, height: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.width = float(width)
        self.height = float(height)

    def translate(self, dx: float, dy: float) -> None:
        self.x = self.x + dx  # type: ignore[operator]
        self.y = self.y + dy  # type: ignore[operator]

    def __repr__(self) -> str:
        return f"Group(id={self.id}, title={self.title!r})"


class LayoutMode(Enum):
    """Arrangement requested by a group title token."""

    DEFAULT = "default"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    ROWS = "rows"
    COLUMNS = "columns"


@dataclass(frozen=True)
class LayoutToken:
    """Parsed layout token; ``count`` is only meaningful for ROWS and COLUMNS."""

    mode: LayoutMode = LayoutMode.DEFAULT
    count: int = 0

    @property
    def is_default(self) -> bool:
        return self.mode is LayoutMode.DEFAULT


@dataclass
class LayoutResult:
    """Summary of a full-graph layout run; ``group_count`` counts resized groups."""

    node_count: int = 0
    layer_count: int = 0
    group_count: int = 0
    execution_ms: float = 0.0


@dataclass
class SelectedLayoutResult:
    """Summary of a selected-groups layout run."""

    node_count: int = 0
    group_count: int = 0
    execution_ms: float = 0.0


__all__ = [
    "EventType",
    "Event",
    "ElementKind",
    "InputSlot",
    "OutputSlot",
    "Element",
    "Link",
    "Group",
    "LayoutMode",
    "LayoutToken",
    "LayoutResult",
    "SelectedLayoutResult",
    "REROUTE_TYPE",
]
