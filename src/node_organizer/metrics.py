"""
Layout quality metrics.

Provides the two measures the organizer is judged by:
- Edge crossings: Number of intersecting link segments
- Compactness: Share of the bounding box covered by elements

Both work on the current positions of a graph, so they can be taken before
and after a layout run.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from .graph import Graph
from .types import Element, Link

Point = Tuple[float, float]


def _output_anchor(element: Element) -> Point:
    return (element.right, element.y + element.height / 2)


def _input_anchor(element: Element) -> Point:
    return (element.x, element.y + element.height / 2)


def _link_segments(graph: Graph) -> list[tuple[Link, Point, Point]]:
    elements = graph.element_map()
    segments = []
    for link in graph.link_list():
        origin = elements.get(link.origin_id)
        target = elements.get(link.target_id)
        if origin is None or target is None:
            continue
        segments.append((link, _output_anchor(origin), _input_anchor(target)))
    return segments


def edge_crossings(graph: Graph) -> int:
    """
    Count the number of link crossings in the layout.

    Each link is drawn as a straight segment from the right-edge centre of
    its origin to the left-edge centre of its target. Two links cross if
    their segments intersect; links sharing an element never count.

    Args:
        graph: Positioned graph

    Returns:
        Number of link crossings

    Time Complexity: O(m^2) where m = number of links
    """
    segments = _link_segments(graph)
    crossings = 0
    for i, (l1, p1, p2) in enumerate(segments):
        ends1 = {l1.origin_id, l1.target_id}
        for l2, p3, p4 in segments[i + 1 :]:
            if l2.origin_id in ends1 or l2.target_id in ends1:
                continue
            if _segments_intersect(p1, p2, p3, p4):
                crossings += 1
    return crossings


def _segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """Check if line segments (p1,p2) and (p3,p4) intersect."""

    def ccw(a: Point, b: Point, c: Point) -> bool:
        return (c[1] - a[1]) * (b[0] - a[0]) > (b[1] - a[1]) * (c[0] - a[0])

    return ccw(p1, p3, p4) != ccw(p2, p3, p4) and ccw(p1, p2, p3) != ccw(p1, p2, p4)


def bounding_box(graph: Graph) -> Optional[Tuple[float, float, float, float]]:
    """
    Bounding box of all elements and bounded groups.

    Returns:
        (min_x, min_y, max_x, max_y), or None for an empty graph
    """
    boxes = [(e.x, e.y, e.right, e.bottom) for e in graph.all_elements()]
    boxes += [
        (g.x, g.y, g.x + g.width, g.y + g.height)  # type: ignore[operator]
        for g in graph.groups
        if g.has_bounds
    ]
    if not boxes:
        return None
    arr = np.array(boxes, dtype=float)
    return (
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )


def layout_compactness(graph: Graph) -> float:
    """
    Compute how densely elements fill the layout's bounding box.

    Args:
        graph: Positioned graph

    Returns:
        Total element area over bounding-box area, clipped to [0, 1].
        An empty or degenerate layout scores 0.
    """
    box = bounding_box(graph)
    if box is None:
        return 0.0
    min_x, min_y, max_x, max_y = box
    box_area = (max_x - min_x) * (max_y - min_y)
    if box_area <= 0:
        return 0.0
    sizes = np.array([(e.width, e.height) for e in graph.all_elements()], dtype=float)
    covered = float((sizes[:, 0] * sizes[:, 1]).sum()) if len(sizes) else 0.0
    return float(np.clip(covered / box_area, 0.0, 1.0))


def layout_quality_summary(graph: Graph) -> dict[str, Any]:
    """
    Compute a summary of layout quality metrics.

    Args:
        graph: Positioned graph

    Returns:
        Dictionary with all metrics:
        - edge_crossings: Number of link crossings
        - compactness: Covered share of the bounding box (0-1)
    """
    return {
        "edge_crossings": edge_crossings(graph),
        "compactness": layout_compactness(graph),
    }


__all__ = [
    "edge_crossings",
    "bounding_box",
    "layout_compactness",
    "layout_quality_summary",
]
