"""
Element classification.

Partitions elements by how links touch them: connected elements enter the
layered graph, disconnected ones go to the left margin zone (or stay with
their group), and reroutes are candidates for chain collapsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..types import Element, Link


@dataclass
class Classification:
    """Element ids by role; ``reroutes`` overlaps the other two sets."""

    connected: set[int] = field(default_factory=set)
    disconnected: set[int] = field(default_factory=set)
    reroutes: set[int] = field(default_factory=set)


def linked_element_ids(links: Iterable[Link]) -> set[int]:
    """Ids of every element named as a link origin or target."""
    ids: set[int] = set()
    for link in links:
        ids.add(link.origin_id)
        ids.add(link.target_id)
    return ids


def classify_elements(elements: Iterable[Element], links: Iterable[Link]) -> Classification:
    """
    Classify elements as connected or disconnected, and flag reroutes.

    Example:
        >>> a, b, c = Element(1), Element(2), Element(3)
        >>> result = classify_elements([a, b, c], [Link(1, 1, 0, 2, 0)])
        >>> sorted(result.connected), sorted(result.disconnected)
        ([1, 2], [3])
    """
    linked = linked_element_ids(links)
    result = Classification()
    for element in elements:
        if element.is_reroute:
            result.reroutes.add(element.id)
        if element.id in linked:
            result.connected.add(element.id)
        else:
            result.disconnected.add(element.id)
    return result


__all__ = ["Classification", "linked_element_ids", "classify_elements"]
