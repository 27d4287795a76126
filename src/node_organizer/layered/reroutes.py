"""
Reroute chain collapsing and restoration.

Reroutes only redirect wires. While layering, every chain of reroutes fed
by a real element is replaced by virtual edges from that source to the
chain's real targets; afterwards the reroutes are spread evenly along the
straight line from the source's output anchor to the centroid of the
targets' input anchors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

import numpy as np

from ..types import Element, Link

if TYPE_CHECKING:
    from .session import LayoutSession

logger = logging.getLogger(__name__)


@dataclass
class ChainTarget:
    """A real element consuming a chain, with the input slot used."""

    element_id: int
    slot: int


@dataclass
class RerouteChain:
    """
    Reroutes between one real source and its real targets.

    Attributes:
        source_id: Element feeding the first reroute
        source_slot: Output slot of the source
        reroute_ids: Reroutes in discovery order (depth-first over branches)
        targets: Real elements reached, possibly none (dead end)
    """

    source_id: int
    source_slot: int
    reroute_ids: list[int] = field(default_factory=list)
    targets: list[ChainTarget] = field(default_factory=list)


def find_reroute_chains(
    elements: Mapping[int, Element],
    links: Sequence[Link],
    reroutes: Iterable[int],
) -> list[RerouteChain]:
    """
    Trace every reroute chain fed directly by a non-reroute element.

    Each reroute belongs to at most one chain. Branches are followed depth
    first; a real element ends its branch as a target, a reroute without
    outgoing links ends its branch without one.

    Args:
        elements: Element id -> element
        links: Links with both endpoints present
        reroutes: Ids of reroute elements

    Returns:
        Chains holding at least one reroute.
    """
    incoming: dict[int, list[Link]] = {}
    outgoing: dict[int, list[Link]] = {}
    for link in links:
        incoming.setdefault(link.target_id, []).append(link)
        outgoing.setdefault(link.origin_id, []).append(link)

    visited: set[int] = set()
    chains: list[RerouteChain] = []

    for start in sorted(reroutes):
        for link in incoming.get(start, ()):
            if start in visited:
                break
            source = elements.get(link.origin_id)
            if source is None or source.is_reroute:
                continue
            chain = RerouteChain(source.id, link.origin_slot)
            _trace_chain(chain, start, elements, outgoing, visited)
            if chain.reroute_ids:
                chains.append(chain)

    logger.debug("Found %d reroute chain(s)", len(chains))
    return chains


def _trace_chain(
    chain: RerouteChain,
    start: int,
    elements: Mapping[int, Element],
    outgoing: Mapping[int, list[Link]],
    visited: set[int],
) -> None:
    stack = [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        chain.reroute_ids.append(current)

        next_hops: list[int] = []
        for link in outgoing.get(current, ()):
            target = elements.get(link.target_id)
            if target is None:
                continue
            if target.is_reroute:
                if target.id not in visited:
                    next_hops.append(target.id)
            else:
                chain.targets.append(ChainTarget(target.id, link.target_slot))
        stack.extend(reversed(next_hops))


def virtual_edges(chains: Iterable[RerouteChain]) -> dict[int, list[int]]:
    """Source id -> distinct target ids, in discovery order."""
    edges: dict[int, list[int]] = {}
    for chain in chains:
        targets = edges.setdefault(chain.source_id, [])
        for target in chain.targets:
            if target.element_id not in targets:
                targets.append(target.element_id)
    return edges


def is_chain_grouped(chain: RerouteChain, session: LayoutSession) -> bool:
    """True when any reroute of the chain is owned by a group."""
    return any(rid in session.group_of for rid in chain.reroute_ids)


def restore_reroute_chains(session: LayoutSession, grouped: bool) -> int:
    """
    Spread each chain's reroutes along its source-to-targets line.

    Only chains whose grouping matches ``grouped`` are handled, so grouped
    chains can be restored before group resizing and free ones after
    overlap resolution. Fixed reroutes are not moved.

    Returns:
        Number of reroutes moved.
    """
    moved = 0
    for chain in session.chains:
        if is_chain_grouped(chain, session) != grouped:
            continue
        source = session.elements.get(chain.source_id)
        targets = [
            session.elements[t.element_id]
            for t in chain.targets
            if t.element_id in session.elements
        ]
        if source is None or not targets:
            continue

        start = np.array([source.right, source.y + source.height / 2])
        end = np.array([[t.x, t.y + t.height / 2] for t in targets]).mean(axis=0)
        count = len(chain.reroute_ids)
        steps = np.arange(1, count + 1) / (count + 1)
        points = start + np.outer(steps, end - start)

        for rid, (px, py) in zip(chain.reroute_ids, points):
            reroute = session.elements[rid]
            if reroute.is_fixed:
                continue
            reroute.move_to(px - reroute.width / 2, py - reroute.height / 2)
            moved += 1

    logger.debug("Restored %d reroute(s) (grouped=%s)", moved, grouped)
    return moved


__all__ = [
    "ChainTarget",
    "RerouteChain",
    "find_reroute_chains",
    "virtual_edges",
    "is_chain_grouped",
    "restore_reroute_chains",
]
