"""
Layering graph construction.

Builds the LayoutSession of a full-graph run:
1. Drop dangling links (with a warning) and classify elements
2. Collapse reroute chains into virtual edges
3. Build the group forest, assign members and plan every group interior
4. Create layout nodes: one representative per top-level group with
   content, one per connected, ungrouped, non-collapsed element
5. Add edges redirected to top-level representatives; edges inside a
   single top-level group are left to the group's own layout
"""

from __future__ import annotations

import logging
import warnings
from typing import Optional

from ..config import LayoutConfig
from ..graph import Graph
from ..groups.contents import plan_groups
from ..groups.hierarchy import assign_group_members, build_group_hierarchy
from ..validation import GraphStructureWarning, validate_link_endpoints
from .classify import classify_elements
from .reroutes import find_reroute_chains, virtual_edges
from .session import LayoutNode, LayoutSession, NodeKey

logger = logging.getLogger(__name__)


def build_layout_session(graph: Graph, config: LayoutConfig) -> LayoutSession:
    """
    Build the condensed layering graph of a document.

    Args:
        graph: Graph to lay out
        config: Resolved configuration

    Returns:
        A session with nodes and edges; layers are not assigned yet.
    """
    elements = graph.element_map()
    all_links = graph.link_list()

    issues = validate_link_endpoints(all_links, elements.keys(), strict=False)
    dangling = {link_id for link_id, _ in issues}
    if dangling:
        warnings.warn(
            f"Ignoring {len(dangling)} link(s) with unknown endpoints.",
            GraphStructureWarning,
            stacklevel=3,
        )
    links = [link for link in all_links if link.id not in dangling]

    element_list = list(elements.values())
    classification = classify_elements(element_list, links)
    session = LayoutSession(
        graph=graph,
        config=config,
        elements=elements,
        links=links,
        classification=classification,
    )

    if config.collapse_reroutes:
        session.chains = find_reroute_chains(elements, links, classification.reroutes)
        session.collapsed = {rid for chain in session.chains for rid in chain.reroute_ids}

    session.layout_groups = build_group_hierarchy(graph.groups)
    session.group_of = assign_group_members(session.layout_groups, element_list)
    plan_groups(session.layout_groups, elements, links, config)

    _add_layout_nodes(session)
    _add_edges(session)

    logger.debug(
        "Layering graph: %d node(s) from %d element(s), %d group(s), %d collapsed reroute(s)",
        len(session.nodes),
        len(elements),
        len(session.layout_groups),
        len(session.collapsed),
    )
    return session


def _add_layout_nodes(session: LayoutSession) -> None:
    for lg in session.top_level_groups():
        if lg.has_content:
            session.nodes[lg.key] = LayoutNode(lg.key, lg.width, lg.height, group=lg)

    for element in session.elements.values():
        if (
            element.id in session.collapsed
            or element.id in session.group_of
            or element.id in session.classification.disconnected
        ):
            continue
        key: NodeKey = ("element", element.id)
        session.nodes[key] = LayoutNode(key, element.width, element.height, element=element)


def _node_key(session: LayoutSession, element_id: int) -> Optional[NodeKey]:
    owner = session.group_of.get(element_id)
    if owner is not None:
        return owner.top_level().key
    key: NodeKey = ("element", element_id)
    return key if key in session.nodes else None


def _connect(session: LayoutSession, source: Optional[NodeKey], target: Optional[NodeKey]) -> None:
    if source is None or target is None or source == target:
        return
    src, tgt = session.nodes[source], session.nodes[target]
    if target not in src.successors:
        src.successors.append(target)
    if source not in tgt.predecessors:
        tgt.predecessors.append(source)


def _add_edges(session: LayoutSession) -> None:
    for link in session.links:
        if link.origin_id in session.collapsed or link.target_id in session.collapsed:
            continue
        _connect(session, _node_key(session, link.origin_id), _node_key(session, link.target_id))

    for source_id, target_ids in virtual_edges(session.chains).items():
        for target_id in target_ids:
            _connect(session, _node_key(session, source_id), _node_key(session, target_id))


__all__ = ["build_layout_session"]
