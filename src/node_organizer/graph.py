"""
In-memory graph document.

This module provides the single object both entry points operate on:
- Graph: Elements, links, groups, optional subgraph boundary records and
  the redraw notification hook
- Graph.from_workflow: Adapter from the editor's workflow dict shape

Only element positions and group bounds are mutated by layout.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from .types import Element, ElementKind, Group, InputSlot, Link, OutputSlot


class Graph:
    """
    Graph document shared by the layout pipeline.

    Attributes:
        elements: Ordinary and reroute elements, in document order
        links: Links keyed by id
        groups: Groups, in document order
        input_node: Subgraph input boundary record, if any
        output_node: Subgraph output boundary record, if any
        on_dirty: Called once when a layout run has written positions

    Example:
        graph = Graph([Element(1), Element(2)])
        graph.connect(1, 2)
        layout_graph(graph)
    """

    def __init__(
        self,
        elements: Optional[Iterable[Element]] = None,
        links: Optional[Union[Iterable[Link], Mapping[int, Link]]] = None,
        groups: Optional[Iterable[Group]] = None,
        *,
        input_node: Optional[Element] = None,
        output_node: Optional[Element] = None,
        on_dirty: Optional[Callable[[], None]] = None,
    ) -> None:
        self.elements: list[Element] = list(elements or [])
        if isinstance(links, Mapping):
            self.links: dict[int, Link] = dict(links)
        else:
            self.links = {link.id: link for link in links or []}
        self.groups: list[Group] = list(groups or [])
        self.input_node = input_node
        self.output_node = output_node
        self.on_dirty = on_dirty

        for boundary in (input_node, output_node):
            if boundary is not None:
                boundary.kind = ElementKind.BOUNDARY

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def all_elements(self) -> list[Element]:
        """Elements including subgraph boundary records."""
        result = list(self.elements)
        for boundary in (self.input_node, self.output_node):
            if boundary is not None:
                result.append(boundary)
        return result

    def element_map(self) -> dict[int, Element]:
        """Element id -> element; the first element wins on duplicate ids."""
        result: dict[int, Element] = {}
        for element in self.all_elements():
            result.setdefault(element.id, element)
        return result

    def link_list(self) -> list[Link]:
        return list(self.links.values())

    def get_element(self, element_id: int) -> Optional[Element]:
        return self.element_map().get(element_id)

    def get_group(self, group_id: int) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def __len__(self) -> int:
        return len(self.all_elements())

    def __repr__(self) -> str:
        return f"Graph(elements={len(self)}, links={len(self.links)}, groups={len(self.groups)})"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_element(self, element: Element) -> Element:
        self.elements.append(element)
        return element

    def add_group(self, group: Group) -> Group:
        self.groups.append(group)
        return group

    def connect(
        self,
        origin_id: int,
        target_id: int,
        origin_slot: int = 0,
        target_slot: int = 0,
        type: str = "",
    ) -> Link:
        """
        Add a link and bind it to the endpoint slots.

        Missing slots are created on the endpoint elements.

        Args:
            origin_id: Source element id
            target_id: Target element id
            origin_slot: Source output slot index
            target_slot: Target input slot index
            type: Payload type tag

        Returns:
            The new link
        """
        link_id = max(self.links, default=0) + 1
        link = Link(link_id, origin_id, origin_slot, target_id, target_slot, type)
        self.links[link_id] = link

        elements = self.element_map()
        origin = elements.get(origin_id)
        if origin is not None:
            while len(origin.outputs) <= origin_slot:
                origin.outputs.append(OutputSlot(type=type))
            origin.outputs[origin_slot].links.append(link_id)
        target = elements.get(target_id)
        if target is not None:
            while len(target.inputs) <= target_slot:
                target.inputs.append(InputSlot(type=type))
            target.inputs[target_slot].link = link_id
        return link

    def set_dirty_canvas(self) -> None:
        """Notify the host that positions changed."""
        if self.on_dirty is not None:
            self.on_dirty()

    # -------------------------------------------------------------------------
    # Workflow adapter
    # -------------------------------------------------------------------------

    @classmethod
    def from_workflow(
        cls,
        data: Mapping[str, Any],
        on_dirty: Optional[Callable[[], None]] = None,
    ) -> Graph:
        """
        Build a graph from an editor workflow dict.

        Accepts links as ``[id, origin, origin_slot, target, target_slot, type]``
        arrays or as dicts, positions and sizes as two-item sequences or as
        ``{"0": .., "1": ..}`` mappings, and group bounds as ``bounding``
        arrays. Subgraph definitions may carry ``inputNode``/``outputNode``
        records, which become boundary elements.

        Args:
            data: Parsed workflow document
            on_dirty: Redraw notification hook

        Returns:
            A new Graph
        """
        elements = [_element_from_dict(node) for node in data.get("nodes") or []]
        links = [_link_from_data(raw) for raw in data.get("links") or []]
        groups = [
            _group_from_dict(raw, index) for index, raw in enumerate(data.get("groups") or [])
        ]
        input_node = _boundary_from_dict(data.get("inputNode"))
        output_node = _boundary_from_dict(data.get("outputNode"))
        return cls(
            elements,
            links,
            groups,
            input_node=input_node,
            output_node=output_node,
            on_dirty=on_dirty,
        )


def _number(value: Any) -> Optional[float]:
    # Malformed entries read as missing
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _is_sequence(value: Any, min_length: int) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes))
        and len(value) >= min_length
    )


def _pair(value: Any) -> tuple[Optional[float], Optional[float]]:
    if value is None:
        return None, None
    if isinstance(value, Mapping):
        first = value.get("0", value.get(0))
        second = value.get("1", value.get(1))
        return _number(first), _number(second)
    if _is_sequence(value, 2):
        return _number(value[0]), _number(value[1])
    return None, None


def _element_from_dict(node: Mapping[str, Any]) -> Element:
    x, y = _pair(node.get("pos"))
    width, height = _pair(node.get("size"))
    flags = node.get("flags") or {}
    inputs = [
        InputSlot(name=slot.get("name", ""), type=str(slot.get("type", "")), link=slot.get("link"))
        for slot in node.get("inputs") or []
    ]
    outputs = [
        OutputSlot(
            name=slot.get("name", ""),
            type=str(slot.get("type", "")),
            links=list(slot.get("links") or []),
        )
        for slot in node.get("outputs") or []
    ]
    return Element(
        id=node["id"],
        x=x,  # type: ignore[arg-type]
        y=y,  # type: ignore[arg-type]
        width=width,  # type: ignore[arg-type]
        height=height,  # type: ignore[arg-type]
        title=node.get("title") or "",
        type=node.get("type") or "",
        inputs=inputs,
        outputs=outputs,
        pinned=bool(flags.get("pinned", False)),
        locked=bool(node.get("locked", False) or flags.get("locked", False)),
    )


def _link_from_data(raw: Any) -> Link:
    if isinstance(raw, Mapping):
        return Link(
            id=raw["id"],
            origin_id=raw["origin_id"],
            origin_slot=raw.get("origin_slot", 0),
            target_id=raw["target_id"],
            target_slot=raw.get("target_slot", 0),
            type=str(raw.get("type", "")),
        )
    link_id, origin_id, origin_slot, target_id, target_slot = raw[:5]
    link_type = raw[5] if len(raw) > 5 else ""
    return Link(link_id, origin_id, origin_slot, target_id, target_slot, str(link_type))


def _bounding(raw: Mapping[str, Any]) -> tuple[Optional[float], ...]:
    bounding = raw.get("bounding")
    if _is_sequence(bounding, 4):
        return tuple(_number(v) for v in bounding[:4])
    x, y = _pair(raw.get("pos"))
    width, height = _pair(raw.get("size"))
    return x, y, width, height


def _group_from_dict(raw: Mapping[str, Any], index: int) -> Group:
    x, y, width, height = _bounding(raw)
    # Older documents carry no group ids
    group_id = raw.get("id", index + 1)
    return Group(id=group_id, title=raw.get("title") or "", x=x, y=y, width=width, height=height)


def _boundary_from_dict(raw: Optional[Mapping[str, Any]]) -> Optional[Element]:
    if not raw:
        return None
    x, y, width, height = _bounding(raw)
    return Element(
        id=raw["id"],
        kind=ElementKind.BOUNDARY,
        x=x,  # type: ignore[arg-type]
        y=y,  # type: ignore[arg-type]
        width=width,  # type: ignore[arg-type]
        height=height,  # type: ignore[arg-type]
        title=raw.get("title") or "",
        type=raw.get("type") or "",
        pinned=bool(raw.get("pinned", False)),
    )


__all__ = ["Graph"]
