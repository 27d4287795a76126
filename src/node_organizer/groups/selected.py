"""
Selected-groups layout.

Re-arranges the interiors of selected groups in place, leaving everything
outside the selection untouched. A selected group nested inside another
selected group is handled as part of its ancestor's run; unselected nested
groups are included automatically. Only links between a group's own
members drive its arrangement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, cast

from ..base import ConfigLike, StaticLayout
from ..graph import Graph
from ..types import Event, SelectedLayoutResult
from .contents import place_group, plan_groups
from .hierarchy import LayoutGroup, assign_group_members, build_group_hierarchy
from .resize import resize_groups_to_fit

if TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)


class SelectedGroupsLayout(StaticLayout):
    """
    Layout of the contents of selected groups.

    Each layout root keeps its current top-left corner; its members and
    nested groups are re-planned and the boxes resized to fit. Boxes may
    end up overlapping content outside the selection.

    Example:
        layout = SelectedGroupsLayout(graph, group_ids=[3, 7])
        result = layout.run().result
        print(result.node_count, result.group_count)
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        group_ids: Iterable[int] = (),
        *,
        config: ConfigLike = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize selected-groups layout.

        Args:
            graph: Graph to lay out in place
            group_ids: Ids of the selected groups
            config: LayoutConfig, mapping of overrides, or None for defaults
            on_start: Callback for start event
            on_tick: Callback fired after each pipeline phase
            on_end: Callback for end event
        """
        super().__init__(graph, config=config, on_start=on_start, on_tick=on_tick, on_end=on_end)
        self._group_ids: set[int] = set(group_ids)

    @property
    def group_ids(self) -> set[int]:
        """Get the selected group ids."""
        return self._group_ids

    @group_ids.setter
    def group_ids(self, value: Iterable[int]) -> None:
        self._group_ids = set(value)

    def select(self, *group_ids: int) -> Self:
        """Add groups to the selection (for chaining)."""
        self._group_ids.update(group_ids)
        return self

    def _compute(self, **kwargs: Any) -> SelectedLayoutResult:
        graph = self._graph
        if graph is None or not self._group_ids:
            return SelectedLayoutResult()

        layout_groups = build_group_hierarchy(graph.groups)
        selected = [lg for lg in layout_groups if lg.group.id in self._group_ids]
        if not selected:
            logger.debug("No selected group resolved: %s", sorted(self._group_ids))
            return SelectedLayoutResult()

        elements = graph.element_map()
        assign_group_members(layout_groups, elements.values())
        selected_set = set(selected)
        roots = [lg for lg in selected if not any(a in selected_set for a in lg.ancestors())]
        processed: list[LayoutGroup] = [lg for root in roots for lg in root.subtree()]
        self._phase("hierarchy")

        plan_groups(processed, elements, graph.link_list(), self._config)
        self._phase("plan")

        for root in roots:
            if not root.has_content:
                continue
            place_group(root, root.group.x, root.group.y, elements, self._config)  # type: ignore[arg-type]
        self._phase("place")

        resize_groups_to_fit(processed, elements, self._config)
        self._phase("resize")

        node_count = sum(len(lg.member_ids) for lg in processed)
        logger.debug(
            "Laid out %d selected root(s): %d group(s), %d element(s)",
            len(roots),
            len(processed),
            node_count,
        )
        graph.set_dirty_canvas()
        return SelectedLayoutResult(node_count=node_count, group_count=len(processed))


def layout_selected_groups(
    graph: Optional[Graph],
    group_ids: Iterable[int],
    config: ConfigLike = None,
) -> SelectedLayoutResult:
    """
    Lay out the contents of the selected groups in place.

    Args:
        graph: Graph to mutate
        group_ids: Ids of the selected groups
        config: LayoutConfig, mapping of overrides, or None for defaults

    Returns:
        Counts of positioned elements and processed groups, plus timing.
        Unknown ids or a missing graph yield a zero result.
    """
    layout = SelectedGroupsLayout(graph, group_ids, config=config).run()
    return cast(SelectedLayoutResult, layout.result)


__all__ = ["SelectedGroupsLayout", "layout_selected_groups"]
