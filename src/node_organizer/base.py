"""
Base classes for organizer layouts.

This module provides abstract base classes that define the common interface
and shared functionality of both entry points:

- BaseLayout: Abstract base with event system, graph and configuration management
- StaticLayout: Single-pass pipeline run with start/tick/end events and timing
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

if TYPE_CHECKING:
    from typing_extensions import Self

from .config import LayoutConfig
from .graph import Graph
from .types import Event, EventType, LayoutResult, SelectedLayoutResult
from .validation import validate_link_endpoints

ConfigLike = Union[LayoutConfig, Mapping[str, Any], None]
"""Configuration input: a LayoutConfig, a mapping of overrides, or None."""

ResultType = Union[LayoutResult, SelectedLayoutResult]


class BaseLayout(ABC):
    """
    Abstract base class for organizer layouts.

    Provides shared infrastructure:
    - Event system (start/tick/end events)
    - Graph and configuration management via properties
    - Result access after run()

    Example:
        layout = GraphLayout(graph, config={"horizontal_gap": 80})
        layout.on("tick", lambda event: print(event["phase"]))
        result = layout.run().result
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        *,
        config: ConfigLike = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            graph: Graph to lay out in place
            config: LayoutConfig, mapping of overrides, or None for defaults
            on_start: Callback for start event
            on_tick: Callback fired after each pipeline phase
            on_end: Callback for end event

        Raises:
            InvalidConfigError: If the configuration is invalid
        """
        self._graph: Optional[Graph] = graph
        self._config: LayoutConfig = LayoutConfig.resolve(config)
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}
        self._result: Optional[ResultType] = None
        self._started_at: float = 0.0

        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> Optional[Graph]:
        """Get the graph being laid out."""
        return self._graph

    @graph.setter
    def graph(self, value: Optional[Graph]) -> None:
        self._graph = value

    @property
    def config(self) -> LayoutConfig:
        """Get the resolved configuration."""
        return self._config

    @config.setter
    def config(self, value: ConfigLike) -> None:
        """Set configuration from a LayoutConfig, a mapping of overrides, or None."""
        self._config = LayoutConfig.resolve(value)

    @property
    def result(self) -> Optional[ResultType]:
        """Result of the last run, or None before run()."""
        return self._result

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    def _elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started_at) * 1000.0

    def _phase(self, name: str) -> None:
        """Report a completed pipeline phase."""
        self.trigger({"type": EventType.tick, "phase": name, "elapsed_ms": self._elapsed_ms()})

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Check the graph strictly.

        Layout itself ignores dangling links; call this first for fail-fast
        behavior.

        Returns:
            self (for chaining)

        Raises:
            InvalidLinkError: If any link references an unknown element.
        """
        if self._graph is not None and self._graph.links:
            validate_link_endpoints(
                self._graph.link_list(), self._graph.element_map().keys(), strict=True
            )
        return self

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout.

        Returns:
            self (for chaining)
        """
        pass


class StaticLayout(BaseLayout):
    """
    Base class for single-pass layouts.

    run() fires the start event, delegates to _compute(), stamps the
    execution time on the returned result and fires the end event.
    """

    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout.

        Fires start event, computes layout, fires end event.

        Args:
            **kwargs: Additional arguments passed to _compute()

        Returns:
            self (for chaining)
        """
        self._started_at = time.perf_counter()
        self.trigger({"type": EventType.start, "elapsed_ms": 0.0})

        result = self._compute(**kwargs)
        result.execution_ms = self._elapsed_ms()
        self._result = result

        self.trigger({"type": EventType.end, "elapsed_ms": result.execution_ms})
        return self

    @abstractmethod
    def _compute(self, **kwargs: Any) -> ResultType:
        """
        Compute positions and write them back to the graph.

        Subclasses must implement this to perform the actual layout computation.
        """
        pass


__all__ = [
    "BaseLayout",
    "StaticLayout",
    "ConfigLike",
]
