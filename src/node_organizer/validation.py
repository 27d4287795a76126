"""
Input validation utilities for the node organizer.

Provides the exception hierarchy, the warning category used when the graph
structure is degraded rather than rejected, and validation functions for
configuration, link endpoints and group containment. Configuration errors
raise; graph content problems are reported as issue lists by default.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Collection, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from .config import LayoutConfig


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidConfigError(ValidationError):
    """Raised when a layout option is unknown or out of range."""

    pass


class InvalidLinkError(ValidationError):
    """Raised when a link references elements that do not exist."""

    pass


class InvalidGroupError(ValidationError):
    """Raised when group containment does not form a forest."""

    pass


class GraphStructureWarning(UserWarning):
    """Warning issued when the graph is laid out in a degraded way."""

    pass


def validate_gap(name: str, value: float) -> float:
    """
    Validate a gap or padding value.

    Args:
        name: Option name, used in the error message
        value: Gap in pixels

    Returns:
        The value as a float

    Raises:
        InvalidConfigError: If the value is negative or not finite
    """
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidConfigError(f"{name} must be a finite number >= 0, got {value}")
    return value


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is positive.

    Raises:
        InvalidConfigError: If iterations < 1
    """
    if iterations < 1:
        raise InvalidConfigError(f"max_iterations must be >= 1, got {iterations}")
    return iterations


def validate_max_columns(max_columns: int) -> int:
    """
    Validate the column policy value.

    Raises:
        InvalidConfigError: If max_columns is negative
    """
    if max_columns < 0:
        raise InvalidConfigError(f"max_columns must be >= 0, got {max_columns}")
    return max_columns


def validate_config(config: LayoutConfig) -> LayoutConfig:
    """
    Validate every field of a layout configuration.

    Args:
        config: Configuration to check

    Returns:
        The same configuration

    Raises:
        InvalidConfigError: On the first invalid field
    """
    for name in ("horizontal_gap", "vertical_gap", "group_padding", "disconnected_gap"):
        validate_gap(name, getattr(config, name))
    for name in ("start_x", "start_y"):
        if not math.isfinite(float(getattr(config, name))):
            raise InvalidConfigError(f"{name} must be finite, got {getattr(config, name)}")
    validate_iterations(config.max_iterations)
    validate_max_columns(config.max_columns)
    if not config.max_row_width > 0:
        raise InvalidConfigError(f"max_row_width must be > 0, got {config.max_row_width}")
    return config


def validate_link_endpoints(
    links: Sequence[Any],
    element_ids: Collection[int],
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that every link's origin and target exist.

    Args:
        links: Sequence of Link objects
        element_ids: Ids of the elements in the graph
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (link_id, issue_description) tuples

    Raises:
        InvalidLinkError: If strict=True and dangling links found
    """
    issues: list[tuple[int, str]] = []

    for link in links:
        if link.origin_id not in element_ids:
            issues.append((link.id, f"Link {link.id}: unknown origin element {link.origin_id}"))
        if link.target_id not in element_ids:
            issues.append((link.id, f"Link {link.id}: unknown target element {link.target_id}"))

    if strict and issues:
        msg = "Invalid link endpoints:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidLinkError(msg)

    return issues


def validate_containment(parents: Mapping[int, Optional[int]]) -> None:
    """
    Validate that a child -> parent mapping forms a forest.

    Args:
        parents: Group id to parent group id (None for roots)

    Raises:
        InvalidGroupError: If following parents ever revisits a group
    """
    for start in parents:
        seen = {start}
        current = parents.get(start)
        while current is not None:
            if current in seen:
                raise InvalidGroupError(f"Cyclic group containment through group {current}")
            seen.add(current)
            current = parents.get(current)


__all__ = [
    "ValidationError",
    "InvalidConfigError",
    "InvalidLinkError",
    "InvalidGroupError",
    "GraphStructureWarning",
    "validate_gap",
    "validate_iterations",
    "validate_max_columns",
    "validate_config",
    "validate_link_endpoints",
    "validate_containment",
]
