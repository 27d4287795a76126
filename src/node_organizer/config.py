"""
Layout configuration.

Provides the tunable parameters shared by both entry points:
- LayoutConfig: Gaps, padding, origin, iteration and packing limits
- ColumnPolicy: Interpretation of ``max_columns``
- Size constants used when the document omits them
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .validation import InvalidConfigError, validate_config

GROUP_TITLE_HEIGHT = 50.0
DEFAULT_ELEMENT_WIDTH = 200.0
DEFAULT_ELEMENT_HEIGHT = 100.0
MIN_LAYER_WIDTH = 100.0


class ColumnPolicy(Enum):
    """
    Column policy of the packer.

    - AUTO: First-fit-decreasing-height rows bounded by ``max_row_width``
    - SINGLE_COLUMN: One element per row
    - FIXED: Exactly ``max_columns`` elements per row
    """

    AUTO = "auto"
    SINGLE_COLUMN = "single-column"
    FIXED = "fixed"

    @classmethod
    def from_max_columns(cls, max_columns: int) -> ColumnPolicy:
        if max_columns <= 0:
            return cls.AUTO
        if max_columns == 1:
            return cls.SINGLE_COLUMN
        return cls.FIXED


@dataclass(frozen=True)
class LayoutConfig:
    """
    Layout parameters, all in canvas pixels unless noted.

    Attributes:
        horizontal_gap: Space between layers and between row neighbours
        vertical_gap: Space between rows and stacked elements
        group_padding: Space between a group's border and its contents
        start_x: Left edge of the layout
        start_y: Top edge of the layout
        max_iterations: Crossing-minimization sweep limit
        max_columns: 0 = auto, 1 = single column, N >= 2 = fixed N columns
        max_row_width: Row width budget of the auto packer
        collapse_reroutes: Replace reroute chains by virtual edges while layering
        disconnected_gap: Space between the disconnected zone and layer 0
    """

    horizontal_gap: float = 100.0
    vertical_gap: float = 40.0
    group_padding: float = 30.0
    start_x: float = 100.0
    start_y: float = 100.0
    max_iterations: int = 24
    max_columns: int = 0
    max_row_width: float = 800.0
    collapse_reroutes: bool = True
    disconnected_gap: float = 150.0

    def __post_init__(self) -> None:
        validate_config(self)

    @property
    def column_policy(self) -> ColumnPolicy:
        return ColumnPolicy.from_max_columns(self.max_columns)

    def replace(self, **overrides: Any) -> LayoutConfig:
        """Return a copy with the given fields replaced."""
        _check_keys(overrides)
        return dataclasses.replace(self, **overrides)

    @classmethod
    def resolve(cls, config: Optional[Union[LayoutConfig, Mapping[str, Any]]] = None) -> LayoutConfig:
        """
        Build a configuration from an optional partial override.

        Args:
            config: A LayoutConfig, a mapping of field overrides, or None

        Returns:
            A complete, validated LayoutConfig

        Raises:
            InvalidConfigError: On unknown fields or invalid values

        Example:
            >>> LayoutConfig.resolve({"horizontal_gap": 60}).vertical_gap
            40.0
        """
        if config is None:
            return cls()
        if isinstance(config, LayoutConfig):
            return config
        return cls().replace(**dict(config))


def _check_keys(overrides: Mapping[str, Any]) -> None:
    known = {f.name for f in dataclasses.fields(LayoutConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise InvalidConfigError(f"Unknown layout option(s): {', '.join(unknown)}")


__all__ = [
    "LayoutConfig",
    "ColumnPolicy",
    "GROUP_TITLE_HEIGHT",
    "DEFAULT_ELEMENT_WIDTH",
    "DEFAULT_ELEMENT_HEIGHT",
    "MIN_LAYER_WIDTH",
]
