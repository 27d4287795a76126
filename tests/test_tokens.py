"""Tests for group title layout tokens."""

import pytest

from node_organizer import LayoutConfig, LayoutMode, LayoutToken, parse_layout_token
from node_organizer.groups import ArrangeItem, arrange_by_token, split_evenly


def create_boxes():
    """Four 100x50 boxes scattered in reading order a, b, c, d."""
    return [
        ArrangeItem("a", 0, 0, 100, 50),
        ArrangeItem("b", 300, 10, 100, 50),
        ArrangeItem("c", 10, 200, 100, 50),
        ArrangeItem("d", 310, 210, 100, 50),
    ]


class TestParseToken:
    """Tests for token parsing."""

    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Loaders [HORIZONTAL]", LayoutToken(LayoutMode.HORIZONTAL)),
            ("[vertical] prompts", LayoutToken(LayoutMode.VERTICAL)),
            ("Samplers [3COL]", LayoutToken(LayoutMode.COLUMNS, 3)),
            ("grid [2row]", LayoutToken(LayoutMode.ROWS, 2)),
            ("[1ROW]", LayoutToken(LayoutMode.HORIZONTAL)),
            ("[1COL]", LayoutToken(LayoutMode.VERTICAL)),
        ],
    )
    def test_tokens(self, title, expected):
        """Recognised tokens parse case-insensitively."""
        assert parse_layout_token(title) == expected

    @pytest.mark.parametrize("title", ["", None, "Plain group", "[0COL]", "[10ROW]", "[HORIZ]"])
    def test_default(self, title):
        """Anything else is the default mode."""
        assert parse_layout_token(title).is_default

    def test_first_match_wins(self):
        """[HORIZONTAL] takes precedence over later tokens."""
        assert parse_layout_token("[2COL] [HORIZONTAL]").mode is LayoutMode.HORIZONTAL


class TestSplitEvenly:
    """Tests for contiguous dealing."""

    def test_uneven(self):
        """Longer runs come first."""
        assert split_evenly([1, 2, 3, 4], 3) == [[1, 2], [3], [4]]

    def test_more_parts_than_items(self):
        """Parts are capped at the item count."""
        assert split_evenly([1, 2], 5) == [[1], [2]]

    def test_empty(self):
        """Nothing to split gives no parts."""
        assert split_evenly([], 3) == []


class TestArrangeByToken:
    """Tests for token arrangements."""

    def test_horizontal(self):
        """One row ordered left to right."""
        offsets = arrange_by_token(create_boxes(), LayoutToken(LayoutMode.HORIZONTAL), LayoutConfig())
        assert offsets == {"a": (0, 0), "c": (200, 0), "b": (400, 0), "d": (600, 0)}

    def test_vertical(self):
        """One column ordered top to bottom."""
        offsets = arrange_by_token(create_boxes(), LayoutToken(LayoutMode.VERTICAL), LayoutConfig())
        assert offsets == {"a": (0, 0), "b": (0, 90), "c": (0, 180), "d": (0, 270)}

    def test_rows(self):
        """Rows are dealt from the top-to-bottom order."""
        offsets = arrange_by_token(create_boxes(), LayoutToken(LayoutMode.ROWS, 2), LayoutConfig())
        assert offsets == {"a": (0, 0), "b": (200, 0), "c": (0, 90), "d": (200, 90)}

    def test_columns(self):
        """Columns are dealt from the left-to-right order."""
        offsets = arrange_by_token(create_boxes(), LayoutToken(LayoutMode.COLUMNS, 2), LayoutConfig())
        assert offsets == {"a": (0, 0), "c": (0, 90), "b": (200, 0), "d": (200, 90)}

    def test_columns_rearrange_stably(self):
        """Arranging an arranged set keeps the assignment."""
        config = LayoutConfig()
        token = LayoutToken(LayoutMode.COLUMNS, 3)
        items = [ArrangeItem(k, 0, i * 10, 100, 50) for i, k in enumerate("wxyz")]
        first = arrange_by_token(items, token, config)
        moved = [ArrangeItem(it.key, *first[it.key], 100, 50) for it in items]
        assert arrange_by_token(moved, token, config) == first

    def test_default_mode_rejected(self):
        """The default mode has no token arrangement."""
        with pytest.raises(ValueError):
            arrange_by_token(create_boxes(), LayoutToken(), LayoutConfig())
