"""Tests for graph preprocessing utilities."""

from node_organizer import (
    count_crossings,
    detect_cycle,
    has_cycle,
    longest_path_layers,
    topological_order,
)
from node_organizer.preprocessing import group_by_layer


def create_dag():
    """Diamond with a tail: a -> b, a -> c, b -> d, c -> d, d -> e."""
    keys = ["a", "b", "c", "d", "e"]
    successors = {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": ["e"]}
    return keys, successors


def predecessors_of(keys, successors):
    preds = {key: [] for key in keys}
    for src, targets in successors.items():
        for tgt in targets:
            preds[tgt].append(src)
    return preds


class TestCycleDetection:
    """Tests for cycle detection functions."""

    def test_detect_cycle_in_cyclic_graph(self):
        """Should detect cycle in a graph with a cycle."""
        cycle = detect_cycle([1, 2, 3], {1: [2], 2: [3], 3: [1]})
        assert cycle == [1, 2, 3, 1]

    def test_detect_cycle_in_acyclic_graph(self):
        """Should return None for acyclic graph."""
        keys, successors = create_dag()
        assert detect_cycle(keys, successors) is None

    def test_has_cycle(self):
        """has_cycle mirrors detect_cycle."""
        assert has_cycle(["x", "y"], {"x": ["y"], "y": ["x"]}) is True
        assert has_cycle(["x", "y"], {"x": ["y"]}) is False

    def test_self_loop(self):
        """Self-loop should be detected as cycle."""
        assert detect_cycle([1], {1: [1]}) == [1, 1]

    def test_unknown_successors_ignored(self):
        """Successors outside the key set do not count."""
        assert detect_cycle([1], {1: [2], 2: [1]}) is None


class TestTopologicalOrder:
    """Tests for Kahn ordering with residuals."""

    def test_dag_order(self):
        """Every edge goes forward in the order."""
        keys, successors = create_dag()
        order, residual = topological_order(keys, successors)
        assert residual == []
        position = {key: i for i, key in enumerate(order)}
        for src, targets in successors.items():
            for tgt in targets:
                assert position[src] < position[tgt]

    def test_key_order_seeds_queue(self):
        """Independent sources keep their key order."""
        order, _ = topological_order([3, 1, 2], {})
        assert order == [3, 1, 2]

    def test_cycle_residual(self):
        """Cycle members and their descendants are residual."""
        order, residual = topological_order(
            ["s", "a", "b", "t"], {"s": ["a"], "a": ["b"], "b": ["a", "t"]}
        )
        assert order == ["s"]
        assert residual == ["a", "b", "t"]


class TestLongestPathLayers:
    """Tests for longest-path layering."""

    def test_diamond(self):
        """Layers follow the longest path from a source."""
        keys, successors = create_dag()
        order, _ = topological_order(keys, successors)
        layers = longest_path_layers(order, predecessors_of(keys, successors))
        assert layers == {"a": 0, "b": 1, "c": 1, "d": 2, "e": 3}

    def test_shortcut_edge(self):
        """A shortcut edge does not pull its target forward."""
        layers = longest_path_layers([0, 1, 2], {1: [0], 2: [0, 1]})
        assert layers == {0: 0, 1: 1, 2: 2}

    def test_residual_defaults_to_zero(self):
        """A residual node without placed predecessors lands in layer 0."""
        layers = longest_path_layers(["a", "b"], {"a": ["b"], "b": ["a"]})
        assert layers == {"a": 0, "b": 1}

    def test_group_by_layer(self):
        """Keys are grouped by layer index, in mapping order."""
        assert group_by_layer({"a": 0, "b": 1, "c": 0}) == [["a", "c"], ["b"]]
        assert group_by_layer({}) == []


class TestCrossingCount:
    """Tests for layered crossing counts."""

    def test_no_crossings(self):
        """Parallel edges do not cross."""
        assert count_crossings([["a", "b"], ["c", "d"]], [("a", "c"), ("b", "d")]) == 0

    def test_one_crossing(self):
        """Swapped targets cross once."""
        assert count_crossings([["a", "b"], ["c", "d"]], [("a", "d"), ("b", "c")]) == 1

    def test_unknown_nodes_ignored(self):
        """Edges to unlayered nodes are skipped."""
        assert count_crossings([["a"], ["b"]], [("a", "z")]) == 0
