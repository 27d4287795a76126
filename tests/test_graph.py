"""Tests for the document model and the workflow adapter."""

import math

from node_organizer import Element, ElementKind, Graph, Group, Link


def create_workflow():
    """Workflow dict in the editor's serialized shape."""
    return {
        "nodes": [
            {"id": 1, "type": "CheckpointLoader", "pos": [10, 20], "size": [300, 120]},
            {"id": 2, "type": "Reroute", "pos": {"0": 400, "1": 50}, "size": {"0": 75, "1": 26}},
            {
                "id": 3,
                "type": "KSampler",
                "pos": [600, 40],
                "size": [250, 260],
                "flags": {"pinned": True},
                "inputs": [{"name": "model", "type": "MODEL", "link": 2}],
            },
            {"id": 4, "type": "Note", "locked": True},
        ],
        "links": [
            [1, 1, 0, 2, 0, "MODEL"],
            {"id": 2, "origin_id": 2, "origin_slot": 0, "target_id": 3, "target_slot": 0},
        ],
        "groups": [
            {"title": "Loaders [VERTICAL]", "bounding": [0, 0, 500, 400]},
            {"id": 9, "title": "Unbounded"},
        ],
        "inputNode": {"id": -10, "bounding": [-200, 0, 120, 60]},
    }


class TestElement:
    """Tests for Element construction."""

    def test_defaults(self):
        """Missing geometry falls back to the origin and 200x100."""
        e = Element(1)
        assert (e.x, e.y, e.width, e.height) == (0.0, 0.0, 200.0, 100.0)
        assert e.kind is ElementKind.NODE

    def test_non_finite_sizes_normalised(self):
        """None and NaN are replaced by defaults."""
        e = Element(1, x=None, width=None, height=float("nan"))  # type: ignore[arg-type]
        assert e.x == 0.0
        assert e.width == 200.0
        assert e.height == 100.0

    def test_non_positive_sizes_normalised(self):
        """Zero and negative sizes are replaced by defaults."""
        e = Element(1, width=0, height=-5)
        assert (e.width, e.height) == (200.0, 100.0)

    def test_reroute_kind(self):
        """Reroute type names resolve to REROUTE."""
        assert Element(1, type="Reroute").is_reroute
        assert Element(2, type="Reroute (rgthree)").is_reroute
        assert not Element(3, type="RerouteLike").is_reroute

    def test_fixed(self):
        """Pinned or locked elements are fixed."""
        assert Element(1, pinned=True).is_fixed
        assert Element(2, locked=True).is_fixed
        assert not Element(3).is_fixed

    def test_edges(self):
        """right and bottom follow position and size."""
        e = Element(1, x=10, y=20, width=30, height=40)
        assert (e.right, e.bottom) == (40, 60)


class TestGroup:
    """Tests for Group bounds handling."""

    def test_has_bounds(self):
        """Groups need all four finite bounds."""
        assert Group(1, x=0, y=0, width=10, height=10).has_bounds
        assert not Group(2, x=0, y=0, width=10).has_bounds
        assert not Group(3, x=0, y=0, width=math.inf, height=10).has_bounds

    def test_translate(self):
        """translate() shifts the box without resizing it."""
        g = Group(1, x=0, y=0, width=10, height=10)
        g.translate(5, -5)
        assert (g.x, g.y, g.width, g.height) == (5, -5, 10, 10)


class TestGraph:
    """Tests for the Graph container."""

    def test_connect_binds_slots(self):
        """connect() creates a link and binds both slots."""
        graph = Graph([Element(1), Element(2)])
        link = graph.connect(1, 2, origin_slot=1, target_slot=0)
        assert link.id == 1
        assert graph.elements[0].outputs[1].links == [1]
        assert graph.elements[1].inputs[0].link == 1
        assert graph.connect(2, 1).id == 2

    def test_links_from_mapping(self):
        """Links may be given keyed by id."""
        graph = Graph([Element(1), Element(2)], {5: Link(5, 1, 0, 2, 0)})
        assert list(graph.links) == [5]

    def test_boundary_records(self):
        """Input/output records become boundary elements."""
        graph = Graph([Element(1)], input_node=Element(-1), output_node=Element(-2))
        assert [e.id for e in graph.all_elements()] == [1, -1, -2]
        assert graph.element_map()[-1].is_boundary
        assert len(graph) == 3

    def test_dirty_callback(self):
        """set_dirty_canvas() calls the hook."""
        calls = []
        graph = Graph(on_dirty=lambda: calls.append(True))
        graph.set_dirty_canvas()
        assert calls == [True]

    def test_get_group(self):
        """Groups are looked up by id."""
        graph = Graph(groups=[Group(4, "A")])
        assert graph.get_group(4).title == "A"
        assert graph.get_group(5) is None


class TestFromWorkflow:
    """Tests for the workflow dict adapter."""

    def test_nodes(self):
        """Positions and sizes are read from lists and index mappings."""
        graph = Graph.from_workflow(create_workflow())
        e1 = graph.get_element(1)
        assert (e1.x, e1.y, e1.width, e1.height) == (10, 20, 300, 120)
        e2 = graph.get_element(2)
        assert (e2.x, e2.y, e2.width, e2.height) == (400, 50, 75, 26)
        assert e2.is_reroute

    def test_flags(self):
        """Pinned flags and locked markers are honoured."""
        graph = Graph.from_workflow(create_workflow())
        assert graph.get_element(3).pinned
        assert graph.get_element(4).locked
        assert graph.get_element(4).width == 200.0

    def test_links(self):
        """Array and dict links are both accepted."""
        graph = Graph.from_workflow(create_workflow())
        assert graph.links[1].type == "MODEL"
        assert (graph.links[1].origin_id, graph.links[1].target_id) == (1, 2)
        assert (graph.links[2].origin_id, graph.links[2].target_id) == (2, 3)

    def test_groups(self):
        """Group bounds come from the bounding array; ids default to position."""
        graph = Graph.from_workflow(create_workflow())
        first, second = graph.groups
        assert first.id == 1
        assert (first.x, first.y, first.width, first.height) == (0, 0, 500, 400)
        assert second.id == 9
        assert not second.has_bounds

    def test_boundary(self):
        """inputNode becomes a boundary element."""
        graph = Graph.from_workflow(create_workflow())
        boundary = graph.input_node
        assert boundary is not None
        assert boundary.is_boundary
        assert (boundary.x, boundary.width) == (-200, 120)

    def test_empty_workflow(self):
        """An empty dict gives an empty graph."""
        graph = Graph.from_workflow({})
        assert len(graph) == 0
        assert graph.links == {}

    def test_malformed_geometry(self):
        """Strings and other non-numbers in geometry read as missing."""
        graph = Graph.from_workflow(
            {
                "nodes": [
                    {"id": 1, "pos": "12", "size": "ab"},
                    {"id": 2, "pos": b"34", "size": [None, "80"]},
                    {"id": 3, "pos": [True, 5], "size": [120]},
                ],
                "groups": [{"title": "G", "bounding": "0123"}],
            }
        )
        e1, e2, e3 = (graph.get_element(i) for i in (1, 2, 3))
        assert (e1.x, e1.y, e1.width, e1.height) == (0, 0, 200, 100)
        assert (e2.x, e2.y, e2.width, e2.height) == (0, 0, 200, 100)
        assert (e3.x, e3.y, e3.width, e3.height) == (0, 5, 200, 100)
        assert not graph.groups[0].has_bounds
