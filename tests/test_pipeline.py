"""Tests for the individual stages of the layered pipeline."""

from node_organizer import Element, EventType, Graph, GraphLayout, Group, LayoutConfig, Link
from node_organizer.layered import (
    assign_layer_x,
    assign_layers,
    assign_node_y,
    build_layout_session,
    collect_entities,
    compact_vertically,
    disconnected_zone_width,
    minimize_crossings,
    place_disconnected,
    recalculate_layer_x,
    resolve_overlaps,
)
from node_organizer.layered.overlap import CONNECTED_PRIORITY, DISCONNECTED_PRIORITY, GROUP_PRIORITY


def create_session(elements, links=(), groups=(), **config):
    graph = Graph(elements, list(links), list(groups))
    return build_layout_session(graph, LayoutConfig(**config))


def create_crossed():
    """Two sources linked crosswise to two sinks: 1 -> 4, 2 -> 3."""
    elements = [Element(i) for i in range(1, 5)]
    return create_session(elements, [Link(1, 1, 0, 4, 0), Link(2, 2, 0, 3, 0)])


def layer_keys(session):
    return [[node.key[1] for node in layer.nodes] for layer in session.layers]


# =============================================================================
# Session construction
# =============================================================================


class TestBuildSession:
    """Tests for the condensed layering graph."""

    def test_group_representative(self):
        """Grouped elements are represented by their top-level group."""
        group = Group(5, "G", x=0, y=0, width=1000, height=1000)
        elements = [Element(1, x=10, y=100), Element(2, x=300, y=100), Element(3, x=2000, y=0)]
        links = [Link(1, 1, 0, 2, 0), Link(2, 2, 0, 3, 0)]
        session = create_session(elements, links, [group])
        assert set(session.nodes) == {("group", 0), ("element", 3)}
        assert session.nodes[("group", 0)].successors == [("element", 3)]
        assert (session.nodes[("group", 0)].width, session.nodes[("group", 0)].height) == (560, 210)

    def test_disconnected_not_layered(self):
        """Unlinked elements get no layout node."""
        session = create_session([Element(1), Element(2), Element(3)], [Link(1, 1, 0, 2, 0)])
        assert ("element", 3) not in session.nodes
        assert [e.id for e in session.standalone_disconnected()] == [3]

    def test_duplicate_edges_merged(self):
        """Parallel links become one edge."""
        session = create_session(
            [Element(1), Element(2)], [Link(1, 1, 0, 2, 0), Link(2, 1, 1, 2, 1)]
        )
        assert session.nodes[("element", 1)].successors == [("element", 2)]


# =============================================================================
# Layering and ordering
# =============================================================================


class TestLayering:
    """Tests for layer assignment and ordering."""

    def test_layers(self):
        """Sources are in layer 0, sinks after their deepest predecessor."""
        session = create_session(
            [Element(1), Element(2), Element(3)],
            [Link(1, 1, 0, 2, 0), Link(2, 2, 0, 3, 0), Link(3, 1, 0, 3, 0)],
        )
        assign_layers(session)
        assert layer_keys(session) == [[1], [2], [3]]

    def test_minimum_layer_width(self):
        """Narrow layers keep the minimum width."""
        session = create_session(
            [Element(1, width=40), Element(2, width=60)], [Link(1, 1, 0, 2, 0)]
        )
        assign_layers(session)
        assert [layer.max_width for layer in session.layers] == [100, 100]

    def test_ties_broken_by_key(self):
        """Nodes with equal barycenters are ordered by key, whatever their height."""
        session = create_session(
            [Element(1), Element(2, height=50), Element(3, height=300)],
            [Link(1, 1, 0, 2, 0), Link(2, 1, 0, 3, 0)],
        )
        assign_layers(session)
        minimize_crossings(session)
        assert layer_keys(session)[1] == [2, 3]

    def test_crossing_removed(self):
        """The barycenter sweep untangles a crossed pair."""
        session = create_crossed()
        assign_layers(session)
        iterations = minimize_crossings(session)
        assert layer_keys(session) == [[1, 2], [4, 3]]
        assert [node.order for node in session.layers[1].nodes] == [0, 1]
        assert 1 <= iterations <= session.config.max_iterations

    def test_single_layer_no_iterations(self):
        """One layer needs no sweeps."""
        session = create_session([Element(1), Element(2)], [Link(1, 1, 0, 1, 0)])
        assign_layers(session)
        assert minimize_crossings(session) == 0


# =============================================================================
# Positioning
# =============================================================================


class TestPositioning:
    """Tests for coordinate assignment."""

    def test_zone_width(self):
        """The zone is the widest standalone disconnected element plus the gap."""
        session = create_session([Element(1), Element(2, width=320)])
        assert disconnected_zone_width(session) == 470

    def test_no_zone(self):
        """Without disconnected elements there is no zone."""
        session = create_session([Element(1), Element(2)], [Link(1, 1, 0, 2, 0)])
        assert disconnected_zone_width(session) == 0

    def test_zone_holds_empty_groups(self):
        """Empty top-level groups widen the zone and stack below its elements."""
        empty = Group(9, x=3000, y=3000, width=400, height=300)
        session = create_session([Element(1, x=900), Element(2, width=320)], groups=[empty])
        assert disconnected_zone_width(session) == 550
        assert place_disconnected(session) == 3
        assert [(e.x, e.y) for e in session.graph.elements] == [(100, 100), (100, 240)]
        assert (empty.x, empty.y, empty.width, empty.height) == (100, 380, 400, 300)

    def test_layer_x(self):
        """Layers are spaced by their widths plus the gap."""
        session = create_session(
            [Element(1, width=300), Element(2)], [Link(1, 1, 0, 2, 0)], horizontal_gap=50
        )
        assign_layers(session)
        assign_layer_x(session)
        assert [layer.x for layer in session.layers] == [100, 450]

    def test_packing_widens_layer(self):
        """Fixed columns can widen a layer and push later layers right."""
        elements = [Element(i) for i in range(1, 5)]
        links = [Link(1, 1, 0, 2, 0), Link(2, 1, 0, 3, 0), Link(3, 2, 0, 4, 0)]
        session = create_session(elements, links, max_columns=2)
        assign_layers(session)
        minimize_crossings(session)
        assign_layer_x(session)
        assign_node_y(session)
        assert session.layers[1].max_width == 500
        recalculate_layer_x(session)
        assert [layer.x for layer in session.layers] == [100, 400, 1000]
        assert (session.nodes[("element", 4)].x, session.nodes[("element", 4)].y) == (1000, 100)

    def test_compaction_centres_layers(self):
        """Short layers are centred against the tallest one."""
        session = create_crossed()
        session.config = session.config.replace(max_columns=1)
        assign_layers(session)
        minimize_crossings(session)
        assign_layer_x(session)
        assign_node_y(session)
        session.layers[0].nodes = session.layers[0].nodes[:1]
        compact_vertically(session)
        assert session.layers[0].nodes[0].y == 170


# =============================================================================
# Overlap resolution
# =============================================================================


class TestOverlap:
    """Tests for the overlap resolver."""

    def test_priorities(self):
        """Groups outrank connected elements, which outrank disconnected ones."""
        group = Group(1, x=0, y=0, width=500, height=500)
        elements = [Element(1, x=10, y=100), Element(2, x=900), Element(3, x=1500)]
        session = create_session(elements, [Link(1, 1, 0, 2, 0)], [group])
        priorities = {e.key: e.priority for e in collect_entities(session)}
        assert priorities == {
            ("group", 0): GROUP_PRIORITY,
            ("element", 2): CONNECTED_PRIORITY,
            ("element", 3): DISCONNECTED_PRIORITY,
        }

    def test_lower_priority_moves(self):
        """A disconnected element is pushed past the connected ones."""
        elements = [Element(1, x=0), Element(2, x=300), Element(3, x=50, y=20)]
        session = create_session(elements, [Link(1, 1, 0, 2, 0)])
        moved = resolve_overlaps(session)
        assert moved == 1
        assert [(e.x, e.y) for e in elements] == [(0, 0), (300, 0), (600, 20)]

    def test_fixed_elements_stay(self):
        """The movable party moves even when it has the higher priority."""
        elements = [Element(1, x=0), Element(2, x=50, pinned=True)]
        session = create_session(elements, [Link(1, 1, 0, 2, 0)])
        resolve_overlaps(session)
        assert elements[1].x == 50
        assert elements[0].x == 350

    def test_group_moves_with_members(self):
        """A displaced group takes its members along."""
        group = Group(1, x=100, y=0, width=300, height=300)
        elements = [Element(1, pinned=True), Element(2, x=120, y=100), Element(3, x=5000)]
        session = create_session(elements, [Link(1, 3, 0, 2, 0)], [group])
        resolve_overlaps(session)
        assert (group.x, group.y) == (300, 0)
        assert (elements[1].x, elements[1].y) == (320, 100)

    def test_no_overlap_no_moves(self):
        """Separated entities are left alone."""
        session = create_session([Element(1, x=0), Element(2, x=300)])
        assert resolve_overlaps(session) == 0

    def test_group_with_fixed_member_stays(self):
        """Groups holding a pinned element are obstacles only."""
        group = Group(1, x=100, y=0, width=300, height=300)
        elements = [
            Element(1, pinned=True),
            Element(2, x=120, y=100, pinned=True),
            Element(3, x=5000),
        ]
        session = create_session(elements, [Link(1, 3, 0, 2, 0)], [group])
        movable = {e.key: e.movable for e in collect_entities(session)}
        assert movable[("group", 0)] is False
        assert resolve_overlaps(session) == 0
        assert (group.x, group.y) == (100, 0)

    def test_collapsed_reroutes_left_out(self):
        """Collapsed reroutes are neither obstacles nor movers."""
        reroute = Element(3, type="Reroute", x=50, y=20, width=75, height=26)
        elements = [Element(1, x=0), Element(2, x=300), reroute]
        session = create_session(elements, [Link(1, 1, 0, 2, 0), Link(2, 2, 0, 3, 0)])
        assert ("element", 3) not in {e.key for e in collect_entities(session)}
        assert resolve_overlaps(session) == 0
        assert (reroute.x, reroute.y) == (50, 20)


# =============================================================================
# Events
# =============================================================================


class TestEvents:
    """Tests for layout lifecycle events."""

    def test_phase_ticks(self):
        """Each pipeline phase fires one tick between start and end."""
        events = []
        graph = Graph([Element(1), Element(2)], [Link(1, 1, 0, 2, 0)])
        GraphLayout(
            graph,
            on_start=lambda e: events.append(("start", e["type"])),
            on_tick=lambda e: events.append(("tick", e["phase"])),
            on_end=lambda e: events.append(("end", e["type"])),
        ).run()
        assert events == [
            ("start", EventType.start),
            ("tick", "build"),
            ("tick", "layers"),
            ("tick", "order"),
            ("tick", "position"),
            ("tick", "compact"),
            ("tick", "apply"),
            ("tick", "resize"),
            ("tick", "overlap"),
            ("tick", "reroutes"),
            ("end", EventType.end),
        ]

    def test_elapsed_time_reported(self):
        """Ticks carry a non-decreasing elapsed time."""
        elapsed = []
        layout = GraphLayout(Graph([Element(1), Element(2)], [Link(1, 1, 0, 2, 0)]))
        layout.on("tick", lambda e: elapsed.append(e["elapsed_ms"]))
        layout.run()
        assert elapsed == sorted(elapsed)
        assert layout.result.execution_ms >= elapsed[-1]

    def test_empty_graph_fires_start_and_end(self):
        """No phases run for an empty graph."""
        events = []
        layout = GraphLayout(Graph())
        layout.on("start", lambda e: events.append("start"))
        layout.on("tick", lambda e: events.append("tick"))
        layout.on("end", lambda e: events.append("end"))
        layout.run()
        assert events == ["start", "end"]
