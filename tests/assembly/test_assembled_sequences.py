# tests/assembly/test_assembled_sequences.py
import pytest

from waygeo.algo import wgs84
from waygeo.assembly.sequences import AssembledPolygon, AssembledPolyline, _AssembledSequence
from waygeo.assembly.walker import WayWalker
from waygeo.domain.entities.geometry import Point, Winding
from waygeo.domain.errors import MalformedTopologyError, RelationNotFoundError, TraversalError
from waygeo.io.memory_store import InMemoryWayStore


def polygon(store, relation_id=1, anchor=None):
    return AssembledPolygon(WayWalker.over(store, relation_id), anchor)


def polyline(store, relation_id=1, anchor=None):
    return AssembledPolyline(WayWalker.over(store, relation_id), anchor)


def drain(seq):
    out = []
    while not seq.fully_traversed():
        out.append(seq.get_next_point())
    return out


# ---------------- Polygons -----------------------------------


@pytest.mark.parametrize("fixture", ["single_way_polygon", "two_way_polygon"])
def test_polygon_points_close_the_ring(fixture, pts, request):
    poly = polygon(request.getfixturevalue(fixture))
    assert poly.get_points() == tuple(pts) + (pts[0],)
    assert poly.closed
    assert wgs84.winding(poly.get_points()) is Winding.COUNTERCLOCKWISE


@pytest.mark.parametrize("fixture", ["single_way_polygon", "two_way_polygon"])
def test_polygon_forward_traversal(fixture, pts, request):
    poly = polygon(request.getfixturevalue(fixture))
    poly.start_traversal(pts[0], pts[1])
    assert drain(poly) == pts + [pts[0]]


@pytest.mark.parametrize("fixture", ["single_way_polygon", "two_way_polygon"])
def test_polygon_backward_traversal(fixture, pts, request):
    poly = polygon(request.getfixturevalue(fixture))
    poly.start_traversal(pts[0], pts[9])
    expected = [pts[0]] + pts[:0:-1] + [pts[0]]
    assert drain(poly) == expected


def test_polygon_traversal_from_the_middle_wraps_around(two_way_polygon, pts):
    poly = polygon(two_way_polygon)
    got = list(poly.traverse(pts[3], pts[4]))
    assert got == pts[3:] + pts[:3] + [pts[3]]
    got = list(poly.traverse(pts[7], pts[6]))
    assert got == pts[7::-1] + pts[:7:-1] + [pts[7]]


def test_polygon_done_flips_right_after_last_point(two_way_polygon, pts):
    poly = polygon(two_way_polygon)
    poly.start_traversal(pts[0], pts[1])
    for _ in range(len(pts)):
        poly.get_next_point()
        assert not poly.fully_traversed()
    assert poly.get_next_point() == pts[0]
    assert poly.fully_traversed()
    with pytest.raises(TraversalError):
        poly.get_next_point()


def test_polygon_independent_of_anchor(two_way_polygon, pts):
    default = polygon(two_way_polygon).get_points()
    mid = polygon(two_way_polygon, anchor="w7").get_points()
    assert mid[0] == mid[-1] == pts[7]
    assert len(mid) == len(default)
    assert set(mid) == set(default)
    # same cyclic order
    assert list(mid[:-1]) == pts[7:] + pts[:7]


def test_polygon_cursors_are_independent(two_way_polygon, pts):
    poly = polygon(two_way_polygon)
    fwd = poly.start_traversal(pts[0], pts[1])
    bwd = poly.start_traversal(pts[0], pts[9])
    p1, fwd = poly.next_point(fwd)
    p2, bwd = poly.next_point(bwd)
    p3, fwd = poly.next_point(fwd)
    p4, bwd = poly.next_point(bwd)
    assert (p1, p3) == (pts[0], pts[1])
    assert (p2, p4) == (pts[0], pts[9])


def test_polygon_from_a_single_cyclic_way(pts):
    s = InMemoryWayStore()
    s.add_way("ring", [f"v{i}" for i in range(10)], points=pts, cyclic=True, relation_ids={"r"})
    poly = polygon(s, relation_id="r")
    assert poly.get_points() == tuple(pts) + (pts[0],)
    assert list(poly.traverse(pts[2], pts[1]))[:3] == [pts[2], pts[1], pts[0]]


def test_polygon_rejects_non_adjacent_start(two_way_polygon, pts):
    poly = polygon(two_way_polygon)
    with pytest.raises(TraversalError):
        poly.start_traversal(pts[0], pts[5])
    with pytest.raises(TraversalError):
        poly.start_traversal(Point.wgs84(40, 40), pts[0])


def test_open_ring_is_malformed(pts):
    s = InMemoryWayStore()
    s.add_way("A", ["a0", "a1", "a2", "a3", "a4"], points=pts[0:5])
    s.add_way("B", ["b0", "b1", "b2", "b3", "b4"], points=pts[5:10])
    s.connect("a4", "b0", {1})  # nothing leads back to A
    poly = polygon(s, anchor="a0")
    with pytest.raises(MalformedTopologyError):
        poly.get_points()
    poly.start_traversal(pts[0], pts[1])
    with pytest.raises(MalformedTopologyError):
        drain(poly)


def test_unknown_relation(two_way_polygon):
    with pytest.raises(RelationNotFoundError):
        polygon(two_way_polygon, relation_id=99)


def test_get_points_is_lazy_and_repeatable(two_way_polygon, pts):
    poly = polygon(two_way_polygon)
    it = poly.iter_points()
    assert next(it) == pts[0]
    assert next(it) == pts[1]
    assert poly.get_points() == poly.get_points()
    assert list(poly) == list(poly.get_points())


# ---------------- Polylines ----------------------------------


@pytest.mark.parametrize("fixture", ["single_way_polyline", "two_way_polyline"])
def test_polyline_points(fixture, pts, request):
    line = polyline(request.getfixturevalue(fixture))
    assert line.get_points() == tuple(pts)
    assert not line.closed


@pytest.mark.parametrize("fixture", ["single_way_polyline", "two_way_polyline"])
def test_polyline_traversals_stop_at_the_end(fixture, pts, request):
    line = polyline(request.getfixturevalue(fixture))
    assert list(line.traverse(pts[0], pts[1])) == pts
    assert list(line.traverse(pts[9], pts[8])) == pts[::-1]
    assert list(line.traverse(pts[5], pts[6])) == pts[5:]
    assert list(line.traverse(pts[5], pts[4])) == pts[5::-1]


@pytest.mark.parametrize("fixture", ["single_way_polyline", "two_way_polyline"])
def test_polyline_get_points_from_any_anchor(fixture, pts, request):
    store = request.getfixturevalue(fixture)
    anchor = "w7"
    assert polyline(store, anchor=anchor).get_points() == tuple(pts)


def test_polyline_end_is_not_a_start(two_way_polyline, pts):
    line = polyline(two_way_polyline)
    with pytest.raises(TraversalError):
        line.start_traversal(pts[9], pts[0])


def test_polyline_single_step(two_way_polyline, pts):
    line = polyline(two_way_polyline)
    line.start_traversal(pts[1], pts[0])
    assert line.get_next_point() == pts[1]
    assert line.get_next_point() == pts[0]
    assert line.fully_traversed()


# ---------------- Chains through their own start ------------


LASSO = [
    Point.wgs84(0, 0),
    Point.wgs84(1, 0),
    Point.wgs84(1, 1),
    Point.wgs84(0, 0),  # back through the start
    Point.wgs84(-1, -1),
]


def test_lasso_polyline_keeps_every_point():
    s = InMemoryWayStore()
    s.add_way("A", [f"a{i}" for i in range(5)], points=LASSO, relation_ids={1})
    line = polyline(s)
    assert line.get_points() == tuple(LASSO)
    assert list(line.traverse(LASSO[2], LASSO[3])) == LASSO[2:]
    assert list(line.traverse(LASSO[4], LASSO[3])) == LASSO[::-1]


def test_lasso_polyline_across_two_ways():
    s = InMemoryWayStore()
    s.add_way("A", ["a0", "a1", "a2"], points=LASSO[:3], relation_ids={1})
    s.add_way("B", ["b0", "b1", "b2"], points=LASSO[2:])
    s.connect("a2", "b0", {1})
    assert polyline(s).get_points() == tuple(LASSO)
    assert polyline(s, anchor="b2").get_points() == tuple(LASSO)


def test_polyline_looping_onto_itself_is_malformed(pts):
    s = InMemoryWayStore()
    s.add_way("A", ["a0", "a1", "a2"], points=pts[:3])
    s.connect("a2", "a0", {1})
    with pytest.raises(MalformedTopologyError):
        polyline(s).get_points()


def test_assembled_sequence_needs_its_walk_methods(two_way_polygon):
    class Partial(_AssembledSequence):
        def iter_points(self):
            yield from ()

    with pytest.raises(TypeError):
        Partial(WayWalker.over(two_way_polygon, 1))
