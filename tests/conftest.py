# tests/conftest.py
import pytest

from waygeo.domain.entities.geometry import Point
from waygeo.io.memory_store import InMemoryWayStore

N = 10


def _test_point(i: int) -> Point:
    # up the east side, then down the west side
    if i < 5:
        return Point.wgs84(5, 2 * i)
    return Point.wgs84(0, 10 - (i - 4) * 2)


@pytest.fixture
def pts() -> list[Point]:
    return [_test_point(i) for i in range(N)]


@pytest.fixture
def single_way_polygon(pts):
    # one way w0..w9 plus w10 repeating p0, looped back onto w0
    s = InMemoryWayStore()
    refs = [f"w{i}" for i in range(N + 1)]
    s.add_way("A", refs, points=pts + [pts[0]])
    s.connect("w10", "w0", {1})
    return s


@pytest.fixture
def two_way_polygon(pts):
    # junction vertices repeat the neighbouring way's end point
    s = InMemoryWayStore()
    s.add_way("A", ["w0", "w1", "w2", "w3", "w4", "w11"], points=pts[0:5] + [pts[5]])
    s.add_way("B", ["w5", "w6", "w7", "w8", "w9", "w10"], points=pts[5:10] + [pts[0]])
    s.connect("w10", "w0", {1})
    s.connect("w11", "w5", {1})
    return s


@pytest.fixture
def single_way_polyline(pts):
    s = InMemoryWayStore()
    s.add_way("A", [f"w{i}" for i in range(N)], points=pts, relation_ids={1})
    return s


@pytest.fixture
def two_way_polyline(pts):
    s = InMemoryWayStore()
    s.add_way("A", ["w0", "w1", "w2", "w3", "w4", "w10"], points=pts[0:5] + [pts[5]])
    s.add_point("w5", pts[5])  # stored but on no way
    s.add_way("B", ["w6", "w7", "w8", "w9"], points=pts[6:10])
    s.connect("w10", "w6", {1})
    return s
