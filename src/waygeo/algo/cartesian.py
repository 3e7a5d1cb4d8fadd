# waygeo/algo/cartesian.py
import math
from collections.abc import Sequence

import numpy as np

from waygeo.algo.wgs84 import angle_delta
from waygeo.domain.constants import COURSE_DELTA_TOLERANCE_DEG, PLANAR_EPS
from waygeo.domain.entities.geometry import CRS, LineSegment, Point, Winding, ring_vertices
from waygeo.domain.errors import DegenerateGeometryError


def distance(a: Point, b: Point) -> float:
    return math.dist(a.coordinate, b.coordinate)


def heading(a: Point, b: Point) -> float:
    """Direction of a->b in degrees, counter-clockwise from +x, in (-180, 180]."""
    if a == b:
        raise DegenerateGeometryError(f"heading undefined for coincident points {a!r}")
    return math.degrees(math.atan2(b.y - a.y, b.x - a.x))


def course_delta(points: Sequence[Point]) -> float:
    # same convention as wgs84.course_delta: counter-clockwise sums to +360
    ring = ring_vertices(points)
    n = len(ring)
    headings = [heading(ring[i], ring[(i + 1) % n]) for i in range(n)]
    return sum(angle_delta(headings[i - 1], headings[i]) for i in range(n))


def winding(points: Sequence[Point]) -> Winding:
    d = course_delta(points)
    if abs(d - 360.0) <= COURSE_DELTA_TOLERANCE_DEG:
        return Winding.COUNTERCLOCKWISE
    if abs(d + 360.0) <= COURSE_DELTA_TOLERANCE_DEG:
        return Winding.CLOCKWISE
    return Winding.DEGENERATE


def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area, positive for counter-clockwise rings."""
    ring = ring_vertices(points)
    xy = np.array([(p.x, p.y) for p in ring], dtype=np.float64)
    x, y = xy[:, 0], xy[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def mean(*points: Point) -> Point:
    if not points:
        raise ValueError("mean of no points")
    dims = {len(p.coordinate) for p in points}
    if len(dims) != 1:
        raise ValueError(f"mixed dimensions {sorted(dims)}")
    c = np.array([p.coordinate for p in points], dtype=np.float64).mean(axis=0)
    return Point(tuple(float(v) for v in c), CRS.CARTESIAN)


def intersect(a: LineSegment, b: LineSegment) -> Point | None:
    p, r = a.start, (a.end.x - a.start.x, a.end.y - a.start.y)
    q, s = b.start, (b.end.x - b.start.x, b.end.y - b.start.y)
    if (r[0] == 0.0 and r[1] == 0.0) or (s[0] == 0.0 and s[1] == 0.0):
        raise DegenerateGeometryError(f"zero-length segment in {a!r} / {b!r}")
    denom = r[0] * s[1] - r[1] * s[0]
    if abs(denom) < PLANAR_EPS:
        return None  # parallel or collinear
    qp = (q.x - p.x, q.y - p.y)
    t = (qp[0] * s[1] - qp[1] * s[0]) / denom
    u = (qp[0] * r[1] - qp[1] * r[0]) / denom
    if not (-PLANAR_EPS <= t <= 1.0 + PLANAR_EPS and -PLANAR_EPS <= u <= 1.0 + PLANAR_EPS):
        return None
    return Point.cartesian(p.x + t * r[0], p.y + t * r[1])
