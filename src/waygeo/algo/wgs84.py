"""Great-circle math on a spherical earth.

Points are WGS84 (lon, lat) in degrees and are embedded on the unit sphere
before any computation. Bearings are degrees clockwise from north in
[0, 360). Distances are meters on a sphere of radius EARTH_RADIUS_M.

Course delta sign convention: a ring walked counter-clockwise in the
lon/lat plane (left turns) sums to +360, clockwise to -360. Rings that
enclose a pole, or cross themselves, sum to roughly 0.
"""

import math
from collections.abc import Sequence

import numpy as np

from waygeo.domain.constants import (
    ANGULAR_TOLERANCE,
    COURSE_DELTA_TOLERANCE_DEG,
    EARTH_RADIUS_M,
    NORTH_POLE,
    VECTOR_DEGENERACY_EPS,
)
from waygeo.domain.entities.geometry import (
    CRS,
    LineSegment,
    Point,
    Vector,
    Winding,
    ring_vertices,
)
from waygeo.domain.errors import DegenerateGeometryError


def _wrap360(deg: float) -> float:
    d = deg % 360.0
    return 0.0 if d >= 360.0 else d  # -1e-17 % 360 rounds up to 360.0


def embed(points: Sequence[Point]) -> np.ndarray:
    """Unit-sphere embedding of many points at once, shape (n, 3)."""
    if any(p.crs is not CRS.WGS84 for p in points):
        raise ValueError("only WGS84 points embed on the sphere")
    lonlat = np.radians(np.array([(p.lon, p.lat) for p in points], dtype=np.float64))
    lon, lat = lonlat[:, 0], lonlat[:, 1]
    return np.column_stack((np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)))


# ------------------------- Bearings -------------------------------


def angle_to(c1: Vector, p: Vector, c2: Vector) -> float:
    """Signed angle in radians between the planes with normals c1 and c2, seen from p."""
    n = c1.cross(c2)
    side = n.dot(p)
    sign = 0.0 if side == 0.0 else math.copysign(1.0, side)
    return math.atan2(sign * n.magnitude(), c1.dot(c2))


def initial_bearing(start: Point, end: Point) -> float:
    a, b = Vector.from_point(start), Vector.from_point(end)
    c1 = a.cross(b)  # great circle through start and end
    c2 = a.cross(NORTH_POLE)  # meridian through start
    if c1.magnitude() < VECTOR_DEGENERACY_EPS:
        raise DegenerateGeometryError(f"no unique great circle through {start!r} and {end!r}")
    if c2.magnitude() < VECTOR_DEGENERACY_EPS:
        raise DegenerateGeometryError(f"bearing is undefined at the pole {start!r}")
    return _wrap360(math.degrees(angle_to(c1, a, c2)))


def final_bearing(start: Point, end: Point) -> float:
    return (initial_bearing(end, start) + 180.0) % 360.0


def angle_delta(a: float, b: float) -> float:
    """b - a in degrees, normalized into (-180, 180]."""
    d = (b - a) % 360.0
    if d > 180.0:
        d -= 360.0
    return d


def course_delta(points: Sequence[Point]) -> float:
    """
    Total signed heading change around a ring, in degrees.
    Accepts the ring open or closed; consecutive repeats are ignored.
    Per edge the bearing drift (final vs initial) is added, per vertex the
    turn from the incoming final bearing to the outgoing initial bearing.
    """
    ring = ring_vertices(points)
    n = len(ring)
    total = 0.0
    previous: float | None = None
    for i in range(n):
        a, b = ring[i], ring[(i + 1) % n]
        initial = initial_bearing(a, b)
        final = final_bearing(a, b)
        if previous is not None:
            total += angle_delta(initial, previous)
        total += angle_delta(final, initial)
        previous = final
    return total + angle_delta(initial_bearing(ring[0], ring[1]), previous)


def winding(points: Sequence[Point]) -> Winding:
    d = course_delta(points)
    if abs(d - 360.0) <= COURSE_DELTA_TOLERANCE_DEG:
        return Winding.COUNTERCLOCKWISE
    if abs(d + 360.0) <= COURSE_DELTA_TOLERANCE_DEG:
        return Winding.CLOCKWISE
    return Winding.DEGENERATE


# ------------------------- Centroid -------------------------------


def mean(*points: Point) -> Point:
    if not points:
        raise ValueError("mean of no points")
    total = embed(points).sum(axis=0)
    if np.linalg.norm(total) / len(points) < VECTOR_DEGENERACY_EPS:
        raise DegenerateGeometryError(f"centroid undefined, embeddings cancel out: {points!r}")
    return Vector.from_array(total).to_point()


# ------------------------- Intersections --------------------------


def _angle(a: Vector, b: Vector) -> float:
    c = a.dot(b) / (a.magnitude() * b.magnitude())
    return math.acos(max(-1.0, min(1.0, c)))


def in_arc(i: Vector, s: Vector, e: Vector) -> bool:
    return abs(_angle(s, i) + _angle(i, e) - _angle(s, e)) <= ANGULAR_TOLERANCE


def _great_circle(a: Vector, b: Vector) -> Vector:
    c = a.cross(b)
    if c.magnitude() < VECTOR_DEGENERACY_EPS:
        raise DegenerateGeometryError(f"arc {a!r} -> {b!r} has no unique great circle")
    return c.normalize()


def intersect_vectors(u1: Vector, u2: Vector, v1: Vector, v2: Vector) -> Vector | None:
    gc1 = _great_circle(u1, u2)
    gc2 = _great_circle(v1, v2)
    if gc1.cross(gc2).magnitude() < VECTOR_DEGENERACY_EPS:
        return None  # same great circle, no single crossing
    i1 = gc1.cross(gc2).normalize()
    i2 = gc2.cross(gc1).normalize()
    if in_arc(i1, u1, u2) and in_arc(i1, v1, v2):
        return i1
    if in_arc(i2, u1, u2) and in_arc(i2, v1, v2):
        return i2
    return None


def intersect(a: LineSegment, b: LineSegment) -> Point | None:
    i = intersect_vectors(
        Vector.from_point(a.start),
        Vector.from_point(a.end),
        Vector.from_point(b.start),
        Vector.from_point(b.end),
    )
    return i.to_point() if i is not None else None


# ------------------------- Distance -------------------------------


def distance(u: Vector, v: Vector) -> float:
    """Great-circle distance in meters between two unit-sphere vectors."""
    return EARTH_RADIUS_M * math.atan2(u.cross(v).magnitude(), u.dot(v))


def distance_between(a: Point, b: Point) -> float:
    return distance(Vector.from_point(a), Vector.from_point(b))
