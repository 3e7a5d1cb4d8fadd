from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from waygeo.domain.errors import DegenerateGeometryError


class CRS(Enum):
    CARTESIAN = "cartesian"  # planar, unit agnostic
    WGS84 = "wgs-84"  # degrees lon/lat on a spherical earth


class Winding(Enum):
    COUNTERCLOCKWISE = "ccw"
    CLOCKWISE = "cw"
    DEGENERATE = "degenerate"


@dataclass(frozen=True)
class Point:
    coordinate: tuple[float, ...]
    crs: CRS = CRS.CARTESIAN

    def __post_init__(self):
        if len(self.coordinate) not in (2, 3):
            raise ValueError(f"point needs 2 or 3 coordinates, got {len(self.coordinate)}")
        object.__setattr__(self, "coordinate", tuple(float(c) for c in self.coordinate))

    @classmethod
    def of(cls, crs: CRS, *coordinate: float) -> Point:
        return cls(tuple(coordinate), crs)

    @classmethod
    def cartesian(cls, *coordinate: float) -> Point:
        return cls(tuple(coordinate), CRS.CARTESIAN)

    @classmethod
    def wgs84(cls, lon: float, lat: float) -> Point:
        return cls((lon, lat), CRS.WGS84)

    @property
    def x(self) -> float:
        return self.coordinate[0]

    @property
    def y(self) -> float:
        return self.coordinate[1]

    # WGS84 naming
    lon = x
    lat = y

    def __repr__(self) -> str:
        return f"Point({', '.join(f'{c:g}' for c in self.coordinate)}, {self.crs.name})"


@dataclass(frozen=True)
class Vector:
    x: float
    y: float
    z: float

    @classmethod
    def from_point(cls, p: Point) -> Vector:
        """Unit-sphere embedding of a WGS84 point."""
        if p.crs is not CRS.WGS84:
            raise ValueError(f"only WGS84 points embed on the sphere, got {p.crs.name}")
        lon, lat = math.radians(p.lon), math.radians(p.lat)
        return cls(math.cos(lat) * math.cos(lon), math.cos(lat) * math.sin(lon), math.sin(lat))

    @classmethod
    def from_array(cls, a) -> Vector:
        x, y, z = (float(c) for c in a)
        return cls(x, y, z)

    def to_point(self) -> Point:
        n = self.normalize()
        lat = math.atan2(n.z, math.hypot(n.x, n.y))
        lon = math.atan2(n.y, n.x)
        return Point.wgs84(math.degrees(lon), math.degrees(lat))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def add(self, o: Vector) -> Vector:
        return Vector(self.x + o.x, self.y + o.y, self.z + o.z)

    def subtract(self, o: Vector) -> Vector:
        return Vector(self.x - o.x, self.y - o.y, self.z - o.z)

    def scale(self, k: float) -> Vector:
        return Vector(self.x * k, self.y * k, self.z * k)

    def dot(self, o: Vector) -> float:
        return self.x * o.x + self.y * o.y + self.z * o.z

    def cross(self, o: Vector) -> Vector:
        return Vector(
            self.y * o.z - self.z * o.y,
            self.z * o.x - self.x * o.z,
            self.x * o.y - self.y * o.x,
        )

    def magnitude(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vector:
        # scale by the largest component first so tiny vectors do not underflow
        m = max(abs(self.x), abs(self.y), abs(self.z))
        if m == 0.0 or not math.isfinite(m):
            raise DegenerateGeometryError(f"cannot normalize {self!r}")
        s = Vector(self.x / m, self.y / m, self.z / m)
        k = s.magnitude()
        return Vector(s.x / k, s.y / k, s.z / k)

    __add__ = add
    __sub__ = subtract


@dataclass(frozen=True, eq=False)
class LineSegment:
    start: Point
    end: Point

    @property
    def points(self) -> tuple[Point, Point]:
        return self.start, self.end

    def reversed(self) -> LineSegment:
        return LineSegment(self.end, self.start)

    # directionless identity
    def __eq__(self, other) -> bool:
        if not isinstance(other, LineSegment):
            return NotImplemented
        return {self.start, self.end} == {other.start, other.end}

    def __hash__(self) -> int:
        return hash(frozenset((self.start, self.end)))


def ring_vertices(points) -> list[Point]:
    """Distinct ring vertices: consecutive repeats and a closing repeat dropped."""
    ring: list[Point] = []
    for p in points:
        if not ring or ring[-1] != p:
            ring.append(p)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    if len(ring) < 3:
        raise DegenerateGeometryError(f"a ring needs 3 distinct vertices, got {len(ring)}")
    return ring
