# runtime/registries.py
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from waygeo.algo import cartesian, wgs84
from waygeo.domain.entities.geometry import CRS, LineSegment, Point, Winding


@dataclass(frozen=True)
class GeometryAlgorithms:
    crs: CRS
    distance: Callable[[Point, Point], float]
    course_delta: Callable[[Sequence[Point]], float]
    winding: Callable[[Sequence[Point]], Winding]
    mean: Callable[..., Point]
    intersect: Callable[[LineSegment, LineSegment], Point | None]


AlgorithmsFactory = Callable[[], GeometryAlgorithms]

_algo_registry: dict[CRS, AlgorithmsFactory] = {}


def register_algorithms(crs: CRS):
    def deco(fn: AlgorithmsFactory):
        _algo_registry[crs] = fn
        return fn

    return deco


def algorithms_for(crs: CRS) -> GeometryAlgorithms:
    try:
        return _algo_registry[crs]()
    except KeyError:
        raise ValueError(f"Unknown crs {crs!r}")


@register_algorithms(CRS.WGS84)
def _make_wgs84() -> GeometryAlgorithms:
    return GeometryAlgorithms(
        crs=CRS.WGS84,
        distance=wgs84.distance_between,
        course_delta=wgs84.course_delta,
        winding=wgs84.winding,
        mean=wgs84.mean,
        intersect=wgs84.intersect,
    )


@register_algorithms(CRS.CARTESIAN)
def _make_cartesian() -> GeometryAlgorithms:
    return GeometryAlgorithms(
        crs=CRS.CARTESIAN,
        distance=cartesian.distance,
        course_delta=cartesian.course_delta,
        winding=cartesian.winding,
        mean=cartesian.mean,
        intersect=cartesian.intersect,
    )
