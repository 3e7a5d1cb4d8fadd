# io/memory_store.py
from collections import defaultdict
from collections.abc import Iterable, Sequence

from waygeo.domain.entities.geometry import CRS, Point
from waygeo.domain.entities.topology import (
    Connector,
    Direction,
    RelationId,
    SegmentKey,
    VertexRef,
)


class InMemoryWayStore:
    """
    Ways, vertices and connectors held in dicts. Satisfies the WayStore protocol.

    A way is an ordered run of vertex refs; each ref belongs to exactly one way.
    Connectors link the last vertex of one way to the first vertex of another
    and are scoped to one or more relation ids.
    """

    def __init__(self, crs: CRS = CRS.WGS84):
        self.crs = crs
        self._points: dict[VertexRef, Point] = {}
        self._ways: dict[SegmentKey, tuple[VertexRef, ...]] = {}
        self._cyclic: set[SegmentKey] = set()
        self._where: dict[VertexRef, tuple[SegmentKey, int]] = {}
        self._out: dict[VertexRef, list[Connector]] = defaultdict(list)
        self._in: dict[VertexRef, list[Connector]] = defaultdict(list)
        self._anchors: dict[RelationId, list[VertexRef]] = defaultdict(list)

    # --------------- Building --------------------------------

    def add_point(self, ref: VertexRef, point: Point) -> None:
        if point.crs is not self.crs:
            raise ValueError(f"point {point!r} is not in {self.crs.value}")
        self._points[ref] = point

    def add_way(
        self,
        key: SegmentKey,
        refs: Sequence[VertexRef],
        *,
        points: Sequence[Point] | None = None,
        cyclic: bool = False,
        relation_ids: Iterable[RelationId] = (),
    ) -> None:
        """
        Register a way. `points` (same length as refs) are stored alongside;
        `relation_ids` make the way's first vertex an anchor of those relations.
        A cyclic way wraps from its last vertex back to its first.
        """
        if key in self._ways:
            raise ValueError(f"way {key!r} already exists")
        if not refs:
            raise ValueError(f"way {key!r} has no vertices")
        if points is not None:
            if len(points) != len(refs):
                raise ValueError(f"way {key!r}: {len(refs)} refs but {len(points)} points")
            for ref, p in zip(refs, points):
                self.add_point(ref, p)
        for i, ref in enumerate(refs):
            if ref in self._where:
                raise ValueError(f"vertex {ref!r} already belongs to way {self._where[ref][0]!r}")
            self._where[ref] = (key, i)
        self._ways[key] = tuple(refs)
        if cyclic:
            self._cyclic.add(key)
        for rid in relation_ids:
            self._anchors[rid].append(refs[0])

    def connect(
        self, source: VertexRef, target: VertexRef, relation_ids: Iterable[RelationId]
    ) -> Connector:
        rids = frozenset(relation_ids)
        if not rids:
            raise ValueError("a connector needs at least one relation id")
        if self.next_vertex(source, Direction.FORWARD) is not None:
            raise ValueError(f"connector source {source!r} is not the last vertex of its way")
        if self.next_vertex(target, Direction.BACKWARD) is not None:
            raise ValueError(f"connector target {target!r} is not the first vertex of its way")
        conn = Connector(target, rids)
        self._out[source].append(conn)
        self._in[target].append(Connector(source, rids))
        for rid in rids:
            if source not in self._anchors[rid]:
                self._anchors[rid].append(source)
        return conn

    # --------------- PointStore ------------------------------

    def point_at(self, ref: VertexRef) -> Point:
        try:
            return self._points[ref]
        except KeyError:
            raise KeyError(f"unknown vertex {ref!r}") from None

    # --------------- AdjacencyStore --------------------------

    def _locate(self, ref: VertexRef) -> tuple[SegmentKey, int]:
        try:
            return self._where[ref]
        except KeyError:
            raise KeyError(f"vertex {ref!r} is not on any way") from None

    def segment_of(self, ref: VertexRef) -> SegmentKey:
        return self._locate(ref)[0]

    def next_vertex(self, ref: VertexRef, direction: Direction) -> VertexRef | None:
        key, i = self._locate(ref)
        refs = self._ways[key]
        j = i + direction
        if key in self._cyclic:
            return refs[j % len(refs)]
        return refs[j] if 0 <= j < len(refs) else None

    # --------------- ConnectorStore --------------------------

    def connectors_at(self, ref: VertexRef, direction: Direction) -> Sequence[Connector]:
        index = self._out if direction is Direction.FORWARD else self._in
        return tuple(index.get(ref, ()))

    def anchors(self, relation_id: RelationId) -> Iterable[VertexRef]:
        return tuple(self._anchors.get(relation_id, ()))

    def ways(self) -> dict[SegmentKey, tuple[VertexRef, ...]]:
        return dict(self._ways)
