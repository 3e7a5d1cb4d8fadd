# waygeo/assembly/sequences.py
"""
Polygons and polylines assembled lazily from a way store.

Nothing is materialised up front: get_points() and every traversal walk the
store through a WayWalker. Cursors hold one point of look-ahead so that
`done` turns true right after the last point has been returned.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, replace

from waygeo.assembly.hooks import NoopHooks
from waygeo.assembly.walker import Phase, WalkState, WayWalker
from waygeo.domain.entities.geometry import CRS, Point
from waygeo.domain.entities.topology import Direction, RelationId, VertexRef
from waygeo.domain.errors import MalformedTopologyError, TraversalError
from waygeo.domain.sequence import PointSequence


@dataclass(frozen=True)
class AssemblyCursor:
    state: WalkState
    pending: Point | None  # next point to hand out
    closing: bool = False  # pending is the repeated start of a ring

    @property
    def done(self) -> bool:
        return self.pending is None


class _AssembledSequence(PointSequence):
    search_directions: tuple[Direction, ...] = (Direction.FORWARD,)

    def __init__(self, walker: WayWalker, anchor: VertexRef | None = None):
        super().__init__()
        self.walker = walker
        self._search = walker.with_hooks(NoopHooks())  # candidate search and direction probes
        self.anchor = anchor if anchor is not None else walker.find_anchor()

    @property
    def crs(self) -> CRS:
        return self.walker.points.crs

    @property
    def relation_id(self) -> RelationId:
        return self.walker.relation_id

    def get_points(self) -> tuple[Point, ...]:
        return tuple(self.iter_points())

    @abstractmethod
    def iter_points(self) -> Iterator[Point]: ...

    @abstractmethod
    def _finish(self, state: WalkState) -> AssemblyCursor: ...

    # --------------- Traversal -------------------------------

    def _probe(self, vertex: VertexRef, direction: Direction) -> Point | None:
        """The point one step away from vertex, crossing connectors; None at an end."""
        state = self._search.begin(vertex, direction, ring=self.closed)
        _, state = self._search.advance(state)
        if state.terminal:
            return None
        p, _ = self._search.advance(state)
        return p

    def _candidates(self, from_: Point) -> Iterator[VertexRef]:
        for d in self.search_directions:
            for p, state in self._search.walk(self.anchor, d, ring=self.closed):
                if p is not None and p == from_:
                    yield state.last_vertex

    def _locate(self, from_: Point, to: Point) -> tuple[VertexRef, Direction]:
        for vertex in self._candidates(from_):
            for d in (Direction.FORWARD, Direction.BACKWARD):
                if self._probe(vertex, d) == to:
                    return vertex, d
        raise TraversalError(f"{from_!r} -> {to!r} is not an edge of this {type(self).__name__}")

    def _prefetch(self, state: WalkState) -> AssemblyCursor:
        p, state = self.walker.advance(state)
        if p is not None:
            return AssemblyCursor(state=state, pending=p)
        return self._finish(state)

    def _begin(self, from_: Point, to: Point) -> AssemblyCursor:
        vertex, d = self._locate(from_, to)
        return self._prefetch(self.walker.begin(vertex, d, ring=self.closed))

    def _step(self, cursor: AssemblyCursor) -> tuple[Point, AssemblyCursor]:
        if cursor.closing:
            return cursor.pending, replace(cursor, pending=None)
        return cursor.pending, self._prefetch(cursor.state)


class AssembledPolygon(_AssembledSequence):
    closed = True

    def iter_points(self) -> Iterator[Point]:
        state = self.walker.begin(self.anchor, Direction.FORWARD)
        while True:
            p, state = self.walker.advance(state)
            if p is None:
                break
            yield p
        self._require_closed(state)
        yield state.origin_point

    def _finish(self, state: WalkState) -> AssemblyCursor:
        self._require_closed(state)
        return AssemblyCursor(state=state, pending=state.origin_point, closing=True)

    def _require_closed(self, state: WalkState):
        if state.phase is Phase.EXHAUSTED:
            raise MalformedTopologyError(
                f"relation {self.relation_id!r} does not close: "
                f"no connector after {state.emitted} vertices"
            )


class AssembledPolyline(_AssembledSequence):
    closed = False
    search_directions = (Direction.FORWARD, Direction.BACKWARD)

    def chain_start(self) -> VertexRef:
        """First vertex of the chain, found by walking backward from the anchor."""
        start = self.anchor
        for p, state in self.walker.walk(self.anchor, Direction.BACKWARD, ring=False):
            if p is not None:
                start = state.last_vertex
        return start

    def iter_points(self) -> Iterator[Point]:
        for p, _ in self.walker.walk(self.chain_start(), Direction.FORWARD, ring=False):
            if p is not None:
                yield p

    def _finish(self, state: WalkState) -> AssemblyCursor:
        return AssemblyCursor(state=state, pending=None)
