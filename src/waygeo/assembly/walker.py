# waygeo/assembly/walker.py
"""
Walk one relation's ways as a single ring or chain.

The walk is an explicit state machine over immutable WalkState values:

    WITHIN_SEGMENT --(way ends)--> AT_CONNECTOR --(connector)--> WITHIN_SEGMENT
          |                              |
          +--(back at origin)--> CLOSED  +--(no connector)--> EXHAUSTED

Only ring walks close; a chain walk (ring=False) runs until a way end has
no connector for the relation, so a chain may pass its start point again.

step() performs exactly one transition, so every state can be built and
checked in isolation. Ways that meet at a shared node repeat that node as
their boundary vertex; the repeat is skipped when crossing the connector.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum

from waygeo.app.protocols import AdjacencyStore, ConnectorStore, PointStore, WayStore
from waygeo.assembly.hooks import AssemblyHooks, NoopHooks
from waygeo.domain.entities.geometry import Point
from waygeo.domain.entities.topology import Direction, RelationId, SegmentKey, VertexRef
from waygeo.domain.errors import (
    AmbiguousConnectorError,
    MalformedTopologyError,
    RelationNotFoundError,
    TraversalError,
)


class Phase(Enum):
    WITHIN_SEGMENT = "within_segment"
    AT_CONNECTOR = "at_connector"
    CLOSED = "closed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class WalkState:
    phase: Phase
    vertex: VertexRef  # next vertex to emit, or the boundary vertex while AT_CONNECTOR
    direction: Direction
    origin: VertexRef
    origin_point: Point
    origin_segment: SegmentKey
    last_vertex: VertexRef | None = None
    last_point: Point | None = None
    visited: frozenset = field(default_factory=frozenset)
    reentered_origin: bool = False  # anchor mid-way: its way is entered a second time
    emitted: int = 0
    ring: bool = True  # open chains never close, they only run out of connectors

    @property
    def terminal(self) -> bool:
        return self.phase in (Phase.CLOSED, Phase.EXHAUSTED)


class WayWalker:
    def __init__(
        self,
        points: PointStore,
        adjacency: AdjacencyStore,
        connectors: ConnectorStore,
        relation_id: RelationId,
        *,
        hooks: AssemblyHooks | None = None,
        max_vertices: int = 1_000_000,
    ):
        if max_vertices < 1:
            raise ValueError(f"max_vertices must be >= 1, got {max_vertices}")
        self.points, self.adjacency, self.connectors = points, adjacency, connectors
        self.relation_id = relation_id
        self.hooks = hooks or NoopHooks()
        self.max_vertices = max_vertices

    @classmethod
    def over(cls, store: WayStore, relation_id: RelationId, **kw) -> WayWalker:
        return cls(store, store, store, relation_id, **kw)

    def with_hooks(self, hooks: AssemblyHooks) -> WayWalker:
        return type(self)(
            self.points,
            self.adjacency,
            self.connectors,
            self.relation_id,
            hooks=hooks,
            max_vertices=self.max_vertices,
        )

    def find_anchor(self) -> VertexRef:
        for ref in self.connectors.anchors(self.relation_id):
            return ref
        raise RelationNotFoundError(self.relation_id)

    # --------------- Transitions -----------------------------

    def begin(
        self, anchor: VertexRef, direction: Direction = Direction.FORWARD, *, ring: bool = True
    ) -> WalkState:
        seg = self.adjacency.segment_of(anchor)
        self.hooks.segment_entered(
            relation_id=self.relation_id, segment=seg, entry=anchor, direction=direction.name
        )
        return WalkState(
            phase=Phase.WITHIN_SEGMENT,
            vertex=anchor,
            direction=direction,
            origin=anchor,
            origin_point=self.points.point_at(anchor),
            origin_segment=seg,
            visited=frozenset((seg,)),
            ring=ring,
        )

    def step(self, state: WalkState) -> tuple[Point | None, WalkState]:
        if state.phase is Phase.WITHIN_SEGMENT:
            return self._within_segment(state)
        if state.phase is Phase.AT_CONNECTOR:
            return None, self._at_connector(state)
        raise TraversalError(f"walk is already {state.phase.value}")

    def advance(self, state: WalkState) -> tuple[Point | None, WalkState]:
        """Step until a point is emitted or the walk ends (point is None then)."""
        while True:
            p, state = self.step(state)
            if p is not None or state.terminal:
                return p, state

    def walk(
        self, anchor: VertexRef, direction: Direction = Direction.FORWARD, *, ring: bool = True
    ) -> Iterator[tuple[Point | None, WalkState]]:
        """Yield (point, state) per emitted vertex, then (None, terminal_state)."""
        state = self.begin(anchor, direction, ring=ring)
        while True:
            p, state = self.advance(state)
            yield p, state
            if p is None:
                return

    # --------------- Phases ----------------------------------

    def _within_segment(self, state: WalkState) -> tuple[Point | None, WalkState]:
        v = state.vertex
        p = self.points.point_at(v)
        if state.ring and state.emitted and (v == state.origin or p == state.origin_point):
            return None, self._close(state)
        if state.emitted >= self.max_vertices:
            self._fail(
                state,
                "vertex_cap",
                MalformedTopologyError(
                    f"relation {self.relation_id!r} exceeds {self.max_vertices} vertices"
                ),
            )
        emitted = state.emitted + 1
        self.hooks.vertex_emitted(relation_id=self.relation_id, vertex=v, emitted=emitted)
        nxt = self.adjacency.next_vertex(v, state.direction)
        if nxt is None:
            return p, replace(
                state, phase=Phase.AT_CONNECTOR, last_vertex=v, last_point=p, emitted=emitted
            )
        return p, replace(state, vertex=nxt, last_vertex=v, last_point=p, emitted=emitted)

    def _at_connector(self, state: WalkState) -> WalkState:
        boundary = state.vertex
        matching = [
            c
            for c in self.connectors.connectors_at(boundary, state.direction)
            if c.serves(self.relation_id)
        ]
        if not matching:
            self.hooks.exhausted(
                relation_id=self.relation_id,
                origin=state.origin,
                emitted=state.emitted,
                segments=len(state.visited),
            )
            return replace(state, phase=Phase.EXHAUSTED)
        if len(matching) > 1:
            self._fail(
                state,
                "ambiguous_connector",
                AmbiguousConnectorError(boundary, self.relation_id, [c.target for c in matching]),
            )

        target = matching[0].target
        self.hooks.connector_resolved(
            relation_id=self.relation_id,
            boundary=boundary,
            target=target,
            direction=state.direction.name,
        )
        if state.ring and target == state.origin:
            return self._close(state)

        seg = self.adjacency.segment_of(target)
        visited, reentered = state.visited, state.reentered_origin
        if seg not in visited:
            visited = visited | {seg}
        elif state.ring and seg == state.origin_segment and not reentered:
            reentered = True
        else:
            self._fail(
                state,
                "segment_revisited",
                MalformedTopologyError(
                    f"relation {self.relation_id!r} re-enters way {seg!r} without closing"
                ),
            )
        self.hooks.segment_entered(
            relation_id=self.relation_id, segment=seg, entry=target, direction=state.direction.name
        )
        state = replace(state, visited=visited, reentered_origin=reentered)

        if self.points.point_at(target) == state.last_point:
            nxt = self.adjacency.next_vertex(target, state.direction)
            if nxt is None:
                # single-vertex way: resolve its own connector next
                return replace(state, vertex=target)
            target = nxt
        return replace(state, phase=Phase.WITHIN_SEGMENT, vertex=target)

    def _close(self, state: WalkState) -> WalkState:
        self.hooks.closed(
            relation_id=self.relation_id,
            origin=state.origin,
            emitted=state.emitted,
            segments=len(state.visited),
        )
        return replace(state, phase=Phase.CLOSED)

    def _fail(self, state: WalkState, reason: str, exc: Exception):
        self.hooks.error(
            relation_id=self.relation_id,
            reason=reason,
            vertex=state.vertex,
            emitted=state.emitted,
            error=str(exc),
        )
        raise exc
