from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from waygeo.domain.entities.geometry import CRS, Point
from waygeo.domain.entities.topology import (
    Connector,
    Direction,
    RelationId,
    SegmentKey,
    VertexRef,
)


# ------------- Stores --------------------
@runtime_checkable
class PointStore(Protocol):
    """
    Resolves vertex refs to coordinates.
    All points of one store share its coordinate system.
    """

    crs: CRS

    def point_at(self, ref: VertexRef) -> Point: ...


@runtime_checkable
class AdjacencyStore(Protocol):
    """
    Responsibilities:
      • Step to the neighbouring vertex inside one way, in either direction.
      • Report which way a vertex belongs to.
    """

    def next_vertex(self, ref: VertexRef, direction: Direction) -> VertexRef | None:
        """None at the physical end of the way in that direction."""

    def segment_of(self, ref: VertexRef) -> SegmentKey: ...


@runtime_checkable
class ConnectorStore(Protocol):
    """
    Responsibilities:
      • List connectors at a way boundary. FORWARD: connectors leaving the
        way's last vertex. BACKWARD: connectors arriving at the way's first
        vertex, reported with their source as the target.
      • List candidate anchor vertices for a relation.
    """

    def connectors_at(self, ref: VertexRef, direction: Direction) -> Sequence[Connector]: ...
    def anchors(self, relation_id: RelationId) -> Iterable[VertexRef]: ...


@runtime_checkable
class WayStore(PointStore, AdjacencyStore, ConnectorStore, Protocol):
    pass
