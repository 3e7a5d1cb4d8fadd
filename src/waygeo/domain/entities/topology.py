from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import IntEnum

VertexRef = Hashable  # store-specific handle of one vertex inside a way
SegmentKey = Hashable  # identity of a way
RelationId = Hashable  # logical ring/chain a connector belongs to


class Direction(IntEnum):
    FORWARD = 1
    BACKWARD = -1

    @property
    def reverse(self) -> "Direction":
        return Direction(-self.value)


@dataclass(frozen=True)
class Connector:
    """Link from a way boundary to the next way's entry vertex, scoped to relations."""

    target: VertexRef
    relation_ids: frozenset = field(default_factory=frozenset)

    def serves(self, relation_id: RelationId) -> bool:
        return relation_id in self.relation_ids
