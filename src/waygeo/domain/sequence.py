# waygeo/domain/sequence.py
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from typing import Any, ClassVar

from waygeo.domain.entities.geometry import CRS, Point
from waygeo.domain.entities.topology import Direction
from waygeo.domain.errors import TraversalError


class PointSequence(ABC):
    """
    Ordered vertices with a resumable, bidirectional traversal.

    start_traversal(from_, to) returns an immutable cursor; next_point(cursor)
    returns (point, next_cursor). The sequence also remembers the cursor of
    its last start_traversal so get_next_point()/fully_traversed() can be
    used directly. Independent cursors may walk one sequence concurrently.
    """

    closed: ClassVar[bool] = False

    def __init__(self):
        self._cursor: Any = None

    @abstractmethod
    def get_points(self) -> tuple[Point, ...]: ...

    @abstractmethod
    def _begin(self, from_: Point, to: Point) -> Any: ...

    @abstractmethod
    def _step(self, cursor: Any) -> tuple[Point, Any]: ...

    def start_traversal(self, from_: Point, to: Point):
        self._cursor = self._begin(from_, to)
        return self._cursor

    def next_point(self, cursor):
        if cursor.done:
            raise TraversalError("sequence already fully traversed")
        return self._step(cursor)

    def get_next_point(self) -> Point:
        if self._cursor is None:
            raise TraversalError("start_traversal() has not been called")
        p, self._cursor = self.next_point(self._cursor)
        return p

    def fully_traversed(self) -> bool:
        if self._cursor is None:
            raise TraversalError("start_traversal() has not been called")
        return self._cursor.done

    def traverse(self, from_: Point, to: Point) -> Iterator[Point]:
        cursor = self._begin(from_, to)
        while not cursor.done:
            p, cursor = self.next_point(cursor)
            yield p

    def __iter__(self) -> Iterator[Point]:
        return iter(self.get_points())


@dataclass(frozen=True)
class TraversalCursor:
    index: int
    direction: Direction
    remaining: int  # points still to be returned

    @property
    def done(self) -> bool:
        return self.remaining <= 0


class _ListSequence(PointSequence):
    def __init__(self, points: Sequence[Point]):
        super().__init__()
        self.points: tuple[Point, ...] = tuple(points)
        crss = {p.crs for p in self.points}
        if len(crss) > 1:
            raise ValueError(f"mixed coordinate systems {sorted(c.name for c in crss)}")

    @property
    def crs(self) -> CRS:
        return self.points[0].crs

    def __len__(self) -> int:
        return len(self.points)

    def _neighbour(self, i: int, d: Direction) -> Point | None:
        j = i + d
        if self.closed:
            return self.points[j % len(self.points)]
        return self.points[j] if 0 <= j < len(self.points) else None

    def _locate(self, from_: Point, to: Point) -> tuple[int, Direction]:
        for i, p in enumerate(self.points):
            if p != from_:
                continue
            if self._neighbour(i, Direction.FORWARD) == to:
                return i, Direction.FORWARD
            if self._neighbour(i, Direction.BACKWARD) == to:
                return i, Direction.BACKWARD
        raise TraversalError(f"{from_!r} -> {to!r} is not an edge of this {type(self).__name__}")

    def _step(self, cursor: TraversalCursor) -> tuple[Point, TraversalCursor]:
        p = self.points[cursor.index]
        nxt = (cursor.index + cursor.direction) % len(self.points)
        return p, replace(cursor, index=nxt, remaining=cursor.remaining - 1)


class SimplePolygon(_ListSequence):
    closed = True

    def __init__(self, points: Sequence[Point]):
        pts = list(points)
        if len(pts) > 1 and pts[0] == pts[-1]:
            pts.pop()
        if len(pts) < 3:
            raise ValueError(f"a polygon needs at least 3 vertices, got {len(pts)}")
        if len(set(pts)) != len(pts):
            raise ValueError("polygon repeats a vertex")
        super().__init__(pts)

    def get_points(self) -> tuple[Point, ...]:
        return self.points + self.points[:1]

    def _begin(self, from_: Point, to: Point) -> TraversalCursor:
        i, d = self._locate(from_, to)
        # every vertex once, then the start again
        return TraversalCursor(index=i, direction=d, remaining=len(self.points) + 1)


class SimplePolyline(_ListSequence):
    closed = False

    def __init__(self, points: Sequence[Point]):
        if len(points) < 2:
            raise ValueError(f"a polyline needs at least 2 points, got {len(points)}")
        super().__init__(points)

    def get_points(self) -> tuple[Point, ...]:
        return self.points

    def _begin(self, from_: Point, to: Point) -> TraversalCursor:
        i, d = self._locate(from_, to)
        remaining = len(self.points) - i if d is Direction.FORWARD else i + 1
        return TraversalCursor(index=i, direction=d, remaining=remaining)
