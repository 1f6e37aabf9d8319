"""
Path geometry on the 4-connected routing grid.

A routed wire is stored pointer-free: a start point, an end point and an
ordered list of straight segments. Every position on the path is recovered
by walking the segments from the start.

Coordinates are ``(row, column)`` tuples. North decreases the row, East
increases the column.

Example::

    from gridroute.geometry import Connection, Direction, Segment

    conn = Connection(
        start=(1, 0),
        end=(3, 1),
        segments=[
            Segment(Direction.SOUTH, 1),
            Segment(Direction.EAST, 1),
            Segment(Direction.SOUTH, 1),
        ],
    )
    conn.find_point(1)  # (2, 1)
    conn.cells()        # [(1, 0), (2, 0), (2, 1), (3, 1)]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gridroute.exceptions import ConnectionStateError

__all__ = [
    "Direction",
    "DIRECTIONS",
    "Point",
    "Segment",
    "Connection",
    "manhattan",
    "move",
]

Point = tuple[int, int]


class Direction(Enum):
    """Grid directions, declared in sampling order."""

    NORTH = (-1, 0)
    SOUTH = (1, 0)
    EAST = (0, 1)
    WEST = (0, -1)

    @property
    def delta(self) -> Point:
        return self.value

    @property
    def inverse(self) -> Direction:
        return _INVERSE[self]

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.NORTH, Direction.SOUTH)


_INVERSE = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

# Fixed order used for weights and cumulative sampling thresholds
DIRECTIONS: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
)


def move(point: Point, direction: Direction, steps: int = 1) -> Point:
    """Return the point reached by stepping ``steps`` cells in ``direction``."""
    dr, dc = direction.delta
    return (point[0] + dr * steps, point[1] + dc * steps)


def manhattan(a: Point, b: Point) -> int:
    """Manhattan distance between two grid points."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass(frozen=True)
class Segment:
    """A maximal straight run of ``length`` cells in one direction."""

    direction: Direction
    length: int

    def __str__(self) -> str:
        return f"{self.direction.name[0]}{self.length}"


@dataclass
class Connection:
    """
    The routed path joining one pin pair.

    Invariant: walking ``start`` through ``segments`` yields exactly ``end``.
    Owned by exactly one Individual; use :meth:`copy` before handing it to
    another one.
    """

    start: Point
    end: Point
    segments: list[Segment] = field(default_factory=list)

    def copy(self) -> Connection:
        """Create an independent copy (segments are immutable and shared)."""
        return Connection(start=self.start, end=self.end, segments=list(self.segments))

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def total_length(self) -> int:
        return sum(seg.length for seg in self.segments)

    def walk(self) -> list[Point]:
        """Return the start point followed by the end point of every segment."""
        points = [self.start]
        current = self.start
        for seg in self.segments:
            current = move(current, seg.direction, seg.length)
            points.append(current)
        return points

    def end_point(self) -> Point:
        """Point reached by telescoping every segment from ``start``."""
        return self.walk()[-1]

    def find_point(self, index: int) -> Point:
        """Return the point reached after walking segments ``0..index`` inclusive."""
        if not 0 <= index < len(self.segments):
            raise ConnectionStateError(
                "Segment index out of range",
                context={"index": index, "segments": len(self.segments)},
            )
        point = self.start
        for seg in self.segments[: index + 1]:
            point = move(point, seg.direction, seg.length)
        return point

    def segment_start(self, index: int) -> Point:
        """Return the point at which segment ``index`` begins."""
        if index == 0:
            return self.start
        return self.find_point(index - 1)

    def cells(self) -> list[Point]:
        """
        Every grid cell occupied by the path, in walking order.

        Each segment contributes ``length`` cells starting at its own start
        point, so turn points appear exactly once; the end pin is appended
        last.
        """
        cells: list[Point] = []
        current = self.start
        for seg in self.segments:
            dr, dc = seg.direction.delta
            for i in range(seg.length):
                cells.append((current[0] + dr * i, current[1] + dc * i))
            current = move(current, seg.direction, seg.length)
        cells.append(self.end)
        return cells

    def flatten(self) -> None:
        """
        Canonicalize the segment list in place.

        Same-direction neighbours merge, opposite neighbours cancel (equal
        lengths remove both, otherwise the difference survives in the longer
        one's direction) and zero-length segments are dropped. The stack
        never holds two consecutive parallel segments.
        """
        merged: list[Segment] = []
        for seg in self.segments:
            if seg.length == 0:
                continue
            if merged and merged[-1].direction == seg.direction:
                merged[-1] = Segment(seg.direction, merged[-1].length + seg.length)
            elif merged and merged[-1].direction == seg.direction.inverse:
                last = merged.pop()
                diff = last.length - seg.length
                if diff > 0:
                    merged.append(Segment(last.direction, diff))
                elif diff < 0:
                    merged.append(Segment(seg.direction, -diff))
            else:
                merged.append(seg)
        self.segments = merged

    def mutate(self, roll_a: float, roll_b: float, dimensions: tuple[int, int]) -> None:
        """
        Insert a self-cancelling perpendicular jog around one segment.

        ``roll_a`` picks the segment (and the jog side: East/North when
        ``roll_a <= 0.5``, West/South otherwise); ``roll_b`` picks the jog
        length, clipped so the shifted segment stays inside the grid. The
        connection is flattened afterwards, so start and end never move.

        Args:
            roll_a: Uniform sample in [0, 1)
            roll_b: Uniform sample in [0, 1)
            dimensions: Grid (rows, cols)
        """
        if not self.segments:
            raise ConnectionStateError(
                "Cannot mutate a connection without segments",
                context={"start": self.start, "end": self.end},
            )

        index = min(int(roll_a * len(self.segments)), len(self.segments) - 1)
        row, col = self.segment_start(index)
        rows, cols = dimensions

        if self.segments[index].direction.is_vertical:
            extent = cols
            if roll_a <= 0.5:
                jog, room = Direction.EAST, cols - 1 - col
            else:
                jog, room = Direction.WEST, col
        else:
            extent = rows
            if roll_a <= 0.5:
                jog, room = Direction.NORTH, row
            else:
                jog, room = Direction.SOUTH, rows - 1 - row

        length = min(int(roll_b * extent) + 1, room)
        if length > 0:
            self.segments.insert(index, Segment(jog, length))
            self.segments.insert(index + 2, Segment(jog.inverse, length))

        self.flatten()

    def is_valid(self, dimensions: tuple[int, int] | None = None) -> bool:
        """Check telescoping, positive lengths and (optionally) grid bounds."""
        if any(seg.length < 1 for seg in self.segments):
            return False
        if self.end_point() != self.end:
            return False
        if dimensions is not None:
            rows, cols = dimensions
            return all(0 <= r < rows and 0 <= c < cols for r, c in self.cells())
        return True

    def __str__(self) -> str:
        path = " ".join(str(seg) for seg in self.segments)
        return f"{self.start} -> {self.end}: {path}"
