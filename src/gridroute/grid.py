"""
Boolean occupancy map used while one Individual is being built.

The map is scratch state: it is created for a single build, handed to the
router by reference and thrown away afterwards. Fitness is never read from
it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from gridroute.exceptions import GridBoundsError
from gridroute.geometry import DIRECTIONS, Point, move

if TYPE_CHECKING:
    from gridroute.problem import Problem

__all__ = ["OccupancyMap"]


class OccupancyMap:
    """Rows x cols boolean grid of cells claimed by already placed wires."""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.cells: NDArray[np.bool_] = np.zeros((rows, cols), dtype=np.bool_)

    @classmethod
    def from_pins(cls, problem: Problem) -> OccupancyMap:
        """Create a map with every pin of ``problem`` marked occupied."""
        occupancy = cls(*problem.dimensions)
        for start, end in problem.pin_pairs:
            occupancy.mark(start)
            occupancy.mark(end)
        return occupancy

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def in_bounds(self, point: Point) -> bool:
        return 0 <= point[0] < self.rows and 0 <= point[1] < self.cols

    def _check(self, point: Point) -> None:
        if not self.in_bounds(point):
            raise GridBoundsError(
                "Grid access out of range",
                context={"point": point, "shape": self.shape},
            )

    def mark(self, point: Point, value: bool = True) -> None:
        self._check(point)
        self.cells[point] = value

    def clear(self, point: Point) -> None:
        self.mark(point, False)

    def is_occupied(self, point: Point) -> bool:
        self._check(point)
        return bool(self.cells[point])

    def count(self) -> int:
        """Number of occupied cells."""
        return int(np.count_nonzero(self.cells))

    def neighbor_factors(
        self,
        point: Point,
        collision_factor: float,
        boundary_factor: float = 0.0,
    ) -> list[float]:
        """
        Weight each direction by what the neighbouring cell holds.

        Returns four factors in N, S, E, W order: ``boundary_factor`` when the
        step leaves the grid, ``collision_factor`` when the neighbour is
        occupied and 1.0 otherwise.
        """
        factors = []
        for direction in DIRECTIONS:
            neighbor = move(point, direction)
            if not self.in_bounds(neighbor):
                factors.append(boundary_factor)
            elif self.cells[neighbor]:
                factors.append(collision_factor)
            else:
                factors.append(1.0)
        return factors

    def copy(self) -> OccupancyMap:
        clone = OccupancyMap(self.rows, self.cols)
        clone.cells = self.cells.copy()
        return clone

    def __repr__(self) -> str:
        return f"OccupancyMap(rows={self.rows}, cols={self.cols}, occupied={self.count()})"
