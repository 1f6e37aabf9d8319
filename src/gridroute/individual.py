"""
Candidate solutions and their fitness.

An Individual holds one Connection per pin pair, positionally aligned with
``Problem.pin_pairs``. Fitness is a weighted cost (lower is better)::

    collisions * collision + total_length * length + segment_count * segment_count

Collisions are always re-derived from the final segment geometry, so
connections edited by mutation or crossover are scored correctly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from gridroute.geometry import Connection, Point
from gridroute.grid import OccupancyMap
from gridroute.problem import Problem
from gridroute.router import RouterConfig, StochasticRouter

logger = logging.getLogger(__name__)

__all__ = ["FitnessWeights", "Individual", "generate_individual"]


@dataclass
class FitnessWeights:
    """Cost weights. Collisions dominate length and turn count."""

    collision: float = 100.0
    length: float = 0.2
    segment_count: float = 0.1


@dataclass
class Individual:
    """
    One full candidate solution.

    Attributes:
        dimensions: Grid (rows, cols), needed to keep mutations on the grid
        connections: One Connection per pin pair, in pin-pair order
        fitness: Cached cost from the last :meth:`evaluate`, None if unscored
    """

    dimensions: tuple[int, int]
    connections: list[Connection] = field(default_factory=list)
    fitness: float | None = None

    def copy(self) -> Individual:
        """Create a deep copy; no Connection is shared with the original."""
        return Individual(
            dimensions=self.dimensions,
            connections=[conn.copy() for conn in self.connections],
            fitness=self.fitness,
        )

    def collect_cells(self) -> list[Point]:
        """Every cell visited by every connection, repeats included."""
        cells: list[Point] = []
        for conn in self.connections:
            cells.extend(conn.cells())
        return cells

    def occupancy_counts(self) -> np.ndarray:
        """Visit count per grid cell as a (rows, cols) integer array."""
        rows, cols = self.dimensions
        counts = np.zeros(rows * cols, dtype=np.int64)
        cells = self.collect_cells()
        if cells:
            index = np.fromiter((r * cols + c for r, c in cells), dtype=np.int64, count=len(cells))
            counts = np.bincount(index, minlength=rows * cols)
        return counts.reshape(rows, cols)

    def collisions(self) -> int:
        """
        Number of repeat visits over all cells.

        A cell visited ``k`` times contributes ``k - 1``; pin cells shared by
        two connections count like any other overlap.
        """
        counts = self.occupancy_counts()
        return int(np.maximum(counts - 1, 0).sum())

    @property
    def total_length(self) -> int:
        return sum(conn.total_length for conn in self.connections)

    @property
    def segment_count(self) -> int:
        return sum(conn.segment_count for conn in self.connections)

    def evaluate(self, weights: FitnessWeights | None = None) -> float:
        """Compute, cache and return the fitness."""
        weights = weights or FitnessWeights()
        self.fitness = (
            self.collisions() * weights.collision
            + self.total_length * weights.length
            + self.segment_count * weights.segment_count
        )
        return self.fitness

    def crossover(self, other: Individual, roll: float) -> None:
        """Replace the connection at ``int(roll * n)`` with a copy of ``other``'s."""
        if not self.connections:
            return
        index = min(int(roll * len(self.connections)), len(self.connections) - 1)
        self.connections[index] = other.connections[index].copy()
        self.fitness = None

    def mutate(self, rng: np.random.Generator, rate: float) -> int:
        """
        Mutate each connection independently with probability ``rate``.

        Returns:
            Number of connections mutated
        """
        mutated = 0
        for conn in self.connections:
            if rng.random() < rate:
                conn.mutate(rng.random(), rng.random(), self.dimensions)
                mutated += 1
        if mutated:
            self.fitness = None
        return mutated

    def is_valid(self) -> bool:
        return all(conn.is_valid(self.dimensions) for conn in self.connections)

    def summary(self, weights: FitnessWeights | None = None) -> dict[str, Any]:
        """Scores for reporting."""
        fitness = self.fitness if self.fitness is not None else self.evaluate(weights)
        return {
            "fitness": fitness,
            "collisions": self.collisions(),
            "total_length": self.total_length,
            "segments": self.segment_count,
            "connections": len(self.connections),
        }


def generate_individual(
    problem: Problem,
    seed: int | None = None,
    *,
    rng: np.random.Generator | None = None,
    router: StochasticRouter | None = None,
    router_config: RouterConfig | None = None,
) -> Individual:
    """
    Route every pin pair of ``problem`` into a new Individual.

    Pins are marked occupied up front, then pairs are routed in order, each
    walk seeing the wires placed before it.

    Args:
        problem: Problem to solve
        seed: Base seed; connection ``i`` gets its own stream ``(seed, i)``
        rng: Stream shared by all connections when no seed is given
        router: Router to use (built from ``router_config`` if omitted)
        router_config: Walk constants for a new router

    Returns:
        Unscored Individual
    """
    router = router or StochasticRouter(router_config)
    if seed is None and rng is None:
        rng = np.random.default_rng()

    occupancy = OccupancyMap.from_pins(problem)
    individual = Individual(dimensions=problem.dimensions)

    for index, (start, end) in enumerate(problem.pin_pairs):
        stream = np.random.default_rng((seed, index)) if seed is not None else rng
        individual.connections.append(router.route(start, end, occupancy, stream))

    return individual
