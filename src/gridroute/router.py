"""
Occupancy-aware stochastic router.

Builds one Connection for one pin pair by a biased random walk. At every
step each of the four directions is weighted by:

- what the neighbouring cell holds (free, occupied by another wire, off-grid)
- how much closer the step brings the walk to the target pin
- a straightness bonus that grows with the cells the wire already consumed

Stepping straight back the way the walk came is forbidden.

Example::

    import numpy as np

    from gridroute.grid import OccupancyMap
    from gridroute.router import StochasticRouter

    occupancy = OccupancyMap(6, 6)
    router = StochasticRouter()
    conn = router.route((1, 3), (5, 3), occupancy, np.random.default_rng(1))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from gridroute.exceptions import DegenerateWalkError, RoutingError
from gridroute.geometry import DIRECTIONS, Connection, Direction, Point, Segment, manhattan, move
from gridroute.grid import OccupancyMap

logger = logging.getLogger(__name__)

__all__ = ["RouterConfig", "StochasticRouter"]


@dataclass
class RouterConfig:
    """Weighting constants for the random walk."""

    collision_factor: float = 0.1  # Neighbour cell already claimed by another wire
    boundary_factor: float = 0.0  # Step would leave the grid
    arrival_factor: float = 10.0  # Step lands exactly on the target pin
    step_bonus: float = 0.5  # Added to the favourite direction per consumed cell
    max_steps: int | None = None  # None = walk until the target is reached


class StochasticRouter:
    """Routes single pin pairs with a biased random walk."""

    def __init__(self, config: RouterConfig | None = None):
        self.config = config or RouterConfig()

    def direction_weights(
        self,
        point: Point,
        end: Point,
        occupancy: OccupancyMap,
        previous: Direction | None = None,
        consumed: int = 0,
    ) -> list[float]:
        """
        Normalized step probabilities in N, S, E, W order.

        Args:
            point: Current walk position
            end: Target pin
            occupancy: Cells claimed so far
            previous: Direction of the last step (its inverse is forbidden)
            consumed: Cells in the connection's already closed segments

        Raises:
            DegenerateWalkError: No direction has a positive weight
        """
        cfg = self.config
        factors = occupancy.neighbor_factors(point, cfg.collision_factor, cfg.boundary_factor)

        weights = []
        for direction, factor in zip(DIRECTIONS, factors):
            distance = manhattan(move(point, direction), end)
            closeness = cfg.arrival_factor if distance == 0 else 1.0 / distance
            weights.append(factor * closeness)

        if previous is not None:
            back = DIRECTIONS.index(previous.inverse)
            back_weight = weights[back]
            weights[back] = 0.0
            # Dead end: backtracking is the only move left
            if not any(weights):
                weights[back] = back_weight

        if not any(weights):
            raise DegenerateWalkError(
                "Every direction weight is zero",
                context={"point": point, "end": end, "shape": occupancy.shape},
                suggestions=["Grids need at least two cells along some axis"],
            )

        best = max(weights)
        bonus = cfg.step_bonus * consumed
        weights = [w + bonus if w == best else w for w in weights]

        total = sum(weights)
        return [w / total for w in weights]

    @staticmethod
    def pick_direction(probabilities: list[float], roll: float) -> Direction:
        """Map a uniform roll onto cumulative thresholds in N, S, E, W order."""
        cumulative = 0.0
        chosen = None
        for direction, p in zip(DIRECTIONS, probabilities):
            if p <= 0.0:
                continue
            cumulative += p
            chosen = direction
            if roll < cumulative:
                return direction
        # Rounding left the roll above the final threshold
        return chosen

    def route(
        self,
        start: Point,
        end: Point,
        occupancy: OccupancyMap,
        rng: np.random.Generator,
    ) -> Connection:
        """
        Walk from ``start`` until ``end`` is reached.

        Every cell the walk leaves is marked occupied. The target pin is
        cleared for the duration of the walk so approaching it is never
        treated as a collision, and marked again once the walk finishes or
        fails.

        Args:
            start: First pin
            end: Second pin
            occupancy: Claimed cells, updated in place
            rng: Random stream owned by the caller

        Returns:
            Connection whose segments telescope from ``start`` to ``end``
        """
        max_steps = self.config.max_steps
        segments: list[Segment] = []
        heading: Direction | None = None
        run = 0
        consumed = 0
        steps = 0
        current = start

        occupancy.clear(end)
        try:
            while current != end:
                probabilities = self.direction_weights(current, end, occupancy, heading, consumed)
                direction = self.pick_direction(probabilities, rng.random())

                occupancy.mark(current)
                if direction == heading:
                    run += 1
                else:
                    if heading is not None:
                        segments.append(Segment(heading, run))
                        consumed += run
                    heading, run = direction, 1
                current = move(current, direction)

                steps += 1
                if max_steps is not None and steps > max_steps:
                    raise RoutingError(
                        "Random walk exceeded the step limit",
                        context={"start": start, "end": end, "max_steps": max_steps},
                        suggestions=["Raise router.max_steps or leave it unset"],
                    )
        finally:
            occupancy.mark(end)

        if heading is not None:
            segments.append(Segment(heading, run))

        logger.debug(
            "Routed %s -> %s in %d steps (%d segments)", start, end, steps, len(segments)
        )
        return Connection(start=start, end=end, segments=segments)
