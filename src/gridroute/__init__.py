"""
gridroute: stochastic wire routing on a 2-D grid.

Connects pin pairs with 4-connected wires while minimizing overlaps, total
wire length and turn count.

Modules:
    geometry: Directions, segments and connections
    grid: Occupancy map used while building a solution
    router: Biased random-walk router for a single pin pair
    individual: Whole candidate solutions and their fitness
    optim: Genetic and random search optimizers
    problem: Problem definition and file loader
    render: Terminal rendering of solutions

Quick Start::

    from gridroute import GeneticOptimizer, load_problem

    problem = load_problem("zad1.txt")
    result = GeneticOptimizer(problem).run()
    print(result.fitness, result.best.collisions())
"""

__version__ = "0.1.0"

from gridroute.exceptions import (
    ConfigurationError,
    ConnectionStateError,
    DegenerateWalkError,
    GridBoundsError,
    GridRouteError,
    ProblemFormatError,
    RoutingError,
    ValidationError,
)
from gridroute.geometry import DIRECTIONS, Connection, Direction, Segment
from gridroute.grid import OccupancyMap
from gridroute.individual import FitnessWeights, Individual, generate_individual
from gridroute.optim import (
    GeneticConfig,
    GeneticOptimizer,
    GeneticResult,
    RandomSearchConfig,
    RandomSearchOptimizer,
    SearchResult,
)
from gridroute.problem import Problem, load_problem, parse_problem
from gridroute.router import RouterConfig, StochasticRouter

__all__ = [
    "__version__",
    # Geometry
    "DIRECTIONS",
    "Direction",
    "Segment",
    "Connection",
    "OccupancyMap",
    # Routing
    "RouterConfig",
    "StochasticRouter",
    "FitnessWeights",
    "Individual",
    "generate_individual",
    # Optimizers
    "GeneticConfig",
    "GeneticOptimizer",
    "GeneticResult",
    "RandomSearchConfig",
    "RandomSearchOptimizer",
    "SearchResult",
    # Problem
    "Problem",
    "load_problem",
    "parse_problem",
    # Errors
    "GridRouteError",
    "ProblemFormatError",
    "ValidationError",
    "RoutingError",
    "DegenerateWalkError",
    "GridBoundsError",
    "ConnectionStateError",
    "ConfigurationError",
]
