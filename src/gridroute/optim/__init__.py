"""
Optimizers that search the space of whole routing solutions.

- GeneticOptimizer: tournament selection, single-connection crossover, jog
  mutation, generational replacement
- RandomSearchOptimizer: independent workers building fresh solutions,
  reduced to a global best
"""

from gridroute.optim.genetic import (
    GeneticConfig,
    GeneticOptimizer,
    GeneticResult,
    tournament_select,
)
from gridroute.optim.random_search import (
    RandomSearchConfig,
    RandomSearchOptimizer,
    SearchResult,
    default_workers,
)

__all__ = [
    "GeneticConfig",
    "GeneticOptimizer",
    "GeneticResult",
    "tournament_select",
    "RandomSearchConfig",
    "RandomSearchOptimizer",
    "SearchResult",
    "default_workers",
]
