"""
Genetic algorithm over whole routing solutions.

Provides population-based search using:
- Router-built initial population (optionally seeded per individual)
- Tournament selection without replacement inside a tournament
- Single-connection crossover between positionally aligned parents
- Per-connection jog mutation
- Full generational replacement (no elitism)

Example::

    from gridroute.optim.genetic import GeneticConfig, GeneticOptimizer
    from gridroute.problem import load_problem

    problem = load_problem("zad1.txt")
    optimizer = GeneticOptimizer(problem, GeneticConfig(population_size=200, seed=7))
    result = optimizer.run()
    print(result.fitness, result.best.collisions())
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from gridroute.exceptions import ConfigurationError
from gridroute.individual import FitnessWeights, Individual, generate_individual
from gridroute.problem import Problem
from gridroute.progress import ProgressCallback, SubProgressCallback, resolve_callback
from gridroute.router import RouterConfig, StochasticRouter

logger = logging.getLogger(__name__)

__all__ = [
    "GeneticConfig",
    "GeneticOptimizer",
    "GeneticResult",
    "tournament_select",
]

# Share of the progress bar spent building the initial population
_INIT_PROGRESS_SHARE = 0.1


@dataclass
class GeneticConfig:
    """Configuration for the genetic optimizer."""

    population_size: int = 1000
    generations: int = 100

    # Genetic operator rates
    crossover_rate: float = 0.8  # Per offspring
    mutation_rate: float = 0.03  # Per connection
    tournament_size: int = 20

    seed: int | None = None  # Individual i of the first population uses seed + i

    def validate(self) -> None:
        """Raise ConfigurationError for out-of-range parameters."""
        problems = {}
        if self.population_size < 1:
            problems["population_size"] = self.population_size
        if self.generations < 0:
            problems["generations"] = self.generations
        if self.tournament_size < 1:
            problems["tournament_size"] = self.tournament_size
        if not 0.0 <= self.crossover_rate <= 1.0:
            problems["crossover_rate"] = self.crossover_rate
        if not 0.0 <= self.mutation_rate <= 1.0:
            problems["mutation_rate"] = self.mutation_rate
        if self.seed is not None and self.seed < 0:
            problems["seed"] = self.seed
        if problems:
            raise ConfigurationError(
                "Invalid genetic optimizer configuration",
                context=problems,
                suggestions=[
                    "population_size and tournament_size must be at least 1",
                    "Rates are probabilities in [0, 1]; seeds are non-negative",
                ],
            )


@dataclass
class GeneticResult:
    """Outcome of a genetic run."""

    best: Individual
    history: list[float] = field(default_factory=list)  # Best fitness per generation
    generations_run: int = 0
    elapsed_ms: float = 0.0
    cancelled: bool = False

    @property
    def fitness(self) -> float:
        return self.best.fitness


def tournament_select(
    population: list[Individual], size: int, rng: np.random.Generator
) -> Individual:
    """
    Return the lowest-fitness Individual among ``size`` distinct random picks.

    The tournament shrinks to the population when it is smaller than
    ``size``. Individuals must carry a cached fitness.
    """
    k = min(size, len(population))
    picks = rng.choice(len(population), size=k, replace=False)
    return min((population[i] for i in picks), key=lambda ind: ind.fitness)


class GeneticOptimizer:
    """
    Genetic search over routing solutions.

    Every Individual in a generation is produced by copying a tournament
    winner, optionally splicing in one connection from a second winner and
    mutating connections. The new generation replaces the old one entirely,
    so the best solution seen so far can be lost between generations.
    """

    def __init__(
        self,
        problem: Problem,
        config: GeneticConfig | None = None,
        weights: FitnessWeights | None = None,
        router_config: RouterConfig | None = None,
    ):
        """
        Initialize the genetic optimizer.

        Args:
            problem: Problem to solve
            config: Population and operator parameters
            weights: Fitness weights
            router_config: Walk constants used to build the first population
        """
        self.problem = problem
        self.config = config or GeneticConfig()
        self.config.validate()
        self.weights = weights or FitnessWeights()
        self.router = StochasticRouter(router_config)
        self._fitness_history: list[float] = []

    def _initialize_population(
        self,
        rng: np.random.Generator,
        progress: ProgressCallback | None = None,
    ) -> list[Individual]:
        """Build and score the first generation."""
        size = self.config.population_size
        seed = self.config.seed
        population = []
        report_every = max(1, size // 100)

        for i in range(size):
            if seed is not None:
                ind = generate_individual(self.problem, seed + i, router=self.router)
            else:
                ind = generate_individual(self.problem, rng=rng, router=self.router)
            ind.evaluate(self.weights)
            population.append(ind)

            if progress is not None and (i + 1) % report_every == 0:
                progress((i + 1) / size, f"Generating population {i + 1}/{size}", False)

        return population

    def _breed(self, population: list[Individual], rng: np.random.Generator) -> Individual:
        """Produce one scored offspring."""
        cfg = self.config
        child = tournament_select(population, cfg.tournament_size, rng).copy()

        if rng.random() < cfg.crossover_rate:
            donor = tournament_select(population, cfg.tournament_size, rng)
            child.crossover(donor, rng.random())

        child.mutate(rng, cfg.mutation_rate)
        child.evaluate(self.weights)
        return child

    def _evolve(
        self, population: list[Individual], rng: np.random.Generator
    ) -> list[Individual]:
        """Perform one generation; the result replaces ``population``."""
        return [self._breed(population, rng) for _ in range(len(population))]

    @staticmethod
    def best_of(population: list[Individual]) -> Individual:
        return min(population, key=lambda ind: ind.fitness)

    def run(
        self,
        progress_callback: ProgressCallback | None = None,
        callback: Callable[[int, Individual], None] | None = None,
    ) -> GeneticResult:
        """
        Run the genetic search for the configured number of generations.

        Args:
            progress_callback: Progress reporter; returning False stops after
                the current generation
            callback: Called after every generation with (generation, best)

        Returns:
            GeneticResult with the best Individual of the final population
        """
        started = time.perf_counter()
        progress = resolve_callback(progress_callback)
        cfg = self.config
        rng = np.random.default_rng(cfg.seed)

        init_progress = (
            SubProgressCallback(progress, 0.0, _INIT_PROGRESS_SHARE) if progress else None
        )
        population = self._initialize_population(rng, init_progress)
        self._fitness_history = [self.best_of(population).fitness]
        logger.info(
            "Initial population of %d, best fitness %.3f",
            len(population),
            self._fitness_history[0],
        )

        cancelled = False
        generations_run = 0
        for gen in range(cfg.generations):
            population = self._evolve(population, rng)
            generations_run = gen + 1

            best = self.best_of(population)
            self._fitness_history.append(best.fitness)
            logger.debug("Generation %d: best fitness %.3f", generations_run, best.fitness)

            if callback:
                callback(gen, best)

            if progress is not None:
                fraction = _INIT_PROGRESS_SHARE + (1.0 - _INIT_PROGRESS_SHARE) * (
                    generations_run / cfg.generations
                )
                if not progress(fraction, f"Generation {generations_run}/{cfg.generations}", True):
                    cancelled = True
                    logger.info("Genetic search cancelled after %d generations", generations_run)
                    break

        best = self.best_of(population)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "Genetic search finished: fitness %.3f, %d collisions, %.0f ms",
            best.fitness,
            best.collisions(),
            elapsed_ms,
        )

        return GeneticResult(
            best=best,
            history=list(self._fitness_history),
            generations_run=generations_run,
            elapsed_ms=elapsed_ms,
            cancelled=cancelled,
        )
