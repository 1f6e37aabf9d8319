"""
Parallel random search baseline.

Splits an iteration budget across worker threads. Each worker builds fresh
Individuals with its own random stream and keeps its best one; the results
come back through futures and are reduced with a final linear scan.

A seeded run is reproducible and therefore single-threaded: iteration ``i``
builds its Individual from seed ``seed + i``.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

import numpy as np

from gridroute.exceptions import ConfigurationError
from gridroute.individual import FitnessWeights, Individual, generate_individual
from gridroute.problem import Problem
from gridroute.progress import ProgressCallback, resolve_callback
from gridroute.router import RouterConfig, StochasticRouter

logger = logging.getLogger(__name__)

__all__ = [
    "RandomSearchConfig",
    "RandomSearchOptimizer",
    "SearchResult",
    "default_workers",
]


def default_workers() -> int:
    """Half the logical CPUs, at least one."""
    return max(1, (os.cpu_count() or 2) // 2)


@dataclass
class RandomSearchConfig:
    """Configuration for random search."""

    iterations: int = 10000
    workers: int | None = None  # None = half the logical CPUs
    seed: int | None = None  # Set for a reproducible single-threaded run

    def validate(self) -> None:
        problems = {}
        if self.iterations < 1:
            problems["iterations"] = self.iterations
        if self.workers is not None and self.workers < 1:
            problems["workers"] = self.workers
        if self.seed is not None and self.seed < 0:
            problems["seed"] = self.seed
        if problems:
            raise ConfigurationError(
                "Invalid random search configuration",
                context=problems,
                suggestions=["iterations and workers must be at least 1, seeds non-negative"],
            )


@dataclass
class SearchResult:
    """Outcome of a random search run."""

    best: Individual
    elapsed_ms: float
    workers: int
    iterations: int  # Individuals actually built

    @property
    def fitness(self) -> float:
        return self.best.fitness


class RandomSearchOptimizer:
    """Repeatedly route the whole problem and keep the cheapest solution."""

    def __init__(
        self,
        problem: Problem,
        config: RandomSearchConfig | None = None,
        weights: FitnessWeights | None = None,
        router_config: RouterConfig | None = None,
    ):
        self.problem = problem
        self.config = config or RandomSearchConfig()
        self.config.validate()
        self.weights = weights or FitnessWeights()
        self.router = StochasticRouter(router_config)

    def _consider(self, best: Individual | None, candidate: Individual) -> Individual:
        candidate.evaluate(self.weights)
        if best is None or candidate.fitness < best.fitness:
            return candidate
        return best

    def _worker(self, iterations: int, seed_seq: np.random.SeedSequence) -> Individual:
        """Hot loop of one thread; touches nothing shared."""
        rng = np.random.default_rng(seed_seq)
        best: Individual | None = None
        for _ in range(iterations):
            candidate = generate_individual(self.problem, rng=rng, router=self.router)
            best = self._consider(best, candidate)
        return best

    def _run_seeded(self, progress: ProgressCallback | None) -> Individual:
        cfg = self.config
        report_every = max(1, cfg.iterations // 100)
        best: Individual | None = None
        for i in range(cfg.iterations):
            candidate = generate_individual(self.problem, cfg.seed + i, router=self.router)
            best = self._consider(best, candidate)
            if progress is not None and (i + 1) % report_every == 0:
                progress((i + 1) / cfg.iterations, f"Iteration {i + 1}/{cfg.iterations}", False)
        return best

    def _run_parallel(
        self, workers: int, per_worker: int, progress: ProgressCallback | None
    ) -> list[Individual]:
        seeds = np.random.SeedSequence().spawn(workers)
        results: list[Individual] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._worker, per_worker, seeds[i]): i for i in range(workers)
            }
            for future in as_completed(futures):
                worker_id = futures[future]
                best = future.result()
                logger.debug("Worker %d finished: fitness %.3f", worker_id, best.fitness)
                results.append(best)
                if progress is not None:
                    progress(
                        len(results) / workers,
                        f"Workers finished {len(results)}/{workers}",
                        False,
                    )
        return results

    def run(self, progress_callback: ProgressCallback | None = None) -> SearchResult:
        """
        Run the search to the full iteration budget.

        Unseeded runs give every worker ``iterations // workers`` iterations;
        the remainder is not run.
        """
        started = time.perf_counter()
        progress = resolve_callback(progress_callback)
        cfg = self.config

        if cfg.seed is not None:
            workers = 1
            iterations = cfg.iterations
            best = self._run_seeded(progress)
        else:
            workers = min(cfg.workers or default_workers(), cfg.iterations)
            per_worker = cfg.iterations // workers
            iterations = per_worker * workers
            candidates = self._run_parallel(workers, per_worker, progress)
            best = candidates[0]
            for candidate in candidates[1:]:
                if candidate.fitness < best.fitness:
                    best = candidate

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "Random search finished: %d iterations on %d worker(s), fitness %.3f, %.0f ms",
            iterations,
            workers,
            best.fitness,
            elapsed_ms,
        )
        return SearchResult(best=best, elapsed_ms=elapsed_ms, workers=workers, iterations=iterations)
