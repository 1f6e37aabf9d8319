"""
Command-line interface for gridroute.

    gridroute genetic <problem>     - Genetic search for a low-cost routing
    gridroute random <problem>      - Parallel random search baseline
    gridroute config                - Show config files, settings, or create one

Examples:
    gridroute genetic zad1.txt --population 500 --generations 50
    gridroute genetic zad1.txt --seed 7 --format json
    gridroute random zad1.txt --iterations 100000 --workers 8
    gridroute random zad1.txt --seed 1 --format coords
    gridroute config --init
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from gridroute import __version__
from gridroute.config import CONFIG_FILENAMES, Config, generate_template, get_config_paths
from gridroute.exceptions import GridRouteError
from gridroute.individual import Individual
from gridroute.optim.genetic import GeneticOptimizer
from gridroute.optim.random_search import RandomSearchOptimizer
from gridroute.problem import load_problem
from gridroute.progress import create_cli_adapter
from gridroute.render import dump_coordinates, render_text, to_dict

__all__ = ["main"]

logger = logging.getLogger("gridroute")


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("problem", help="Path to problem file (W;H then r0;c0;r1;c1 lines)")
    parser.add_argument("--seed", type=int, help="Seed for a reproducible run")
    parser.add_argument("--format", choices=["grid", "coords", "json"], help="Output format")
    parser.add_argument("-q", "--quiet", action="store_true", default=None, help="No progress bar")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Log to stderr (-vv for debug)"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridroute",
        description="Stochastic grid wire router with genetic and random search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"gridroute {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    genetic_parser = subparsers.add_parser("genetic", help="Run the genetic optimizer")
    _add_common_arguments(genetic_parser)
    genetic_parser.add_argument("--population", type=int, dest="population_size")
    genetic_parser.add_argument("--generations", type=int)
    genetic_parser.add_argument("--crossover-rate", type=float)
    genetic_parser.add_argument("--mutation-rate", type=float)
    genetic_parser.add_argument("--tournament-size", type=int)

    random_parser = subparsers.add_parser("random", help="Run the random search optimizer")
    _add_common_arguments(random_parser)
    random_parser.add_argument("--iterations", type=int)
    random_parser.add_argument("--workers", type=int, help="Worker threads (unseeded runs only)")

    config_parser = subparsers.add_parser(
        "config", help="Show config files and settings or create one"
    )
    config_parser.add_argument("--show", action="store_true", help="Show effective settings")
    config_parser.add_argument("--init", action="store_true", help="Write a template config")
    config_parser.add_argument("--force", action="store_true", help="Overwrite existing config")

    return parser


def _overrides(args: argparse.Namespace, names: List[str]) -> dict:
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def _print_result(individual: Individual, elapsed_ms: float, fmt: str) -> None:
    if fmt == "json":
        payload = to_dict(individual)
        payload["elapsed_ms"] = round(elapsed_ms, 3)
        print(json.dumps(payload, indent=2))
        return

    summary = individual.summary()
    print(f"Best evaluate: {summary['fitness']:.3f}")
    print(f"Conflict at: {summary['collisions']} points")
    print(f"Compute time: {elapsed_ms:.0f} ms")

    if fmt == "coords":
        print(dump_coordinates(individual))
    else:
        from rich.console import Console

        Console(highlight=False).print(render_text(individual), end="")


def _run_genetic(args: argparse.Namespace, config: Config) -> int:
    problem = load_problem(args.problem)
    genetic = replace(
        config.genetic,
        **_overrides(
            args,
            [
                "population_size",
                "generations",
                "crossover_rate",
                "mutation_rate",
                "tournament_size",
            ],
        ),
        seed=args.seed if args.seed is not None else config.defaults.seed,
    )
    optimizer = GeneticOptimizer(problem, genetic, config.fitness, config.router)

    with create_cli_adapter(quiet=args.quiet) as (_, callback):
        result = optimizer.run(progress_callback=callback)

    _print_result(result.best, result.elapsed_ms, args.format)
    return 0


def _run_random(args: argparse.Namespace, config: Config) -> int:
    problem = load_problem(args.problem)
    search = replace(
        config.search,
        **_overrides(args, ["iterations", "workers"]),
        seed=args.seed if args.seed is not None else config.defaults.seed,
    )
    optimizer = RandomSearchOptimizer(problem, search, config.fitness, config.router)

    with create_cli_adapter(quiet=args.quiet) as (_, callback):
        result = optimizer.run(progress_callback=callback)

    _print_result(result.best, result.elapsed_ms, args.format)
    return 0


def _run_config(args: argparse.Namespace, config: Config) -> int:
    if args.init:
        target = Path.cwd() / CONFIG_FILENAMES[0]
        if target.exists() and not args.force:
            print(f"Error: {target} already exists (use --force to overwrite)", file=sys.stderr)
            return 1
        target.write_text(generate_template(), encoding="utf-8")
        print(f"Wrote {target}")
        return 0

    if args.show:
        for section, values in config.as_dict().items():
            print(f"[{section}]")
            for key, value in values.items():
                print(f"  {key} = {value!r}  ({config.get_source(f'{section}.{key}')})")
        return 0

    for scope, path in get_config_paths().items():
        print(f"{scope}: {path if path else '(none)'}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the gridroute CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = Config.load()
        if args.command == "config":
            return _run_config(args, config)

        _configure_logging(args.verbose or (1 if config.defaults.verbose else 0))
        if args.quiet is None:
            args.quiet = config.defaults.quiet
        if args.format is None:
            args.format = config.defaults.format

        if args.command == "genetic":
            return _run_genetic(args, config)
        return _run_random(args, config)
    except GridRouteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
