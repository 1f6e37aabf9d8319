"""Progress indicators for CLI operations.

All progress output goes to stderr to keep stdout clean for the solution.

Usage:
    from gridroute.cli.progress import create_progress

    with create_progress(quiet=args.quiet) as progress:
        task = progress.add_task("Searching...", total=100)
        progress.update(task, completed=50)
"""

import sys


def is_terminal() -> bool:
    """Check if stderr is attached to a terminal."""
    return sys.stderr.isatty()


def create_progress(quiet: bool = False, **kwargs):
    """Create a Rich Progress instance configured for CLI use.

    Args:
        quiet: If True, returns a no-op progress context
        **kwargs: Additional arguments passed to Progress

    Returns:
        Progress context manager (or no-op if quiet or not a terminal)
    """
    if quiet or not is_terminal():
        return _NoOpProgress()

    from rich.progress import (
        BarColumn,
        Progress,
        SpinnerColumn,
        TaskProgressColumn,
        TextColumn,
        TimeElapsedColumn,
    )

    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=_get_stderr_console(),
        **kwargs,
    )


def _get_stderr_console():
    """Get a Rich Console that outputs to stderr."""
    from rich.console import Console

    return Console(stderr=True, force_terminal=None)


class _NoOpProgress:
    """No-op progress context manager for quiet mode."""

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def add_task(self, description: str, total: float | None = None, **kwargs) -> int:
        return 0

    def update(self, task_id: int, **kwargs) -> None:
        pass

    def advance(self, task_id: int, advance: float = 1) -> None:
        pass

    def remove_task(self, task_id: int) -> None:
        pass
