"""
Progress callback infrastructure for optimizer runs.

Optimizers accept an explicit ``progress_callback`` and otherwise fall back
to the callback installed by the nearest :class:`ProgressContext`.

Example::

    from gridroute.progress import ProgressContext

    def on_progress(progress: float, message: str, cancelable: bool) -> bool:
        print(f"{progress*100:.0f}%: {message}")
        return True  # False stops a cancelable operation

    with ProgressContext(callback=on_progress):
        GeneticOptimizer(problem).run()

For CLI usage, see gridroute.cli.progress for Rich-based progress bars.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TypeAlias

# Returns False to cancel, True to continue
ProgressCallback: TypeAlias = Callable[[float, str, bool], bool]

_current_progress: ContextVar[ProgressCallback | None] = ContextVar(
    "current_progress", default=None
)


def get_current_callback() -> ProgressCallback | None:
    """Get the progress callback of the enclosing ProgressContext, if any."""
    return _current_progress.get()


def resolve_callback(callback: ProgressCallback | None) -> ProgressCallback | None:
    """Prefer an explicit callback, else the one from context."""
    return callback if callback is not None else get_current_callback()


def report_progress(progress: float, message: str, cancelable: bool = True) -> bool:
    """Report through the context callback; always True when there is none."""
    callback = get_current_callback()
    if callback is not None:
        return callback(progress, message, cancelable)
    return True


class ProgressContext:
    """Context manager that installs a progress callback for its scope."""

    def __init__(self, callback: ProgressCallback | None = None):
        self._callback = callback
        self._token = None
        self._cancelled = False

    def __enter__(self) -> ProgressContext:
        self._token = _current_progress.set(self._callback)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _current_progress.reset(self._token)

    def report(self, progress: float, message: str, cancelable: bool = True) -> bool:
        """Report progress through the callback; False once cancelled."""
        if self._cancelled:
            return False
        if self._callback is not None:
            result = self._callback(progress, message, cancelable)
            if not result:
                self._cancelled = True
            return result
        return True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class SubProgressCallback:
    """
    Scale a phase's 0-100% into a slice of the parent's range.

    Example::

        init = SubProgressCallback(on_progress, start=0.0, end=0.1)
        init(0.5, "Population 500/1000")  # parent sees 5%
    """

    def __init__(
        self,
        parent: ProgressCallback,
        start: float = 0.0,
        end: float = 1.0,
        prefix: str = "",
    ):
        self._parent = parent
        self._start = start
        self._end = end
        self._prefix = prefix

    def __call__(self, progress: float, message: str, cancelable: bool = True) -> bool:
        if progress < 0:
            scaled = -1
        else:
            scaled = self._start + (progress * (self._end - self._start))

        full_message = f"{self._prefix}{message}" if self._prefix else message
        return self._parent(scaled, full_message, cancelable)


def create_cli_adapter(quiet: bool = False):
    """
    Bridge progress callbacks to a Rich progress bar.

    Example::

        with create_cli_adapter(quiet=args.quiet) as (progress, callback):
            optimizer.run(progress_callback=callback)
    """
    from .cli.progress import create_progress

    @contextmanager
    def adapter():
        with create_progress(quiet=quiet) as progress:
            task_id = None

            def callback(prog: float, message: str, cancelable: bool) -> bool:
                nonlocal task_id
                if task_id is None:
                    task_id = progress.add_task(message, total=100)
                if prog >= 0:
                    progress.update(task_id, completed=int(prog * 100), description=message)
                else:
                    progress.update(task_id, description=message)
                return True

            yield progress, callback

    return adapter()
