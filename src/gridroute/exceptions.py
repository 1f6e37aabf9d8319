"""
Custom exception hierarchy for gridroute.

Every error carries optional context (file, line, point, ...) and a list of
suggestions, rendered into a single readable message.

Example::

    from gridroute.exceptions import ProblemFormatError, ValidationError

    raise ProblemFormatError(
        "Expected 4 fields in pin line",
        file_path="zad1.txt",
        line=3,
        suggestions=["Pin lines have the form r0;c0;r1;c1"],
    )

    raise ValidationError(["Pin (7, 2) is outside the 6x6 grid"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class GridRouteError(Exception):
    """
    Base exception for all gridroute errors.

    Attributes:
        context: Dictionary of contextual information (file, line, point, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ProblemFormatError(GridRouteError):
    """
    A problem file could not be read or parsed.

    Example::

        raise ProblemFormatError(
            "Invalid integer 'x'",
            file_path="zad1.txt",
            line=2,
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        line: Optional[int] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        if line is not None and "line" not in ctx:
            ctx["line"] = line

        super().__init__(message, ctx, suggestions)


class ValidationError(GridRouteError):
    """
    Problem validation failed with one or more errors.

    Collects every error instead of stopping at the first one.

    Attributes:
        errors: List of individual validation error messages
    """

    def __init__(
        self,
        errors: List[str],
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.errors = errors
        message = f"Validation failed with {len(errors)} error(s):\n"
        message += "\n".join(f"  {i + 1}. {e}" for i, e in enumerate(errors))
        super().__init__(message, context, suggestions)


class RoutingError(GridRouteError):
    """
    A connection could not be routed.

    Example::

        raise RoutingError(
            "Walk exceeded step limit",
            context={"start": (1, 3), "end": (5, 3), "max_steps": 10000},
        )
    """

    pass


class DegenerateWalkError(RoutingError):
    """
    Every direction weight collapsed to zero during a random walk.

    Only reachable on grids where a point has no in-bounds neighbour at all.
    """

    pass


class GridBoundsError(GridRouteError):
    """
    A grid cell outside the occupancy map was accessed.

    This is an invariant violation, never a user error.
    """

    pass


class ConnectionStateError(GridRouteError):
    """
    A connection operation was applied to an invalid segment list.

    Raised for structural edits on a connection without segments.
    """

    pass


class ConfigurationError(GridRouteError):
    """
    Optimizer or router parameters are invalid.

    Example::

        raise ConfigurationError(
            "population_size must be at least 1",
            context={"population_size": 0},
        )
    """

    pass


__all__ = [
    "GridRouteError",
    "ProblemFormatError",
    "ValidationError",
    "RoutingError",
    "DegenerateWalkError",
    "GridBoundsError",
    "ConnectionStateError",
    "ConfigurationError",
]
