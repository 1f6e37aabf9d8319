"""
Routing problem definition and the text loader.

File format::

    W;H
    r0;c0;r1;c1
    r0;c0;r1;c1
    ...

The first line gives the grid size (``W`` bounds the row index, ``H`` the
column index); every following line is one pin pair. Blank lines are
ignored. Anything else is a fatal load error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from gridroute.exceptions import ProblemFormatError, ValidationError
from gridroute.geometry import Point

logger = logging.getLogger(__name__)

__all__ = ["Problem", "PinPair", "parse_problem", "load_problem"]

PinPair = tuple[Point, Point]


@dataclass(frozen=True)
class Problem:
    """
    Immutable routing problem shared by every router invocation.

    Attributes:
        dimensions: Grid size as (rows, cols)
        pin_pairs: Ordered pin pairs; Individuals keep one Connection per pair
            in the same order
    """

    dimensions: tuple[int, int]
    pin_pairs: tuple[PinPair, ...]

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so the problem stays hashable
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        object.__setattr__(
            self,
            "pin_pairs",
            tuple((tuple(start), tuple(end)) for start, end in self.pin_pairs),
        )
        self.validate()

    @classmethod
    def from_pairs(
        cls, dimensions: tuple[int, int], pin_pairs: Sequence[PinPair]
    ) -> Problem:
        return cls(dimensions=dimensions, pin_pairs=tuple(pin_pairs))

    @property
    def rows(self) -> int:
        return self.dimensions[0]

    @property
    def cols(self) -> int:
        return self.dimensions[1]

    def contains(self, point: Point) -> bool:
        return 0 <= point[0] < self.rows and 0 <= point[1] < self.cols

    def validate(self) -> None:
        """
        Check grid size and pin placement.

        Raises:
            ValidationError: With every problem found
        """
        errors: list[str] = []
        if len(self.dimensions) != 2 or any(d < 1 for d in self.dimensions):
            errors.append(f"Grid dimensions must be two positive integers, got {self.dimensions}")
            raise ValidationError(errors)

        for index, (start, end) in enumerate(self.pin_pairs):
            for point in (start, end):
                if not self.contains(point):
                    errors.append(
                        f"Pin pair {index}: pin {point} is outside the "
                        f"{self.rows}x{self.cols} grid"
                    )
            if start == end:
                errors.append(f"Pin pair {index}: both pins are at {start}")

        if errors:
            raise ValidationError(
                errors,
                context={"dimensions": self.dimensions, "pin_pairs": len(self.pin_pairs)},
                suggestions=["Pin coordinates are zero-based (row, column)"],
            )


def _parse_fields(
    line: str, expected: int, line_no: int, source: str | None
) -> list[int]:
    fields = [f.strip() for f in line.strip().split(";")]
    if len(fields) != expected:
        raise ProblemFormatError(
            f"Expected {expected} fields, got {len(fields)}",
            context={"text": line.strip()},
            line=line_no,
            file_path=source,
            suggestions=["Grid line is W;H, pin lines are r0;c0;r1;c1"],
        )
    try:
        return [int(f) for f in fields]
    except ValueError as e:
        raise ProblemFormatError(
            f"Invalid integer field: {e}",
            context={"text": line.strip()},
            line=line_no,
            file_path=source,
        ) from e


def parse_problem(text: str, source: str | None = None) -> Problem:
    """
    Parse problem text.

    Args:
        text: File contents
        source: Optional file name used in error messages

    Raises:
        ProblemFormatError: Malformed line or missing grid line
        ValidationError: Pins outside the grid or degenerate pin pairs
    """
    lines = [(i + 1, line) for i, line in enumerate(text.splitlines()) if line.strip()]
    if not lines:
        raise ProblemFormatError("Problem file is empty", file_path=source)

    header_no, header = lines[0]
    rows, cols = _parse_fields(header, 2, header_no, source)

    pin_pairs: list[PinPair] = []
    for line_no, line in lines[1:]:
        r0, c0, r1, c1 = _parse_fields(line, 4, line_no, source)
        pin_pairs.append(((r0, c0), (r1, c1)))

    problem = Problem(dimensions=(rows, cols), pin_pairs=tuple(pin_pairs))
    logger.debug(
        "Parsed problem %s: %dx%d grid, %d pin pairs",
        source or "<text>",
        rows,
        cols,
        len(pin_pairs),
    )
    return problem


def load_problem(path: str | Path) -> Problem:
    """Load a problem file from disk."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProblemFormatError(
            f"Cannot read problem file: {e.strerror or e}",
            file_path=path,
            suggestions=["Check the path and file permissions"],
        ) from e
    return parse_problem(text, source=str(path))
