"""Terminal rendering of routing solutions."""

from __future__ import annotations

from typing import Any

from rich.text import Text

from gridroute.geometry import Direction, move
from gridroute.individual import Individual

__all__ = ["PALETTE", "render_text", "render_plain", "dump_coordinates", "to_dict"]

PALETTE = ("red", "green", "yellow", "blue", "magenta", "cyan", "white")

EMPTY = "∙"

_N, _S, _E, _W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST

# Pin glyph keyed by the direction the wire leaves (start) or arrives (end)
_START_PIN = {_N: "╨", _S: "╥", _E: "╞", _W: "╡"}
_END_PIN = {_N: "╥", _S: "╨", _E: "╡", _W: "╞"}

# Corner glyph keyed by (incoming direction, outgoing direction)
_CORNER = {
    (_E, _N): "╝",
    (_W, _N): "╚",
    (_E, _S): "╗",
    (_W, _S): "╔",
    (_N, _E): "╔",
    (_S, _E): "╚",
    (_N, _W): "╗",
    (_S, _W): "╝",
}


def _straight(direction: Direction) -> str:
    return "║" if direction.is_vertical else "═"


def _glyph_grid(individual: Individual) -> list[list[tuple[str, str]]]:
    """(character, style) for every cell; later connections draw on top."""
    rows, cols = individual.dimensions
    grid = [[(EMPTY, "white") for _ in range(cols)] for _ in range(rows)]

    for index, conn in enumerate(individual.connections):
        if not conn.segments:
            continue
        color = PALETTE[index % len(PALETTE)]
        point = conn.start
        grid[point[0]][point[1]] = (_START_PIN[conn.segments[0].direction], color)

        for i, seg in enumerate(conn.segments):
            for step in range(1, seg.length):
                r, c = move(point, seg.direction, step)
                grid[r][c] = (_straight(seg.direction), color)
            point = move(point, seg.direction, seg.length)

            if i < len(conn.segments) - 1:
                turn = (seg.direction, conn.segments[i + 1].direction)
                grid[point[0]][point[1]] = (_CORNER.get(turn, _straight(seg.direction)), color)

        grid[point[0]][point[1]] = (_END_PIN[conn.segments[-1].direction], color)

    return grid


def render_text(individual: Individual) -> Text:
    """Colored grid picture, one connection per palette color."""
    text = Text()
    for row in _glyph_grid(individual):
        for char, style in row:
            text.append(char, style=style)
        text.append("\n")
    return text


def render_plain(individual: Individual) -> str:
    """The grid picture without colors."""
    return "\n".join("".join(char for char, _ in row) for row in _glyph_grid(individual))


def dump_coordinates(individual: Individual) -> str:
    """Raw per-connection coordinate listing."""
    lines = []
    for index, conn in enumerate(individual.connections):
        lines.append(f"#{index} {conn}")
        lines.append("    " + " ".join(f"{r},{c}" for r, c in conn.cells()))
    return "\n".join(lines)


def to_dict(individual: Individual) -> dict[str, Any]:
    """JSON-serializable description of a solution."""
    return {
        "dimensions": list(individual.dimensions),
        **individual.summary(),
        "connections": [
            {
                "start": list(conn.start),
                "end": list(conn.end),
                "segments": [
                    {"direction": seg.direction.name, "length": seg.length}
                    for seg in conn.segments
                ],
            }
            for conn in individual.connections
        ],
    }
