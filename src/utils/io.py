"""Text helpers for grids: one line per row, one character per cell."""

from typing import Sequence

from src.tango.model import Grid, Symbol, make_grid


def format_grid(grid: Sequence[Sequence[Symbol]], sep: str = " ") -> str:
    """Render a grid as text, e.g. 'S M . S M M' per row."""
    return "\n".join(sep.join(value.value for value in row) for row in grid)


def parse_grid(text: str) -> Grid:
    """Parse text produced by format_grid (separators optional)."""
    rows = []
    for line in text.strip().splitlines():
        cells = [ch for ch in line if not ch.isspace() and ch not in ",|"]
        if cells:
            rows.append(cells)
    return make_grid(rows)


def grid_to_string(grid: Sequence[Sequence[Symbol]]) -> str:
    """Compact single-line form used in CSV output: rows joined by '/'."""
    return "/".join("".join(value.value for value in row) for row in grid)
