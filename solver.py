"""Top-level Tango solve interface.

Expose `solve_puzzle(puzzle)` that accepts either a Level or a raw level
dictionary compatible with `src.tango.loader.parse_level`.
"""

from typing import Any, Optional

from src.tango import solver_core
from src.tango.loader import parse_level
from src.tango.model import Grid, Level


def solve_puzzle(puzzle: Any) -> Optional[Grid]:
    """
    Solve a puzzle and return the completed grid, or None if it has no solution.
    Accepts:
      - Level instances (used directly)
      - Raw level dictionaries (parsed via `parse_level`)
    """
    if isinstance(puzzle, Level):
        level = puzzle
    elif isinstance(puzzle, dict):
        level = parse_level(puzzle, solve_missing=False)
    else:
        raise TypeError("solve_puzzle expects a Level instance or level dictionary")

    return solver_core.solve(level.initial_grid, level.constraints)


__all__ = ["solve_puzzle"]
