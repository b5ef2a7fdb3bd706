"""Depth-first Tango search shared by the deterministic solver and the generator.

The solver and the generator differ only in the order symbols are tried on an
empty cell, so both run the same `_search` routine with a different trial-order
policy. The search owns its working grid: a symbol is written before recursing
and explicitly set back to EMPTY when the branch fails.
"""

import random
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .errors import SearchInvariantError
from .model import GRID_SIZE, Constraint, Grid, Symbol, copy_grid, empty_grid, make_grid
from .rules import can_place
from src.utils.trace import Tracer, get_tracer

CELL_COUNT = GRID_SIZE * GRID_SIZE

TrialOrder = Callable[[int, int], Sequence[Symbol]]
# Called with the working grid once every cell is filled; True stops the search.
OnComplete = Callable[[Grid], bool]

_SUN_FIRST: Tuple[Symbol, Symbol] = (Symbol.SUN, Symbol.MOON)
_MOON_FIRST: Tuple[Symbol, Symbol] = (Symbol.MOON, Symbol.SUN)


def fixed_order(row: int, col: int) -> Sequence[Symbol]:
    """Sun before Moon everywhere: makes the solver reproducible."""
    return _SUN_FIRST


def random_order(rng: random.Random) -> TrialOrder:
    """Pick Sun-first or Moon-first independently for every cell."""

    def _order(row: int, col: int) -> Sequence[Symbol]:
        return _SUN_FIRST if rng.random() < 0.5 else _MOON_FIRST

    return _order


def solve(grid: Sequence[Sequence[Symbol]], constraints: Iterable[Constraint] = ()) -> Optional[Grid]:
    """
    Fill `grid` to completion, trying Sun before Moon in row-major order.
    Returns the first solution found, or None when the puzzle is unsatisfiable
    (including when a pre-filled cell already breaks a rule). `grid` itself is
    never modified.
    """
    working = make_grid(grid)
    found = _search(working, 0, tuple(constraints), fixed_order, _stop_at_first, get_tracer())
    return working if found else None


def count_solutions(
    grid: Sequence[Sequence[Symbol]],
    constraints: Iterable[Constraint] = (),
    limit: int = 2,
) -> int:
    """Count distinct completions of `grid`, stopping once `limit` are found."""
    if limit < 1:
        raise ValueError("limit must be at least 1")
    found: List[Grid] = []

    def _collect(full: Grid) -> bool:
        found.append(copy_grid(full))
        return len(found) >= limit

    _search(make_grid(grid), 0, tuple(constraints), fixed_order, _collect, get_tracer())
    return len(found)


def generate_solution(rng: Optional[random.Random] = None) -> Grid:
    """Build a complete legal grid from scratch with randomized symbol order."""
    rng = rng or random.Random()
    grid = empty_grid()
    if not _search(grid, 0, (), random_order(rng), _stop_at_first, get_tracer()):
        raise SearchInvariantError("Search from an empty board found no complete grid")
    return grid


def _stop_at_first(grid: Grid) -> bool:
    return True


def _filled(grid: Grid) -> int:
    return sum(1 for row in grid for value in row if value is not Symbol.EMPTY)


def _search(
    grid: Grid,
    index: int,
    constraints: Tuple[Constraint, ...],
    order: TrialOrder,
    on_complete: OnComplete,
    tracer: Optional[Tracer] = None,
) -> bool:
    tracer = tracer or get_tracer()
    if index == CELL_COUNT:
        tracer.log_solution_found(filled_count=CELL_COUNT)
        return on_complete(grid)

    row, col = divmod(index, GRID_SIZE)
    current = grid[row][col]

    # Pre-filled cells are re-validated against everything around them.
    if current is not Symbol.EMPTY:
        valid = can_place(grid, row, col, current, constraints)
        tracer.log_locked_check(row, col, current.value, is_valid=valid)
        if not valid:
            return False
        return _search(grid, index + 1, constraints, order, on_complete, tracer)

    for value in order(row, col):
        if not can_place(grid, row, col, value, constraints):
            continue
        grid[row][col] = value
        if tracer.enabled:
            tracer.log_place(row, col, value.value, filled_count=_filled(grid))
        if _search(grid, index + 1, constraints, order, on_complete, tracer):
            return True
        grid[row][col] = Symbol.EMPTY

    tracer.log_backtrack(row, col)
    return False
