"""Level digger: turn a generated solution into a playable Tango level.

A level is accepted when the deterministic solver, run on the dug grid and the
chosen constraints, reproduces the generated solution cell for cell. That only
shows the solver's first answer is the intended one; pass `strict=True` to also
require that no second completion exists.
"""

import math
import random
from typing import Any, List, Optional, Sequence

from .errors import GenerationFailure
from .model import (
    GRID_SIZE,
    Constraint,
    Difficulty,
    Edge,
    Grid,
    Level,
    Relation,
    Symbol,
    copy_grid,
    grids_match,
)
from .solver_core import count_solutions, generate_solution, solve
from src.utils.trace import get_tracer

MAX_ATTEMPTS = 100
MIN_CONSTRAINTS = 3
MAX_CONSTRAINTS = 5


def derive_constraints(solution: Sequence[Sequence[Symbol]]) -> List[Constraint]:
    """Label every adjacent pair of `solution` as EQUAL or OPPOSITE."""
    candidates: List[Constraint] = []
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE - 1):
            candidates.append(_label(solution, r, c, Edge.RIGHT))
    for r in range(GRID_SIZE - 1):
        for c in range(GRID_SIZE):
            candidates.append(_label(solution, r, c, Edge.BOTTOM))
    return candidates


def _label(solution: Sequence[Sequence[Symbol]], row: int, col: int, edge: Edge) -> Constraint:
    other_row, other_col = (row, col + 1) if edge is Edge.RIGHT else (row + 1, col)
    same = solution[row][col] is solution[other_row][other_col]
    relation = Relation.EQUAL if same else Relation.OPPOSITE
    return Constraint(row=row, col=col, edge=edge, relation=relation)


def pick_constraints(
    candidates: Sequence[Constraint],
    rng: random.Random,
    low: int = MIN_CONSTRAINTS,
    high: int = MAX_CONSTRAINTS,
) -> List[Constraint]:
    count = min(rng.randint(low, high), len(candidates))
    return rng.sample(list(candidates), count)


def dig_cells(solution: Sequence[Sequence[Symbol]], rate: float, rng: random.Random) -> Grid:
    """Blank out floor(36 * rate) distinct random cells of a copy of `solution`."""
    grid = copy_grid(solution)
    to_remove = math.floor(GRID_SIZE * GRID_SIZE * rate)
    cells = [(r, c) for r in range(GRID_SIZE) for c in range(GRID_SIZE)]
    for r, c in rng.sample(cells, to_remove):
        grid[r][c] = Symbol.EMPTY
    return grid


def dig_level(
    difficulty: Any = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
    max_attempts: int = MAX_ATTEMPTS,
    strict: bool = False,
) -> Level:
    """
    Generate a level for `difficulty` (a Difficulty or its name).
    Raises GenerationFailure once `max_attempts` candidates have been rejected.
    """
    tier = Difficulty.parse(difficulty)
    rng = rng or random.Random()
    tracer = get_tracer()

    for attempt in range(1, max_attempts + 1):
        solution = generate_solution(rng)
        constraints = pick_constraints(derive_constraints(solution), rng)
        initial = dig_cells(solution, tier.removal_rate, rng)
        removed = sum(1 for row in initial for value in row if value is Symbol.EMPTY)
        filled = GRID_SIZE * GRID_SIZE - removed
        tracer.log_dig_attempt(
            attempt, filled_count=filled, removed=removed, constraints=len(constraints)
        )

        if not grids_match(solve(initial, constraints), solution):
            tracer.log_dig_rejected(attempt, reason="Solver found a different grid")
            continue
        if strict and count_solutions(initial, constraints, limit=2) > 1:
            tracer.log_dig_rejected(attempt, reason="More than one solution")
            continue

        tracer.log_level_accepted(attempt, filled_count=filled)
        return Level(
            initial_grid=initial,
            constraints=constraints,
            solution=solution,
            difficulty=tier,
        )

    raise GenerationFailure(tier, max_attempts)
