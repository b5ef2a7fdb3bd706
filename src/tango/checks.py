"""Whole-grid checks for live boards: violations, progress, win and hints."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Set

from .model import GRID_SIZE, LINE_LIMIT, Cell, Constraint, Level, Symbol, grids_match
from .rules import constraint_holds
from .solver_core import solve

Board = Sequence[Sequence[Symbol]]


@dataclass(frozen=True)
class Progress:
    rows: int
    cols: int


class HintKind(Enum):
    ERROR = "error"  # a filled cell disagrees with the solution
    REVEAL = "reveal"  # an empty cell gets its solution value


@dataclass(frozen=True)
class Hint:
    row: int
    col: int
    value: Symbol
    kind: HintKind


@dataclass(frozen=True)
class AuditResult:
    level_id: Any
    solved: bool
    balanced: bool
    no_triples: bool
    constraints_ok: bool
    matches_stored: Optional[bool]  # None when the level ships no solution

    @property
    def ok(self) -> bool:
        return (
            self.solved
            and self.balanced
            and self.no_triples
            and self.constraints_ok
            and self.matches_stored is not False
        )


def _lines() -> List[List[Cell]]:
    rows = [[(r, c) for c in range(GRID_SIZE)] for r in range(GRID_SIZE)]
    cols = [[(r, c) for r in range(GRID_SIZE)] for c in range(GRID_SIZE)]
    return rows + cols


def triple_cells(grid: Board) -> Set[Cell]:
    cells: Set[Cell] = set()
    for line in _lines():
        for start in range(GRID_SIZE - 2):
            window = line[start:start + 3]
            values = {grid[r][c] for r, c in window}
            if len(values) == 1 and Symbol.EMPTY not in values:
                cells.update(window)
    return cells


def overfull_cells(grid: Board) -> Set[Cell]:
    cells: Set[Cell] = set()
    for line in _lines():
        for symbol in (Symbol.SUN, Symbol.MOON):
            holding = [(r, c) for r, c in line if grid[r][c] is symbol]
            if len(holding) > LINE_LIMIT:
                cells.update(holding)
    return cells


def find_violations(grid: Board) -> Set[Cell]:
    """Cells taking part in a triple or in a line with too many of one symbol."""
    return triple_cells(grid) | overfull_cells(grid)


def broken_constraints(grid: Board, constraints: Iterable[Constraint]) -> List[Constraint]:
    return [k for k in constraints if not constraint_holds(grid, k)]


def line_progress(grid: Board) -> Progress:
    """Count rows and columns that already hold exactly three of each symbol."""
    balanced = []
    for line in _lines():
        values = [grid[r][c] for r, c in line]
        balanced.append(
            values.count(Symbol.SUN) == LINE_LIMIT and values.count(Symbol.MOON) == LINE_LIMIT
        )
    return Progress(rows=sum(balanced[:GRID_SIZE]), cols=sum(balanced[GRID_SIZE:]))


def is_complete(grid: Board) -> bool:
    return all(value is not Symbol.EMPTY for row in grid for value in row)


def is_valid_solution(grid: Board, constraints: Iterable[Constraint] = ()) -> bool:
    if not is_complete(grid) or find_violations(grid):
        return False
    progress = line_progress(grid)
    if progress.rows != GRID_SIZE or progress.cols != GRID_SIZE:
        return False
    return not broken_constraints(grid, constraints)


def is_won(grid: Board, level: Level) -> bool:
    if not is_valid_solution(grid, level.constraints):
        return False
    # A legal grid still has to be the level's own solution.
    return level.solution is None or grids_match(grid, level.solution)


def next_hint(grid: Board, solution: Board) -> Optional[Hint]:
    """Fix the first wrong cell, otherwise reveal the first empty one."""
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            value = grid[r][c]
            if value is not Symbol.EMPTY and value is not solution[r][c]:
                return Hint(row=r, col=c, value=solution[r][c], kind=HintKind.ERROR)
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if grid[r][c] is Symbol.EMPTY:
                return Hint(row=r, col=c, value=solution[r][c], kind=HintKind.REVEAL)
    return None


def audit_level(level: Level) -> AuditResult:
    """Solve a level and check the result the way a level pack is vetted."""
    solution = solve(level.initial_grid, level.constraints)
    if solution is None:
        return AuditResult(
            level_id=level.level_id,
            solved=False,
            balanced=False,
            no_triples=False,
            constraints_ok=False,
            matches_stored=None if level.solution is None else False,
        )

    progress = line_progress(solution)
    return AuditResult(
        level_id=level.level_id,
        solved=True,
        balanced=progress.rows == GRID_SIZE and progress.cols == GRID_SIZE,
        no_triples=not triple_cells(solution),
        constraints_ok=not broken_constraints(solution, level.constraints),
        matches_stored=None if level.solution is None else grids_match(solution, level.solution),
    )


def audit_levels(levels: Iterable[Level]) -> List[AuditResult]:
    return [audit_level(level) for level in levels]
