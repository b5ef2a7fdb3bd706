"""Integration-style tests for the backtracking solver."""

from solver import solve_puzzle
from src.tango.checks import is_valid_solution, line_progress, triple_cells
from src.tango.model import (
    Constraint,
    Edge,
    Relation,
    Symbol,
    copy_grid,
    empty_grid,
    make_grid,
)
from src.tango.solver_core import count_solutions, solve

S, M = Symbol.SUN, Symbol.MOON

SOLVED_ROWS = [
    "MMSSMS",
    "SSMMSM",
    "MMSSMS",
    "SSMMSM",
    "MSMSSM",
    "SMSMMS",
]


def _assert_legal(grid, constraints=()):
    assert triple_cells(grid) == set()
    progress = line_progress(grid)
    assert (progress.rows, progress.cols) == (6, 6)
    for k in constraints:
        first = grid[k.row][k.col]
        second = grid[k.other_cell[0]][k.other_cell[1]]
        if k.relation is Relation.EQUAL:
            assert first is second
        else:
            assert first is not second


def test_solves_empty_grid():
    solution = solve(empty_grid())
    assert solution is not None
    _assert_legal(solution)


def test_solver_is_deterministic():
    constraints = [
        Constraint(row=1, col=1, edge=Edge.RIGHT, relation=Relation.EQUAL),
        Constraint(row=3, col=4, edge=Edge.BOTTOM, relation=Relation.OPPOSITE),
    ]
    grid = make_grid(["S.....", "......", "..M...", "......", "....S.", "......"])
    first = solve(grid, constraints)
    second = solve(grid, constraints)
    assert first is not None
    assert first == second
    _assert_legal(first, constraints)


def test_constraint_scenario_never_repeats_first_pair():
    constraint = Constraint(row=0, col=0, edge=Edge.RIGHT, relation=Relation.OPPOSITE)
    grid = empty_grid()
    grid[0][0] = S
    grid[0][2] = S

    solution = solve(grid, [constraint])

    assert solution is not None
    assert solution[0][0] is S
    assert solution[0][2] is S
    assert solution[0][1] is M
    _assert_legal(solution, [constraint])


def test_locked_cells_are_kept():
    grid = make_grid(["M..S..", ".....M", ".M.S..", "......", ".S.SS.", "S....."])
    solution = solve(grid)
    assert solution is not None
    for r in range(6):
        for c in range(6):
            if grid[r][c] is not Symbol.EMPTY:
                assert solution[r][c] is grid[r][c]


def test_full_legal_grid_is_returned_unchanged():
    grid = make_grid(SOLVED_ROWS)
    assert solve(grid) == grid


def test_full_grid_with_unbalanced_row_is_unsatisfiable():
    rows = list(SOLVED_ROWS)
    rows[0] = "SSMSSM"
    assert solve(make_grid(rows)) is None


def test_contradictory_locked_cells_are_unsatisfiable():
    grid = make_grid(["SSS...", "......", "......", "......", "......", "......"])
    assert solve(grid) is None


def test_contradictory_constraint_is_unsatisfiable():
    constraint = Constraint(row=0, col=0, edge=Edge.RIGHT, relation=Relation.EQUAL)
    grid = make_grid(["SM....", "......", "......", "......", "......", "......"])
    assert solve(grid, [constraint]) is None


def test_solve_does_not_touch_callers_grid():
    grid = make_grid(["S.....", "......", "......", "......", "......", "......"])
    before = copy_grid(grid)
    solve(grid)
    assert grid == before


def test_solve_accepts_text_rows():
    solution = solve(["S.S...", "..M..S", ".M....", "M.....", "....S.", "......"])
    assert solution is not None
    assert is_valid_solution(solution)


def test_count_solutions():
    assert count_solutions(make_grid(SOLVED_ROWS)) == 1
    bad = list(SOLVED_ROWS)
    bad[0] = "SSMSSM"
    assert count_solutions(make_grid(bad)) == 0
    assert count_solutions(empty_grid(), limit=3) == 3

    almost = make_grid(SOLVED_ROWS)
    almost[5][5] = Symbol.EMPTY
    assert count_solutions(almost) == 1


def test_solve_puzzle_accepts_records():
    record = {
        "id": "demo",
        "initialGrid": ["S.S...", "..M..S", ".M....", "M.....", "....S.", "......"],
        "constraints": [{"row": 0, "col": 0, "type": "RIGHT", "relation": "OPPOSITE"}],
    }
    solution = solve_puzzle(record)
    assert solution is not None
    assert solution[0][1] is M
