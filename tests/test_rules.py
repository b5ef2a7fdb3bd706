"""Unit tests for the single-cell legality predicate."""

import pytest

from src.tango.model import Constraint, Edge, Relation, Symbol, empty_grid, make_grid
from src.tango.rules import breaks_triple, can_place, constraint_holds, exceeds_balance

S, M, E = Symbol.SUN, Symbol.MOON, Symbol.EMPTY


def _grid_with(cells):
    grid = empty_grid()
    for (r, c), value in cells.items():
        grid[r][c] = value
    return grid


def test_backward_triple_is_rejected():
    grid = _grid_with({(0, 0): S, (0, 1): S})
    assert not can_place(grid, 0, 2, S)
    assert can_place(grid, 0, 2, M)


def test_middle_triple_is_rejected():
    grid = _grid_with({(0, 0): S, (0, 2): S})
    assert breaks_triple(grid, 0, 1, S)
    assert not can_place(grid, 0, 1, S)
    assert can_place(grid, 0, 1, M)


def test_forward_triple_is_rejected():
    grid = _grid_with({(0, 4): M, (0, 5): M})
    assert not can_place(grid, 0, 3, M)
    assert can_place(grid, 0, 3, S)


def test_vertical_triples_in_every_alignment():
    grid = _grid_with({(1, 3): S, (2, 3): S})
    assert not can_place(grid, 0, 3, S)
    assert not can_place(grid, 3, 3, S)

    middle = _grid_with({(2, 0): M, (4, 0): M})
    assert not can_place(middle, 3, 0, M)


def test_balance_limit_counts_filled_cells_only():
    grid = _grid_with({(0, 0): S, (0, 2): S, (0, 4): S})
    assert exceeds_balance(grid, 0, 5, S)
    assert not can_place(grid, 0, 5, S)
    assert can_place(grid, 0, 5, M)


def test_balance_applies_to_columns():
    grid = _grid_with({(0, 1): M, (2, 1): M, (4, 1): M})
    assert not can_place(grid, 5, 1, M)


def test_prefilled_candidate_is_counted_once():
    grid = make_grid(["SMSMS.", "......", "......", "......", "......", "......"])
    # (0,0) already holds SUN; re-validating it must not count it twice.
    assert can_place(grid, 0, 0, S)
    assert can_place(grid, 0, 4, S)


def test_equal_constraint_from_either_endpoint():
    constraint = Constraint(row=2, col=2, edge=Edge.BOTTOM, relation=Relation.EQUAL)
    grid = _grid_with({(3, 2): M})
    assert not can_place(grid, 2, 2, S, [constraint])
    assert can_place(grid, 2, 2, M, [constraint])

    reverse = _grid_with({(2, 2): S})
    assert not can_place(reverse, 3, 2, M, [constraint])
    assert can_place(reverse, 3, 2, S, [constraint])


def test_opposite_constraint_and_unfilled_partner():
    constraint = Constraint(row=0, col=0, edge=Edge.RIGHT, relation=Relation.OPPOSITE)
    grid = _grid_with({(0, 0): S, (0, 2): S})
    assert not can_place(grid, 0, 1, S, [constraint])
    assert can_place(grid, 0, 1, M, [constraint])

    # With (0,0) still empty the constraint imposes nothing on (0,1).
    assert can_place(empty_grid(), 0, 1, S, [constraint])


def test_constraint_holds_on_partial_grid():
    constraint = Constraint(row=1, col=1, edge=Edge.RIGHT, relation=Relation.EQUAL)
    assert constraint_holds(_grid_with({(1, 1): S}), constraint)
    assert constraint_holds(_grid_with({(1, 1): S, (1, 2): S}), constraint)
    assert not constraint_holds(_grid_with({(1, 1): S, (1, 2): M}), constraint)


def test_placing_empty_is_an_error():
    with pytest.raises(ValueError):
        can_place(empty_grid(), 0, 0, E)


def test_constraint_off_the_board_is_rejected():
    with pytest.raises(ValueError):
        Constraint(row=0, col=5, edge=Edge.RIGHT, relation=Relation.EQUAL)
    with pytest.raises(ValueError):
        Constraint(row=5, col=0, edge=Edge.BOTTOM, relation=Relation.EQUAL)
