"""Legality predicate shared by the solver, the generator and the digger.

Every check looks at cells on both sides of the candidate: an initial grid can
have filled cells anywhere, not only before the cell being placed in scan order.
The candidate cell itself is always read as the value being tried, whatever the
grid currently holds there.
"""

from typing import Iterable, List, Sequence

from .model import GRID_SIZE, LINE_LIMIT, Constraint, Symbol

Line = Sequence[Symbol]


def _row(grid: Sequence[Sequence[Symbol]], row: int) -> List[Symbol]:
    return list(grid[row])


def _column(grid: Sequence[Sequence[Symbol]], col: int) -> List[Symbol]:
    return [grid[r][col] for r in range(GRID_SIZE)]


def _line_breaks_triple(line: Line, index: int, value: Symbol) -> bool:
    """True if `value` at `index` completes three equal symbols in `line`."""
    # Windows (-2,-1,0), (-1,0,1) and (0,1,2) relative to the candidate.
    for start in (index - 2, index - 1, index):
        if start < 0 or start + 2 >= len(line):
            continue
        if all(k == index or line[k] is value for k in range(start, start + 3)):
            return True
    return False


def _line_exceeds_balance(line: Line, index: int, value: Symbol) -> bool:
    count = 1 + sum(1 for k, current in enumerate(line) if k != index and current is value)
    return count > LINE_LIMIT


def breaks_triple(grid: Sequence[Sequence[Symbol]], row: int, col: int, value: Symbol) -> bool:
    return _line_breaks_triple(_row(grid, row), col, value) or _line_breaks_triple(
        _column(grid, col), row, value
    )


def exceeds_balance(grid: Sequence[Sequence[Symbol]], row: int, col: int, value: Symbol) -> bool:
    return _line_exceeds_balance(_row(grid, row), col, value) or _line_exceeds_balance(
        _column(grid, col), row, value
    )


def breaks_relations(
    grid: Sequence[Sequence[Symbol]],
    row: int,
    col: int,
    value: Symbol,
    constraints: Iterable[Constraint],
) -> bool:
    for constraint in constraints:
        partner = constraint.partner_of(row, col)
        if partner is None:
            continue
        other = grid[partner[0]][partner[1]]
        # Unfilled partners impose nothing yet.
        if not constraint.accepts(value, other):
            return True
    return False


def can_place(
    grid: Sequence[Sequence[Symbol]],
    row: int,
    col: int,
    value: Symbol,
    constraints: Iterable[Constraint] = (),
) -> bool:
    """Check whether `value` at (row, col) keeps every rule family satisfied."""
    if value is Symbol.EMPTY:
        raise ValueError("can_place expects SUN or MOON, not EMPTY")
    if breaks_triple(grid, row, col, value):
        return False
    if exceeds_balance(grid, row, col, value):
        return False
    return not breaks_relations(grid, row, col, value, constraints)


def constraint_holds(grid: Sequence[Sequence[Symbol]], constraint: Constraint) -> bool:
    """True unless both endpoints are filled and the relation fails."""
    first = grid[constraint.row][constraint.col]
    other_row, other_col = constraint.other_cell
    return constraint.accepts(first, grid[other_row][other_col])
