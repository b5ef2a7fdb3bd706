"""Tango board data structures: symbols, grids, constraints and levels."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Sequence, Tuple

GRID_SIZE = 6
LINE_LIMIT = GRID_SIZE // 2


class Symbol(Enum):
    EMPTY = "."
    SUN = "S"
    MOON = "M"

    @classmethod
    def parse(cls, raw: Any) -> "Symbol":
        """Accept a Symbol, its short text form, or None/"E" for an empty cell."""
        if isinstance(raw, Symbol):
            return raw
        if raw is None:
            return cls.EMPTY
        text = str(raw).strip().upper()
        if text in ("", ".", "E", "EMPTY", "NULL"):
            return cls.EMPTY
        if text in ("S", "SUN"):
            return cls.SUN
        if text in ("M", "MOON"):
            return cls.MOON
        raise ValueError(f"Unknown cell symbol: {raw!r}")


Cell = Tuple[int, int]
Grid = List[List[Symbol]]
FrozenGrid = Tuple[Tuple[Symbol, ...], ...]


class Edge(Enum):
    RIGHT = "RIGHT"
    BOTTOM = "BOTTOM"


class Relation(Enum):
    EQUAL = "EQUAL"
    OPPOSITE = "OPPOSITE"


class Difficulty(Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @classmethod
    def parse(cls, raw: Any) -> "Difficulty":
        if isinstance(raw, Difficulty):
            return raw
        try:
            return cls[str(raw).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown difficulty: {raw!r}") from None

    @property
    def removal_rate(self) -> float:
        return REMOVAL_RATES[self]


# Share of the 36 cells blanked out when digging a level.
REMOVAL_RATES = {
    Difficulty.EASY: 0.3,
    Difficulty.MEDIUM: 0.5,
    Difficulty.HARD: 0.7,
}


def difficulty_for_level(level_number: int) -> Difficulty:
    """Progression used when levels are served one after another (1-based)."""
    if level_number <= 2:
        return Difficulty.EASY
    if level_number <= 5:
        return Difficulty.MEDIUM
    return Difficulty.HARD


@dataclass(frozen=True)
class Constraint:
    """
    Equal/Opposite marker between (row, col) and its right or bottom neighbour.
    """

    row: int
    col: int
    edge: Edge
    relation: Relation

    def __post_init__(self) -> None:
        if not (0 <= self.row < GRID_SIZE and 0 <= self.col < GRID_SIZE):
            raise ValueError(f"Constraint origin off the board: ({self.row}, {self.col})")
        other_row, other_col = self.other_cell
        if other_row >= GRID_SIZE or other_col >= GRID_SIZE:
            raise ValueError(
                f"Constraint {self.edge.value} of ({self.row}, {self.col}) leaves the board"
            )

    @property
    def cell(self) -> Cell:
        return (self.row, self.col)

    @property
    def other_cell(self) -> Cell:
        if self.edge is Edge.RIGHT:
            return (self.row, self.col + 1)
        return (self.row + 1, self.col)

    def partner_of(self, row: int, col: int) -> Optional[Cell]:
        """Return the opposite endpoint if (row, col) is one of ours, else None."""
        if (row, col) == self.cell:
            return self.other_cell
        if (row, col) == self.other_cell:
            return self.cell
        return None

    def accepts(self, first: Symbol, second: Symbol) -> bool:
        if first is Symbol.EMPTY or second is Symbol.EMPTY:
            return True
        if self.relation is Relation.EQUAL:
            return first is second
        return first is not second

    @classmethod
    def from_dict(cls, raw: dict) -> "Constraint":
        if not isinstance(raw, dict):
            raise TypeError(f"Constraint must be a mapping, got {type(raw).__name__}")
        edge = raw.get("edge", raw.get("type"))
        return cls(
            row=int(raw["row"]),
            col=int(raw["col"]),
            edge=Edge(str(edge).upper()),
            relation=Relation(str(raw["relation"]).upper()),
        )

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "col": self.col,
            "type": self.edge.value,
            "relation": self.relation.value,
        }


def empty_grid() -> Grid:
    return [[Symbol.EMPTY] * GRID_SIZE for _ in range(GRID_SIZE)]


def make_grid(rows: Sequence[Sequence[Any]]) -> Grid:
    """Build a mutable grid from nested values, checking the 6x6 shape."""
    if len(rows) != GRID_SIZE:
        raise ValueError(f"Grid must have {GRID_SIZE} rows, got {len(rows)}")
    grid: Grid = []
    for r, row in enumerate(rows):
        if isinstance(row, str):
            row = list(row)
        if len(row) != GRID_SIZE:
            raise ValueError(f"Row {r} must have {GRID_SIZE} cells, got {len(row)}")
        grid.append([Symbol.parse(value) for value in row])
    return grid


def copy_grid(grid: Sequence[Sequence[Symbol]]) -> Grid:
    return [list(row) for row in grid]


def freeze_grid(grid: Sequence[Sequence[Symbol]]) -> FrozenGrid:
    return tuple(tuple(row) for row in grid)


def grids_match(first: Optional[Sequence[Sequence[Symbol]]], second: Optional[Sequence[Sequence[Symbol]]]) -> bool:
    if first is None or second is None:
        return False
    return freeze_grid(first) == freeze_grid(second)


@dataclass(frozen=True)
class Level:
    """A playable puzzle and the solution it was dug from."""

    initial_grid: FrozenGrid
    constraints: Tuple[Constraint, ...]
    solution: Optional[FrozenGrid]
    level_id: Optional[Any] = None
    difficulty: Optional[Difficulty] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Published grids are stored as tuples so consumers cannot edit them.
        object.__setattr__(self, "initial_grid", freeze_grid(self.initial_grid))
        object.__setattr__(self, "constraints", tuple(self.constraints))
        if self.solution is not None:
            object.__setattr__(self, "solution", freeze_grid(self.solution))

    def locked_cells(self) -> FrozenSet[Cell]:
        return frozenset(
            (r, c)
            for r, row in enumerate(self.initial_grid)
            for c, value in enumerate(row)
            if value is not Symbol.EMPTY
        )

    def working_grid(self) -> Grid:
        """Fresh mutable copy of the initial grid."""
        return copy_grid(self.initial_grid)
