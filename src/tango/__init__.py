"""Tango 6x6 puzzle core: constraint model, backtracking solver and level generator."""

from .model import (
    GRID_SIZE,
    Constraint,
    Difficulty,
    Edge,
    Level,
    Relation,
    Symbol,
    difficulty_for_level,
    empty_grid,
    make_grid,
)
from .errors import GenerationFailure, LevelFormatError, SearchInvariantError, TangoError
from .rules import can_place
from .solver_core import count_solutions, generate_solution, solve
from .digger import dig_level
from .checks import HintKind, audit_level, find_violations, is_won, line_progress, next_hint
from .loader import load_levels, parse_level

__all__ = [
    "GRID_SIZE",
    "Constraint",
    "Difficulty",
    "Edge",
    "Level",
    "Relation",
    "Symbol",
    "difficulty_for_level",
    "empty_grid",
    "make_grid",
    "GenerationFailure",
    "LevelFormatError",
    "SearchInvariantError",
    "TangoError",
    "can_place",
    "count_solutions",
    "generate_solution",
    "solve",
    "dig_level",
    "HintKind",
    "audit_level",
    "find_violations",
    "is_won",
    "line_progress",
    "next_hint",
    "load_levels",
    "parse_level",
]
