import json
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from .errors import LevelFormatError
from .model import Constraint, Difficulty, Level, Symbol, make_grid
from .solver_core import solve

_INITIAL_KEYS = ("initialGrid", "initial_grid", "grid", "puzzle")
_SOLUTION_KEYS = ("solutionGrid", "solution_grid", "solution")


def load_levels(file_path: str) -> List[Level]:
    """
    Reads a level pack. Handles .json (object or array), .jsonl and .parquet.
    Returns one Level per record; malformed records raise LevelFormatError.
    """
    file_path = str(file_path)
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    return [parse_level(record) for record in load_records(file_path)]


def load_records(file_path: str) -> List[Dict[str, Any]]:
    """Raw level dictionaries from a level pack, before any parsing."""
    # Case 1: Parquet File (Binary)
    if file_path.endswith(".parquet"):
        df = pd.read_parquet(file_path)
        return [_coerce_record(r) for r in df.to_dict(orient="records")]

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            try:
                payload = json.load(f)
            except json.JSONDecodeError as e:
                raise LevelFormatError(f"{file_path}: invalid JSON ({e})") from e
        if isinstance(payload, dict) and isinstance(payload.get("levels"), list):
            payload = payload["levels"]
        if isinstance(payload, list):
            return [p for p in payload if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [payload]
        return []

    # Case 3: JSONL File (Text)
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                raise LevelFormatError(f"{file_path}:{line_number}: invalid JSON ({e})") from e
            if isinstance(obj, dict):
                data.append(obj)
    return data


def _coerce_jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _coerce_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_coerce_jsonable(v) for v in value]
    # numpy arrays and scalars coming out of parquet columns
    if hasattr(value, "tolist"):
        return _coerce_jsonable(value.tolist())
    if isinstance(value, str) and value.strip()[:1] in ("[", "{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _coerce_record(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_jsonable(v) for k, v in record.items()}


def _first_present(record: Dict[str, Any], keys) -> Optional[Any]:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def parse_level(record: Dict[str, Any], solve_missing: bool = True) -> Level:
    """
    Convert one level record into a Level. When the record carries no
    solution grid, the level is solved on load; an unsolvable level keeps
    solution=None so an audit can report it.
    """
    record = _coerce_record(record)
    level_id = record.get("id")

    raw_initial = _first_present(record, _INITIAL_KEYS)
    if raw_initial is None:
        raise LevelFormatError(f"Level {level_id!r} has no initial grid")

    try:
        initial = make_grid(raw_initial)
        raw_constraints = record.get("constraints") or []
        if not isinstance(raw_constraints, list):
            raise TypeError("constraints must be a list")
        constraints = [Constraint.from_dict(k) for k in raw_constraints]
        raw_solution = _first_present(record, _SOLUTION_KEYS)
        solution = make_grid(raw_solution) if raw_solution is not None else None
        difficulty = record.get("difficulty")
        tier = Difficulty.parse(difficulty) if difficulty else None
    except (KeyError, TypeError, ValueError) as e:
        raise LevelFormatError(f"Level {level_id!r} is malformed: {e}") from e

    if solution is None and solve_missing:
        solution = solve(initial, constraints)

    return Level(
        initial_grid=initial,
        constraints=constraints,
        solution=solution,
        level_id=level_id,
        difficulty=tier,
    )


def _grid_rows(grid) -> List[List[Optional[str]]]:
    return [[None if v is Symbol.EMPTY else v.value for v in row] for row in grid]


def level_to_record(level: Level) -> Dict[str, Any]:
    """Inverse of parse_level, in the same shape as the shipped level data."""
    record: Dict[str, Any] = {}
    if level.level_id is not None:
        record["id"] = level.level_id
    if level.difficulty is not None:
        record["difficulty"] = level.difficulty.value
    record["initialGrid"] = _grid_rows(level.initial_grid)
    record["constraints"] = [k.to_dict() for k in level.constraints]
    if level.solution is not None:
        record["solutionGrid"] = _grid_rows(level.solution)
    return record
