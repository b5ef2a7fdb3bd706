"""CLI entrypoint: solve level packs, generate new levels, audit shipped levels."""

import argparse
import csv
import json
import os
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from solver import solve_puzzle
from src.tango.checks import audit_levels
from src.tango.digger import MAX_ATTEMPTS, dig_level
from src.tango.errors import GenerationFailure, LevelFormatError, TangoError
from src.tango.loader import level_to_record, load_levels, load_records
from src.tango.model import Difficulty
from src.utils.io import grid_to_string
from src.utils.trace import Tracer, enable_tracing, get_tracer, reset_tracer

LEVEL_SUFFIXES = [".json", ".jsonl", ".parquet"]
DEFAULT_LEVELS_PATH = Path(__file__).resolve().parent / "data" / "levels.json"


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Solve, generate and audit 6x6 Tango levels")
    parser.add_argument("--trace", type=Path, default=None, help="Optional path to write the search trace as CSV")
    commands = parser.add_subparsers(dest="command", required=True)

    solve_cmd = commands.add_parser("solve", help="Solve every level in a file or directory")
    solve_cmd.add_argument("input", type=Path, help="Path to a level file or directory of level files")
    solve_cmd.add_argument("--output", type=Path, default=None, help="Optional path to write results as CSV")

    gen_cmd = commands.add_parser("generate", help="Print freshly dug levels as JSON lines")
    gen_cmd.add_argument(
        "--difficulty",
        default=Difficulty.MEDIUM.value,
        choices=[d.value.lower() for d in Difficulty] + [d.value for d in Difficulty],
    )
    gen_cmd.add_argument("--count", type=int, default=1)
    gen_cmd.add_argument("--seed", type=int, default=None, help="Seed for reproducible generation")
    gen_cmd.add_argument("--max-attempts", type=int, default=MAX_ATTEMPTS)
    gen_cmd.add_argument(
        "--strict",
        action="store_true",
        help="Also reject levels that have more than one solution.",
    )

    audit_cmd = commands.add_parser("audit", help="Check that every level in a pack solves cleanly")
    audit_cmd.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="Level file to audit (default: $TANGO_LEVELS_PATH or data/levels.json)",
    )
    return parser.parse_args(argv)


def _level_files(path: Path) -> List[Path]:
    if path.is_file():
        return [path]
    if path.is_dir():
        return [p for p in sorted(path.iterdir()) if p.suffix in LEVEL_SUFFIXES]
    raise ValueError(f"Input path {path} is neither file nor directory")


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "solution", "status", "steps"])

        for r in results:
            writer.writerow([r["id"], r["solution"], r["status"], r["steps"]])


def _fresh_tracer() -> Tracer:
    """Start an empty, enabled global tracer for one unit of work."""
    reset_tracer()
    enable_tracing(True)
    return get_tracer()


def run_solve(args, run_tracer: Tracer) -> int:
    results: List[Dict[str, Any]] = []
    records = []
    for file_path in _level_files(args.input):
        try:
            records.extend(load_records(str(file_path)))
        except LevelFormatError as e:
            print(f"ERROR: Skipping {file_path}: {e}")

    for index, record in enumerate(records, start=1):
        puzzle_id = record.get("id", index)
        tracer = _fresh_tracer()

        try:
            solution = solve_puzzle(record)
        except TangoError as e:
            print(f"ERROR: Failed to solve level {puzzle_id}: {e}")
            results.append({"id": puzzle_id, "solution": "", "status": "error", "steps": -1})
            continue
        finally:
            run_tracer.absorb(tracer)

        results.append({
            "id": puzzle_id,
            "solution": grid_to_string(solution) if solution else "",
            "status": "solved" if solution else "unsatisfiable",
            "steps": tracer.summary()["num_placements"],
        })

    if args.output:
        write_results_csv(results, args.output)
    else:
        for r in results:
            print(f"{r['id']}\t{r['status']}\t{r['solution']}\t{r['steps']}")
    return 0


def run_generate(args, run_tracer: Tracer) -> int:
    rng = random.Random(args.seed)
    for index in range(1, args.count + 1):
        tracer = _fresh_tracer()
        try:
            level = dig_level(
                args.difficulty,
                rng=rng,
                max_attempts=args.max_attempts,
                strict=args.strict,
            )
        except GenerationFailure as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        finally:
            run_tracer.absorb(tracer)
        record = level_to_record(level)
        record["id"] = index
        print(json.dumps(record, separators=(",", ":")))
    return 0


def run_audit(args, run_tracer: Tracer) -> int:
    path = args.input or Path(os.environ.get("TANGO_LEVELS_PATH", DEFAULT_LEVELS_PATH))
    tracer = _fresh_tracer()
    try:
        results = audit_levels(load_levels(str(path)))
    except LevelFormatError as e:
        print(f"ERROR: Cannot audit {path}: {e}")
        return 1
    finally:
        run_tracer.absorb(tracer)

    failures = 0
    for result in results:
        if result.ok:
            print(f"Level {result.level_id}: OK")
            continue
        failures += 1
        problems = [
            name
            for name, passed in (
                ("no solution", result.solved),
                ("unbalanced", result.balanced),
                ("three in a row", result.no_triples),
                ("constraint broken", result.constraints_ok),
                ("differs from stored solution", result.matches_stored is not False),
            )
            if not passed
        ]
        print(f"Level {result.level_id}: FAILED ({', '.join(problems)})")
    print(f"Audited {len(results)} levels, {failures} failed")
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    run_tracer = Tracer(enabled=args.trace is not None)

    handlers = {"solve": run_solve, "generate": run_generate, "audit": run_audit}
    try:
        status = handlers[args.command](args, run_tracer)
    finally:
        # Leave the library-wide tracer switched off for any later caller.
        reset_tracer()

    if args.trace:
        run_tracer.to_csv(args.trace)
    return status


if __name__ == "__main__":
    sys.exit(main())
