"""Tracing module: logs Tango search and digging steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the solving or generation process."""

    timestamp: float
    step_number: int
    action_type: str  # 'place', 'backtrack', 'locked_check', 'solution_found', 'dig_attempt', ...
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[str] = None
    filled_count: Optional[int] = None  # Number of non-empty cells after the step
    attempt: Optional[int] = None  # Digger attempt number
    is_valid: Optional[bool] = None
    reason: Optional[str] = None  # Why backtracking or rejection occurred


class Tracer:
    """Records search steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_place(self, row: int, col: int, value: Any, filled_count: int):
        """Log a tentative placement on an empty cell."""
        if not self.enabled:
            return
        self._record('place', row=row, col=col, value=str(value), filled_count=filled_count)

    def log_backtrack(self, row: int, col: int, reason: str = "No legal symbol"):
        """Log a backtrack event."""
        if not self.enabled:
            return
        self._record('backtrack', row=row, col=col, reason=reason)

    def log_locked_check(self, row: int, col: int, value: Any, is_valid: bool):
        """Log re-validation of a pre-filled cell."""
        if not self.enabled:
            return
        self._record('locked_check', row=row, col=col, value=str(value), is_valid=is_valid)

    def log_solution_found(self, filled_count: int):
        """Log when a full grid is reached."""
        if not self.enabled:
            return
        self._record('solution_found', filled_count=filled_count)

    def log_dig_attempt(self, attempt: int, filled_count: int, removed: int, constraints: int):
        """Log a digger attempt before verification."""
        if not self.enabled:
            return
        self._record(
            'dig_attempt',
            attempt=attempt,
            filled_count=filled_count,
            reason=f"Removed {removed} cells, kept {constraints} constraints",
        )

    def log_dig_rejected(self, attempt: int, reason: str):
        """Log a discarded digger attempt."""
        if not self.enabled:
            return
        self._record('dig_rejected', attempt=attempt, is_valid=False, reason=reason)

    def log_level_accepted(self, attempt: int, filled_count: int):
        """Log the level the digger hands back."""
        if not self.enabled:
            return
        self._record('level_accepted', attempt=attempt, filled_count=filled_count, is_valid=True)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'row', 'col', 'value',
            'filled_count', 'attempt', 'is_valid', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_placements': action_counts.get('place', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_dig_attempts': action_counts.get('dig_attempt', 0),
        }

    def absorb(self, other: "Tracer") -> None:
        """Append another tracer's steps, renumbering them after ours."""
        if not self.enabled:
            return
        for step in other.steps:
            self.step_counter += 1
            self.steps.append(replace(step, step_number=self.step_counter))


# Global tracer instance. Library calls share it, so it records nothing until
# tracing is switched on explicitly.
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer (disabled until enable_tracing())."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=False)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
