"""Exception types raised by the Tango core."""

from typing import Any, Optional


class TangoError(Exception):
    """Base class for every error raised by the Tango core."""


class GenerationFailure(TangoError):
    """The digger ran out of attempts without producing an acceptable level."""

    def __init__(self, difficulty: Any, attempts: int, message: Optional[str] = None):
        self.difficulty = difficulty
        self.attempts = attempts
        label = getattr(difficulty, "value", difficulty)
        super().__init__(
            message or f"Failed to generate a {label} level after {attempts} attempts"
        )


class SearchInvariantError(TangoError, RuntimeError):
    """Search from an empty board found no grid; the legality rules are broken."""


class LevelFormatError(TangoError, ValueError):
    """A level record could not be turned into a Level."""
