"""Error types and outcome codes shared by the solver and the generator."""

from enum import Enum


class InvalidParamsError(ValueError):
    """Generator or board parameters are out of range."""


class InconsistentBoardError(RuntimeError):
    """A clue cannot be satisfied given the current flags and reveals."""


class SolveOutcome(Enum):
    """Result of running the solver driver on a board."""

    SOLVED = "solved"
    STUCK = "stuck"
    INCONSISTENT = "inconsistent"


class GenerationStatus(Enum):
    """Result status of board generation."""

    OK = "ok"
    CANCELLED = "cancelled"
    NOT_GUARANTEED_LOGICAL = "not_guaranteed_logical"
