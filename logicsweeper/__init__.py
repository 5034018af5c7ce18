"""
Logical Minesweeper Solver

A deduction-only Minesweeper solver and no-guess board generator:
- Basic rules, subset logic and the global mine count
- Proof by contradiction on single frontier cells
- Linear algebra over the frontier constraint system
- Bounded enumeration of small frontier regions
- Generation of boards that can be cleared without guessing
"""

from importlib import import_module
from typing import Any

from .config import GeneratorConfig, SolverConfig
from .engine import Board
from .errors import (
    GenerationStatus,
    InconsistentBoardError,
    InvalidParamsError,
    SolveOutcome,
)
from .generator import CancelToken, GenerationResult, generate, generate_async
from .hint import ClueNote, Hint, explain_hint, hint
from .persistence import load_board, save_board
from .solver import LogicalSolver, is_solvable, simulate_play, solve

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Board",
    "LogicalSolver",
    "Hint",
    # Solving
    "solve",
    "simulate_play",
    "is_solvable",
    "hint",
    "explain_hint",
    "ClueNote",
    # Generation
    "generate",
    "generate_async",
    "CancelToken",
    "GenerationResult",
    "GenerationStatus",
    # Configuration and errors
    "SolverConfig",
    "GeneratorConfig",
    "SolveOutcome",
    "InvalidParamsError",
    "InconsistentBoardError",
    # Persistence
    "save_board",
    "load_board",
    # Analysis functions (loaded on demand, they pull in matplotlib)
    "run_solver_many_tests",
    "run_generator_many_tests",
    "run_level_analysis",
    "summarize_strategy_mix",
]

_ANALYSIS_NAMES = {
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_generator_many_tests",
    "run_level_analysis",
    "summarize_strategy_mix",
}


def __getattr__(name: str) -> Any:
    if name in _ANALYSIS_NAMES:
        module = import_module(".analysis", __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name}")
