"""Logical Minesweeper solver driver: runs the strategy stack to a fixpoint."""

import logging
from typing import Any, Callable, Dict, List, Optional, Set

from .config import SolverConfig
from .constraints import StrategyResult, all_revealed
from .contradiction import CONTRADICTION, solve_by_contradiction
from .engine import HIDDEN, Board
from .errors import InconsistentBoardError, SolveOutcome
from .linear import LINEAR, solve_by_linear
from .rules import (
    BASIC,
    GLOBAL_COUNT,
    SUBSET,
    apply_basic_rules,
    apply_global_count,
    apply_subset_logic,
)
from .tank import TANK, tank_solve
from .utils import Cell

logger = logging.getLogger(__name__)

STRATEGY_ORDER = (BASIC, SUBSET, GLOBAL_COUNT, CONTRADICTION, LINEAR, TANK)


class LogicalSolver:
    """
    Deduction-only solver bound to one board.

    Strategies run in a fixed priority order:
    1. Basic rules
    2. Subset logic
    3. Global mine count
    4. Contradiction prover
    5. Linear solver
    6. Tank enumerator

    After any strategy makes progress the pass restarts from the basic
    rules. The solver never guesses and never touches the ground truth.
    """

    def __init__(
        self,
        board: Board,
        config: Optional[SolverConfig] = None,
        record_steps: bool = False,
    ) -> None:
        """
        Initialize a solver for a specific board.

        Args:
            board: The board to solve. Its view and flags are mutated.
            config: Strategy limits; defaults to ``SolverConfig()``.
            record_steps: If True, record a step history for replay.
                Leave False for benchmarks.
        """
        self.board = board
        self.config = config or SolverConfig()
        self.record_steps = record_steps

        # Metrics / counters (for analysis)
        self.attempted: Dict[str, int] = {name: 0 for name in STRATEGY_ORDER}
        self.inferred: Dict[str, int] = {name: 0 for name in STRATEGY_ORDER}
        self.passes_count: int = 0

        # Each step: action, cell, method, step_number, view/flags snapshots
        self.steps_history: List[Dict[str, Any]] = []

        # Cells changed since the basic rules (resp. subset logic) last ran
        self._basic_dirty: Set[Cell] = all_revealed(board)
        self._subset_dirty: Set[Cell] = set(self._basic_dirty)

    # -------------------------------------------------------------------------
    # Step recording
    # -------------------------------------------------------------------------

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "view": [row[:] for row in self.board.view],
            "flags": [row[:] for row in self.board.flags],
        }

    def _record_changes(
        self, method: str, changed: List[Cell], before: Dict[str, Any]
    ) -> None:
        """
        Record one step per changed cell, replaying the pass on ``before``.

        Cells come in application order, so each intermediate snapshot is
        the exact board state right after that cell changed.
        """
        view = before["view"]
        flags = before["flags"]
        for x, y in changed:
            if self.board.flags[y][x]:
                action = "flag"
                flags[y][x] = True
            else:
                action = "reveal"
                view[y][x] = self.board.view[y][x]
            self.steps_history.append({
                "action": action,
                "cell": (x, y),
                "method": method,
                "step_number": len(self.steps_history),
                "view_snapshot": [row[:] for row in view],
                "flags_snapshot": [row[:] for row in flags],
            })

    def record_reveal(self, method: str, changed: List[Cell]) -> None:
        """Note cells revealed outside the strategy loop (the opening move)."""
        self._mark_dirty(changed)
        if not self.record_steps or not changed:
            return
        before = self._snapshot()
        for x, y in changed:
            before["view"][y][x] = HIDDEN
        self._record_changes(method, changed, before)

    # -------------------------------------------------------------------------
    # Strategy passes
    # -------------------------------------------------------------------------

    def _mark_dirty(self, changed: List[Cell]) -> None:
        self._basic_dirty.update(changed)
        self._subset_dirty.update(changed)

    def _run(self, name: str, apply: Callable[[], StrategyResult]) -> bool:
        before = self._snapshot() if self.record_steps else None
        self.attempted[name] += 1

        result = apply()
        if not result.progress:
            return False

        self.inferred[name] += len(result.changed)
        self._mark_dirty(result.changed)
        if before is not None:
            self._record_changes(name, result.changed, before)
        return True

    def _apply_basic(self) -> StrategyResult:
        dirty, self._basic_dirty = self._basic_dirty, set()
        return apply_basic_rules(self.board, dirty)

    def _apply_subset(self) -> StrategyResult:
        dirty, self._subset_dirty = self._subset_dirty, set()
        return apply_subset_logic(self.board, dirty)

    def step(self) -> Optional[str]:
        """
        Run one pass of the strategy stack.

        Returns:
            The label of the first strategy that made progress, or None
            if no strategy could deduce anything.

        Raises:
            InconsistentBoardError: If the board's clues and flags cannot
                be satisfied.
        """
        self.passes_count += 1
        board, config = self.board, self.config
        strategies = (
            (BASIC, self._apply_basic),
            (SUBSET, self._apply_subset),
            (GLOBAL_COUNT, lambda: apply_global_count(board)),
            (CONTRADICTION, lambda: solve_by_contradiction(board, config)),
            (LINEAR, lambda: solve_by_linear(board, config)),
            (TANK, lambda: tank_solve(board, config=config)),
        )
        for name, apply in strategies:
            if self._run(name, apply):
                return name
        return None

    def is_solved(self) -> bool:
        """True when every safe cell is revealed or every mine is flagged."""
        board = self.board
        if board.is_victory():
            return True
        return all(board.is_flagged(x, y) for x, y in board.mine_positions())

    def solve(self) -> SolveOutcome:
        """
        Apply strategies until no further deduction is possible.

        Returns:
            SOLVED, STUCK, or INCONSISTENT when the player's flags contradict
            the clues. Never raises for board content.
        """
        board = self.board
        # Each productive pass changes at least one cell.
        max_passes = 2 * board.width * board.height + 1

        try:
            for _ in range(max_passes):
                if self.step() is None:
                    break
        except InconsistentBoardError as e:
            logger.debug("solver stopped on an inconsistent board: %s", e)
            return SolveOutcome.INCONSISTENT

        return SolveOutcome.SOLVED if self.is_solved() else SolveOutcome.STUCK

    def summary(self) -> Dict[str, Any]:
        """Counters for analysis: attempts and inferred cells per strategy."""
        return {
            "passes_count": self.passes_count,
            "attempted": dict(self.attempted),
            "inferred": dict(self.inferred),
            "revealed_cells_count": self.board.revealed_count(),
            "flags_count": self.board.flag_count,
            "steps_history": self.steps_history,
        }


def solve(board: Board, config: Optional[SolverConfig] = None) -> SolveOutcome:
    """Run the full strategy stack on ``board`` in place."""
    return LogicalSolver(board, config).solve()


def open_first_click(board: Board, first_click: Cell) -> Optional[List[Cell]]:
    """
    Reveal the first-click cell against the ground truth.

    Returns:
        The revealed cells, or None if the first click is a mine.

    Raises:
        ValueError: If the first click is outside the board.
    """
    x, y = first_click
    status, payload = board.reveal(x, y)
    if status == -1:
        return None
    revealed = payload.get("revealed_cells", [])
    return [(cx, cy) for cx, cy, _ in revealed]  # type: ignore[union-attr]


def simulate_play(
    board: Board,
    first_click: Cell,
    config: Optional[SolverConfig] = None,
    solver: Optional[LogicalSolver] = None,
) -> SolveOutcome:
    """
    Play the board from ``first_click`` using deduction alone.

    The board's view and flags are mutated; call ``board.reset()`` to
    replay. A first click on a mine counts as STUCK, since no deduction
    can recover from it.

    Args:
        board: Board with its mines placed.
        first_click: Opening cell (x, y).
        config: Strategy limits.
        solver: Optional pre-built solver (for step recording); it must
            be bound to ``board``.
    """
    opened = open_first_click(board, first_click)
    if opened is None:
        logger.debug("first click %s hit a mine", first_click)
        return SolveOutcome.STUCK

    if solver is None:
        solver = LogicalSolver(board, config)
    else:
        solver.record_reveal("first_move", opened)
    return solver.solve()


def is_solvable(
    board: Board, first_click: Cell, config: Optional[SolverConfig] = None
) -> bool:
    """True if the board can be cleared from ``first_click`` without guessing."""
    trial = board.copy()
    trial.reset()
    return simulate_play(trial, first_click, config) is SolveOutcome.SOLVED
