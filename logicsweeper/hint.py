"""Single-step hints with the strategy and clue cells that justify them."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .config import SolverConfig
from .constraints import Deduction
from .contradiction import find_contradiction_deductions
from .engine import Board
from .errors import InconsistentBoardError
from .linear import find_linear_deductions
from .rules import (
    find_basic_deductions,
    find_global_count_deductions,
    find_subset_deductions,
)
from .tank import find_tank_deductions
from .utils import Cell

logger = logging.getLogger(__name__)

GOD_MODE = "godMode"


@dataclass(frozen=True)
class Hint:
    """
    One suggested move.

    Attributes:
        cell: The implicated cell (x, y).
        kind: "mine" or "safe".
        strategy: Label of the strategy that found it, or "godMode" when
            the hint comes from the ground truth.
        witnesses: Clue cells that justify the deduction, for highlighting.
    """

    cell: Cell
    kind: str
    strategy: str
    witnesses: Tuple[Cell, ...] = ()

    @property
    def is_mine(self) -> bool:
        return self.kind == "mine"


def _from_deduction(d: Deduction) -> Hint:
    return Hint(d.cell, "mine" if d.is_mine else "safe", d.strategy, d.witnesses)


def _pick(deductions: List[Deduction]) -> Optional[Deduction]:
    """First safe deduction if any, else the first mine."""
    for d in deductions:
        if not d.is_mine:
            return d
    return deductions[0] if deductions else None


@dataclass(frozen=True)
class ClueNote:
    """
    What one witness clue shows, for building explanation text.

    Attributes:
        cell: The clue cell (x, y).
        value: The clue's number.
        flags: Known mines around it (flags and revealed bombs).
        hidden: Hidden unflagged neighbors.
        remaining: ``value - flags``, mines still to place around it.
    """

    cell: Cell
    value: int
    flags: int
    hidden: int
    remaining: int


def explain_hint(board: Board, h: Hint) -> Tuple[ClueNote, ...]:
    """Describe each witness clue of ``h`` as the board shows it now."""
    notes: List[ClueNote] = []
    for x, y in h.witnesses:
        value = board.revealed_clue(x, y)
        if value is None:
            continue
        flags = sum(1 for n in board.neighbors(x, y) if board.is_known_mine(*n))
        hidden = sum(1 for n in board.neighbors(x, y) if board.is_hidden(*n))
        notes.append(ClueNote((x, y), value, flags, hidden, value - flags))
    return tuple(notes)


def god_mode_hint(board: Board) -> Optional[Hint]:
    """
    Pick a hidden safe cell straight from the ground truth.

    Frontier cells win, scored by their revealed neighbors plus 10 for a
    zero clue; otherwise any safe island cell, zeros first. Ties go to
    the first cell in row-major order.
    """
    best: Optional[Cell] = None
    best_score = -1
    on_frontier = False

    for x, y in board.hidden_cells():
        if board.is_mine(x, y):
            continue
        revealed = sum(
            1 for n in board.neighbors(x, y) if board.revealed_clue(*n) is not None
        )
        bonus = 10 if board.clues[y][x] == 0 else 0

        if revealed:
            score = revealed + bonus
            if not on_frontier or score > best_score:
                best, best_score, on_frontier = (x, y), score, True
        elif not on_frontier and bonus > best_score:
            best, best_score = (x, y), bonus

    if best is None:
        return None
    return Hint(best, "safe", GOD_MODE)


def hint(board: Board, config: Optional[SolverConfig] = None) -> Optional[Hint]:
    """
    Find one deduction without touching the board.

    Strategies are tried in the solver's priority order and the first one
    that deduces anything supplies the hint; a safe cell is preferred over
    a mine from the same strategy. When nothing can be deduced the hint
    falls back to ``god_mode_hint``.

    Returns:
        A ``Hint``, or None when no hidden safe cell remains or the board
        is inconsistent.
    """
    config = config or SolverConfig()
    finders: List[Callable[[], List[Deduction]]] = [
        lambda: find_basic_deductions(board),
        lambda: find_subset_deductions(board),
        lambda: find_global_count_deductions(board),
        lambda: find_contradiction_deductions(board, config),
        lambda: find_linear_deductions(board, config),
        lambda: find_tank_deductions(board, config=config),
    ]

    try:
        for find in finders:
            d = _pick(find())
            if d is not None:
                return _from_deduction(d)
    except InconsistentBoardError as e:
        logger.debug("no hint on an inconsistent board: %s", e)
        return None

    return god_mode_hint(board)
