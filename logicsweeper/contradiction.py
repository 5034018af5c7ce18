"""Proof by contradiction over single frontier cells."""

import logging
from typing import List, Optional, Set, Tuple

from .config import SolverConfig
from .constraints import (
    Deduction,
    StrategyResult,
    get_frontier,
    reveal_safe,
    touching_clues,
)
from .engine import Board
from .errors import InconsistentBoardError
from .rules import remaining_mines
from .utils import Cell

logger = logging.getLogger(__name__)

CONTRADICTION = "contradiction"


def check_contradiction(
    board: Board,
    cell: Cell,
    assume_mine: bool,
    rounds: int,
    mines_left: Optional[int] = None,
) -> Tuple[bool, Tuple[Cell, ...]]:
    """
    Test one hypothesis about ``cell`` for a contradiction.

    The hypothesis is propagated through the basic counting rules for at
    most ``rounds`` rounds, on a private overlay; the board is not touched.
    Hypotheses are never nested.

    Args:
        board: Board to reason about.
        cell: Hidden unflagged cell to hypothesize about.
        assume_mine: True to assume ``cell`` is a mine, False for safe.
        rounds: Maximum propagation rounds.
        mines_left: Global remaining mine count; computed if None.

    Returns:
        (contradiction_found, witnesses) where witnesses are the clue
        cells examined on the way to the contradiction.
    """
    sim_mines: Set[Cell] = set()
    sim_safe: Set[Cell] = set()
    if assume_mine:
        sim_mines.add(cell)
    else:
        sim_safe.add(cell)

    left = remaining_mines(board) if mines_left is None else mines_left
    hidden_total = len(board.hidden_cells())
    witnesses: List[Cell] = []
    to_check: Set[Cell] = set(board.neighbors(*cell))

    for _ in range(rounds):
        if not to_check:
            break
        current = sorted(to_check, key=lambda c: (c[1], c[0]))
        to_check = set()

        for cx, cy in current:
            value = board.revealed_clue(cx, cy)
            if value is None:
                continue

            known = 0
            hidden: List[Cell] = []
            for n in board.neighbors(cx, cy):
                if board.is_known_mine(*n) or n in sim_mines:
                    known += 1
                elif board.is_hidden(*n) and n not in sim_safe:
                    hidden.append(n)

            if (cx, cy) not in witnesses:
                witnesses.append((cx, cy))

            if known > value or known + len(hidden) < value:
                return True, tuple(witnesses)

            if not hidden:
                continue
            if known == value:
                for n in hidden:
                    sim_safe.add(n)
                    to_check.update(board.neighbors(*n))
            elif known + len(hidden) == value:
                for n in hidden:
                    sim_mines.add(n)
                    to_check.update(board.neighbors(*n))

        if len(sim_mines) > left or hidden_total - len(sim_safe) < left:
            return True, tuple(witnesses)

    return False, tuple(witnesses)


def _test_cell(
    board: Board, cell: Cell, config: SolverConfig, mines_left: int
) -> Optional[Deduction]:
    mine_fails, mine_witnesses = check_contradiction(
        board, cell, True, config.contradiction_rounds, mines_left
    )
    safe_fails, safe_witnesses = check_contradiction(
        board, cell, False, config.contradiction_rounds, mines_left
    )

    if mine_fails and safe_fails:
        raise InconsistentBoardError(f"Cell {cell} can be neither mine nor safe.")
    if not mine_fails and not safe_fails:
        return None

    witnesses = mine_witnesses if mine_fails else safe_witnesses
    if not witnesses:
        witnesses = tuple(touching_clues(board, cell))
    return Deduction(cell, safe_fails, CONTRADICTION, witnesses)


def find_contradiction_deductions(
    board: Board, config: Optional[SolverConfig] = None
) -> List[Deduction]:
    """
    Test both hypotheses for every frontier cell against the current board.

    A cell whose mine hypothesis fails is safe; a cell whose safe
    hypothesis fails is a mine.

    Raises:
        InconsistentBoardError: If both hypotheses fail for some cell.
    """
    config = config or SolverConfig()
    mines_left = remaining_mines(board)
    deductions: List[Deduction] = []
    for cell in get_frontier(board):
        d = _test_cell(board, cell, config, mines_left)
        if d is not None:
            deductions.append(d)
    return deductions


def solve_by_contradiction(
    board: Board, config: Optional[SolverConfig] = None
) -> StrategyResult:
    """
    Apply the contradiction prover cell by cell.

    Each deduction is applied immediately, so later frontier cells are
    tested against the updated board.
    """
    config = config or SolverConfig()
    changed: List[Cell] = []

    for cell in get_frontier(board):
        if not board.is_hidden(*cell):
            continue
        d = _test_cell(board, cell, config, remaining_mines(board))
        if d is None:
            continue
        if d.is_mine:
            board.set_flag(*cell)
            changed.append(cell)
        else:
            changed.extend(reveal_safe(board, *cell))

    if changed:
        logger.debug("contradiction prover changed %d cells", len(changed))
    return StrategyResult(bool(changed), board.flag_count, changed)
