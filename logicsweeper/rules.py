"""
Cheap local deductions: basic clue arithmetic, subset logic and global count.

Each rule has a finder that inspects the board and returns deductions
without touching it, and an applier that flags and reveals the result.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from .constraints import (
    Constraint,
    Deduction,
    StrategyResult,
    all_revealed,
    apply_deductions,
    clue_constraint,
    expand_dirty,
)
from .engine import Board
from .errors import InconsistentBoardError
from .utils import Cell

logger = logging.getLogger(__name__)

BASIC = "basic"
SUBSET = "subset"
GLOBAL_COUNT = "globalCount"

# Hidden neighborhoods of two clues can only overlap within this
# Chebyshev distance.
SUBSET_RADIUS = 2


def _candidate_clues(board: Board, dirty: Optional[Iterable[Cell]]) -> List[Cell]:
    """Revealed clues whose neighborhood intersects the dirty cells, row-major."""
    cells = all_revealed(board) if dirty is None else expand_dirty(board, dirty)
    clues = [c for c in cells if board.revealed_clue(*c) is not None]
    return sorted(clues, key=lambda c: (c[1], c[0]))


# -----------------------------------------------------------------------------
# Basic rules
# -----------------------------------------------------------------------------


def find_basic_deductions(
    board: Board, dirty: Optional[Iterable[Cell]] = None
) -> List[Deduction]:
    """
    Apply the two counting rules to every candidate clue.

    - remaining == 0: every hidden neighbor is safe.
    - remaining == |hidden|: every hidden neighbor is a mine.

    Args:
        board: Board to inspect.
        dirty: Cells changed since the last pass; None scans every clue.

    Raises:
        InconsistentBoardError: If a clue cannot be satisfied.
    """
    deductions: List[Deduction] = []
    for x, y in _candidate_clues(board, dirty):
        c = clue_constraint(board, x, y)
        if c is None or not c.hidden:
            continue

        if c.remaining == 0:
            is_mine = False
        elif c.remaining == len(c.hidden):
            is_mine = True
        else:
            continue

        for cell in sorted(c.hidden, key=lambda h: (h[1], h[0])):
            deductions.append(Deduction(cell, is_mine, BASIC, (c.cell,)))
    return deductions


def apply_basic_rules(
    board: Board, dirty: Optional[Iterable[Cell]] = None
) -> StrategyResult:
    """Flag and reveal everything the basic counting rules prove."""
    result = apply_deductions(board, find_basic_deductions(board, dirty))
    if result.progress:
        logger.debug("basic rules changed %d cells", len(result.changed))
    return result


# -----------------------------------------------------------------------------
# Subset logic
# -----------------------------------------------------------------------------


def _subset_deductions(a: Constraint, b: Constraint) -> List[Deduction]:
    """Deductions on b's exclusive cells when a's hidden set lies inside b's."""
    if not a.hidden or len(a.hidden) >= len(b.hidden) or not a.hidden <= b.hidden:
        return []

    diff = b.hidden - a.hidden
    diff_mines = b.remaining - a.remaining
    if diff_mines < 0 or diff_mines > len(diff):
        raise InconsistentBoardError(
            f"Clues {a.cell} and {b.cell} disagree on {len(diff)} shared cells."
        )

    if diff_mines == 0:
        is_mine = False
    elif diff_mines == len(diff):
        is_mine = True
    else:
        return []

    return [
        Deduction(cell, is_mine, SUBSET, (a.cell, b.cell))
        for cell in sorted(diff, key=lambda h: (h[1], h[0]))
    ]


def find_subset_deductions(
    board: Board, dirty: Optional[Iterable[Cell]] = None
) -> List[Deduction]:
    """
    Compare nearby clue pairs for containment of their hidden sets.

    If H_A is a proper subset of H_B, exactly ``r_B - r_A`` mines lie in
    H_B minus H_A, so the difference is all safe when that count is zero
    and all mines when it equals the difference size. Only clues within
    two cells of each other are paired.

    Raises:
        InconsistentBoardError: If a clue or a clue pair cannot be satisfied.
    """
    cache: Dict[Cell, Optional[Constraint]] = {}

    def constraint_at(cell: Cell) -> Optional[Constraint]:
        if cell not in cache:
            cache[cell] = clue_constraint(board, *cell)
        return cache[cell]

    deductions: List[Deduction] = []
    checked: Set[frozenset] = set()

    for ax, ay in _candidate_clues(board, dirty):
        a = constraint_at((ax, ay))
        if a is None or not a.hidden:
            continue

        for dy in range(-SUBSET_RADIUS, SUBSET_RADIUS + 1):
            for dx in range(-SUBSET_RADIUS, SUBSET_RADIUS + 1):
                if dx == 0 and dy == 0:
                    continue
                bx, by = ax + dx, ay + dy
                if not board.in_bounds(bx, by):
                    continue

                pair = frozenset(((ax, ay), (bx, by)))
                if pair in checked:
                    continue
                checked.add(pair)

                b = constraint_at((bx, by))
                if b is None or not b.hidden:
                    continue

                deductions.extend(_subset_deductions(a, b))
                deductions.extend(_subset_deductions(b, a))

    return deductions


def apply_subset_logic(
    board: Board, dirty: Optional[Iterable[Cell]] = None
) -> StrategyResult:
    """Flag and reveal everything pairwise subset logic proves."""
    result = apply_deductions(board, find_subset_deductions(board, dirty))
    if result.progress:
        logger.debug("subset logic changed %d cells", len(result.changed))
    return result


# -----------------------------------------------------------------------------
# Global mine count
# -----------------------------------------------------------------------------


def remaining_mines(board: Board) -> int:
    """Total mines minus flags and mines already shown."""
    return board.bomb_count - board.known_mine_count()


def find_global_count_deductions(
    board: Board, mines_left: Optional[int] = None
) -> List[Deduction]:
    """
    Deduce from the total mine count.

    - No mines left: every hidden unflagged cell is safe.
    - As many mines left as hidden cells: every hidden cell is a mine.

    Args:
        board: Board to inspect.
        mines_left: Remaining mine count; computed from the board if None.

    Raises:
        InconsistentBoardError: If the remaining count is negative or
            exceeds the number of hidden cells.
    """
    hidden = board.hidden_cells()
    left = remaining_mines(board) if mines_left is None else mines_left

    if left < 0 or left > len(hidden):
        raise InconsistentBoardError(
            f"{left} mines remain for {len(hidden)} hidden cells."
        )
    if not hidden:
        return []

    if left == 0:
        return [Deduction(cell, False, GLOBAL_COUNT) for cell in hidden]
    if left == len(hidden):
        return [Deduction(cell, True, GLOBAL_COUNT) for cell in hidden]
    return []


def apply_global_count(
    board: Board, mines_left: Optional[int] = None
) -> StrategyResult:
    """Flag or reveal every hidden cell when the mine total decides them."""
    result = apply_deductions(board, find_global_count_deductions(board, mines_left))
    if result.progress:
        logger.debug("global count changed %d cells", len(result.changed))
    return result
