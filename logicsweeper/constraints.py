"""
Constraint system shared by every deduction strategy.

A revealed clue at (x, y) with value k constrains its hidden unflagged
neighbors H: exactly ``k - known_mines`` of them are mines. Strategies read
these constraints, produce ``Deduction`` objects, and the appliers in this
module turn deductions into flags and reveals on the board.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .engine import Board
from .errors import InconsistentBoardError
from .utils import Cell


@dataclass(frozen=True)
class Constraint:
    """``remaining`` mines live among ``hidden``; ``cell`` is the clue."""

    cell: Cell
    hidden: FrozenSet[Cell]
    remaining: int


@dataclass(frozen=True)
class Deduction:
    """A provable fact about one hidden cell and the clues that justify it."""

    cell: Cell
    is_mine: bool
    strategy: str
    witnesses: Tuple[Cell, ...] = ()


@dataclass
class StrategyResult:
    """
    Outcome of applying one strategy to a board.

    Attributes:
        progress: True if at least one cell was flagged or revealed.
        flag_count: The board's flag count after the pass.
        changed: Cells flagged or revealed by the pass (flood-fill
            cascades included), in application order.
    """

    progress: bool
    flag_count: int
    changed: List[Cell] = field(default_factory=list)


def clue_constraint(board: Board, x: int, y: int) -> Optional[Constraint]:
    """
    Build the constraint for a revealed clue, or None if (x, y) shows no clue.

    Raises:
        InconsistentBoardError: If the remaining value is negative or larger
            than the number of hidden neighbors.
    """
    value = board.revealed_clue(x, y)
    if value is None:
        return None

    known = 0
    hidden: List[Cell] = []
    for nx, ny in board.neighbors(x, y):
        if board.is_known_mine(nx, ny):
            known += 1
        elif board.is_hidden(nx, ny):
            hidden.append((nx, ny))

    remaining = value - known
    if remaining < 0 or remaining > len(hidden):
        raise InconsistentBoardError(
            f"Clue at ({x}, {y}) needs {remaining} mines among {len(hidden)} hidden cells."
        )
    return Constraint((x, y), frozenset(hidden), remaining)


def expand_dirty(board: Board, dirty: Iterable[Cell]) -> Set[Cell]:
    """Return the dirty cells together with all of their neighbors."""
    out: Set[Cell] = set()
    for x, y in dirty:
        out.add((x, y))
        out.update(board.neighbors(x, y))
    return out


def all_revealed(board: Board) -> Set[Cell]:
    """Every visible cell; the starting dirty set for a full scan."""
    return {
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if board.revealed_clue(x, y) is not None
    }


def get_frontier(board: Board) -> List[Cell]:
    """
    Return hidden unflagged cells adjacent to at least one revealed clue.

    Cells are listed in row-major order.
    """
    frontier: List[Cell] = []
    for x, y in board.hidden_cells():
        for nx, ny in board.neighbors(x, y):
            if board.revealed_clue(nx, ny) is not None:
                frontier.append((x, y))
                break
    return frontier


def group_frontier_regions(board: Board, frontier: List[Cell]) -> List[List[Cell]]:
    """
    Partition frontier cells into components that transitively share a clue.

    Each component lists its cells in breadth-first discovery order, so
    consecutive cells tend to share constraints.
    """
    frontier_set: Set[Cell] = set(frontier)
    seen: Set[Cell] = set()
    regions: List[List[Cell]] = []

    for start in frontier:
        if start in seen:
            continue

        region: List[Cell] = []
        queue: Deque[Cell] = deque([start])
        seen.add(start)

        while queue:
            cx, cy = queue.popleft()
            region.append((cx, cy))
            for clue in board.neighbors(cx, cy):
                if board.revealed_clue(*clue) is None:
                    continue
                for n in board.neighbors(*clue):
                    if n in frontier_set and n not in seen:
                        seen.add(n)
                        queue.append(n)

        regions.append(region)

    return regions


def touching_clues(board: Board, cell: Cell) -> List[Cell]:
    """Revealed clue cells adjacent to ``cell``."""
    return [n for n in board.neighbors(*cell) if board.revealed_clue(*n) is not None]


def merge_deductions(deductions: Iterable[Deduction]) -> List[Deduction]:
    """
    Drop duplicate deductions, keeping the first one per cell.

    Raises:
        InconsistentBoardError: If one cell is deduced both mine and safe.
    """
    by_cell: Dict[Cell, Deduction] = {}
    for d in deductions:
        prev = by_cell.get(d.cell)
        if prev is None:
            by_cell[d.cell] = d
        elif prev.is_mine != d.is_mine:
            raise InconsistentBoardError(
                f"Cell {d.cell} was deduced both mine and safe."
            )
    return list(by_cell.values())


def reveal_safe(board: Board, x: int, y: int) -> List[Cell]:
    """
    Reveal a cell the solver proved safe and cascade through zeros.

    Raises:
        InconsistentBoardError: If the ground truth says the cell is a mine,
            which only happens when the player's flags are wrong.
    """
    if board.is_mine(x, y):
        raise InconsistentBoardError(f"Cell ({x}, {y}) was deduced safe but is a mine.")
    return [(cx, cy) for cx, cy, _ in board.flood_fill(x, y)]


def apply_deductions(board: Board, deductions: Iterable[Deduction]) -> StrategyResult:
    """
    Flag deduced mines, then reveal deduced safe cells.

    Deductions already satisfied by the board are skipped.
    """
    changed: List[Cell] = []
    merged = merge_deductions(deductions)

    for d in merged:
        if d.is_mine and board.set_flag(*d.cell):
            changed.append(d.cell)

    for d in merged:
        if not d.is_mine and board.is_hidden(*d.cell):
            changed.extend(reveal_safe(board, *d.cell))

    return StrategyResult(bool(changed), board.flag_count, changed)
