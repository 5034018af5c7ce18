"""Bounded exhaustive enumeration of mine configurations per frontier region."""

import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, DefaultDict, Dict, FrozenSet, List, Optional, Tuple, cast

from .config import SolverConfig
from .constraints import (
    Deduction,
    StrategyResult,
    apply_deductions,
    get_frontier,
    group_frontier_regions,
)
from .engine import Board
from .errors import InconsistentBoardError
from .rules import remaining_mines
from .utils import Cell

logger = logging.getLogger(__name__)

TANK = "tank"


@dataclass(frozen=True)
class RegionConstraint:
    """A clue's view of one region: its hidden cells split inside/outside."""

    cell: Cell
    remaining: int
    inside: Tuple[Cell, ...]
    outside_count: int


class TooManyConfigurations(Exception):
    """Raised internally to abandon a region past the enumeration cap."""


def get_region_constraints(board: Board, region: List[Cell]) -> List[RegionConstraint]:
    """
    Gather the clues touching ``region``.

    Raises:
        InconsistentBoardError: If a clue's remaining value is impossible.
    """
    region_set: FrozenSet[Cell] = frozenset(region)
    seen = set()
    constraints: List[RegionConstraint] = []

    for cell in region:
        for clue in board.neighbors(*cell):
            if clue in seen:
                continue
            value = board.revealed_clue(*clue)
            if value is None:
                continue
            seen.add(clue)

            known = 0
            inside: List[Cell] = []
            outside = 0
            for n in board.neighbors(*clue):
                if board.is_known_mine(*n):
                    known += 1
                elif board.is_hidden(*n):
                    if n in region_set:
                        inside.append(n)
                    else:
                        outside += 1

            remaining = value - known
            if remaining < 0 or remaining > len(inside) + outside:
                raise InconsistentBoardError(
                    f"Clue at {clue} needs {remaining} mines among "
                    f"{len(inside) + outside} hidden cells."
                )
            constraints.append(RegionConstraint(clue, remaining, tuple(inside), outside))

    return constraints


def _dfs_region(
    constraints: List[RegionConstraint],
    i: int,
    assignment: Dict[Cell, bool],
    data: Dict[str, Any],
    mines_used: int,
    mines_left_total: int,
    max_configurations: int,
) -> None:
    """
    Enumerate assignments constraint by constraint.

    For constraint i, its still-unassigned inside cells receive every
    mine count that keeps ``0 <= remaining - inside_mines <= outside``,
    in every combination. Regions are frontier components, so once every
    constraint is processed every region cell has a value.
    """
    if mines_used > mines_left_total:
        return

    if i == len(constraints):
        counts = cast(DefaultDict[Cell, int], data["mines_frequency_counts"])
        for cell, is_mine in assignment.items():
            if is_mine:
                counts[cell] += 1
        data["configurations_count"] += 1
        if data["configurations_count"] > max_configurations:
            raise TooManyConfigurations()
        return

    c = constraints[i]
    assigned_mines = 0
    unassigned: List[Cell] = []
    for cell in c.inside:
        v = assignment.get(cell)
        if v is None:
            unassigned.append(cell)
        elif v:
            assigned_mines += 1

    needed = c.remaining - assigned_mines
    low = max(0, needed - c.outside_count)
    high = min(len(unassigned), needed)
    if high < low or mines_used + low > mines_left_total:
        return

    for k in range(low, high + 1):
        if mines_used + k > mines_left_total:
            break
        for mines_tuple in itertools.combinations(unassigned, k):
            mines_set = set(mines_tuple)
            for cell in unassigned:
                assignment[cell] = cell in mines_set
            _dfs_region(
                constraints,
                i + 1,
                assignment,
                data,
                mines_used + k,
                mines_left_total,
                max_configurations,
            )

    for cell in unassigned:
        assignment.pop(cell, None)


def enumerate_region(
    region: List[Cell],
    constraints: List[RegionConstraint],
    mines_left: int,
    max_configurations: int,
) -> Optional[Tuple[int, Dict[Cell, int]]]:
    """
    Count valid configurations of a region and per-cell mine frequencies.

    Returns:
        (configurations_count, mine_counts), or None if the enumeration
        cap was hit.
    """
    data: Dict[str, Any] = {
        "mines_frequency_counts": defaultdict(int),
        "configurations_count": 0,
    }
    ordered = sorted(constraints, key=lambda c: (c.cell[1], c.cell[0]))
    try:
        _dfs_region(ordered, 0, {}, data, 0, mines_left, max_configurations)
    except TooManyConfigurations:
        return None
    counts = cast(DefaultDict[Cell, int], data["mines_frequency_counts"])
    return data["configurations_count"], {cell: counts[cell] for cell in region}


def find_tank_deductions(
    board: Board,
    mines_left: Optional[int] = None,
    config: Optional[SolverConfig] = None,
) -> List[Deduction]:
    """
    Enumerate every valid configuration of each small frontier region.

    Cells that are mines in every configuration are mines; cells that are
    safe in every configuration are safe. Regions larger than
    ``config.max_region_size`` are skipped.

    Raises:
        InconsistentBoardError: If some region has no valid configuration.
    """
    config = config or SolverConfig()
    left = remaining_mines(board) if mines_left is None else mines_left
    frontier = get_frontier(board)
    if not frontier:
        return []

    regions = group_frontier_regions(board, frontier)
    regions.sort(key=len)
    deductions: List[Deduction] = []

    for region in regions:
        if len(region) > config.max_region_size:
            continue

        constraints = get_region_constraints(board, region)
        if not constraints:
            continue

        enumerated = enumerate_region(region, constraints, left, config.max_configurations)
        if enumerated is None:
            logger.debug("tank skipped a region of %d cells (too many configurations)", len(region))
            continue

        total, counts = enumerated
        if total == 0:
            raise InconsistentBoardError(
                f"No valid configuration for a frontier region of {len(region)} cells."
            )

        witnesses = tuple(c.cell for c in constraints)
        for cell in region:
            if counts[cell] == total:
                deductions.append(Deduction(cell, True, TANK, witnesses))
            elif counts[cell] == 0:
                deductions.append(Deduction(cell, False, TANK, witnesses))

    return deductions


def tank_solve(
    board: Board,
    mines_left: Optional[int] = None,
    config: Optional[SolverConfig] = None,
) -> StrategyResult:
    """Flag and reveal every cell the tank enumerator decides."""
    result = apply_deductions(board, find_tank_deductions(board, mines_left, config))
    if result.progress:
        logger.debug("tank solver changed %d cells", len(result.changed))
    return result
