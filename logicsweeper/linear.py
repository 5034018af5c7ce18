"""
Linear-algebra deductions over the frontier constraint system.

Every frontier cell is a 0/1 variable and every clue touching the frontier
is an equation ``sum(x_i) = remaining``. The augmented matrix of each
connected component is brought to reduced row-echelon form with partial
pivoting, and rows whose constant matches the sum of their positive (or
negative) coefficients pin all of their variables.

Tolerance contract: coefficients with magnitude below
``SolverConfig.pivot_epsilon`` are zero, and a row pins its variables only
when its constant is within ``SolverConfig.linear_tolerance`` of a
coefficient sum.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config import SolverConfig
from .constraints import (
    Deduction,
    StrategyResult,
    apply_deductions,
    get_frontier,
    group_frontier_regions,
    merge_deductions,
)
from .engine import Board
from .errors import InconsistentBoardError
from .utils import Cell

logger = logging.getLogger(__name__)

LINEAR = "linear"


def build_system(
    board: Board, variables: List[Cell]
) -> Tuple[np.ndarray, List[Cell]]:
    """
    Build the augmented matrix for the clues touching ``variables``.

    A clue with a hidden neighbor outside ``variables`` is left out, since
    its equation would involve unknowns the system does not model.

    Returns:
        (matrix, clue_cells) where matrix has one row per kept clue and
        ``len(variables) + 1`` columns, the last being the constant.
    """
    index: Dict[Cell, int] = {cell: i for i, cell in enumerate(variables)}
    rows: List[np.ndarray] = []
    clue_cells: List[Cell] = []
    processed = set()

    for cell in variables:
        for clue in board.neighbors(*cell):
            if clue in processed:
                continue
            value = board.revealed_clue(*clue)
            if value is None:
                continue
            processed.add(clue)

            row = np.zeros(len(variables) + 1, dtype=float)
            known = 0
            valid = True
            for n in board.neighbors(*clue):
                if board.is_known_mine(*n):
                    known += 1
                elif board.is_hidden(*n):
                    i = index.get(n)
                    if i is None:
                        valid = False
                        break
                    row[i] = 1.0

            if not valid:
                continue
            row[-1] = value - known
            rows.append(row)
            clue_cells.append(clue)

    if not rows:
        return np.zeros((0, len(variables) + 1), dtype=float), []
    return np.vstack(rows), clue_cells


def row_reduce(matrix: np.ndarray, eps: float) -> np.ndarray:
    """
    Return the reduced row-echelon form of an augmented matrix.

    Pivots are chosen by largest magnitude in the column (partial pivoting).
    The last column is the constant and never pivots.
    """
    m = matrix.astype(float, copy=True)
    n_rows, n_cols = m.shape
    pivot_row = 0

    for col in range(n_cols - 1):
        if pivot_row >= n_rows:
            break

        best = pivot_row + int(np.argmax(np.abs(m[pivot_row:, col])))
        if abs(m[best, col]) < eps:
            continue

        if best != pivot_row:
            m[[pivot_row, best]] = m[[best, pivot_row]]

        m[pivot_row] /= m[pivot_row, col]
        for r in range(n_rows):
            if r != pivot_row and abs(m[r, col]) >= eps:
                m[r] -= m[r, col] * m[pivot_row]

        m[np.abs(m) < eps] = 0.0
        pivot_row += 1

    return m


def read_definite(
    reduced: np.ndarray, tol: float, eps: float
) -> Dict[int, bool]:
    """
    Read definite variable values off a reduced matrix.

    For a row with positive coefficient sum P, negative sum N and constant
    b (every variable being 0 or 1, N <= b <= P):
    - b == P: positive-coefficient variables are 1, negative ones 0.
    - b == N: negative-coefficient variables are 1, positive ones 0.

    Returns:
        Mapping from variable index to True (mine) or False (safe).

    Raises:
        InconsistentBoardError: If a row has no solution in 0/1 values.
    """
    values: Dict[int, bool] = {}

    for row in reduced:
        coeffs = row[:-1]
        target = row[-1]
        nonzero = np.flatnonzero(np.abs(coeffs) >= eps)

        if nonzero.size == 0:
            if abs(target) > tol:
                raise InconsistentBoardError("Constraint system has no solution.")
            continue

        pos = [int(i) for i in nonzero if coeffs[i] > 0]
        neg = [int(i) for i in nonzero if coeffs[i] < 0]
        pos_sum = float(coeffs[pos].sum()) if pos else 0.0
        neg_sum = float(coeffs[neg].sum()) if neg else 0.0

        if target > pos_sum + tol or target < neg_sum - tol:
            raise InconsistentBoardError("Constraint system has no 0/1 solution.")

        if abs(target - pos_sum) <= tol:
            ones, zeros = pos, neg
        elif abs(target - neg_sum) <= tol:
            ones, zeros = neg, pos
        else:
            continue

        for i in ones:
            if values.get(i) is False:
                raise InconsistentBoardError("Variable pinned to both 0 and 1.")
            values[i] = True
        for i in zeros:
            if values.get(i) is True:
                raise InconsistentBoardError("Variable pinned to both 0 and 1.")
            values[i] = False

    return values


def solve_component(
    board: Board, variables: List[Cell], config: SolverConfig
) -> List[Deduction]:
    """Deductions for one set of variables solved as a single system."""
    matrix, clue_cells = build_system(board, variables)
    if not clue_cells:
        return []

    reduced = row_reduce(matrix, config.pivot_epsilon)
    values = read_definite(reduced, config.linear_tolerance, config.pivot_epsilon)
    witnesses = tuple(clue_cells)
    return [
        Deduction(variables[i], is_mine, LINEAR, witnesses)
        for i, is_mine in sorted(values.items())
    ]


def solve_large_component(
    board: Board, component: List[Cell], config: SolverConfig
) -> List[Deduction]:
    """Solve overlapping windows along a component and union the results."""
    window = config.linear_window
    step = max(1, window // 2)
    deductions: List[Deduction] = []

    for start in range(0, len(component), step):
        chunk = component[start:start + window]
        if not chunk:
            break
        deductions.extend(solve_component(board, chunk, config))
        if start + window >= len(component):
            break

    return merge_deductions(deductions)


def find_linear_deductions(
    board: Board, config: Optional[SolverConfig] = None
) -> List[Deduction]:
    """
    Split the frontier into components and solve each one.

    Components larger than ``config.linear_window`` are solved in
    overlapping windows.

    Raises:
        InconsistentBoardError: If some component has no 0/1 solution.
    """
    config = config or SolverConfig()
    frontier = get_frontier(board)
    if not frontier:
        return []

    deductions: List[Deduction] = []
    for component in group_frontier_regions(board, frontier):
        if len(component) > config.linear_window:
            deductions.extend(solve_large_component(board, component, config))
        else:
            deductions.extend(solve_component(board, component, config))
    return merge_deductions(deductions)


def solve_by_linear(
    board: Board, config: Optional[SolverConfig] = None
) -> StrategyResult:
    """Flag and reveal every variable the linear solver pins."""
    result = apply_deductions(board, find_linear_deductions(board, config))
    if result.progress:
        logger.debug("linear solver changed %d cells", len(result.changed))
    return result
