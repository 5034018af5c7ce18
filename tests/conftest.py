import itertools
import random
from typing import Callable, Iterable, List, Set

import pytest

from logicsweeper.constraints import Deduction
from logicsweeper.engine import Board
from logicsweeper.generator import generate
from logicsweeper.rules import apply_basic_rules, remaining_mines
from logicsweeper.utils import Cell


def _open_board(width: int, height: int, bombs: int, seed: int) -> Board:
    first_click = (width // 2, height // 2)
    board = generate(width, height, bombs, first_click, seed=seed).board
    assert board is not None
    board.reveal(*first_click)
    return board


@pytest.fixture
def opened_board() -> Callable[..., Board]:
    """Random board with its center cell revealed."""
    return _open_board


@pytest.fixture
def basic_settled_board() -> Callable[..., Board]:
    """Random opened board after the basic rules reach a fixpoint."""

    def make(width: int, height: int, bombs: int, seed: int) -> Board:
        board = _open_board(width, height, bombs, seed)
        while apply_basic_rules(board).progress:
            pass
        return board

    return make


def _partial_board(seed: int) -> Board:
    """5x4 board with 2-5 mines and a few random safe cells revealed."""
    rng = random.Random(seed)
    cells = [(x, y) for y in range(4) for x in range(5)]
    mines = rng.sample(cells, rng.randint(2, 5))
    board = Board.from_mines(5, 4, mines)
    safe = [c for c in cells if c not in mines]
    for _ in range(rng.randint(2, 5)):
        board.reveal(*rng.choice(safe))
    return board


def _consistent_layouts(board: Board) -> List[Set[Cell]]:
    """Every placement of the remaining mines that agrees with all visible clues."""
    hidden = board.hidden_cells()
    clues = [
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if board.revealed_clue(x, y) is not None
    ]
    layouts: List[Set[Cell]] = []
    for chosen in itertools.combinations(hidden, remaining_mines(board)):
        mines = set(chosen)
        if all(
            sum(
                1
                for n in board.neighbors(x, y)
                if n in mines or board.is_known_mine(*n)
            )
            == board.revealed_clue(x, y)
            for x, y in clues
        ):
            layouts.append(mines)
    return layouts


@pytest.fixture
def partial_board() -> Callable[[int], Board]:
    """Small random board with a handful of reveals, flags untouched."""
    return _partial_board


@pytest.fixture
def assert_holds_everywhere() -> Callable[[Board, Iterable[Deduction]], None]:
    """Check deductions against every mine layout consistent with the board."""

    def check(board: Board, deductions: Iterable[Deduction]) -> None:
        layouts = _consistent_layouts(board)
        assert layouts
        for d in deductions:
            for mines in layouts:
                assert (d.cell in mines) == d.is_mine, d

    return check
