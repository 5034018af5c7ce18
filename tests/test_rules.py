import pytest

from logicsweeper.engine import Board
from logicsweeper.errors import InconsistentBoardError, SolveOutcome
from logicsweeper.rules import (
    apply_basic_rules,
    apply_global_count,
    apply_subset_logic,
    find_basic_deductions,
    find_global_count_deductions,
    find_subset_deductions,
)
from logicsweeper.solver import solve


def test_basic_rules_flag_single_neighbor() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)

    result = apply_basic_rules(board)

    assert result.progress
    assert result.flag_count == 1
    assert board.is_flagged(1, 0)

    assert solve(board) is SolveOutcome.SOLVED
    assert board.view[0][2] == 1


def test_basic_rules_with_dirty_set_skip_unrelated_clues() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    assert find_basic_deductions(board, dirty=[(2, 0)]) == []
    assert [d.cell for d in find_basic_deductions(board, dirty=[(0, 0)])] == [(1, 0)]


def test_subset_logic_reveals_exclusive_cells() -> None:
    board = Board.from_mines(3, 2, [(1, 1)])
    for x in range(3):
        board.reveal(x, 0)
    assert [board.view[0][x] for x in range(3)] == [1, 1, 1]

    result = apply_subset_logic(board)

    assert result.progress
    assert board.view[1][0] == 1
    assert board.view[1][2] == 1
    assert board.is_hidden(1, 1)

    assert solve(board) is SolveOutcome.SOLVED
    assert board.is_flagged(1, 1)


def test_subset_deductions_name_both_clues() -> None:
    board = Board.from_mines(3, 2, [(1, 1)])
    for x in range(3):
        board.reveal(x, 0)

    deductions = find_subset_deductions(board)

    by_cell = {d.cell: d for d in deductions}
    assert set(by_cell) == {(0, 1), (2, 1)}
    assert not by_cell[(2, 1)].is_mine
    assert set(by_cell[(2, 1)].witnesses) == {(0, 0), (1, 0)}
    assert set(by_cell[(0, 1)].witnesses) == {(1, 0), (2, 0)}


def test_global_count_reveals_when_no_mines_left() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    board.set_flag(1, 0)

    deductions = find_global_count_deductions(board)
    assert [(d.cell, d.is_mine) for d in deductions] == [((2, 0), False)]

    result = apply_global_count(board)
    assert result.progress
    assert board.is_victory()


def test_global_count_flags_when_every_hidden_cell_is_a_mine() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    board.reveal(2, 0)

    deductions = find_global_count_deductions(board)
    assert [(d.cell, d.is_mine) for d in deductions] == [((1, 0), True)]


def test_global_count_rejects_impossible_totals() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    with pytest.raises(InconsistentBoardError):
        find_global_count_deductions(board, mines_left=3)
    with pytest.raises(InconsistentBoardError):
        find_global_count_deductions(board, mines_left=-1)


def test_overflagged_clue_is_inconsistent() -> None:
    board = Board.from_mines(3, 1, [(0, 0)])
    board.reveal(1, 0)
    board.set_flag(0, 0)
    board.set_flag(2, 0)

    with pytest.raises(InconsistentBoardError):
        find_basic_deductions(board)
    assert solve(board) is SolveOutcome.INCONSISTENT
    assert board.is_flagged(2, 0)


@pytest.mark.parametrize("seed", range(15))
def test_local_rules_are_sound(opened_board, seed: int) -> None:
    board = opened_board(9, 9, 12, seed)

    for _ in range(100):
        progress = apply_basic_rules(board).progress
        progress = apply_subset_logic(board).progress or progress
        if not progress:
            break

    for y in range(board.height):
        for x in range(board.width):
            if board.is_flagged(x, y):
                assert board.is_mine(x, y)
            if board.revealed_clue(x, y) is not None:
                assert not board.is_mine(x, y)
