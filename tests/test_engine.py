import pytest

from logicsweeper.engine import EXPLODED, HIDDEN, Board
from logicsweeper.errors import InvalidParamsError
from logicsweeper.utils import get_neighborhoods

S6_MINES = [(0, 0), (3, 1), (1, 2), (2, 3)]


def test_neighborhoods_match_in_bounds_neighbors() -> None:
    width, height = 5, 3
    nbrs = get_neighborhoods(width, height)
    assert len(nbrs) == width * height
    for y in range(height):
        for x in range(width):
            expected = {
                (x + dx, y + dy)
                for dx in (-1, 0, 1)
                for dy in (-1, 0, 1)
                if (dx, dy) != (0, 0)
                and 0 <= x + dx < width
                and 0 <= y + dy < height
            }
            assert set(nbrs[(x, y)]) == expected
            assert len(nbrs[(x, y)]) == len(expected)


def test_neighborhoods_reject_empty_grid() -> None:
    with pytest.raises(ValueError):
        get_neighborhoods(0, 4)


def test_board_rejects_bad_dimensions() -> None:
    with pytest.raises(InvalidParamsError):
        Board(0, 3)
    with pytest.raises(InvalidParamsError):
        Board(3, -1)


def test_clues_are_computed_from_mines() -> None:
    board = Board.from_mines(4, 4, S6_MINES)
    expected = [
        [0, 1, 1, 1],
        [2, 2, 2, 0],
        [1, 0, 3, 2],
        [1, 2, 0, 1],
    ]
    for y in range(4):
        for x in range(4):
            if board.is_mine(x, y):
                continue
            assert board.clues[y][x] == expected[y][x]
    assert board.bomb_count == 4
    assert board.mine_positions() == [(0, 0), (3, 1), (1, 2), (2, 3)]


def test_place_mines_rejects_duplicates_and_out_of_bounds() -> None:
    board = Board(3, 3)
    with pytest.raises(InvalidParamsError):
        board.place_mines([(1, 1), (1, 1)])
    with pytest.raises(InvalidParamsError):
        board.place_mines([(3, 0)])


def test_reveal_zero_cascades_to_victory() -> None:
    board = Board.from_mines(3, 3, [(2, 2)])
    status, payload = board.reveal(0, 0)
    assert status == 1
    assert len(payload["revealed_cells"]) == 8
    assert board.is_victory()
    assert board.view[2][2] == HIDDEN


def test_flood_fill_skips_flagged_cells() -> None:
    board = Board.from_mines(3, 3, [(2, 2)])
    assert board.set_flag(2, 0)
    status, _ = board.reveal(0, 0)
    assert status == 0
    assert board.view[0][2] == HIDDEN
    assert board.is_flagged(2, 0)
    assert board.view[1][2] == 1


def test_reveal_mine_explodes() -> None:
    board = Board.from_mines(2, 1, [(1, 0)])
    status, payload = board.reveal(1, 0)
    assert status == -1
    assert payload["cell"] == (1, 0)
    assert board.view[0][1] == EXPLODED
    assert board.is_known_mine(1, 0)


def test_reveal_out_of_bounds_raises() -> None:
    board = Board(2, 2)
    with pytest.raises(ValueError):
        board.reveal(2, 0)


def test_flags_only_on_hidden_cells() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    assert not board.toggle_flag(0, 0)
    assert board.toggle_flag(1, 0)
    assert board.flag_count == 1
    assert not board.set_flag(1, 0)
    assert not board.toggle_flag(1, 0)
    assert board.flag_count == 0


def test_reset_keeps_mines() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    board.set_flag(1, 0)
    board.reset()
    assert board.hidden_cells() == [(0, 0), (1, 0), (2, 0)]
    assert board.flag_count == 0
    assert board.mine_positions() == [(1, 0)]


def test_copy_has_independent_overlays() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    other = board.copy()
    other.reveal(0, 0)
    other.set_flag(1, 0)
    assert board.view[0][0] == HIDDEN
    assert not board.is_flagged(1, 0)
    assert other.mines is board.mines


def test_format_board_plain() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    board.set_flag(1, 0)
    text = board.format_board(color=False)
    assert "\033" not in text
    assert text.splitlines()[-1].endswith(" 1  F  .")
    full = board.format_board(reveal_all=True, color=False)
    assert full.splitlines()[-1].endswith(" 1  F  1")


def test_replacing_mines_on_a_copy_leaves_the_original() -> None:
    board = Board.from_mines(3, 3, [(0, 0)])
    clues = [row[:] for row in board.clues]

    other = board.copy()
    other.place_mines([(2, 2)])

    assert board.clues == clues
    assert board.mine_positions() == [(0, 0)]
    assert other.clues[1][1] == 1
    assert other.clues[0][1] == 0
