import asyncio
import random

import pytest

from logicsweeper.config import GeneratorConfig
from logicsweeper.engine import HIDDEN, Board
from logicsweeper.errors import GenerationStatus, InvalidParamsError, SolveOutcome
from logicsweeper.generator import (
    CancelToken,
    generate,
    generate_async,
    place_random_mines,
    safe_zone,
)
from logicsweeper.solver import is_solvable


@pytest.fixture
def always_stuck(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every no-guess attempt fail."""
    monkeypatch.setattr(
        "logicsweeper.generator.simulate_play",
        lambda *args, **kwargs: SolveOutcome.STUCK,
    )


@pytest.mark.parametrize(
    "width, height, bombs, first_click",
    [
        (0, 5, 1, (0, 0)),
        (5, 0, 1, (0, 0)),
        (5, 5, -1, (0, 0)),
        (5, 5, 17, (2, 2)),
        (5, 5, 3, (5, 0)),
        (5, 5, 3, (0, -1)),
        (2, 2, 1, (0, 0)),
    ],
)
def test_invalid_params(width: int, height: int, bombs: int, first_click) -> None:
    with pytest.raises(InvalidParamsError):
        generate(width, height, bombs, first_click)


def test_tiny_board_without_mines() -> None:
    result = generate(2, 2, 0, (0, 0))
    assert result.ok
    assert result.board is not None
    assert result.board.bomb_count == 0


def test_safe_zone_is_clipped_to_the_board() -> None:
    assert safe_zone(5, 5, (0, 0), 1) == {(0, 0), (1, 0), (0, 1), (1, 1)}
    assert len(safe_zone(9, 9, (4, 4), 2)) == 25
    assert len(safe_zone(9, 9, (0, 4), 2)) == 15


def test_place_random_mines_fits_what_it_can(caplog: pytest.LogCaptureFixture) -> None:
    board = Board(3, 3)
    excluded = {(x, y) for y in range(3) for x in range(3)} - {(0, 0), (2, 2)}

    placed = place_random_mines(board, 5, excluded, random.Random(0))

    assert placed == 2
    assert board.mine_positions() == [(0, 0), (2, 2)]
    assert "only 2 of 5 mines" in caplog.text


@pytest.mark.parametrize("no_guess, radius", [(False, 1), (True, 2)])
def test_first_click_neighborhood_is_mine_free(no_guess: bool, radius: int) -> None:
    first_click = (5, 4)
    result = generate(12, 9, 20, first_click, no_guess, seed=3)
    board = result.board
    assert board is not None

    assert board.bomb_count == 20
    assert len(board.mine_positions()) == 20
    for x, y in safe_zone(12, 9, first_click, radius):
        assert not board.is_mine(x, y)
    assert all(v == HIDDEN for row in board.view for v in row)
    assert board.flag_count == 0


def test_clues_match_mines() -> None:
    board = generate(10, 8, 15, (0, 0), seed=11).board
    assert board is not None
    for y in range(8):
        for x in range(10):
            if board.is_mine(x, y):
                continue
            count = sum(1 for nx, ny in board.neighbors(x, y) if board.is_mine(nx, ny))
            assert board.clues[y][x] == count


def test_same_seed_same_layout() -> None:
    a = generate(16, 16, 40, (8, 8), seed=7).board
    b = generate(16, 16, 40, (8, 8), seed=7).board
    c = generate(16, 16, 40, (8, 8), seed=8).board
    assert a is not None and b is not None and c is not None
    assert a.mine_positions() == b.mine_positions()
    assert a.mine_positions() != c.mine_positions()


def test_no_guess_board_is_solvable() -> None:
    first_click = (4, 4)
    result = generate(8, 8, 8, first_click, True, seed=1)

    assert result.status is GenerationStatus.OK
    assert result.attempts >= 1
    assert result.board is not None
    assert is_solvable(result.board, first_click)
    assert result.board.hidden_cells() == [(x, y) for y in range(8) for x in range(8)]


def test_checker_rejection_exhausts_budget(always_stuck) -> None:
    result = generate(
        8, 8, 10, (4, 4), True, config=GeneratorConfig(max_attempts=3), seed=0
    )

    assert result.status is GenerationStatus.NOT_GUARANTEED_LOGICAL
    assert not result.ok
    assert result.attempts == 3
    assert result.board is not None
    assert result.board.bomb_count == 10


def test_progress_and_cancel_between_attempts(always_stuck) -> None:
    token = CancelToken()
    calls = []

    def on_progress(attempts: int, total: int) -> None:
        calls.append((attempts, total))
        token.cancel()

    result = generate(
        8, 8, 10, (4, 4), True,
        config=GeneratorConfig(max_attempts=100, yield_every=5),
        seed=0, cancel=token, on_progress=on_progress,
    )

    assert calls == [(5, 100)]
    assert result.status is GenerationStatus.CANCELLED
    assert result.board is None
    assert result.attempts == 6


def test_cancel_before_start() -> None:
    token = CancelToken()
    token.cancel()
    result = generate(8, 8, 10, (4, 4), True, cancel=token)
    assert result.status is GenerationStatus.CANCELLED
    assert result.attempts == 0


def test_async_matches_sync_layout() -> None:
    sync = generate(9, 9, 10, (4, 4), seed=5).board
    result = asyncio.run(generate_async(9, 9, 10, (4, 4), seed=5))
    assert result.ok
    assert sync is not None and result.board is not None
    assert result.board.mine_positions() == sync.mine_positions()


def test_async_cancel_is_seen_after_yielding(always_stuck) -> None:
    token = CancelToken()

    result = asyncio.run(
        generate_async(
            8, 8, 10, (4, 4), True,
            config=GeneratorConfig(max_attempts=100, yield_every=5),
            seed=0, cancel=token, on_progress=lambda a, t: token.cancel(),
        )
    )

    assert result.status is GenerationStatus.CANCELLED
    assert result.attempts == 5


def test_async_validates_params() -> None:
    with pytest.raises(InvalidParamsError):
        asyncio.run(generate_async(3, 3, 5, (1, 1)))
