import pytest

from logicsweeper.engine import HIDDEN, Board
from logicsweeper.errors import SolveOutcome
from logicsweeper.generator import generate
from logicsweeper.rules import BASIC, GLOBAL_COUNT
from logicsweeper.solver import (
    STRATEGY_ORDER,
    LogicalSolver,
    is_solvable,
    open_first_click,
    simulate_play,
    solve,
)

S6_MINES = [(0, 0), (3, 1), (1, 2), (2, 3)]


def _trivial_board() -> Board:
    board = Board.from_mines(3, 1, [(1, 0)])
    board.reveal(0, 0)
    return board


def test_checkerboard_layout_is_stuck() -> None:
    board = Board.from_mines(4, 4, S6_MINES)

    assert simulate_play(board, (1, 0)) is SolveOutcome.STUCK
    assert board.view[0][1] == 1
    assert board.flag_count == 0


def test_is_solvable_leaves_the_board_alone() -> None:
    board = Board.from_mines(4, 4, S6_MINES)

    assert not is_solvable(board, (1, 0))
    assert board.hidden_cells() == [
        (x, y) for y in range(4) for x in range(4)
    ]

    easy = Board.from_mines(3, 1, [(1, 0)])
    assert is_solvable(easy, (0, 0))
    assert easy.view[0][0] == HIDDEN


def test_first_click_on_a_mine_is_stuck() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    assert open_first_click(board, (1, 0)) is None
    board.reset()
    assert simulate_play(board, (1, 0)) is SolveOutcome.STUCK


def test_recorded_steps_replay_each_change() -> None:
    board = _trivial_board()
    solver = LogicalSolver(board, record_steps=True)

    assert solver.solve() is SolveOutcome.SOLVED

    steps = solver.steps_history
    assert [(s["action"], s["cell"], s["method"]) for s in steps] == [
        ("flag", (1, 0), BASIC),
        ("reveal", (2, 0), GLOBAL_COUNT),
    ]
    assert [s["step_number"] for s in steps] == [0, 1]
    assert steps[0]["flags_snapshot"][0][1]
    assert steps[0]["view_snapshot"][0][2] == HIDDEN
    assert steps[1]["view_snapshot"][0][2] == 1


def test_recording_solver_notes_the_opening_move() -> None:
    board = Board.from_mines(3, 1, [(1, 0)])
    solver = LogicalSolver(board, record_steps=True)

    assert simulate_play(board, (0, 0), solver=solver) is SolveOutcome.SOLVED

    first = solver.steps_history[0]
    assert (first["action"], first["cell"], first["method"]) == (
        "reveal",
        (0, 0),
        "first_move",
    )
    assert first["view_snapshot"][0][0] == 1
    assert first["view_snapshot"][0][2] == HIDDEN


def test_steps_are_not_recorded_by_default() -> None:
    board = _trivial_board()
    solver = LogicalSolver(board)
    solver.solve()
    assert solver.steps_history == []
    assert solver.inferred[BASIC] == 1
    assert solver.inferred[GLOBAL_COUNT] == 1


def test_summary_counters() -> None:
    board = _trivial_board()
    solver = LogicalSolver(board)
    solver.solve()

    summary = solver.summary()

    assert summary["revealed_cells_count"] == 2
    assert summary["flags_count"] == 1
    assert summary["passes_count"] == 3
    assert set(summary["attempted"]) == set(STRATEGY_ORDER)
    assert summary["attempted"][BASIC] == 3


def test_step_reports_the_productive_strategy() -> None:
    board = _trivial_board()
    solver = LogicalSolver(board)
    assert solver.step() == BASIC
    assert solver.step() == GLOBAL_COUNT
    assert solver.step() is None


def test_overflagged_board_is_inconsistent() -> None:
    board = Board.from_mines(3, 1, [(0, 0)])
    board.reveal(1, 0)
    board.set_flag(0, 0)
    board.set_flag(2, 0)
    assert solve(board) is SolveOutcome.INCONSISTENT


@pytest.mark.parametrize("seed", range(10))
def test_solver_only_adds_correct_knowledge(seed: int) -> None:
    first_click = (4, 4)
    board = generate(9, 9, 12, first_click, seed=seed).board
    assert board is not None
    board.reveal(*first_click)
    before = [row[:] for row in board.view]

    outcome = solve(board)
    assert outcome in (SolveOutcome.SOLVED, SolveOutcome.STUCK)

    for y in range(9):
        for x in range(9):
            if before[y][x] != HIDDEN:
                assert board.view[y][x] == before[y][x]
            if board.is_flagged(x, y):
                assert board.is_mine(x, y)
            if board.revealed_clue(x, y) is not None:
                assert not board.is_mine(x, y)

    # A second run on the fixpoint has nothing left to deduce.
    again = LogicalSolver(board)
    assert again.solve() is outcome
    assert sum(again.inferred.values()) == 0
