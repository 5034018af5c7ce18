"""
Board generation with an optional no-guess guarantee.

Mines are placed uniformly outside a safe zone around the first click. In
no-guess mode every attempt is played out by the logical solver from the
first click and rejected unless it is solved without guessing.
"""

import asyncio
import logging
import random
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Set

from .config import GeneratorConfig, SolverConfig
from .engine import Board
from .errors import GenerationStatus, InvalidParamsError, SolveOutcome
from .solver import simulate_play
from .utils import Cell

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class CancelToken:
    """Shared cancellation flag checked by the generator between attempts."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class GenerationResult:
    """
    Outcome of ``generate``.

    Attributes:
        board: The generated board with mines placed and nothing revealed,
            or None when cancelled.
        status: OK, CANCELLED or NOT_GUARANTEED_LOGICAL (the attempt
            budget ran out; the board may require guessing).
        attempts: Number of layouts tried.
    """

    board: Optional[Board]
    status: GenerationStatus
    attempts: int

    @property
    def ok(self) -> bool:
        return self.status is GenerationStatus.OK


def safe_radius(no_guess: bool) -> int:
    return 2 if no_guess else 1


def safe_zone(
    width: int, height: int, first_click: Cell, radius: int
) -> Set[Cell]:
    """In-bounds cells within Chebyshev ``radius`` of the first click."""
    fx, fy = first_click
    return {
        (x, y)
        for y in range(max(0, fy - radius), min(height, fy + radius + 1))
        for x in range(max(0, fx - radius), min(width, fx + radius + 1))
    }


def validate_params(
    width: int, height: int, bomb_count: int, first_click: Cell
) -> None:
    """
    Check generator inputs.

    Raises:
        InvalidParamsError: If a dimension is below 1, the bomb count is
            negative or leaves no room for a 3x3 opening, or the first
            click is off the board.
    """
    if width < 1 or height < 1:
        raise InvalidParamsError("Width and height must be at least 1.")
    if bomb_count < 0:
        raise InvalidParamsError("Bomb count must be non-negative.")
    if bomb_count > max(0, width * height - 9):
        raise InvalidParamsError(
            f"Too many bombs: {bomb_count} > {width}*{height} - 9."
        )
    fx, fy = first_click
    if not (0 <= fx < width and 0 <= fy < height):
        raise InvalidParamsError(f"First click {first_click} is outside the board.")


def place_random_mines(
    board: Board, bomb_count: int, excluded: Set[Cell], rng: random.Random
) -> int:
    """
    Place up to ``bomb_count`` mines uniformly over cells not in ``excluded``.

    Returns:
        The number of mines actually placed. When the eligible area is too
        small the board gets as many mines as fit.
    """
    eligible: List[Cell] = [
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if (x, y) not in excluded
    ]
    count = min(bomb_count, len(eligible))
    if count < bomb_count:
        logger.warning(
            "only %d of %d mines fit outside the safe zone", count, bomb_count
        )
    board.place_mines(rng.sample(eligible, count))
    return count


def _attempts(
    width: int,
    height: int,
    bomb_count: int,
    first_click: Cell,
    no_guess: bool,
    config: GeneratorConfig,
    rng: random.Random,
    solver_config: Optional[SolverConfig],
    state: dict,
) -> Iterator[Optional[Board]]:
    """
    Yield None after each rejected attempt and the board once one passes.

    ``state["board"]`` always holds the latest attempt.
    """
    excluded = safe_zone(width, height, first_click, safe_radius(no_guess))

    for attempt in range(1, config.max_attempts + 1):
        state["attempts"] = attempt
        board = Board(width, height)
        place_random_mines(board, bomb_count, excluded, rng)
        state["board"] = board

        if not no_guess:
            yield board
            return

        outcome = simulate_play(board, first_click, solver_config)
        board.reset()
        if outcome is SolveOutcome.SOLVED:
            yield board
            return

        logger.debug("attempt %d rejected (%s)", attempt, outcome.value)
        yield None


def _make_rng(rng: Optional[random.Random], seed: Optional[int]) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


def _finish(state: dict, board: Optional[Board]) -> GenerationResult:
    attempts = state["attempts"]
    if board is not None:
        logger.info("generated a board after %d attempt(s)", attempts)
        return GenerationResult(board, GenerationStatus.OK, attempts)
    logger.warning(
        "no logical board found in %d attempts; returning a board that may need guessing",
        attempts,
    )
    return GenerationResult(
        state["board"], GenerationStatus.NOT_GUARANTEED_LOGICAL, attempts
    )


def _cancelled(attempts: int) -> GenerationResult:
    logger.info("generation cancelled after %d attempt(s)", attempts)
    return GenerationResult(None, GenerationStatus.CANCELLED, attempts)


def generate(
    width: int,
    height: int,
    bomb_count: int,
    first_click: Cell,
    no_guess: bool = False,
    *,
    config: Optional[GeneratorConfig] = None,
    solver_config: Optional[SolverConfig] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> GenerationResult:
    """
    Generate a board, retrying until it is solvable by logic when requested.

    Args:
        width: Board width.
        height: Board height.
        bomb_count: Mines to place.
        first_click: The player's opening cell (x, y). The 3x3 area around
            it (5x5 in no-guess mode) is kept mine-free.
        no_guess: If True, only accept layouts the logical solver clears
            from the first click.
        config: Attempt budget and progress cadence.
        solver_config: Limits passed to the solver during simulation.
        rng: Random source; takes precedence over ``seed``.
        seed: Seed for a fresh ``random.Random`` when ``rng`` is None.
        cancel: Token checked between attempts.
        on_progress: Called as ``on_progress(attempts, max_attempts)``
            every ``config.yield_every`` attempts.

    Returns:
        A ``GenerationResult``. The board comes back with nothing revealed.

    Raises:
        InvalidParamsError: If the parameters are out of range.
    """
    validate_params(width, height, bomb_count, first_click)
    config = config or GeneratorConfig()
    rng = _make_rng(rng, seed)
    state: dict = {"attempts": 0, "board": None}
    if cancel is not None and cancel.cancelled:
        return _cancelled(0)

    for board in _attempts(
        width, height, bomb_count, first_click, no_guess, config, rng, solver_config, state
    ):
        if board is not None:
            return _finish(state, board)

        attempts = state["attempts"]
        if cancel is not None and cancel.cancelled:
            return _cancelled(attempts)
        if attempts % config.yield_every == 0 and on_progress is not None:
            on_progress(attempts, config.max_attempts)

    return _finish(state, None)


async def generate_async(
    width: int,
    height: int,
    bomb_count: int,
    first_click: Cell,
    no_guess: bool = False,
    *,
    config: Optional[GeneratorConfig] = None,
    solver_config: Optional[SolverConfig] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> GenerationResult:
    """
    Same as ``generate`` but yields to the event loop between attempts.

    Control goes back to the loop every ``config.yield_every`` attempts so
    a single-threaded host can keep handling input (and set ``cancel``)
    while boards are being tried.
    """
    validate_params(width, height, bomb_count, first_click)
    config = config or GeneratorConfig()
    rng = _make_rng(rng, seed)
    state: dict = {"attempts": 0, "board": None}
    if cancel is not None and cancel.cancelled:
        return _cancelled(0)

    for board in _attempts(
        width, height, bomb_count, first_click, no_guess, config, rng, solver_config, state
    ):
        if board is not None:
            return _finish(state, board)

        attempts = state["attempts"]
        if cancel is not None and cancel.cancelled:
            return _cancelled(attempts)
        if attempts % config.yield_every == 0:
            if on_progress is not None:
                on_progress(attempts, config.max_attempts)
            await asyncio.sleep(0)
            if cancel is not None and cancel.cancelled:
                return _cancelled(attempts)

    return _finish(state, None)
