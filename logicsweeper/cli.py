"""Command-line entry point: generate, save and replay boards."""

import argparse
import logging
from typing import List, Optional

from .config import GeneratorConfig
from .errors import GenerationStatus, InvalidParamsError, SolveOutcome
from .generator import generate
from .persistence import load_board, save_board
from .solver import LogicalSolver, simulate_play
from .utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logicsweeper",
        description="Generate Minesweeper boards that can be cleared without guessing.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="generate a new board")
    gen.add_argument("width", type=int, help="board width")
    gen.add_argument("height", type=int, help="board height")
    gen.add_argument("bombs", type=int, help="number of mines")
    gen.add_argument(
        "--first-click",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        help="opening cell (default: board center)",
    )
    gen.add_argument("--no-guess", action="store_true", help="require a logical solution")
    gen.add_argument("--seed", type=int, default=None, help="random seed")
    gen.add_argument(
        "--max-attempts",
        type=int,
        default=GeneratorConfig().max_attempts,
        help="attempt budget in no-guess mode",
    )
    gen.add_argument("--save", metavar="DIR", default=None, help="write last_board.json here")
    gen.add_argument(
        "--no-color", action="store_true", help="print without ANSI colors"
    )

    solve = sub.add_parser("solve", help="replay a saved board with the logical solver")
    solve.add_argument("path", help="JSON file written by 'generate --save'")
    solve.add_argument(
        "--first-click",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        help="opening cell (default: board center)",
    )
    solve.add_argument(
        "--no-color", action="store_true", help="print without ANSI colors"
    )
    return parser


def _cmd_generate(args: argparse.Namespace) -> int:
    first_click = (
        tuple(args.first_click) if args.first_click else (args.width // 2, args.height // 2)
    )
    result = generate(
        args.width,
        args.height,
        args.bombs,
        first_click,  # type: ignore[arg-type]
        args.no_guess,
        config=GeneratorConfig(max_attempts=args.max_attempts),
        seed=args.seed,
    )
    if result.board is None:
        print("Generation cancelled.")
        return 1

    print(result.board.format_board(reveal_all=True, color=not args.no_color))
    print(f"Status: {result.status.value} after {result.attempts} attempt(s)")

    if args.save is not None:
        path = save_board(result.board, args.save, no_guess=args.no_guess)
        print(f"Saved {path}")

    return 0 if result.status is GenerationStatus.OK else 2


def _cmd_solve(args: argparse.Namespace) -> int:
    board = load_board(args.path)
    first_click = (
        tuple(args.first_click) if args.first_click else (board.width // 2, board.height // 2)
    )
    if not board.in_bounds(*first_click):
        raise InvalidParamsError(f"First click {first_click} is outside the board.")
    solver = LogicalSolver(board)
    outcome = simulate_play(board, first_click, solver=solver)  # type: ignore[arg-type]

    print(board.format_board(color=not args.no_color))
    print(f"Outcome: {outcome.value}")
    for name, count in solver.inferred.items():
        if count:
            print(f"  {name}: {count} cell(s)")
    return 0 if outcome is SolveOutcome.SOLVED else 2


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run a subcommand. Returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "generate":
            return _cmd_generate(args)
        return _cmd_solve(args)
    except (ValueError, OSError) as e:
        # InvalidParamsError and json.JSONDecodeError are ValueErrors
        logger.error("%s", e)
        return 1
