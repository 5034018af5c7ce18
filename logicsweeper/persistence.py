"""Save and load board layouts for replay."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Set, Union

from .engine import Board
from .errors import InvalidParamsError
from .utils import Cell

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "last_board.json"

BoardRecord = Dict[str, Any]


def board_to_record(board: Board, no_guess: bool = False) -> BoardRecord:
    """
    Convert a board's layout to a JSON-friendly record.

    Only the ground truth is stored; the player's view and flags are not.
    Mine positions are listed in row-major order.
    """
    return {
        "width": board.width,
        "height": board.height,
        "bombCount": board.bomb_count,
        "noGuessMode": no_guess,
        "minePositions": [[x, y] for x, y in board.mine_positions()],
    }


def board_from_record(record: BoardRecord) -> Board:
    """
    Rebuild a board from a record written by ``board_to_record``.

    Raises:
        InvalidParamsError: If a field is missing or malformed, a position
            is repeated or off the board, or ``bombCount`` disagrees with
            the positions.
    """
    try:
        width = int(record["width"])
        height = int(record["height"])
        bomb_count = int(record["bombCount"])
        raw_positions = record["minePositions"]
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidParamsError(f"Malformed board record: {e}") from e

    positions: List[Cell] = []
    seen: Set[Cell] = set()
    for item in raw_positions:
        try:
            x, y = item
            cell = (int(x), int(y))
        except (TypeError, ValueError) as e:
            raise InvalidParamsError(f"Malformed mine position: {item!r}") from e
        if cell in seen:
            raise InvalidParamsError(f"Duplicate mine position {cell}.")
        seen.add(cell)
        positions.append(cell)

    if bomb_count != len(positions):
        raise InvalidParamsError(
            f"bombCount is {bomb_count} but {len(positions)} positions are listed."
        )

    return Board.from_mines(width, height, positions)


def save_board(
    board: Board,
    directory: Union[str, Path] = ".",
    *,
    no_guess: bool = False,
    filename: str = DEFAULT_FILENAME,
) -> Path:
    """Write the board's layout as JSON and return the file path."""
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    file_path = path / filename
    with file_path.open("w", encoding="utf-8") as fp:
        json.dump(board_to_record(board, no_guess), fp, ensure_ascii=False, indent=2)
    logger.debug("saved board layout to %s", file_path)
    return file_path


def load_board(path: Union[str, Path]) -> Board:
    """
    Read a layout written by ``save_board``.

    Raises:
        InvalidParamsError: If the record is invalid.
    """
    with Path(path).open("r", encoding="utf-8") as fp:
        record = json.load(fp)
    return board_from_record(record)
