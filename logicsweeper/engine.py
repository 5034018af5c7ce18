"""Minesweeper board state: ground truth, player view and flag overlay."""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from .errors import InvalidParamsError
from .utils import Cell, Neighborhoods, get_neighborhoods

# View codes. 0..8 are revealed clue values.
HIDDEN = -1
EXPLODED = 9
REVEALED_BOMB = 10


class Board:
    """
    A Minesweeper board shared by the player, the solver and the generator.

    Ground truth (``mines`` and ``clues``) is fixed once mines are placed.
    The overlays (``view`` and ``flags``) are what a player knows and are
    mutated by play and by the solver. All grids are indexed ``[y][x]``.
    """

    def __init__(self, width: int, height: int) -> None:
        """
        Create an empty board with no mines.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.

        Raises:
            InvalidParamsError: If dimensions are invalid.
        """
        if width <= 0 or height <= 0:
            raise InvalidParamsError("Width and height must be positive.")

        self.width: int = width
        self.height: int = height
        self.bomb_count: int = 0

        self.mines: List[List[bool]] = [
            [False for _ in range(width)] for _ in range(height)
        ]
        self.clues: List[List[int]] = [
            [0 for _ in range(width)] for _ in range(height)
        ]
        self.view: List[List[int]] = [
            [HIDDEN for _ in range(width)] for _ in range(height)
        ]
        self.flags: List[List[bool]] = [
            [False for _ in range(width)] for _ in range(height)
        ]
        self.flag_count: int = 0

        self._neighborhoods: Neighborhoods = get_neighborhoods(width, height)

    @classmethod
    def from_mines(
        cls, width: int, height: int, mine_positions: Iterable[Cell]
    ) -> "Board":
        """Build a board with the given mine layout and computed clues."""
        board = cls(width, height)
        board.place_mines(mine_positions)
        return board

    # -------------------------------------------------------------------------
    # Ground truth
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, x: int, y: int) -> Tuple[Cell, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(x, y)]

    def place_mines(self, mine_positions: Iterable[Cell]) -> None:
        """
        Replace the mine layout and recompute every clue.

        Raises:
            InvalidParamsError: If a position is out of bounds or repeated.
        """
        seen: Set[Cell] = set()
        for x, y in mine_positions:
            if not self.in_bounds(x, y):
                raise InvalidParamsError(f"Mine position ({x}, {y}) is outside the board.")
            if (x, y) in seen:
                raise InvalidParamsError(f"Duplicate mine position ({x}, {y}).")
            seen.add((x, y))

        self.mines = [[False for _ in range(self.width)] for _ in range(self.height)]
        for x, y in seen:
            self.mines[y][x] = True
        self.bomb_count = len(seen)
        self.compute_clues()

    def compute_clues(self) -> None:
        """
        Rebuild the clue grid: each non-mine cell gets its adjacent mine count.

        A new grid is assigned rather than filled in place, since copies
        share ground truth with the board they came from.
        """
        clues = [[0 for _ in range(self.width)] for _ in range(self.height)]
        for y in range(self.height):
            for x in range(self.width):
                if self.mines[y][x]:
                    continue
                clues[y][x] = sum(
                    1 for nx, ny in self.neighbors(x, y) if self.mines[ny][nx]
                )
        self.clues = clues

    def is_mine(self, x: int, y: int) -> bool:
        return self.mines[y][x]

    def mine_positions(self) -> List[Cell]:
        """Return all mine positions in row-major order."""
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if self.mines[y][x]
        ]

    # -------------------------------------------------------------------------
    # Player view
    # -------------------------------------------------------------------------

    def is_hidden(self, x: int, y: int) -> bool:
        """True for hidden cells that carry no flag."""
        return self.view[y][x] == HIDDEN and not self.flags[y][x]

    def is_flagged(self, x: int, y: int) -> bool:
        return self.flags[y][x]

    def revealed_clue(self, x: int, y: int) -> Optional[int]:
        """Return the visible clue value, or None if the cell shows no clue."""
        v = self.view[y][x]
        if 0 <= v <= 8:
            return v
        return None

    def is_known_mine(self, x: int, y: int) -> bool:
        """True for flagged cells and mines the player has already seen."""
        return self.flags[y][x] or self.view[y][x] in (EXPLODED, REVEALED_BOMB)

    def known_mine_count(self) -> int:
        return sum(
            1
            for y in range(self.height)
            for x in range(self.width)
            if self.is_known_mine(x, y)
        )

    def hidden_cells(self) -> List[Cell]:
        """Return every hidden unflagged cell in row-major order."""
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if self.is_hidden(x, y)
        ]

    def revealed_count(self) -> int:
        return sum(
            1
            for y in range(self.height)
            for x in range(self.width)
            if 0 <= self.view[y][x] <= 8
        )

    def is_victory(self) -> bool:
        """True when every non-mine cell has been revealed."""
        for y in range(self.height):
            for x in range(self.width):
                if not self.mines[y][x] and self.view[y][x] == HIDDEN:
                    return False
        return True

    def flood_fill(self, x: int, y: int) -> List[Tuple[int, int, int]]:
        """
        Reveal a connected region starting at (x, y) using flood fill rules.

        Zero cells cascade to their neighbors; numbered cells stop the
        cascade. Flagged and already visible cells are left untouched. The
        fill uses an explicit stack so large empty areas cannot exhaust the
        interpreter's recursion limit.

        Args:
            x: X-coordinate of the starting cell.
            y: Y-coordinate of the starting cell.

        Returns:
            A list of newly revealed cells as (x, y, clue).
        """
        stack: List[Cell] = [(x, y)]
        revealed_cells: List[Tuple[int, int, int]] = []

        while stack:
            cx, cy = stack.pop()
            if self.view[cy][cx] != HIDDEN or self.flags[cy][cx]:
                continue
            if self.mines[cy][cx]:
                continue

            value = self.clues[cy][cx]
            self.view[cy][cx] = value
            revealed_cells.append((cx, cy, value))

            if value == 0:
                for nx, ny in self.neighbors(cx, cy):
                    if self.view[ny][nx] == HIDDEN and not self.flags[ny][nx]:
                        stack.append((nx, ny))

        return revealed_cells

    def reveal(self, x: int, y: int) -> Tuple[int, Dict[str, object]]:
        """
        Reveal a single cell as a player would and return a status code plus payload.

        Returns:
            Tuple of (status, payload) where status is:
                - -1: Mine hit (the cell becomes EXPLODED)
                - 0: Non-terminal reveal (or no-op)
                - 1: Victory (all safe cells revealed)

            Payload contains "revealed_cells" for status 0 or 1 and
            "cell" for status -1.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            raise ValueError("Cell coordinates are outside the board.")

        if self.view[y][x] != HIDDEN or self.flags[y][x]:
            return 0, {}

        if self.mines[y][x]:
            self.view[y][x] = EXPLODED
            return -1, {"cell": (x, y)}

        revealed_cells = self.flood_fill(x, y)
        if self.is_victory():
            return 1, {"revealed_cells": revealed_cells}
        return 0, {"revealed_cells": revealed_cells}

    def set_flag(self, x: int, y: int) -> bool:
        """Flag a hidden cell. Returns True if the flag was newly placed."""
        if self.view[y][x] != HIDDEN or self.flags[y][x]:
            return False
        self.flags[y][x] = True
        self.flag_count += 1
        return True

    def toggle_flag(self, x: int, y: int) -> bool:
        """
        Toggle the flag on a hidden cell.

        Returns:
            The new flag state. Visible cells are never flagged.
        """
        if self.view[y][x] != HIDDEN:
            return False
        self.flags[y][x] = not self.flags[y][x]
        self.flag_count += 1 if self.flags[y][x] else -1
        return self.flags[y][x]

    def reset(self) -> None:
        """
        Hide every cell and remove every flag.

        Keeps the mine layout so the same board can be played again.
        """
        self.view = [[HIDDEN for _ in range(self.width)] for _ in range(self.height)]
        self.flags = [[False for _ in range(self.width)] for _ in range(self.height)]
        self.flag_count = 0

    def copy(self) -> "Board":
        """Return a board with copied overlays; ground truth is shared."""
        other = Board.__new__(Board)
        other.width = self.width
        other.height = self.height
        other.bomb_count = self.bomb_count
        other.mines = self.mines
        other.clues = self.clues
        other.view = [row[:] for row in self.view]
        other.flags = [row[:] for row in self.flags]
        other.flag_count = self.flag_count
        other._neighborhoods = self._neighborhoods
        return other

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str, color: bool) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}" if color else s

    def _m(self, s: str, color: bool) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}" if color else s

    def cell_symbol(self, x: int, y: int, reveal_all: bool = False) -> str:
        """Single-character symbol for a cell: '.', 'F', '*', 'X' or a digit."""
        v = self.view[y][x]
        if v == EXPLODED:
            return "X"
        if v == REVEALED_BOMB:
            return "*"
        if 0 <= v <= 8:
            return str(v)
        if self.flags[y][x]:
            return "F"
        if reveal_all:
            return "*" if self.mines[y][x] else str(self.clues[y][x])
        return "."

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and clues under hidden cells.
            color: If True, wrap coordinates and mines in ANSI colors.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        w, h = self.width, self.height

        def cell_str(x: int, y: int) -> str:
            s = self.cell_symbol(x, y, reveal_all)
            if s in ("*", "X"):
                return self._m(s, color)
            return s

        header_cells = " ".join(f"{x:2d}" for x in range(w))
        out = [self._c("   ", color) + self._c(header_cells, color)]
        out.append(self._c("   " + "-" * (3 * w - 1), color))

        for y in range(h):
            row_cells = " ".join(f" {cell_str(x, y)}" for x in range(w))
            out.append(self._c(f"{y:2d} ", color) + self._c("|", color) + row_cells)

        return "\n".join(out)
