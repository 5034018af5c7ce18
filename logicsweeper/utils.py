"""Utility functions for the logical Minesweeper solver."""

import logging
from typing import Dict, List, Tuple

Cell = Tuple[int, int]
Neighborhoods = Dict[Cell, Tuple[Cell, ...]]


def get_neighborhoods(width: int, height: int) -> Neighborhoods:
    """
    Precompute 8-connected neighbor coordinates for every cell in a grid.

    The mapping is built fresh on every call; boards own their copy and
    drop it with themselves.

    Args:
        width: Grid width (number of columns). Must be positive.
        height: Grid height (number of rows). Must be positive.

    Returns:
        Mapping from each cell (x, y) to a tuple of valid neighboring
        coordinates (nx, ny) under 8-connectivity, in row-major order.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    neighborhoods: Neighborhoods = {}
    for y in range(height):
        for x in range(width):
            nbrs: List[Cell] = []
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < width and 0 <= ny < height:
                        nbrs.append((nx, ny))
            neighborhoods[(x, y)] = tuple(nbrs)

    return neighborhoods


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
