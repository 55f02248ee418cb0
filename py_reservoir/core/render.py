"""Text rendering of a grid for diagnostics."""

from typing import List

import numpy as np

from .grid import Grid, Tile

TILE_CHARS = {
    Tile.CLAY: "#",
    Tile.SAND: " ",
    Tile.WATER: "~",
}
FLOWING_CHAR = "|"
SPRING_CHAR = "+"


def render_grid(grid: Grid, show_still: bool = False) -> str:
    """
    Render the grid with column rulers and row labels.

    The rulers print each column number vertically, one line per digit,
    followed by a line marking the spring column.

    Args:
        grid: Grid to render
        show_still: Draw flowing water as ``|`` and still water as ``~``;
            requires the stabilization pass to have run

    Returns:
        Multi-line string, one line per row after the rulers
    """
    if show_still and grid.still is None:
        raise ValueError("Still water not classified. Run process_still_water() first!")

    columns = range(grid.min_x, grid.max_x + 1)
    digits = len(str(grid.max_x))
    label_w = max(4, len(str(grid.max_y)))
    margin = " " * (label_w + 1)

    lines: List[str] = []
    for digit in range(digits):
        lines.append(margin + "".join(str(x).rjust(digits)[digit] for x in columns))
    lines.append(margin + "".join(SPRING_CHAR if x == grid.spring[0] else " " for x in columns))

    rows = grid.as_rows()
    still = grid.still.reshape(grid.height, grid.width) if show_still else None
    for row in range(grid.height):
        chars = [TILE_CHARS[Tile(int(value))] for value in rows[row]]
        if still is not None:
            for column in np.flatnonzero((rows[row] == Tile.WATER) & ~still[row]):
                chars[column] = FLOWING_CHAR
        lines.append(f"{grid.min_y + row:>{label_w}} " + "".join(chars))

    return "\n".join(lines)
