"""Still water classification for a settled grid."""

import numpy as np
import structlog

from .grid import Grid, Tile

logger = structlog.get_logger()


def process_still_water(grid: Grid) -> np.ndarray:
    """
    Mark water that has permanently pooled.

    A run of water is still when it is walled in by clay on both sides and
    every tile beneath it is clay or still water. Rows are classified from
    the bottom up so each row's floor is settled before the row above is
    looked at. Water on the bottom row is never still since its floor lies
    outside the grid. Tiles are left untouched; the classification is
    stored in ``grid.still``.

    Args:
        grid: Grid whose flow simulation has completed

    Returns:
        Boolean array parallel to ``grid.tiles``
    """
    logger.info("Classifying still water")

    still = np.zeros(grid.size, dtype=bool)
    rows = grid.as_rows()
    still_rows = still.reshape(grid.height, grid.width)

    for row in range(grid.height - 2, -1, -1):
        y = grid.min_y + row
        visited = -1  # Runs are classified once, from their leftmost tile
        for column in np.flatnonzero(rows[row] == Tile.WATER):
            if column <= visited:
                continue
            left, right = grid.scan_run(grid.min_x + int(column), y)
            visited = right - grid.min_x
            if grid.read(left, y) != Tile.CLAY or grid.read(right, y) != Tile.CLAY:
                continue

            start, stop = left + 1 - grid.min_x, right - grid.min_x
            floor = rows[row + 1, start:stop]
            if np.all((floor == Tile.CLAY) | still_rows[row + 1, start:stop]):
                still_rows[row, start:stop] = True

    grid.still = still
    logger.info("Still water classified", still_tiles=int(np.count_nonzero(still)))
    return still
