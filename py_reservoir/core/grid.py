"""
Tile grid for the ground cross-section.

This module implements:
- The tile states (clay, sand, water)
- A flat row-major tile buffer covering the scanned region
- Water run scanning behind the full-waterline and still-water checks
"""

from enum import IntEnum
from typing import Iterable, Optional, Tuple

import numpy as np
import structlog

from .scan import ClayVein

logger = structlog.get_logger()

SPRING_X = 500

# Columns added beyond the outermost clay (or spring) column on each side
PADDING = 2


class Tile(IntEnum):
    """State of a single ground tile."""

    CLAY = 0
    SAND = 1
    WATER = 2


class Grid:
    """
    Bounded 2D region of tiles stored row-major in a flat numpy buffer.

    Coordinates are absolute scan coordinates. Callers must stay inside
    ``[min_x, max_x] x [min_y, max_y]``; accesses are not bounds checked.
    """

    def __init__(self, min_x: int, width: int, min_y: int, max_y: int, spring_x: int = SPRING_X):
        self.min_x = min_x
        self.width = width
        self.min_y = min_y
        self.max_y = max_y
        self.spring = (spring_x, min_y)

        self.tiles = np.full(width * self.height, Tile.SAND, dtype=np.uint8)
        self.still: Optional[np.ndarray] = None  # Overlay set by stabilization

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def max_x(self) -> int:
        return self.min_x + self.width - 1

    @property
    def size(self) -> int:
        return self.width * self.height

    def index(self, x: int, y: int) -> int:
        return (y - self.min_y) * self.width + (x - self.min_x)

    def read(self, x: int, y: int) -> Tile:
        return Tile(int(self.tiles[self.index(x, y)]))

    def write(self, x: int, y: int, tile: Tile) -> None:
        self.tiles[self.index(x, y)] = tile

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def is_boundary(self, x: int, y: int) -> bool:
        """True for tiles on the top or bottom row or either edge column."""
        return y <= self.min_y or y >= self.max_y or x <= self.min_x or x >= self.max_x

    def scan_run(self, x: int, y: int) -> Tuple[int, int]:
        """
        Find where the water run through ``(x, y)`` ends.

        Scans left, then right, from ``x`` while tiles are water, never past
        the region edges.

        Args:
            x: Column to start scanning from
            y: Row to scan

        Returns:
            Columns the left and right scans stopped on
        """
        left = x
        while self.read(left, y) == Tile.WATER and left > self.min_x:
            left -= 1

        right = x
        while self.read(right, y) == Tile.WATER and right < self.max_x:
            right += 1

        return left, right

    def is_full_waterline(self, x: int, y: int) -> bool:
        """
        Check whether the water run through ``(x, y)`` rests on solid ends.

        The row is full only when both scans of ``scan_run`` stop on clay
        or water, i.e. there is no sand gap the water could escape through.
        """
        left, right = self.scan_run(x, y)
        return self.read(left, y) != Tile.SAND and self.read(right, y) != Tile.SAND

    def count_water(self) -> int:
        """Number of tiles touched by water, still or flowing."""
        return int(np.count_nonzero(self.tiles == Tile.WATER))

    def count_still_water(self) -> int:
        """Number of tiles classified as still by the stabilization pass."""
        if self.still is None:
            raise ValueError("Still water not classified. Run process_still_water() first!")
        return int(np.count_nonzero(self.still))

    def as_rows(self) -> np.ndarray:
        """2D ``(height, width)`` view of the tile buffer."""
        return self.tiles.reshape(self.height, self.width)


def _bounds(veins: Iterable[ClayVein], spring_x: int) -> Tuple[int, int, int, int]:
    xs = [spring_x]
    ys = []
    for vein in veins:
        (x0, x1), (y0, y1) = vein.x_range, vein.y_range
        xs.extend((x0, x1))
        ys.extend((y0, y1))
    return min(xs), max(xs), min(ys), max(ys)


def build_grid(veins: Iterable[ClayVein], spring_x: int = SPRING_X) -> Grid:
    """
    Build the grid for a set of clay veins.

    The region spans every clay tile and the spring column, padded on both
    sides so water spilling past the outermost clay always falls through
    an in-bounds column.

    Args:
        veins: Clay veins from the scan
        spring_x: Column of the spring; it sits on the topmost clay row

    Returns:
        Grid stamped with clay and with water at the spring
    """
    veins = list(veins)
    if not veins:
        raise ValueError("Cannot build a grid without clay veins")

    min_x, max_x, min_y, max_y = _bounds(veins, spring_x)
    min_x -= PADDING
    max_x += PADDING

    grid = Grid(min_x, max_x - min_x + 1, min_y, max_y, spring_x=spring_x)
    for vein in veins:
        for x, y in vein.coordinates():
            grid.write(x, y, Tile.CLAY)

    if grid.read(*grid.spring) == Tile.CLAY:
        raise ValueError(f"Spring at {grid.spring} is sealed in clay")
    grid.write(*grid.spring, Tile.WATER)

    logger.info("Grid built",
                veins=len(veins),
                width=grid.width,
                height=grid.height,
                min_x=grid.min_x,
                min_y=grid.min_y,
                max_y=grid.max_y)
    return grid
