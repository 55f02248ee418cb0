"""
Water flow simulation from the spring.

Water advances one unit of work per tick through two cooperating worklists:
- the flow frontier (FIFO): positions still falling or spreading sideways
- the backtrack stack (LIFO): fallen-through positions waiting to be
  reconciled once the column below them settles

Backtracking is what fills basins: once the row beneath a position holds
water between solid ends, the position's row is swept full of water, and
any end of the sweep that is not clay becomes a new falling position.
"""

from collections import deque
from typing import Callable, Deque, Optional, Tuple

import structlog

from .grid import Grid, Tile
from .stabilization import process_still_water

logger = structlog.get_logger()

Coord = Tuple[int, int]


class FlowSimulation:
    """Drives water from the spring of a grid until nothing moves."""

    def __init__(self, grid: Grid):
        """
        Initialize the simulation.

        Args:
            grid: Grid built by build_grid(); water already sits at its spring
        """
        self.grid = grid
        self.frontier: Deque[Coord] = deque([grid.spring])
        self.backtrack: Deque[Coord] = deque()

    @property
    def pending(self) -> bool:
        return bool(self.frontier) or bool(self.backtrack)

    def tick(self) -> bool:
        """
        Advance one unit of work.

        Falling water is always advanced before any backtracking.

        Returns:
            True while work remains
        """
        if self.frontier:
            self.flow_step()
        elif self.backtrack:
            self.backtrack_step()
        return self.pending

    def run(self, on_step: Optional[Callable[["FlowSimulation"], None]] = None) -> int:
        """
        Tick until both worklists are empty.

        Args:
            on_step: Called with the simulation after every tick

        Returns:
            Number of ticks taken
        """
        logger.info("Running water flow", spring=self.grid.spring, tiles=self.grid.size)

        ticks = 0
        while self.pending:
            self.tick()
            ticks += 1
            if on_step is not None:
                on_step(self)

        logger.info("Water flow settled", ticks=ticks, water_tiles=self.grid.count_water())
        return ticks

    def flow_step(self) -> None:
        grid = self.grid
        x, y = self.frontier.popleft()

        # Nothing below the bottom row is observable
        if y >= grid.max_y:
            return

        below = grid.read(x, y + 1)
        if below == Tile.SAND or below == Tile.WATER:
            grid.write(x, y + 1, Tile.WATER)
            self.frontier.append((x, y + 1))
            self.backtrack.append((x, y))
        elif below == Tile.CLAY:
            for side in (x - 1, x + 1):
                if grid.read(side, y) == Tile.SAND:
                    grid.write(side, y, Tile.WATER)
                    self.frontier.append((side, y))

    def backtrack_step(self) -> None:
        grid = self.grid
        x, y = self.backtrack.pop()

        # Boundary tiles cannot hold a pool
        if grid.is_boundary(x, y):
            return

        if grid.is_full_waterline(x, y + 1) and grid.read(x - 1, y) != Tile.CLAY:
            self._sweep(x, y, -1)

        if grid.is_full_waterline(x, y + 1) and grid.read(x + 1, y) != Tile.CLAY:
            self._sweep(x, y, 1)

        if self.frontier:
            self.flow_step()

    def _sweep(self, x: int, y: int, step: int) -> None:
        """
        Fill row ``y`` from ``x`` towards ``step`` while it rests on non-clay.

        The sweep stops at clay in the row, clay underneath, or the region
        edge. Unless it stopped on clay, the final tile overflows and is
        queued to fall.
        """
        grid = self.grid
        edge = grid.min_x if step < 0 else grid.max_x

        current = x
        while (grid.read(current, y + 1) != Tile.CLAY
               and grid.read(current, y) != Tile.CLAY
               and current != edge):
            grid.write(current, y, Tile.WATER)
            current += step

        if grid.read(current, y) != Tile.CLAY:
            grid.write(current, y, Tile.WATER)
            self.frontier.append((current, y))

    def process_still_water(self) -> int:
        """
        Classify still water once the flow has settled.

        Returns:
            Number of still water tiles
        """
        if self.pending:
            raise ValueError("Water is still moving. Run the simulation to completion first!")
        process_still_water(self.grid)
        return self.grid.count_still_water()

    def count_water(self) -> int:
        return self.grid.count_water()

    def count_still_water(self) -> int:
        return self.grid.count_still_water()
