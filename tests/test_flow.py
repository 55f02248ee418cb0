"""Tests for the water flow simulation."""

import pytest
import numpy as np
from py_reservoir.core.flow import FlowSimulation
from py_reservoir.core.grid import Tile, build_grid
from py_reservoir.core.scan import ClayVein, parse_scan


# Basin three tiles wide directly under the spring, walls rising to the spring row
SMALL_BASIN = [
    ClayVein("x", 498, 1, 4),
    ClayVein("x", 502, 1, 4),
    ClayVein("y", 4, 498, 502),
]


def simulate(veins):
    simulation = FlowSimulation(build_grid(veins))
    ticks = simulation.run()
    return simulation, ticks


class TestFlowStep:
    """Test the falling and spreading state machine."""

    def test_water_falls_into_sand(self):
        """Falling water marks the tile below and records where it came from."""
        simulation = FlowSimulation(build_grid([ClayVein("x", 510, 1, 5)]))
        simulation.flow_step()

        assert simulation.grid.read(500, 2) == Tile.WATER
        assert list(simulation.frontier) == [(500, 2)]
        assert list(simulation.backtrack) == [(500, 1)]

    def test_blocked_water_spreads_sideways(self):
        """Clay below sends water to both sandy neighbours without backtracking."""
        simulation = FlowSimulation(build_grid([
            ClayVein("y", 3, 499, 501),
            ClayVein("x", 510, 1, 3),
        ]))
        simulation.flow_step()
        simulation.flow_step()

        grid = simulation.grid
        assert grid.read(499, 2) == Tile.WATER
        assert grid.read(501, 2) == Tile.WATER
        assert list(simulation.frontier) == [(499, 2), (501, 2)]
        assert list(simulation.backtrack) == [(500, 1)]

    def test_spread_skips_clay_neighbours(self):
        """Clay beside blocked water stays clay and is not queued."""
        simulation = FlowSimulation(build_grid([
            ClayVein("x", 499, 1, 2),
            ClayVein("x", 501, 1, 2),
            ClayVein("y", 2, 499, 501),
        ]))
        simulation.flow_step()

        assert simulation.grid.read(499, 1) == Tile.CLAY
        assert simulation.grid.read(501, 1) == Tile.CLAY
        assert not simulation.frontier
        assert not simulation.backtrack

    def test_bottom_row_drains(self):
        """Water on the bottom row is discarded without touching the grid."""
        simulation = FlowSimulation(build_grid([ClayVein("x", 510, 1, 5)]))
        grid = simulation.grid
        grid.write(500, 5, Tile.WATER)
        simulation.frontier.clear()
        simulation.frontier.append((500, 5))
        before = grid.tiles.copy()

        simulation.flow_step()

        assert np.array_equal(grid.tiles, before)
        assert not simulation.frontier
        assert not simulation.backtrack


class TestBacktrackStep:
    """Test the reconciliation state machine."""

    def test_boundary_entries_discarded(self):
        """Entries on the top row never pool."""
        simulation = FlowSimulation(build_grid(SMALL_BASIN))
        simulation.frontier.clear()
        simulation.backtrack.append((500, 1))
        before = simulation.grid.tiles.copy()

        simulation.backtrack_step()

        assert np.array_equal(simulation.grid.tiles, before)
        assert not simulation.backtrack

    def test_full_row_below_fills_current_row(self):
        """A full waterline below sweeps the row out to the basin walls."""
        simulation = FlowSimulation(build_grid(SMALL_BASIN))
        while simulation.frontier:
            simulation.tick()

        grid = simulation.grid
        assert [grid.read(x, 3) for x in (499, 500, 501)] == [Tile.WATER] * 3
        assert grid.read(499, 2) == Tile.SAND
        assert simulation.backtrack[-1] == (500, 2)

        simulation.tick()

        assert [grid.read(x, 2) for x in (499, 500, 501)] == [Tile.WATER] * 3
        assert not simulation.frontier

    def test_overflow_resumes_falling(self, classic_scan):
        """A sweep ending off the clay floor queues the overflow tile and moves it at once."""
        simulation = FlowSimulation(build_grid(parse_scan(classic_scan)))
        grid = simulation.grid
        while list(simulation.backtrack)[-1:] != [(500, 2)] or simulation.frontier:
            simulation.tick()

        simulation.tick()

        # Row 2 spills right past the basin wall at 501; the spill already spread to 502
        assert grid.read(501, 2) == Tile.WATER
        assert grid.read(502, 2) == Tile.WATER
        assert list(simulation.frontier) == [(502, 2)]


class TestRun:
    """Test driving the simulation to completion."""

    def test_classic_basin_water_count(self, classic_scan):
        """The classic scan touches 57 tiles."""
        simulation, _ = simulate(parse_scan(classic_scan))
        assert simulation.count_water() == 57
        assert not simulation.pending

    def test_classic_basin_still_water(self, classic_scan):
        """29 of the classic scan's water tiles settle."""
        simulation, _ = simulate(parse_scan(classic_scan))
        assert simulation.process_still_water() == 29
        assert simulation.count_still_water() == 29
        assert simulation.count_water() == 57

    def test_isolated_vein_drains(self):
        """Water falls straight past a distant vein and nothing pools."""
        simulation, _ = simulate([ClayVein("x", 510, 1, 5)])
        grid = simulation.grid

        assert simulation.count_water() == 5
        assert all(grid.read(500, y) == Tile.WATER for y in range(1, 6))
        assert simulation.process_still_water() == 0

    def test_one_tile_pocket(self):
        """A pocket one tile wide and deep under the spring holds one still tile."""
        simulation, ticks = simulate([
            ClayVein("x", 499, 1, 2),
            ClayVein("x", 501, 1, 2),
            ClayVein("y", 2, 499, 500),
            ClayVein("y", 2, 500, 501),
        ])
        assert ticks == 1
        assert simulation.count_water() >= 1
        assert simulation.process_still_water() == 1

    def test_small_basin(self):
        """The basin fills below the spring row; the spring row keeps flowing."""
        simulation, ticks = simulate(SMALL_BASIN)
        assert ticks == 7
        assert simulation.count_water() == 7
        assert simulation.process_still_water() == 6

    def test_on_step_called_every_tick(self):
        seen = []
        simulation = FlowSimulation(build_grid(SMALL_BASIN))
        ticks = simulation.run(on_step=lambda sim: seen.append(sim.count_water()))
        assert len(seen) == ticks

    def test_still_water_requires_settled_flow(self):
        """Stabilization refuses to run while water is moving."""
        simulation = FlowSimulation(build_grid(SMALL_BASIN))
        with pytest.raises(ValueError, match="still moving"):
            simulation.process_still_water()


class TestInvariants:
    """Test properties that hold over every step."""

    @pytest.fixture(params=["classic", "small_basin", "isolated"])
    def simulation(self, request, classic_scan):
        veins = {
            "classic": parse_scan(classic_scan),
            "small_basin": SMALL_BASIN,
            "isolated": [ClayVein("x", 510, 1, 5)],
        }[request.param]
        return FlowSimulation(build_grid(veins))

    def test_water_is_monotonic_and_clay_is_kept(self, simulation):
        """Water never returns to sand and clay is never overwritten."""
        grid = simulation.grid
        clay = grid.tiles == Tile.CLAY
        water = grid.tiles == Tile.WATER
        count = grid.count_water()

        while simulation.tick():
            current_water = grid.tiles == Tile.WATER
            assert np.all(current_water[water])
            assert np.array_equal(grid.tiles == Tile.CLAY, clay)
            assert grid.count_water() >= count
            water, count = current_water, grid.count_water()

    def test_terminates_within_tile_count(self, simulation):
        """Both worklists drain in no more ticks than there are tiles."""
        ticks = simulation.run()
        assert ticks <= simulation.grid.size
        assert not simulation.frontier
        assert not simulation.backtrack
