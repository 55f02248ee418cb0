#!/usr/bin/env python3
"""
Simple demo script showing water settling into the classic two-basin scan.
"""

from py_reservoir.core import FlowSimulation, build_grid, parse_scan, render_grid

CLASSIC_SCAN = """x=495, y=2..7
y=7, x=495..501
x=501, y=3..7
x=498, y=2..4
x=506, y=1..2
x=498, y=10..13
x=504, y=10..13
y=13, x=498..504
"""


def main():
    """Demonstrate the flow simulation."""
    print("Py-Reservoir Basin Demo")
    print("=" * 40)

    grid = build_grid(parse_scan(CLASSIC_SCAN))
    print(f"\nGrid {grid.width}x{grid.height}, spring at {grid.spring}")

    # Snapshot the water count every 10 ticks
    snapshots = []

    def snapshot(simulation):
        if len(snapshots) % 10 == 0:
            print(f"  water tiles: {simulation.count_water()}")
        snapshots.append(simulation.count_water())

    simulation = FlowSimulation(grid)
    ticks = simulation.run(on_step=snapshot)
    simulation.process_still_water()

    print(f"\nSettled after {ticks} ticks:\n")
    print(render_grid(grid, show_still=True))
    print(f"\nAll water tiles:   {simulation.count_water()}")
    print(f"Still water tiles: {simulation.count_still_water()}")


if __name__ == "__main__":
    main()
