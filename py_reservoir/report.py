"""Result model for a finished simulation."""

from typing import Optional

from pydantic import BaseModel, Field

from .core.flow import FlowSimulation


class SimulationReport(BaseModel):
    """Counts and geometry of a settled simulation."""

    total_water: int = Field(..., description="Tiles ever touched by water")
    still_water: Optional[int] = Field(None, description="Tiles holding still water, if classified")
    ticks: int = Field(..., description="Units of work taken to settle")
    width: int
    height: int
    min_x: int
    max_x: int
    min_y: int
    max_y: int


def build_report(simulation: FlowSimulation, ticks: int) -> SimulationReport:
    grid = simulation.grid
    return SimulationReport(
        total_water=grid.count_water(),
        still_water=grid.count_still_water() if grid.still is not None else None,
        ticks=ticks,
        width=grid.width,
        height=grid.height,
        min_x=grid.min_x,
        max_x=grid.max_x,
        min_y=grid.min_y,
        max_y=grid.max_y,
    )
