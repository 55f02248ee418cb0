"""
Core ground water simulation functionality.
"""

from .scan import ClayVein, ScanFormatError, parse_scan, load_scan
from .grid import Grid, Tile, build_grid, SPRING_X
from .flow import FlowSimulation
from .stabilization import process_still_water
from .render import render_grid

__all__ = ['ClayVein', 'ScanFormatError', 'parse_scan', 'load_scan',
           'Grid', 'Tile', 'build_grid', 'SPRING_X',
           'FlowSimulation', 'process_still_water', 'render_grid']
