"""Command line driver: settle water over a clay scan and print the counts."""

import argparse
import sys
from typing import List, Optional

import structlog

from .config import settings
from .core import FlowSimulation, ScanFormatError, build_grid, load_scan, parse_scan, render_grid
from .logging_config import configure_logging
from .report import build_report

logger = structlog.get_logger()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-reservoir",
        description="Simulate water seeping from a spring through a clay scan",
    )
    parser.add_argument("scan", help="Clay scan file, or '-' to read standard input")
    parser.add_argument("--spring-x", type=int, default=settings.spring_x,
                        help="Column of the spring (default: %(default)s)")
    parser.add_argument("--no-still", action="store_true",
                        help="Skip still water classification")
    parser.add_argument("--render", action="store_true", default=settings.render,
                        help="Print the settled grid before the counts")
    parser.add_argument("--json", action="store_true",
                        help="Print the report as JSON")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        default=settings.log_level.upper(),
                        help="Log level (default: %(default)s)")
    parser.add_argument("--log-format", choices=("plain", "json"), default=settings.log_format,
                        help="Log output format (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    try:
        veins = parse_scan(sys.stdin.read()) if args.scan == "-" else load_scan(args.scan)
        grid = build_grid(veins, spring_x=args.spring_x)
    except ScanFormatError as e:
        logger.error("Malformed clay scan", error=str(e))
        return 2
    except (OSError, ValueError) as e:
        logger.error("Could not set up simulation", error=str(e))
        return 2

    simulation = FlowSimulation(grid)
    ticks = simulation.run()
    if not args.no_still:
        simulation.process_still_water()

    report = build_report(simulation, ticks)

    if args.json:
        print(report.model_dump_json(indent=2))
        return 0

    if args.render:
        print(render_grid(grid, show_still=not args.no_still))
    print(f"All water tiles count: {report.total_water}")
    if report.still_water is not None:
        print(f"Still water tiles count: {report.still_water}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
