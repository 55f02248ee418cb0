"""
Clay scan parsing.

A scan lists clay veins one per line, either vertical::

    x=495, y=2..7

or horizontal::

    y=7, x=495..501
"""

import re
from pathlib import Path
from typing import Iterator, List, NamedTuple, Tuple, Union

import structlog

logger = structlog.get_logger()

VEIN_PATTERN = re.compile(r"(?P<axis>[xy])=(?P<line>\d+), (?P<other>[xy])=(?P<start>\d+)\.\.(?P<end>\d+)")


class ScanFormatError(ValueError):
    """Raised when scan text cannot be parsed completely."""

    def __init__(self, message: str, line_number: int = 0):
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ClayVein(NamedTuple):
    """Axis-aligned clay segment."""
    axis: str  # "x": vertical vein at column `line`, "y": horizontal vein at row `line`
    line: int
    start: int
    end: int

    @property
    def x_range(self) -> Tuple[int, int]:
        if self.axis == "x":
            return self.line, self.line
        return self.start, self.end

    @property
    def y_range(self) -> Tuple[int, int]:
        if self.axis == "y":
            return self.line, self.line
        return self.start, self.end

    def coordinates(self) -> Iterator[Tuple[int, int]]:
        """Yield every (x, y) covered by the vein."""
        for offset in range(self.start, self.end + 1):
            if self.axis == "x":
                yield self.line, offset
            else:
                yield offset, self.line


def parse_vein(line: str, line_number: int = 0) -> ClayVein:
    match = VEIN_PATTERN.fullmatch(line)
    if match is None:
        raise ScanFormatError(f"unrecognized vein {line!r}", line_number)
    if match["axis"] == match["other"]:
        raise ScanFormatError(f"vein fixes and spans the same axis in {line!r}", line_number)

    start, end = int(match["start"]), int(match["end"])
    if start > end:
        raise ScanFormatError(f"range {start}..{end} is reversed", line_number)
    return ClayVein(match["axis"], int(match["line"]), start, end)


def parse_scan(text: str) -> List[ClayVein]:
    """
    Parse a whole clay scan.

    Trailing newlines are accepted; any other unparsed content is an error.

    Args:
        text: Scan text, one vein per line

    Returns:
        Veins in input order
    """
    body = text.rstrip("\n")
    if not body:
        raise ScanFormatError("scan contains no clay veins")

    veins = [parse_vein(line, number) for number, line in enumerate(body.split("\n"), start=1)]
    logger.debug("Scan parsed", veins=len(veins))
    return veins


def load_scan(path: Union[str, Path]) -> List[ClayVein]:
    """Read and parse a scan file."""
    logger.info("Loading clay scan", path=str(path))
    return parse_scan(Path(path).read_text())
