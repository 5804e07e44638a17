"""
Map loading.

A map file holds one grid row per line, each cell a single-character
color token separated by whitespace:

    r g g r
    g g r g
"""

import logging
from pathlib import Path
from typing import List, Union

from .base import GridWorld
from ..utils.grid import check_rectangular

logger = logging.getLogger(__name__)


class MapFormatError(ValueError):
    """Map text could not be parsed into a grid of colors."""


def parse_line(line: str, line_no: int = 0) -> List[str]:
    """
    Parse one row of map text.

    Args:
        line: Whitespace-separated color tokens
        line_no: 1-based line number (for error messages)

    Returns:
        row: List of single-character colors
    """
    row = line.split()
    for token in row:
        if len(token) != 1:
            raise MapFormatError(
                f"line {line_no}: color tokens must be single characters, got {token!r}"
            )
    return row


def parse_map(text: str) -> GridWorld:
    """
    Parse map text into a GridWorld.

    Blank lines are skipped. Rows are never padded: a ragged map raises
    GridShapeError.
    """
    rows = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        rows.append(parse_line(line, line_no))

    if not rows:
        raise MapFormatError("map contains no rows")

    check_rectangular(rows, "map")
    return GridWorld.from_rows(rows)


def read_map(path: Union[str, Path]) -> GridWorld:
    """
    Load a map file.

    Raises:
        FileNotFoundError: missing file
        MapFormatError: malformed tokens or empty map
        GridShapeError: ragged rows
    """
    path = Path(path)
    world = parse_map(path.read_text())
    logger.debug("Loaded map %s: %dx%d, palette=%s", path, world.height, world.width, world.palette)
    return world
