"""
Maze parsing utilities for navmaze.

Provides two parsing formats:
1. Token format: one token per cell listing its open sides
2. Drawn format: the ASCII wall drawing produced by ascii_render.render_maze
"""

from __future__ import annotations

import textwrap

from maze_grid import Grid
from maze_types import Cell, Direction, InvalidConfigurationError

__all__ = ["parse_maze", "parse_maze_drawing"]


def parse_maze(definition: str) -> Grid:
    """
    Parse a maze from a compact token format.

    Format:
    - Rows separated by |
    - Cells separated by whitespace
    - Each cell token lists its open sides using N, E, S, W (any order,
      case-insensitive); '_' marks a cell with no open side

    Openings must agree between neighbours (an 'E' needs a 'W' on the cell to
    the right) and may not lead off the grid.

    Example:
        "ES W|N _"
        Creates a 2x2 grid where cell 0 opens east and south, cell 1 opens
        west, cell 2 opens north and cell 3 is walled in.

    Args:
        definition: The maze definition string

    Returns:
        Grid with walls set from the tokens

    Raises:
        InvalidConfigurationError: On unknown characters, ragged rows, or
            openings that do not match their neighbour
    """
    row_strings = [row.strip() for row in definition.strip().split("|")]
    token_rows = [row.split() for row in row_strings]

    if not token_rows or not token_rows[0]:
        raise InvalidConfigurationError("Empty maze definition")

    width = len(token_rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(token_rows) if len(row) != width]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in maze\n"
            f"  Expected: {width} cells (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual in mismatched:
            error_msg += f"    Row {row_idx}: {actual} cells - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise InvalidConfigurationError(error_msg)

    cells: list[Cell] = []
    for y, row in enumerate(token_rows):
        for x, token in enumerate(row):
            walls = [True, True, True, True]
            if token != "_":
                for char in token.upper():
                    try:
                        direction = Direction(char)
                    except ValueError:
                        raise InvalidConfigurationError(
                            f"Invalid cell token: '{token}'\n"
                            f"  Row {y}: \"{row_strings[y]}\"\n"
                            f"  Position: column {x}\n"
                            f"  Valid tokens: letters from N, E, S, W, or '_' for no openings"
                        ) from None
                    walls[direction.index] = False
            cells.append(Cell(x, y, walls))

    grid = Grid(width, len(token_rows), cells)
    _check_openings(grid)
    return grid


def _check_openings(grid: Grid) -> None:
    for index, cell in enumerate(grid):
        for direction in Direction:
            if cell.has_wall(direction):
                continue
            other = grid.neighbour(index, direction)
            if other == -1:
                raise InvalidConfigurationError(
                    f"Cell ({cell.x}, {cell.y}) opens {direction.value} off the edge of the maze"
                )
            if grid[other].has_wall(direction.opposite):
                raise InvalidConfigurationError(
                    f"Cell ({cell.x}, {cell.y}) opens {direction.value} but its neighbour "
                    f"({grid[other].x}, {grid[other].y}) has no {direction.opposite.value} opening"
                )


def parse_maze_drawing(drawing: str) -> Grid:
    """
    Parse a maze from its ASCII wall drawing.

    Format (each cell is two characters wide):
        +--+--+
        |     |
        +  +--+
        |     |
        +--+--+

    A gap in a '+--+' run or a missing '|' is an opening. Colour codes must
    already be stripped.

    Args:
        drawing: Multi-line drawing; leading/trailing blank lines are ignored

    Returns:
        Grid with matching walls on both sides of every opening

    Raises:
        InvalidConfigurationError: If the drawing does not have the expected shape
    """
    lines = [line.rstrip() for line in textwrap.dedent(drawing).split("\n") if line.strip()]
    if len(lines) < 3 or len(lines) % 2 == 0:
        raise InvalidConfigurationError(
            f"Maze drawing needs an odd number of lines (>= 3), got {len(lines)}"
        )

    border = lines[0]
    if not border.startswith("+") or (len(border) - 1) % 3 != 0:
        raise InvalidConfigurationError(
            f"Invalid top border: \"{border}\"\n"
            f"  Expected '+--' repeated once per cell, ending with '+'"
        )
    width = (len(border) - 1) // 3
    height = (len(lines) - 1) // 2
    size = 3 * width + 1
    lines = [line.ljust(size) for line in lines]

    cells: list[Cell] = []
    for y in range(height):
        above, body, below = lines[2 * y], lines[2 * y + 1], lines[2 * y + 2]
        for x in range(width):
            left = 3 * x
            walls = [
                above[left + 1 : left + 3] != "  ",
                body[left + 3] != " ",
                below[left + 1 : left + 3] != "  ",
                body[left] != " ",
            ]
            cells.append(Cell(x, y, walls))

    grid = Grid(width, height, cells)
    _check_openings(grid)
    return grid
