"""
Maze grid storage and generation.

A Grid is a row-major list of Cells. Each Cell carries its own wall flags;
the effective wall between two neighbours is closed if either side says so.
"""

from __future__ import annotations

import logging
import random
from typing import Iterator

from maze_types import Cell, Direction, InvalidConfigurationError, Vector

logger = logging.getLogger(__name__)


class Grid:
    """A width x height array of Cells in row-major order."""

    def __init__(self, width: int, height: int, cells: list[Cell] | None = None) -> None:
        if width <= 0 or height <= 0:
            raise InvalidConfigurationError(
                f"Grid dimensions must be positive, got {width}x{height}"
            )
        if cells is None:
            cells = [Cell(x, y) for y in range(height) for x in range(width)]
        elif len(cells) != width * height:
            raise InvalidConfigurationError(
                f"Expected {width * height} cells for a {width}x{height} grid, got {len(cells)}"
            )
        self.width = width
        self.height = height
        self.cells = cells

    @classmethod
    def closed(cls, cell_divisions: int) -> Grid:
        """
        A square grid with every wall closed, except the top row's own top
        walls which start open (the entrance side). Grid edges are always
        effectively closed, so this only affects raw flags.
        """
        if cell_divisions <= 0:
            raise InvalidConfigurationError(
                f"cell_divisions must be >= 1, got {cell_divisions}"
            )
        cells = [
            Cell(x, y, [y != 0, True, True, True])
            for y in range(cell_divisions)
            for x in range(cell_divisions)
        ]
        return cls(cell_divisions, cell_divisions, cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    # -------------------------------------------------------------------------
    # Addressing
    # -------------------------------------------------------------------------

    def in_bounds(self, pos: Vector) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def index_of(self, pos: Vector) -> int:
        """Cell index for a position, or -1 if it lies off the grid."""
        if not self.in_bounds(pos):
            return -1
        return pos.x + pos.y * self.width

    def position_of(self, index: int) -> Vector:
        self.check_index(index)
        return Vector(index % self.width, index // self.width)

    def check_index(self, index: int) -> None:
        if not 0 <= index < len(self.cells):
            raise InvalidConfigurationError(
                f"Cell index {index} out of range [0, {len(self.cells)})"
            )

    def neighbour(self, index: int, direction: Direction) -> int:
        """Index of the adjacent cell in a direction, or -1 at the grid edge."""
        return self.index_of(self.position_of(index) + direction.delta)

    # -------------------------------------------------------------------------
    # Wall resolution
    # -------------------------------------------------------------------------

    def is_open(self, index: int, direction: Direction) -> bool:
        """
        Effective openness of one side of a cell.

        Open only when both this cell's own flag and the neighbour's facing
        flag are clear. The grid edge is always closed.
        """
        other = self.neighbour(index, direction)
        if other == -1:
            return False
        return not (
            self.cells[index].has_wall(direction)
            or self.cells[other].has_wall(direction.opposite)
        )

    def open_directions(self, index: int) -> list[Direction]:
        """Effectively open sides of a cell, in scan order."""
        return [d for d in Direction if self.is_open(index, d)]

    def is_corridor(self, index: int) -> bool:
        """True for straight corridor cells: exactly two opposite sides open."""
        open_dirs = set(self.open_directions(index))
        return open_dirs == {Direction.N, Direction.S} or open_dirs == {Direction.E, Direction.W}

    def walk(self, index: int, direction: Direction) -> Iterator[int]:
        """Yield the cells reached by stepping from index in a direction until a closed wall."""
        while self.is_open(index, direction):
            index = self.neighbour(index, direction)
            yield index

    def remove_wall_between(self, a: int, b: int) -> None:
        """Clear the shared wall bit on both of two adjacent cells."""
        direction = self.position_of(a).direction_to(self.position_of(b))
        if self.neighbour(a, direction) != b:
            raise ValueError(f"Cells {a} and {b} are not adjacent")
        self.cells[a].walls[direction.index] = False
        self.cells[b].walls[direction.opposite.index] = False

    def open_wall_count(self) -> int:
        """Number of effectively open internal walls (each counted once)."""
        count = 0
        for index in range(len(self.cells)):
            for direction in (Direction.E, Direction.S):
                if self.is_open(index, direction):
                    count += 1
        return count


# =============================================================================
# Generation
# =============================================================================


def _unvisited_neighbours(grid: Grid, index: int, visited: set[int]) -> list[int]:
    out = []
    for direction in Direction:
        other = grid.neighbour(index, direction)
        if other != -1 and other not in visited:
            out.append(other)
    return out


def generate_maze(cell_divisions: int, rng: random.Random | None = None) -> Grid:
    """
    Build a perfect maze by randomized depth-first wall removal.

    Uses an explicit stack rather than recursion. Each wall removal joins
    exactly one unvisited cell, so the result is a spanning tree over the
    cells with cell_divisions**2 - 1 open walls.

    Args:
        cell_divisions: Side length of the square grid (must be >= 1)
        rng: Random source; a fresh unseeded one is used if omitted

    Returns:
        The generated Grid

    Raises:
        InvalidConfigurationError: If cell_divisions < 1
    """
    grid = Grid.closed(cell_divisions)
    rng = rng or random.Random()

    total = len(grid)
    current = 0
    visited = {current}
    stack: list[int] = []

    while len(visited) < total:
        candidates = _unvisited_neighbours(grid, current, visited)
        if candidates:
            nxt = rng.choice(candidates)
            visited.add(nxt)
            stack.append(current)
            grid.remove_wall_between(current, nxt)
            current = nxt
        else:
            # Backtrack
            current = stack.pop()

    logger.debug("generate_maze: %dx%d grid, %d cells visited", cell_divisions, cell_divisions, len(visited))
    return grid
