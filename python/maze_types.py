"""
Shared type definitions for the navmaze system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from maze_grid import Grid
    from navmesh import NavMesh


# =============================================================================
# Errors
# =============================================================================


class InvalidConfigurationError(ValueError):
    """Rejected input (bad size, out-of-range cell index, malformed maze text)."""


class MazeTopologyError(RuntimeError):
    """A trace or search found the maze inconsistent with a perfect maze."""


# =============================================================================
# Geometry
# =============================================================================


@dataclass(frozen=True)
class Vector:
    """2D integer point."""

    x: int
    y: int

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    @property
    def length(self) -> int:
        """Manhattan distance from the origin."""
        return abs(self.x) + abs(self.y)

    def direction_to(self, other: Vector) -> Direction:
        """
        Direction from this point to an axis-aligned other point.

        Raises:
            ValueError: If the points are identical or not on a shared row/column
        """
        if self.x != other.x and self.y != other.y:
            raise ValueError(f"{self} and {other} are not axis-aligned")
        if other.y < self.y:
            return Direction.N
        if other.x > self.x:
            return Direction.E
        if other.y > self.y:
            return Direction.S
        if other.x < self.x:
            return Direction.W
        raise ValueError(f"No direction between identical points {self}")


class Direction(Enum):
    """Cardinal direction. Member order is the fixed scan order."""

    N = "N"  # Top (decreasing y)
    E = "E"  # Right (increasing x)
    S = "S"  # Bottom (increasing y)
    W = "W"  # Left (decreasing x)

    @property
    def index(self) -> int:
        """Slot of this direction in a Cell's wall list."""
        return _WALL_SLOTS[self]

    @property
    def delta(self) -> Vector:
        return _DELTAS[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_WALL_SLOTS = {Direction.N: 0, Direction.E: 1, Direction.S: 2, Direction.W: 3}

_DELTAS = {
    Direction.N: Vector(0, -1),
    Direction.E: Vector(1, 0),
    Direction.S: Vector(0, 1),
    Direction.W: Vector(-1, 0),
}

_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.E: Direction.W,
    Direction.S: Direction.N,
    Direction.W: Direction.E,
}


# =============================================================================
# Maze Entities
# =============================================================================


@dataclass
class Cell:
    """One grid square with its own wall flags (top, right, bottom, left)."""

    x: int
    y: int
    walls: list[bool] = field(default_factory=lambda: [True, True, True, True])

    @property
    def position(self) -> Vector:
        return Vector(self.x, self.y)

    def has_wall(self, direction: Direction) -> bool:
        """Raw wall flag on this side only. Traversal must use Grid.open_directions."""
        return self.walls[direction.index]


@dataclass(frozen=True)
class NavLink:
    """A directional link to another nav node. target == -1 means no link."""

    target: int = -1
    distance: int = 0

    @property
    def linked(self) -> bool:
        return self.target != -1


NO_LINK = NavLink()


@dataclass
class NavNode:
    """A nav mesh vertex sitting on a junction, corner or dead-end cell."""

    x: int
    y: int
    links: dict[Direction, NavLink] = field(
        default_factory=lambda: {d: NO_LINK for d in Direction}
    )

    @property
    def position(self) -> Vector:
        return Vector(self.x, self.y)


class ColorToken(Enum):
    """Opaque visual states handed to a Renderer."""

    START = "start"
    FINISH = "finish"
    PATH = "path"
    SEARCHED = "searched"
    EXPLORE = "explore"
    CLEAR = "clear"


# =============================================================================
# Renderer Collaborator
# =============================================================================


class Renderer(Protocol):
    """
    Visual side of the maze. Calls must be idempotent and must not raise:
    a renderer that cannot find a cell logs and ignores the request.
    """

    def attach(self, grid: Grid, mesh: NavMesh) -> None:
        """Called whenever the maze is (re)generated."""
        ...

    def recolor(
        self, cell_index: int, color: ColorToken, bright: bool = False, instant: bool = False
    ) -> None: ...

    def recolor_node(
        self, node_index: int, color: ColorToken, bright: bool = False, instant: bool = False
    ) -> None: ...

    def clear(self) -> None: ...


class NullRenderer:
    """Renderer that draws nothing."""

    def attach(self, grid: Grid, mesh: NavMesh) -> None:
        pass

    def recolor(
        self, cell_index: int, color: ColorToken, bright: bool = False, instant: bool = False
    ) -> None:
        pass

    def recolor_node(
        self, node_index: int, color: ColorToken, bright: bool = False, instant: bool = False
    ) -> None:
        pass

    def clear(self) -> None:
        pass
