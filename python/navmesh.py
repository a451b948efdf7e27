"""
Navigation mesh over a generated maze.

Straight corridors are collapsed into single weighted edges between nav
nodes sitting on junctions, corners and dead ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from maze_grid import Grid
from maze_types import Direction, MazeTopologyError, NavLink, NavNode

logger = logging.getLogger(__name__)


@dataclass
class NavMesh:
    """Nav nodes plus a cell index -> node index lookup."""

    grid: Grid
    nodes: list[NavNode] = field(default_factory=list)
    node_at: dict[int, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, node_index: int) -> NavNode:
        return self.nodes[node_index]

    def node_index_at(self, cell_index: int) -> int:
        """Node sitting on a cell, or -1."""
        return self.node_at.get(cell_index, -1)

    def cell_index_of(self, node_index: int) -> int:
        return self.grid.index_of(self.nodes[node_index].position)

    def add_node(self, cell_index: int) -> int:
        cell = self.grid[cell_index]
        self.nodes.append(NavNode(cell.x, cell.y))
        node_index = len(self.nodes) - 1
        self.node_at[cell_index] = node_index
        return node_index

    def link(self, a: int, b: int, direction: Direction, distance: int) -> None:
        """Create a bidirectional edge; b lies in `direction` from a."""
        self.nodes[a].links[direction] = NavLink(b, distance)
        self.nodes[b].links[direction.opposite] = NavLink(a, distance)

    def links(self) -> list[tuple[int, int, int]]:
        """Every edge once, as (node_a, node_b, distance) with node_a < node_b."""
        edges = []
        for i, node in enumerate(self.nodes):
            for link in node.links.values():
                if link.linked and i < link.target:
                    edges.append((i, link.target, link.distance))
        return edges


def is_node_site(grid: Grid, cell_index: int) -> bool:
    """Dead ends, corners and junctions get nodes; straight corridors do not."""
    return not grid.is_corridor(cell_index)


def auto_link(mesh: NavMesh, node_index: int) -> None:
    """
    Trace each open direction from a node until the next node site.

    Links to the node found there if it already exists. Sites whose node has
    not been created yet are linked when that node is added.
    """
    grid = mesh.grid
    origin = mesh.cell_index_of(node_index)
    origin_pos = grid.position_of(origin)

    for direction in grid.open_directions(origin):
        for current in grid.walk(origin, direction):
            other = mesh.node_index_at(current)
            if other != -1:
                if other != node_index:
                    distance = (grid.position_of(current) - origin_pos).length
                    mesh.link(node_index, other, direction, distance)
                break
            if not grid.is_corridor(current):
                break
        else:
            raise MazeTopologyError(
                f"Trace from node {node_index} at {origin_pos} heading {direction.value} "
                f"ended without reaching a node site"
            )


def build_navmesh(grid: Grid) -> NavMesh:
    """
    Scan cells in index order, creating and auto-linking a node on each site.

    Cell 0 always gets a node as the entrance anchor.
    """
    mesh = NavMesh(grid)
    for cell_index in range(len(grid)):
        if cell_index == 0 or is_node_site(grid, cell_index):
            node_index = mesh.add_node(cell_index)
            auto_link(mesh, node_index)

    logger.debug("build_navmesh: %d nodes, %d edges over %d cells", len(mesh), len(mesh.links()), len(grid))
    return mesh
