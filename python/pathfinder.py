"""
Incremental multi-branch search over a NavMesh.

One call to PathFinder.step() advances a SearchSession by one tick:
  IDLE -> SEEDED (trace out from the raw start cell)
       -> EXPLORING (extend / branch one frontier entry per tick)
       -> COMPLETE (finish reached; session.cells holds the cell path)
A session can be cancelled at any point, which is a normal terminal state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

from maze_grid import Grid
from maze_types import (
    ColorToken,
    Direction,
    InvalidConfigurationError,
    MazeTopologyError,
    Renderer,
)
from navmesh import NavMesh

logger = logging.getLogger(__name__)


class SearchState(Enum):
    """Lifecycle of a search session."""

    IDLE = "idle"  # Created, not yet seeded (or seeding found no open side)
    SEEDED = "seeded"  # Frontier holds the nodes traced from the start cell
    EXPLORING = "exploring"  # At least one explore tick has run
    COMPLETE = "complete"  # Finish reached, cell path reconstructed
    CANCELLED = "cancelled"  # Start/finish changed or search abandoned


@dataclass(frozen=True)
class Path:
    """
    One frontier entry.

    An empty node list is the direct case: the finish lies on a straight
    open line from the start in `direction`.
    """

    nodes: tuple[int, ...]
    distance: int
    direction: Direction

    def extend(self, node: int, distance: int, direction: Direction) -> Path:
        return Path(self.nodes + (node,), self.distance + distance, direction)


@dataclass
class SearchSession:
    """All mutable state of one search, discarded when the search ends."""

    start: int
    finish: int
    frontier: list[Path] = field(default_factory=list)
    explored: set[int] = field(default_factory=set)
    state: SearchState = SearchState.IDLE
    result: Path | None = None
    cells: list[int] = field(default_factory=list)
    ticks: int = 0
    stalled: bool = False  # Seeding found no open side; stays IDLE

    @property
    def active(self) -> bool:
        return self.state in (SearchState.IDLE, SearchState.SEEDED, SearchState.EXPLORING)

    def cancel(self) -> None:
        self.frontier.clear()
        self.explored.clear()
        self.state = SearchState.CANCELLED


def span_contains(grid: Grid, a: int, b: int, target: int) -> bool:
    """True if target lies on the straight segment from cell a to cell b (inclusive)."""
    pa, pb, pt = grid.position_of(a), grid.position_of(b), grid.position_of(target)
    if pa.x == pb.x == pt.x:
        return min(pa.y, pb.y) <= pt.y <= max(pa.y, pb.y)
    if pa.y == pb.y == pt.y:
        return min(pa.x, pb.x) <= pt.x <= max(pa.x, pb.x)
    return False


def trace_cells(grid: Grid, mesh: NavMesh, start: int, finish: int, path: Path) -> list[int]:
    """
    Expand a terminal path into the ordered cell indices from start to finish.

    Walks start -> first node -> ... -> last node, stopping as soon as the
    finish is reached, since it may sit strictly between the last two nodes.

    Raises:
        MazeTopologyError: If a segment is blocked or the finish is never reached
    """
    cells = [start]
    if start == finish:
        return cells

    if not path.nodes:
        for current in grid.walk(start, path.direction):
            cells.append(current)
            if current == finish:
                return cells
        raise MazeTopologyError(
            f"Direct path from cell {start} heading {path.direction.value} never reached cell {finish}"
        )

    current = start
    for node in path.nodes:
        target = mesh.cell_index_of(node)
        direction = grid.position_of(current).direction_to(grid.position_of(target))
        for step in grid.walk(current, direction):
            cells.append(step)
            if step == finish:
                return cells
            if step == target:
                break
        else:
            raise MazeTopologyError(
                f"Segment from cell {current} to node {node} (cell {target}) is blocked"
            )
        current = target

    raise MazeTopologyError(f"Path {path.nodes} ends without reaching cell {finish}")


def deliver_path(
    cells: list[int],
    renderer: Renderer,
    is_cancelled: Callable[[], bool],
) -> Iterator[int]:
    """
    Hand a finished cell path to the renderer one cell per resumption.

    is_cancelled() is checked before every cell; once it reports True the
    renderer is cleared and nothing further is yielded.
    """
    if not cells:
        return
    start, finish = cells[0], cells[-1]
    for cell in cells:
        if is_cancelled():
            logger.debug("deliver_path: cancelled before cell %d", cell)
            renderer.clear()
            return
        if cell == start:
            renderer.recolor(cell, ColorToken.START, bright=True)
        elif cell == finish:
            renderer.recolor(cell, ColorToken.FINISH, bright=True)
        else:
            renderer.recolor(cell, ColorToken.PATH, bright=True, instant=True)
        yield cell


class PathFinder:
    """Steps SearchSessions over one maze's grid and nav mesh."""

    def __init__(self, grid: Grid, mesh: NavMesh, renderer: Renderer) -> None:
        self.grid = grid
        self.mesh = mesh
        self.renderer = renderer

    def begin(self, start: int, finish: int) -> SearchSession:
        """Create a fresh session. Start and finish must be distinct, in-range cells."""
        self.grid.check_index(start)
        self.grid.check_index(finish)
        if start == finish:
            raise InvalidConfigurationError(f"Start and finish are the same cell ({start})")
        return SearchSession(start, finish)

    def step(self, session: SearchSession) -> SearchState:
        """Advance a session by one tick and return its new state."""
        if session.state is SearchState.IDLE and not session.stalled:
            self._seed(session)
        elif session.state in (SearchState.SEEDED, SearchState.EXPLORING):
            self._explore(session)
        session.ticks += 1
        return session.state

    # -------------------------------------------------------------------------
    # Seed
    # -------------------------------------------------------------------------

    def _seed(self, session: SearchSession) -> None:
        grid = self.grid
        seeds: list[Path] = []

        for direction in grid.open_directions(session.start):
            distance = 0
            for current in grid.walk(session.start, direction):
                distance += 1
                if current == session.finish:
                    self._complete(session, Path((), distance, direction))
                    return
                node = self.mesh.node_index_at(current)
                if node != -1:
                    seeds.append(Path((node,), distance, direction))
                    break
                self.renderer.recolor(current, ColorToken.SEARCHED)
            else:
                raise MazeTopologyError(
                    f"Trace from start cell {session.start} heading {direction.value} "
                    f"hit a wall without reaching a nav node"
                )

        if not seeds:
            logger.warning("No open direction from start cell %d; search stalled", session.start)
            session.stalled = True
            return

        start_node = self.mesh.node_index_at(session.start)
        if start_node != -1:
            session.explored.add(start_node)
        for seed in seeds:
            session.explored.add(seed.nodes[0])
            session.frontier.insert(0, seed)
            self.renderer.recolor_node(seed.nodes[0], ColorToken.EXPLORE, bright=True, instant=True)

        session.state = SearchState.SEEDED
        logger.info("search seeded: %d frontier entries from cell %d", len(seeds), session.start)

    # -------------------------------------------------------------------------
    # Explore
    # -------------------------------------------------------------------------

    def _explore(self, session: SearchSession) -> None:
        if not session.frontier:
            raise MazeTopologyError(
                f"Frontier exhausted before reaching cell {session.finish} from cell {session.start}"
            )

        entry = session.frontier.pop(0)
        last = entry.nodes[-1]
        last_cell = self.mesh.cell_index_of(last)
        extended: Path | None = None
        branches: list[Path] = []

        links = self.mesh[last].links
        for direction in Direction:
            link = links[direction]
            if not link.linked or link.target in session.explored:
                continue
            session.explored.add(link.target)
            candidate = entry.extend(link.target, link.distance, direction)
            target_cell = self.mesh.cell_index_of(link.target)

            if span_contains(self.grid, last_cell, target_cell, session.finish):
                self._complete(session, candidate)
                return

            self._mark_span(last_cell, target_cell, direction)
            self.renderer.recolor_node(link.target, ColorToken.EXPLORE, bright=True, instant=True)
            if extended is None:
                extended = candidate
            else:
                branches.insert(0, candidate)

        if extended is None:
            logger.debug("explore: dead end at node %d dropped", last)
        elif branches:
            logger.debug("explore: node %d branched %d way(s)", last, len(branches) + 1)

        session.frontier[:0] = branches + ([extended] if extended is not None else [])
        session.state = SearchState.EXPLORING
        self.renderer.recolor(session.start, ColorToken.START, bright=True)
        self.renderer.recolor(session.finish, ColorToken.FINISH, bright=True)

    def _mark_span(self, a: int, b: int, direction: Direction) -> None:
        for current in self.grid.walk(a, direction):
            if current == b:
                break
            self.renderer.recolor(current, ColorToken.SEARCHED)

    # -------------------------------------------------------------------------
    # Complete
    # -------------------------------------------------------------------------

    def _complete(self, session: SearchSession, path: Path) -> None:
        session.cells = trace_cells(self.grid, self.mesh, session.start, session.finish, path)
        session.result = path
        session.frontier.clear()
        session.state = SearchState.COMPLETE
        self.renderer.clear()
        self.renderer.recolor(session.start, ColorToken.START, bright=True)
        self.renderer.recolor(session.finish, ColorToken.FINISH, bright=True)
        logger.info(
            "search complete: %d -> %d via %d node(s), %d cells, %d tick(s)",
            session.start,
            session.finish,
            len(path.nodes),
            len(session.cells),
            session.ticks + 1,
        )
