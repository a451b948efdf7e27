"""
Maze facade: generation, nav mesh and tick-driven pathfinding behind the
caller API generate / set_start_cell / set_finish_cell / step / cancel.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterator

from maze_grid import Grid, generate_maze
from maze_types import (
    ColorToken,
    InvalidConfigurationError,
    MazeTopologyError,
    NullRenderer,
    Renderer,
)
from navmesh import NavMesh, build_navmesh
from pathfinder import PathFinder, SearchSession, SearchState, deliver_path

logger = logging.getLogger(__name__)

SCALES = (10, 20, 30)


def next_scale(current: int) -> int:
    """Cycle through the preset maze sizes: 10 -> 20 -> 30 -> 10."""
    following = current + 10
    return following if following <= SCALES[-1] else SCALES[0]


@dataclass(frozen=True)
class MazeConfig:
    """
    Settings for a Maze.

    tick_duration is in milliseconds and is normalised to a multiple of 10,
    never below 10.
    """

    cell_divisions: int = 20
    tick_duration: int = 50
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.cell_divisions <= 0:
            raise InvalidConfigurationError(
                f"cell_divisions must be >= 1, got {self.cell_divisions}"
            )
        object.__setattr__(self, "tick_duration", max(round(self.tick_duration / 10) * 10, 10))

    def tick_interval(self, frontier_size: int = 1) -> float:
        """Seconds between ticks; shortens as the frontier grows."""
        return self.tick_duration / max(1, frontier_size) / 1000


class Maze:
    """
    One maze plus at most one in-flight search.

    Owns the grid, nav mesh and search session; any new generate or
    start/finish change cancels the current search first.
    """

    def __init__(
        self,
        config: MazeConfig | None = None,
        renderer: Renderer | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or MazeConfig()
        self.renderer: Renderer = renderer or NullRenderer()
        self.rng = rng or random.Random(self.config.seed)
        self.cell_divisions = self.config.cell_divisions
        self.start_cell = -1
        self.finish_cell = -1
        self.session: SearchSession | None = None
        self.last_state = SearchState.IDLE
        self._delivery: Iterator[int] | None = None
        self.delivered: list[int] = []
        self.generate()

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate(self, cell_divisions: int | None = None) -> None:
        """Rebuild grid and nav mesh from scratch, dropping any search."""
        size = self.cell_divisions if cell_divisions is None else cell_divisions
        if size <= 0:
            raise InvalidConfigurationError(f"cell_divisions must be >= 1, got {size}")
        self.cancel()
        grid = generate_maze(size, self.rng)
        self.load(grid)
        logger.info("Generated %dx%d maze with %d nav nodes", size, size, len(self.mesh))

    def load(self, grid: Grid, mesh: NavMesh | None = None) -> None:
        """Install an existing grid (e.g. a parsed one), building its nav mesh if needed."""
        self.cancel()
        self.grid = grid
        self.mesh = mesh or build_navmesh(grid)
        self.cell_divisions = grid.width
        self.pathfinder = PathFinder(self.grid, self.mesh, self.renderer)
        self.start_cell = -1
        self.finish_cell = -1
        self.last_state = SearchState.IDLE
        self.renderer.attach(self.grid, self.mesh)
        self.renderer.clear()

    def links(self) -> list[tuple[int, int, int]]:
        return self.mesh.links()

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def set_start_cell(self, index: int) -> None:
        self.grid.check_index(index)
        self.cancel()
        if self.start_cell != -1:
            self.renderer.recolor(self.start_cell, ColorToken.CLEAR)
        self.start_cell = index
        self._paint_selection()

    def set_finish_cell(self, index: int) -> None:
        self.grid.check_index(index)
        self.cancel()
        if self.finish_cell != -1:
            self.renderer.recolor(self.finish_cell, ColorToken.CLEAR)
        self.finish_cell = index
        self._paint_selection()

    def toggle_cell(self, index: int) -> None:
        """
        Click-style selection.

        - No start yet: the cell becomes the start.
        - The start is clicked again: everything is deselected.
        - No finish yet: the cell becomes the finish (search armed).
        - The finish is clicked again: the finish is deselected.
        - Any other cell: the finish moves there and the search restarts.
        """
        self.grid.check_index(index)
        if self.start_cell == -1:
            self.set_start_cell(index)
        elif index == self.start_cell:
            self.clear_selection()
        elif self.finish_cell == -1 or index != self.finish_cell:
            self.set_finish_cell(index)
        else:
            self.cancel()
            self.renderer.recolor(self.finish_cell, ColorToken.CLEAR)
            self.finish_cell = -1

    def clear_selection(self) -> None:
        self.cancel()
        self.start_cell = -1
        self.finish_cell = -1
        self.renderer.clear()

    def _paint_selection(self) -> None:
        if self.start_cell != -1:
            self.renderer.recolor(self.start_cell, ColorToken.START, bright=True)
        if self.finish_cell != -1:
            self.renderer.recolor(self.finish_cell, ColorToken.FINISH, bright=True)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self.start_cell != -1 and self.finish_cell != -1 and self.start_cell != self.finish_cell

    @property
    def frontier_size(self) -> int:
        return len(self.session.frontier) if self.session else 0

    def cancel(self) -> None:
        """Abandon the current search or delivery and clear all highlighting."""
        if self.session is None:
            return
        logger.debug("Cancelling search %d -> %d", self.session.start, self.session.finish)
        self.session.cancel()
        self.session = None
        self._delivery = None
        self.last_state = SearchState.CANCELLED
        self.renderer.clear()
        self._paint_selection()

    def step(self) -> SearchState:
        """
        Advance one tick.

        Starts a session when start and finish are set; seeds, explores, then
        delivers the finished path one cell per tick.
        """
        if self.session is None:
            if not self.ready:
                return self.last_state
            self.session = self.pathfinder.begin(self.start_cell, self.finish_cell)
            self.delivered = []
            logger.info("Search started: %d -> %d", self.start_cell, self.finish_cell)

        session = self.session
        if session.state is SearchState.COMPLETE:
            return self._deliver_next(session)

        try:
            state = self.pathfinder.step(session)
        except MazeTopologyError:
            logger.error("Search %d -> %d aborted on topology error", session.start, session.finish)
            session.cancel()
            self.session = None
            raise

        if state is SearchState.COMPLETE:
            self._delivery = deliver_path(
                session.cells, self.renderer, lambda: self.session is not session
            )
        self.last_state = state
        return state

    def _deliver_next(self, session: SearchSession) -> SearchState:
        if self._delivery is None:
            raise RuntimeError(
                f"Search {session.start} -> {session.finish} is complete but has no path delivery"
            )
        cell = next(self._delivery, None)
        if cell is not None:
            self.delivered.append(cell)
        if cell is None or cell == session.finish:
            # Path fully shown; selections reset so a new search can be picked
            self.session = None
            self._delivery = None
            self.start_cell = -1
            self.finish_cell = -1
        self.last_state = SearchState.COMPLETE
        return SearchState.COMPLETE

    def run(self, max_ticks: int = 1_000_000) -> list[int]:
        """Step until the current search is delivered and return the delivered cells."""
        if not self.ready:
            raise InvalidConfigurationError("Both a start and a distinct finish cell must be set")
        self.step()
        ticks = 1
        while self.session is not None:
            if self.session.stalled:
                start = self.session.start
                self.cancel()
                raise MazeTopologyError(f"Search from cell {start} stalled: the start cell has no open side")
            if ticks >= max_ticks:
                raise RuntimeError(f"Search did not finish within {max_ticks} ticks")
            self.step()
            ticks += 1
        return list(self.delivered)

    def solve(self, start: int, finish: int) -> list[int]:
        """Select start and finish, run the search to completion, return the cell path."""
        self.set_start_cell(start)
        self.set_finish_cell(finish)
        return self.run()
