"""
Interactive demo for navmaze.
Move a cursor around the maze, pick start and finish cells, and watch the
nav mesh search tick by tick.
"""

import logging
import sys
import time

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import AsciiRenderer
from maze_types import Direction, MazeTopologyError
from navmaze import Maze, MazeConfig, next_scale
from pathfinder import SearchState

MOVES = {
    "w": Direction.N,
    "d": Direction.E,
    "s": Direction.S,
    "a": Direction.W,
}


class InteractiveDemo:
    """Keyboard-driven maze and search viewer."""

    def __init__(self, config: MazeConfig) -> None:
        self.config = config
        self.renderer = AsciiRenderer()
        self.maze = Maze(config, self.renderer)
        self.cursor = 0
        self.show_nodes = False
        self.console = Console()
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with maze and status."""
        maze = self.maze
        status = Text()
        status.append("Size: ", style="bold")
        status.append(f"{maze.cell_divisions}x{maze.cell_divisions}  ")
        status.append("Nav nodes: ", style="bold")
        status.append(f"{len(maze.mesh)}\n")
        status.append("Start: ", style="bold")
        status.append(f"{maze.start_cell if maze.start_cell != -1 else '-'}  ")
        status.append("Finish: ", style="bold")
        status.append(f"{maze.finish_cell if maze.finish_cell != -1 else '-'}  ")
        status.append("State: ", style="bold")
        status.append(f"{maze.last_state.value}  ")
        status.append("Frontier: ", style="bold")
        status.append(f"{maze.frontier_size}\n\n")

        maze_text = self.renderer.render(highlight=self.cursor, show_nodes=self.show_nodes)
        status.append(Text.from_ansi(maze_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move cursor\n")
        status.append("  Space   - Toggle start/finish at cursor\n")
        status.append("  N       - Advance search one tick\n")
        status.append("  P       - Run search to the end\n")
        status.append("  X       - Cancel search\n")
        status.append("  V       - Show/hide nav nodes\n")
        status.append("  G       - Generate a new maze\n")
        status.append("  C       - Cycle maze size\n")
        status.append("  Q       - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="navmaze", border_style="green")

    def move_cursor(self, direction: Direction) -> None:
        target = self.maze.grid.neighbour(self.cursor, direction)
        if target != -1:
            self.cursor = target

    def toggle(self) -> None:
        self.maze.toggle_cell(self.cursor)
        self.status_message = f"Toggled cell {self.cursor}"

    def tick(self) -> None:
        try:
            state = self.maze.step()
        except MazeTopologyError as e:
            self.status_message = f"✗ Search aborted: {e}"
            return
        if state is SearchState.COMPLETE and self.maze.session is None:
            self.status_message = f"✓ Path shown ({len(self.maze.delivered)} cells)"
        else:
            self.status_message = f"Tick: {state.value}"

    def run_search(self, live: Live) -> None:
        """Step the search until its path has been delivered, pacing each tick."""
        if not self.maze.ready:
            self.status_message = "Pick a start and a different finish first"
            return
        self.tick()
        while self.maze.session is not None:
            live.update(self.generate_display())
            time.sleep(self.config.tick_interval(self.maze.frontier_size))
            self.tick()

    def regenerate(self, size: int | None = None) -> None:
        self.maze.generate(size)
        self.cursor = 0
        self.status_message = f"Generated {self.maze.cell_divisions}x{self.maze.cell_divisions} maze"

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=10) as live:
            try:
                while True:
                    live.update(self.generate_display())
                    key = readchar.readkey().lower()

                    if key == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key in MOVES:
                        self.move_cursor(MOVES[key])
                    elif key == " ":
                        self.toggle()
                    elif key == "n":
                        self.tick()
                    elif key == "p":
                        self.run_search(live)
                    elif key == "x":
                        self.maze.cancel()
                        self.status_message = "Search cancelled"
                    elif key == "v":
                        self.show_nodes = not self.show_nodes
                    elif key == "g":
                        self.regenerate()
                    elif key == "c":
                        self.regenerate(next_scale(self.maze.cell_divisions))
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main() -> None:
    size = int(sys.argv[1]) if len(sys.argv) > 1 else 10
    InteractiveDemo(MazeConfig(cell_divisions=size)).run()


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    main()
