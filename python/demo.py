"""
Demonstration script for navmaze: generate a maze, show its nav mesh,
then search between two cells and print each stage.
"""

import argparse
import logging

from ascii_render import AsciiRenderer
from maze_types import InvalidConfigurationError
from navmaze import Maze, MazeConfig
from pathfinder import SearchState


def generation_demo(maze: Maze, renderer: AsciiRenderer) -> None:
    """Show the generated maze with its nav nodes."""
    print("=" * 40)
    print(f"Generated {maze.cell_divisions}x{maze.cell_divisions} maze")
    print(f"Nav nodes: {len(maze.mesh)}  Links: {len(maze.links())}")
    print("=" * 40)
    print(renderer.render(show_nodes=True))
    print()


def search_demo(maze: Maze, renderer: AsciiRenderer, start: int, finish: int) -> None:
    """Step a search tick by tick, printing the frontier, then the final path."""
    maze.set_start_cell(start)
    maze.set_finish_cell(finish)

    print("=" * 40)
    print(f"Search: cell {start} -> cell {finish}")
    print("=" * 40)

    ticks = 1
    state = maze.step()
    while state in (SearchState.SEEDED, SearchState.EXPLORING):
        ticks += 1
        state = maze.step()
    if state is not SearchState.COMPLETE:
        print(f"✗ Search did not start ({state.value})")
        return
    print(f"Found after {ticks} tick(s)")
    print(renderer.render())
    print()

    path = maze.run()
    print(f"✓ Path ({len(path)} cells): {path}")
    print(renderer.render())


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a maze and find a path through it.")
    parser.add_argument("--size", type=int, default=10, help="cells per side")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--start", type=int, default=0, help="start cell index")
    parser.add_argument("--finish", type=int, default=None, help="finish cell index (default: last cell)")
    parser.add_argument("--verbose", action="store_true", help="log search progress")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    renderer = AsciiRenderer()
    try:
        config = MazeConfig(cell_divisions=args.size, seed=args.seed)
    except InvalidConfigurationError as e:
        parser.error(str(e))
    maze = Maze(config, renderer)
    finish = args.finish if args.finish is not None else args.size * args.size - 1

    generation_demo(maze, renderer)
    try:
        search_demo(maze, renderer, args.start, finish)
    except InvalidConfigurationError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
