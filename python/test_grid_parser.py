"""Tests for grid_parser module."""

import random

import pytest

from ascii_render import render_maze
from grid_parser import parse_maze, parse_maze_drawing
from maze_grid import generate_maze
from maze_types import Direction, InvalidConfigurationError

SNAKE = "E EW SW|ES EW NW|NE EW W"

SNAKE_DRAWING = """
    +--+--+--+
    |        |
    +--+--+  +
    |        |
    +  +--+--+
    |        |
    +--+--+--+
"""


class TestParseMaze:
    """Tests for the token maze parser."""

    def test_simple_maze(self) -> None:
        """Parse a 2x2 maze and check every wall."""
        grid = parse_maze("ES W|N _")

        assert grid.width == 2
        assert grid.height == 2
        assert grid[0].walls == [True, False, False, True]
        assert grid[1].walls == [True, True, True, False]
        assert grid[2].walls == [False, True, True, True]
        assert grid[3].walls == [True, True, True, True]

    def test_cell_coordinates(self) -> None:
        """Cells carry their own row-major position."""
        grid = parse_maze(SNAKE)
        assert [(c.x, c.y) for c in grid][3:6] == [(0, 1), (1, 1), (2, 1)]

    def test_open_directions(self) -> None:
        """Openings resolve through both neighbours."""
        grid = parse_maze(SNAKE)
        assert grid.open_directions(0) == [Direction.E]
        assert grid.open_directions(4) == [Direction.E, Direction.W]
        assert grid.open_directions(5) == [Direction.N, Direction.W]

    def test_token_order_and_case(self) -> None:
        """Side letters may come in any order and either case."""
        a = parse_maze("es w|n _")
        b = parse_maze("SE W|N _")
        assert [c.walls for c in a] == [c.walls for c in b]

    def test_whitespace_handling(self) -> None:
        """Extra spaces around rows and cells are ignored."""
        grid = parse_maze("  E   W  |  E  W ")
        assert grid.width == 2
        assert grid.height == 2

    def test_single_row(self) -> None:
        """A definition without '|' is one row."""
        grid = parse_maze("E EW EW W")
        assert grid.width == 4
        assert grid.height == 1

    def test_error_empty_definition(self) -> None:
        """Nothing to parse."""
        with pytest.raises(InvalidConfigurationError, match="Empty maze definition"):
            parse_maze("   ")

    def test_error_invalid_token(self) -> None:
        """Letters other than N, E, S, W are rejected."""
        with pytest.raises(InvalidConfigurationError, match="Invalid cell token: 'EX'") as exc:
            parse_maze("EX W")
        assert "column 0" in str(exc.value)

    def test_error_inconsistent_rows(self) -> None:
        """Ragged rows are reported with their lengths."""
        with pytest.raises(InvalidConfigurationError, match="Inconsistent row lengths") as exc:
            parse_maze("E W|E")
        assert "Row 1: 1 cells" in str(exc.value)

    def test_error_one_sided_opening(self) -> None:
        """Both neighbours must list a shared opening."""
        with pytest.raises(InvalidConfigurationError, match="has no W opening"):
            parse_maze("E _")

    def test_error_opening_off_edge(self) -> None:
        """Openings cannot leave the grid."""
        with pytest.raises(InvalidConfigurationError, match="off the edge"):
            parse_maze("N _")


class TestParseMazeDrawing:
    """Tests for the drawn maze parser."""

    def test_matches_token_format(self) -> None:
        """The drawing and token forms describe the same maze."""
        drawn = parse_maze_drawing(SNAKE_DRAWING)
        tokens = parse_maze(SNAKE)
        assert drawn.width == 3
        assert drawn.height == 3
        assert [c.walls for c in drawn] == [c.walls for c in tokens]

    def test_cell_bodies_ignored(self) -> None:
        """Colour glyphs inside cells do not affect walls."""
        drawing = """
        +--+--+
        |[] ##|
        +--+--+
        """
        grid = parse_maze_drawing(drawing)
        assert grid.open_directions(0) == [Direction.E]
        assert grid.open_directions(1) == [Direction.W]

    def test_rendered_mazes_parse_back(self) -> None:
        """Plain renders of generated mazes parse to the same openings."""
        for seed in range(5):
            grid = generate_maze(6, random.Random(seed))
            parsed = parse_maze_drawing(render_maze(grid, use_color=False))
            for index in range(len(grid)):
                assert parsed.open_directions(index) == grid.open_directions(index)

    def test_error_even_line_count(self) -> None:
        """Wall rows and cell rows must alternate."""
        with pytest.raises(InvalidConfigurationError, match="odd number of lines"):
            parse_maze_drawing("+--+\n|  |")

    def test_error_bad_border(self) -> None:
        """The top border must be a '+--+' run."""
        with pytest.raises(InvalidConfigurationError, match="Invalid top border"):
            parse_maze_drawing("+-+\n| |\n+-+")

    def test_error_open_border(self) -> None:
        """A gap in the outer wall leads off the grid."""
        drawing = """
        +  +
        |  |
        +--+
        """
        with pytest.raises(InvalidConfigurationError, match="off the edge"):
            parse_maze_drawing(drawing)
