"""Tests for ascii_render module."""

import logging

from ascii_render import AsciiRenderer, cell_body, render_maze
from grid_parser import parse_maze
from maze_types import ColorToken
from navmesh import build_navmesh

SNAKE = "E EW SW|ES EW NW|NE EW W"

SNAKE_PLAIN = "\n".join(
    [
        "+--+--+--+",
        "|        |",
        "+--+--+  +",
        "|        |",
        "+  +--+--+",
        "|        |",
        "+--+--+--+",
    ]
)


def snake_renderer() -> AsciiRenderer:
    grid = parse_maze(SNAKE)
    renderer = AsciiRenderer()
    renderer.attach(grid, build_navmesh(grid))
    return renderer


class TestRenderMaze:
    """Tests for the wall drawing."""

    def test_plain_drawing(self) -> None:
        """Walls render as '+--+' runs and '|' bars."""
        assert render_maze(parse_maze(SNAKE), use_color=False) == SNAKE_PLAIN

    def test_single_cell(self) -> None:
        """A 1x1 maze is a closed box."""
        assert render_maze(parse_maze("_"), use_color=False) == "+--+\n|  |\n+--+"

    def test_nodes_marked(self) -> None:
        """Nav node cells draw as '()' when a mesh is given."""
        grid = parse_maze(SNAKE)
        lines = render_maze(grid, mesh=build_navmesh(grid), use_color=False).split("\n")
        assert lines[1] == "|()    ()|"
        assert lines[3] == "|()    ()|"

    def test_colored_cells(self) -> None:
        """Colour tokens pick the cell body glyphs."""
        grid = parse_maze(SNAKE)
        colors = {
            0: (ColorToken.START, True),
            1: (ColorToken.PATH, False),
            2: (ColorToken.SEARCHED, False),
            8: (ColorToken.FINISH, True),
        }
        lines = render_maze(grid, colors, use_color=False).split("\n")
        assert lines[1] == "|[] ## ..|"
        assert lines[5] == "|      []|"

    def test_highlight_wins(self) -> None:
        """The cursor cell is drawn over any colour."""
        lines = render_maze(
            parse_maze(SNAKE), {4: (ColorToken.PATH, False)}, highlight=4, use_color=False
        ).split("\n")
        assert lines[3] == "|   <>   |"


class TestCellBody:
    """Tests for individual cell glyphs."""

    def test_plain_glyphs(self) -> None:
        """Each token has its own two-character body."""
        assert cell_body(None, use_color=False) == "  "
        assert cell_body(ColorToken.CLEAR, use_color=False) == "  "
        assert cell_body(ColorToken.EXPLORE, use_color=False) == "**"
        assert cell_body(None, is_node=True, use_color=False) == "()"
        assert cell_body(ColorToken.PATH, is_node=True, use_color=False) == "##"


class TestAsciiRenderer:
    """Tests for the Renderer implementation."""

    def test_recolor_and_clear(self) -> None:
        """recolor stores tokens; CLEAR and clear() drop them."""
        renderer = snake_renderer()
        renderer.recolor(0, ColorToken.START, bright=True)
        renderer.recolor(1, ColorToken.PATH)
        assert renderer.colors == {
            0: (ColorToken.START, True),
            1: (ColorToken.PATH, False),
        }
        renderer.recolor(1, ColorToken.CLEAR)
        assert renderer.colors == {0: (ColorToken.START, True)}
        renderer.clear()
        assert renderer.colors == {}

    def test_recolor_node_targets_node_cell(self) -> None:
        """Node indices map to their cells."""
        renderer = snake_renderer()
        # Node 3 sits on cell 5
        renderer.recolor_node(3, ColorToken.EXPLORE, bright=True, instant=True)
        assert renderer.colors == {5: (ColorToken.EXPLORE, True)}

    def test_render_uses_state(self) -> None:
        """render() draws the remembered colours."""
        renderer = snake_renderer()
        renderer.recolor(8, ColorToken.FINISH)
        assert renderer.render(use_color=False).split("\n")[5] == "|      []|"
        assert renderer.render(show_nodes=True, use_color=False).split("\n")[5] == "|()    []|"

    def test_attach_resets_colors(self) -> None:
        """A new maze starts uncoloured."""
        renderer = snake_renderer()
        renderer.recolor(0, ColorToken.START)
        grid = parse_maze("E W")
        renderer.attach(grid, build_navmesh(grid))
        assert renderer.colors == {}
        assert renderer.render(use_color=False) == "+--+--+\n|     |\n+--+--+"

    def test_unattached_renders_nothing(self) -> None:
        """Without a grid there is nothing to draw."""
        assert AsciiRenderer().render() == ""

    def test_unknown_cell_warns(self, caplog) -> None:
        """Out-of-range cells and nodes are logged and ignored."""
        renderer = snake_renderer()
        with caplog.at_level(logging.WARNING, logger="ascii_render"):
            renderer.recolor(99, ColorToken.PATH)
            renderer.recolor_node(42, ColorToken.EXPLORE)
        assert renderer.colors == {}
        assert "no cell 99" in caplog.text
        assert "no nav node 42" in caplog.text
