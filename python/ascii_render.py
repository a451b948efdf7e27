"""
ASCII rendering for navmaze.

Draws a Grid as a '+--+' wall drawing with each cell body coloured by the
ColorToken a Renderer last assigned to it. AsciiRenderer is the Renderer
used by the demos.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from maze_grid import Grid
from maze_types import ColorToken, Direction
from navmesh import NavMesh

logger = logging.getLogger(__name__)

# Body characters and (dim, bright) colours per token
_STYLES: dict[ColorToken, tuple[str, Callable[[str], str], Callable[[str], str]]] = {
    ColorToken.START: ("[]", chalk.green, chalk.greenBright),
    ColorToken.FINISH: ("[]", chalk.red, chalk.redBright),
    ColorToken.PATH: ("##", chalk.yellow, chalk.yellowBright),
    ColorToken.SEARCHED: ("..", chalk.blue, chalk.blueBright),
    ColorToken.EXPLORE: ("**", chalk.magenta, chalk.magentaBright),
}

CellColors = dict[int, tuple[ColorToken, bool]]


def _plain(s: str) -> str:
    return s


def cell_body(
    token: ColorToken | None,
    bright: bool = False,
    is_node: bool = False,
    highlighted: bool = False,
    use_color: bool = True,
) -> str:
    """Two-character body for one cell."""
    if highlighted:
        return chalk.white("<>") if use_color else "<>"
    if token is None or token is ColorToken.CLEAR:
        if is_node:
            return chalk.cyan("()") if use_color else "()"
        return "  "
    chars, dim, lit = _STYLES[token]
    if not use_color:
        return chars
    return (lit if bright else dim)(chars)


def render_maze(
    grid: Grid,
    colors: CellColors | None = None,
    mesh: NavMesh | None = None,
    highlight: int | None = None,
    use_color: bool = True,
) -> str:
    """
    Render a maze to a string.

    Args:
        grid: The maze to draw
        colors: Optional cell index -> (token, bright) map for cell bodies
        mesh: If given, uncoloured nav node cells are drawn as '()'
        highlight: Optional cell index drawn as a cursor
        use_color: False produces plain text that parse_maze_drawing accepts

    Returns:
        Rendered string, one text line per wall row and cell row
    """
    colors = colors or {}
    wall = chalk.white if use_color else _plain
    lines: list[str] = []

    for y in range(grid.height):
        top = "+"
        body = ""
        for x in range(grid.width):
            index = x + y * grid.width
            top += ("  " if grid.is_open(index, Direction.N) else wall("--")) + "+"
            body += " " if grid.is_open(index, Direction.W) else wall("|")
            token, bright = colors.get(index, (None, False))
            body += cell_body(
                token,
                bright,
                is_node=mesh is not None and mesh.node_index_at(index) != -1,
                highlighted=index == highlight,
                use_color=use_color,
            )
        last = (y + 1) * grid.width - 1
        body += " " if grid.is_open(last, Direction.E) else wall("|")
        lines.append(top)
        lines.append(body)

    bottom = "+"
    for x in range(grid.width):
        index = x + (grid.height - 1) * grid.width
        bottom += ("  " if grid.is_open(index, Direction.S) else wall("--")) + "+"
    lines.append(bottom)

    return "\n".join(lines)


class AsciiRenderer:
    """Renderer that remembers the colour of every cell for render_maze."""

    def __init__(self, grid: Grid | None = None, mesh: NavMesh | None = None) -> None:
        self.grid = grid
        self.mesh = mesh
        self.colors: CellColors = {}

    def attach(self, grid: Grid, mesh: NavMesh) -> None:
        """Point the renderer at a newly generated maze."""
        self.grid = grid
        self.mesh = mesh
        self.colors = {}

    def recolor(
        self, cell_index: int, color: ColorToken, bright: bool = False, instant: bool = False
    ) -> None:
        if self.grid is None or not 0 <= cell_index < len(self.grid):
            logger.warning("recolor: no cell %d to colour %s", cell_index, color.value)
            return
        if color is ColorToken.CLEAR:
            self.colors.pop(cell_index, None)
        else:
            self.colors[cell_index] = (color, bright)

    def recolor_node(
        self, node_index: int, color: ColorToken, bright: bool = False, instant: bool = False
    ) -> None:
        if self.mesh is None or not 0 <= node_index < len(self.mesh):
            logger.warning("recolor_node: no nav node %d to colour %s", node_index, color.value)
            return
        self.recolor(self.mesh.cell_index_of(node_index), color, bright, instant)

    def clear(self) -> None:
        self.colors.clear()

    def render(self, highlight: int | None = None, show_nodes: bool = False, use_color: bool = True) -> str:
        if self.grid is None:
            return ""
        return render_maze(
            self.grid,
            self.colors,
            self.mesh if show_nodes else None,
            highlight,
            use_color,
        )
