"""
ASCII rendering for pipe puzzles.

Each tile is drawn as a single box-drawing glyph. Tiles sit on the odd rows and
columns of a (2*cols+1) x (2*rows+1) character canvas; the gaps between them
show joints (two matching links), walls and the outer boundary. On wrapping
boards the edge shared by opposite sides is drawn on both sides.
"""

from __future__ import annotations

import logging
from typing import Callable

from simple_chalk import chalk  # type: ignore[import-untyped]

from grid_types import Coord, Direction, Feature
from puzzle import Puzzle, Tile

logger = logging.getLogger(__name__)

__all__ = ["render", "tile_glyph"]

# Glyph for each link pattern, indexed east, north, west, south
GLYPHS: dict[tuple[bool, bool, bool, bool], str] = {
    (True, False, False, False): "╶",
    (False, True, False, False): "╵",
    (False, False, True, False): "╴",
    (False, False, False, True): "╷",
    (True, False, True, False): "─",
    (False, True, False, True): "│",
    (True, True, False, False): "└",
    (False, True, True, False): "┘",
    (False, False, True, True): "┐",
    (True, False, False, True): "┌",
    (True, True, True, False): "┴",
    (False, True, True, True): "┤",
    (True, False, True, True): "┬",
    (True, True, False, True): "├",
    (True, True, True, True): "┼",
}

CORNER = "·"
WALL_VERTICAL = "┃"
WALL_HORIZONTAL = "━"
JOINT_VERTICAL = "│"
JOINT_HORIZONTAL = "─"


def tile_glyph(tile: Tile) -> str:
    """Return the box-drawing glyph for the tile's current links."""
    return GLYPHS[tuple(tile.has_link(d) for d in Direction)]  # type: ignore[index]


def _tile_color(tile: Tile) -> Callable[[str], str]:
    if tile.feature is Feature.SOURCE:
        return chalk.yellowBright
    if not tile.powered:
        return chalk.white
    if tile.feature is Feature.DRAIN:
        return chalk.green
    return chalk.yellow


def _edge(puzzle: Puzzle, coord: Coord, direction: Direction) -> tuple[str, bool]:
    """Describe the top (N) or left (W) edge of `coord`.

    `coord` may lie one past the last row or column. Returns the character
    for the edge and whether it is drawn as a wall.
    """
    grid = puzzle.grid
    neighbor = coord + direction.to_coord()
    wall_char = WALL_HORIZONTAL if direction is Direction.N else WALL_VERTICAL
    joint_char = JOINT_VERTICAL if direction is Direction.N else JOINT_HORIZONTAL

    if not puzzle.options.wrapping and not (grid.contains_coord(coord) and grid.contains_coord(neighbor)):
        return wall_char, True

    here = grid.normalized_coord(coord)
    if puzzle.wall_between(here, direction):
        return wall_char, True

    if grid.wrapping_get(here).has_link(direction) and grid.wrapping_get(neighbor).has_link(-direction):
        return joint_char, False
    return " ", False


def render(puzzle: Puzzle, color: bool = True, highlight_pos: Coord | None = None) -> str:
    """
    Render a puzzle as text.

    Args:
        puzzle: The puzzle to render
        color: Colorize powered tiles and walls with ANSI codes
        highlight_pos: Optional tile to highlight (e.g. a cursor)

    Returns:
        The rendered board, one line per character row
    """
    grid = puzzle.grid
    width = 2 * grid.cols + 1
    height = 2 * grid.rows + 1

    def paint(text: str, style: Callable[[str], str]) -> str:
        return style(text) if color else text

    lines: list[str] = []
    for row in range(height):
        parts: list[str] = []
        for col in range(width):
            x, y = col // 2, row // 2
            if row % 2 == 0 and col % 2 == 0:
                parts.append(CORNER)
            elif row % 2 == 0:
                char, is_wall = _edge(puzzle, Coord(x, y), Direction.N)
                parts.append(paint(char, chalk.red) if is_wall else char)
            elif col % 2 == 0:
                char, is_wall = _edge(puzzle, Coord(x, y), Direction.W)
                parts.append(paint(char, chalk.red) if is_wall else char)
            else:
                coord = Coord(x, y)
                tile = grid[coord]
                glyph = tile_glyph(tile)
                if highlight_pos is not None and coord == highlight_pos:
                    parts.append(paint(glyph, chalk.bgWhite.black))
                else:
                    parts.append(paint(glyph, _tile_color(tile)))
        lines.append("".join(parts))

    logger.debug("render: %dx%d tiles, %d walls", grid.cols, grid.rows, len(puzzle.walls))
    return "\n".join(lines)
