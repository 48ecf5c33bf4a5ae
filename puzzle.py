"""
The puzzle model: a grid of rotatable pipe tiles, walls between tiles and a
single energy source. Owns the energy propagation (flood fill) which decides
which tiles are powered.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum

from grid import Grid
from grid_types import Alignment, Coord, Direction, Feature, Orientation, Shape
from links import Links

logger = logging.getLogger(__name__)

MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 20


class Difficulty(Enum):
    """Difficulty of a generated puzzle; selects the shape preference weights."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Options:
    """The options a puzzle is generated with."""

    board_size: int = MIN_BOARD_SIZE  # Number of rows and columns
    difficulty: Difficulty = Difficulty.EASY
    wrapping: bool = False  # Board forms a torus: left/right and top/bottom edges are adjacent

    def __post_init__(self) -> None:
        if self.board_size < MIN_BOARD_SIZE:
            raise ValueError(f"board size must be at least {MIN_BOARD_SIZE}, got {self.board_size}")
        if self.board_size > MAX_BOARD_SIZE:
            raise ValueError(f"board size must not be greater than {MAX_BOARD_SIZE}, got {self.board_size}")


# =============================================================================
# Tiles and Walls
# =============================================================================


@dataclass
class Tile:
    """A tile on the game board.

    Tiles contain pipes of a certain shape and may carry a source or a drain.
    Tiles are powered if connected to the source. Rotating a tile changes which
    of its edges carry a pipe stub.
    """

    shape: Shape
    feature: Feature = Feature.NONE
    orientation: Orientation = Orientation.BASIC
    powered: bool = False

    @classmethod
    def from_links(cls, links: Links) -> Tile:
        """Create an unpowered tile; dead-ends are automatically drains."""
        shape, orientation = links.to_shape()
        feature = Feature.DRAIN if shape is Shape.DEAD_END else Feature.NONE
        return cls(shape, feature, orientation)

    def rotate(self) -> None:
        """Rotate one quarter-turn counter-clockwise."""
        self.orientation = self.orientation.next_ccw()

    def has_link(self, direction: Direction) -> bool:
        return self.shape.base_links[(direction.value - self.orientation.value) % 4]

    def links(self) -> Links:
        return Links(*(self.has_link(d) for d in Direction))


@dataclass(frozen=True)
class Wall:
    """A wall between two tiles.

    A horizontal wall lies on the top edge of the tile at `position`, a
    vertical wall on its left edge.
    """

    position: Coord
    alignment: Alignment


# =============================================================================
# Puzzle
# =============================================================================


@dataclass
class Puzzle:
    """The puzzle: a square grid of rotatable tiles, a source, drains and walls."""

    options: Options  # How the puzzle was generated
    grid: Grid[Tile]
    walls: tuple[Wall, ...]
    source: Coord  # The tile at this position is also marked as the source
    expected_moves: int = 0
    _wall_index: frozenset[Wall] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.walls = tuple(self.walls)
        self._wall_index = frozenset(self.walls)

    def size(self) -> int:
        """Return the number of rows (equal to the number of columns)."""
        assert self.grid.rows == self.grid.cols
        return self.grid.rows

    def solved(self) -> bool:
        """All tiles must be powered, not just the drains."""
        return all(tile.powered for tile in self.grid)

    def get_tile(self, coord: Coord) -> Tile | None:
        return self.grid.get(coord)

    def rotate_tile(self, coord: Coord) -> None:
        """Rotate the tile at `coord` by one quarter-turn.

        Energy is not recomputed; call calc_energy() once the caller is done
        rotating.
        """
        self.grid[coord].rotate()

    def copy(self) -> Puzzle:
        """Return an independent copy, e.g. to restart from the starting position."""
        return copy.deepcopy(self)

    # =========================================================================
    # Energy Propagation
    # =========================================================================

    def calc_energy(self) -> None:
        """Recalculate which tiles are connected to the source and thus powered."""
        assert self.grid.contains_coord(self.source), f"source {self.source} is off the grid"
        assert self.grid[self.source].feature is Feature.SOURCE, "source tile lost its feature"

        for tile in self.grid:
            tile.powered = False

        powered = 0
        work: list[Coord] = [self.source]
        while work:
            current = work.pop()
            tile = self.grid[current]
            if tile.powered:
                continue
            tile.powered = True
            powered += 1

            for direction in Direction:
                neighbor = current + direction.to_coord()
                if not self.grid.wrapping_get(neighbor).powered and self.connected(current, direction):
                    work.append(self.grid.normalized_coord(neighbor))

        logger.debug("calc_energy: %d of %d tiles powered", powered, len(self.grid))

    def connected(self, coord: Coord, direction: Direction) -> bool:
        """Return True if the tile at `coord` and its neighbor in `direction`
        have a connection, i.e. two matching links and no wall in between."""
        neighbor = coord + direction.to_coord()

        # Without wrapping the board is surrounded by invisible walls
        if not self.options.wrapping and not self.grid.contains_coord(neighbor):
            return False

        if self.wall_between(coord, direction):
            return False

        return (
            self.grid.wrapping_get(coord).has_link(direction)
            and self.grid.wrapping_get(neighbor).has_link(-direction)
        )

    def wall_between(self, coord: Coord, direction: Direction) -> bool:
        """Return True if a wall separates `coord` from its neighbor in `direction`."""
        here = self.grid.normalized_coord(coord)
        there = self.grid.normalized_coord(coord + direction.to_coord())

        match direction:
            case Direction.N:
                wall = Wall(here, Alignment.HORIZONTAL)
            case Direction.S:
                wall = Wall(there, Alignment.HORIZONTAL)
            case Direction.W:
                wall = Wall(here, Alignment.VERTICAL)
            case Direction.E:
                wall = Wall(there, Alignment.VERTICAL)
            case _:
                raise ValueError(f"Unknown direction: {direction}")

        return wall in self._wall_index
