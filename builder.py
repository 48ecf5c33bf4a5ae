"""
Random puzzle generation.

A puzzle is built in three steps:
1. Grow a spanning tree of links from the source in the center, choosing each
   new edge with a preference for certain tile shapes (randomized Prim's).
2. Place walls on edges which carry no connection in the solved puzzle.
3. Rotate a random subset of tiles; the number of rotated tiles is the
   expected number of moves.
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass
from typing import Sequence, TypeVar

from grid import Grid
from grid_types import Alignment, Coord, Direction, Feature, Shape
from links import Links
from puzzle import Difficulty, Options, Puzzle, Tile, Wall

logger = logging.getLogger(__name__)

__all__ = [
    "Builder",
    "DIFFICULTY_WEIGHTS",
    "sample_count",
    "weighted_choice",
]

T = TypeVar("T")

# Preference of each shape when growing the spanning tree
DIFFICULTY_WEIGHTS: dict[Difficulty, dict[Shape, int]] = {
    Difficulty.EASY: {
        Shape.CROSS_INTERSECTION: 1,
        Shape.T_INTERSECTION: 1,
        Shape.CORNER: 4,
        Shape.STRAIGHT: 3,
        Shape.DEAD_END: 1,
    },
    Difficulty.MEDIUM: {
        Shape.CROSS_INTERSECTION: 0,
        Shape.T_INTERSECTION: 1,
        Shape.CORNER: 5,
        Shape.STRAIGHT: 2,
        Shape.DEAD_END: 1,
    },
    Difficulty.HARD: {
        Shape.CROSS_INTERSECTION: 0,
        Shape.T_INTERSECTION: 2,
        Shape.CORNER: 5,
        Shape.STRAIGHT: 0,
        Shape.DEAD_END: 1,
    },
}

# Fraction of possible walls placed, and relative standard deviation
WALL_MEAN_PERCENT = 0.06
WALL_STD_DEV = 0.2

# Fraction of rotatable tiles scrambled, and relative standard deviation
ROTATION_MEAN_PERCENT = 0.8
ROTATION_STD_DEV = 0.1


def weighted_choice(rng: random.Random, items: Sequence[T], weights: Sequence[int]) -> T:
    """Pick one item with probability proportional to its weight.

    Falls back to a uniform choice if all weights are zero.
    """
    if not items:
        raise ValueError("weighted_choice requires at least one item")
    if all(weight == 0 for weight in weights):
        return rng.choice(items)
    return rng.choices(items, weights=weights)[0]


def sample_count(rng: random.Random, total: int, mean_percent: float, std_dev: float) -> int:
    """Draw how many of `total` items to pick from a normal distribution.

    The mean is `mean_percent * total` and the standard deviation is relative
    to the mean. The result is clamped to [0, total].
    """
    mean = mean_percent * total
    value = rng.gauss(mean, std_dev * mean)
    return int(min(max(value, 0.0), float(total)))


@dataclass(frozen=True)
class _Connection:
    """A candidate edge of the spanning tree."""

    parent: Coord
    child: Coord
    direction: Direction  # From parent to child


class Builder:
    """Creates random puzzles.

    Pass a seeded `random.Random` as `rng` for reproducible puzzles.
    """

    def __init__(self, options: Options | None = None, rng: random.Random | None = None) -> None:
        self.options = options if options is not None else Options()
        self.rng = rng if rng is not None else random.Random()

    def with_options(self, options: Options) -> Builder:
        self.options = options
        return self

    @property
    def source(self) -> Coord:
        """The source sits in the center of the board."""
        return Coord.splat(self.options.board_size // 2)

    def build(self) -> Puzzle:
        """Create a new, scrambled puzzle with energy already computed."""
        solved = self.build_solved()

        tiles = solved.grid.copy()
        expected_moves = self.rotate_tiles(tiles)

        puzzle = Puzzle(self.options, tiles, solved.walls, solved.source, expected_moves)
        puzzle.calc_energy()

        logger.info(
            "build: size=%d difficulty=%s wrapping=%s walls=%d expected_moves=%d",
            self.options.board_size,
            self.options.difficulty.value,
            self.options.wrapping,
            len(puzzle.walls),
            expected_moves,
        )
        return puzzle

    def build_solved(self) -> Puzzle:
        """Create a puzzle in its solved orientation, before any tile is rotated."""
        source = self.source
        links = self.create_grid_of_links(source)

        tiles = links.map(Tile.from_links)
        tiles[source].feature = Feature.SOURCE

        walls = self.create_walls(tiles)

        puzzle = Puzzle(self.options, tiles, walls, source, expected_moves=0)
        puzzle.calc_energy()
        return puzzle

    # =========================================================================
    # Spanning Tree
    # =========================================================================

    def create_grid_of_links(self, source: Coord) -> Grid[Links]:
        """Create the underlying spanning tree of the grid graph.

        Starting from the source, repeatedly extend the tree from one of its
        boundary cells to an unvisited neighbor. Each candidate edge is weighted
        by how much the difficulty likes the shape its parent would get.
        """
        size = self.options.board_size
        weights = DIFFICULTY_WEIGHTS[self.options.difficulty]
        proto_tiles: Grid[Links] = Grid.with_size(size, size, Links())

        visited: Grid[bool] = Grid.with_size(size, size, False)
        visited[source] = True

        # Tree cells which may still have unvisited neighbors
        boundary: list[Coord] = [source]

        while True:
            new_boundary: list[Coord] = []
            connections: list[_Connection] = []

            for parent in boundary:
                has_candidate = False
                for direction in Direction:
                    child = parent + direction.to_coord()
                    if self.options.wrapping:
                        child = proto_tiles.normalized_coord(child)
                    if proto_tiles.contains_coord(child) and not visited[child]:
                        connections.append(_Connection(parent, child, direction))
                        has_candidate = True
                if has_candidate:
                    new_boundary.append(parent)

            if not connections:
                break

            # Shape each parent would have if the connection were made
            connection_weights = []
            for connection in connections:
                grown = copy.copy(proto_tiles[connection.parent])
                grown[connection.direction] = True
                connection_weights.append(weights[grown.shape])

            connection = weighted_choice(self.rng, connections, connection_weights)

            new_boundary.append(connection.child)
            visited[connection.child] = True

            proto_tiles[connection.parent][connection.direction] = True
            proto_tiles[connection.child][-connection.direction] = True
            boundary = new_boundary

        return proto_tiles

    # =========================================================================
    # Walls
    # =========================================================================

    def create_walls(
        self,
        tiles: Grid[Tile],
        mean_percent: float = WALL_MEAN_PERCENT,
        std_dev: float = WALL_STD_DEV,
    ) -> list[Wall]:
        """Randomly place some walls.

        Must be called on the solved grid of tiles (before rotation): walls are
        only placed where the solution has no connection between two tiles.
        """
        sites: list[Wall] = []
        for coord, tile in tiles.indexed():
            # Top of tile
            if (self.options.wrapping or coord.y != 0) and not tile.has_link(Direction.N):
                sites.append(Wall(coord, Alignment.HORIZONTAL))
            # Left of tile
            if (self.options.wrapping or coord.x != 0) and not tile.has_link(Direction.W):
                sites.append(Wall(coord, Alignment.VERTICAL))

        count = sample_count(self.rng, len(sites), mean_percent, std_dev)
        logger.debug("create_walls: %d of %d eligible sites", count, len(sites))
        return self.rng.sample(sites, count)

    # =========================================================================
    # Scrambling
    # =========================================================================

    def rotate_tiles(
        self,
        tiles: Grid[Tile],
        mean_percent: float = ROTATION_MEAN_PERCENT,
        std_dev: float = ROTATION_STD_DEV,
    ) -> int:
        """Randomly rotate some tiles of a solved grid and return how many.

        Crosses look the same in every orientation and are never picked.
        Each picked tile is rotated at least once, so it counts as one move.
        """
        rotatable = [
            coord for coord, tile in tiles.indexed() if tile.shape is not Shape.CROSS_INTERSECTION
        ]

        count = sample_count(self.rng, len(rotatable), mean_percent, std_dev)
        picked = self.rng.sample(rotatable, count)
        logger.debug("rotate_tiles: %d of %d rotatable tiles", count, len(rotatable))

        for coord in picked:
            tile = tiles[coord]
            # A straight pipe has only two distinct orientations
            turns = 1 if tile.shape is Shape.STRAIGHT else self.rng.randint(1, 3)
            for _ in range(turns):
                tile.rotate()

        return len(picked)
