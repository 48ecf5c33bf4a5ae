"""Tests for random puzzle generation."""

import random
from collections import Counter

import pytest

from builder import DIFFICULTY_WEIGHTS, Builder, sample_count, weighted_choice
from grid import Grid
from grid_types import Alignment, Coord, Direction, Feature, Orientation, Shape
from puzzle import Difficulty, Options, Puzzle, Tile

ALL_OPTIONS = [
    Options(board_size=size, difficulty=difficulty, wrapping=wrapping)
    for size in (3, 4, 7, 12)
    for difficulty in Difficulty
    for wrapping in (False, True)
]

SEEDS = range(8)


def count_edges(puzzle: Puzzle) -> int:
    """Number of connected tile pairs, each counted once."""
    links = 0
    for coord in puzzle.grid.indices():
        links += sum(puzzle.connected(coord, d) for d in Direction)
    return links // 2


def tree_edge_under_wall(solved: Puzzle) -> bool:
    """True if any wall sits on an edge joining two matching links."""
    grid = solved.grid
    for wall in solved.walls:
        direction = Direction.N if wall.alignment is Alignment.HORIZONTAL else Direction.W
        here = grid[wall.position]
        there = grid.wrapping_get(wall.position + direction.to_coord())
        if here.has_link(direction) and there.has_link(-direction):
            return True
    return False


class TestBuilderOptions:
    """Tests for builder configuration."""

    def test_default_options(self) -> None:
        """A builder without options creates the smallest easy board."""
        puzzle = Builder(rng=random.Random(0)).build()
        assert puzzle.options == Options()
        assert puzzle.size() == 3

    def test_with_options(self) -> None:
        """with_options is chainable and the options are kept on the puzzle."""
        options = Options(board_size=3, difficulty=Difficulty.EASY, wrapping=False)
        builder = Builder(rng=random.Random(1)).with_options(options)
        assert builder.options == options
        assert builder.build().options == options

    def test_source_in_center(self) -> None:
        """The source sits in the center, rounding down on even boards."""
        assert Builder(Options(board_size=5)).source == Coord(2, 2)
        assert Builder(Options(board_size=4)).source == Coord(2, 2)

    def test_reproducible_with_seed(self) -> None:
        """The same seed yields the same puzzle."""
        options = Options(board_size=9, difficulty=Difficulty.MEDIUM, wrapping=True)
        first = Builder(options, random.Random(42)).build()
        second = Builder(options, random.Random(42)).build()
        assert first == second


class TestBuiltPuzzles:
    """Properties every generated puzzle must satisfy."""

    @pytest.mark.parametrize("options", ALL_OPTIONS, ids=repr)
    def test_structure(self, options: Options) -> None:
        """One source in the center of a square board; expected moves bounded by rotatable tiles."""
        for seed in SEEDS:
            puzzle = Builder(options, random.Random(seed)).build()

            assert puzzle.grid.rows == puzzle.grid.cols == options.board_size
            sources = [coord for coord, tile in puzzle.grid.indexed() if tile.feature is Feature.SOURCE]
            assert sources == [puzzle.source]
            assert puzzle.grid.contains_coord(puzzle.source)

            rotatable = sum(tile.shape is not Shape.CROSS_INTERSECTION for tile in puzzle.grid)
            assert 0 <= puzzle.expected_moves <= rotatable

    @pytest.mark.parametrize("options", ALL_OPTIONS, ids=repr)
    def test_solved_puzzle_is_fully_powered(self, options: Options) -> None:
        """Before scrambling, the spanning tree powers every tile."""
        for seed in SEEDS:
            solved = Builder(options, random.Random(seed)).build_solved()
            assert solved.solved()
            assert solved.expected_moves == 0

    @pytest.mark.parametrize("options", ALL_OPTIONS, ids=repr)
    def test_solved_puzzle_is_a_tree(self, options: Options) -> None:
        """A spanning tree over n*n tiles has n*n - 1 connections."""
        for seed in SEEDS:
            solved = Builder(options, random.Random(seed)).build_solved()
            assert count_edges(solved) == options.board_size**2 - 1

    @pytest.mark.parametrize("options", ALL_OPTIONS, ids=repr)
    def test_walls_avoid_tree_edges(self, options: Options) -> None:
        """Walls never cut a connection of the solution."""
        for seed in SEEDS:
            solved = Builder(options, random.Random(seed)).build_solved()
            assert not tree_edge_under_wall(solved)

    @pytest.mark.parametrize("options", [o for o in ALL_OPTIONS if not o.wrapping], ids=repr)
    def test_no_walls_on_board_edge_without_wrapping(self, options: Options) -> None:
        """The board edge is an implicit wall, so no explicit wall is placed there."""
        for seed in SEEDS:
            puzzle = Builder(options, random.Random(seed)).build()
            for wall in puzzle.walls:
                if wall.alignment is Alignment.HORIZONTAL:
                    assert wall.position.y != 0
                else:
                    assert wall.position.x != 0

    @pytest.mark.parametrize("options", ALL_OPTIONS, ids=repr)
    def test_scrambling_matches_expected_moves(self, options: Options) -> None:
        """Exactly `expected_moves` tiles differ from the solution; shapes and walls are kept."""
        for seed in SEEDS:
            solved = Builder(options, random.Random(seed)).build_solved()
            puzzle = Builder(options, random.Random(seed)).build()

            assert puzzle.walls == solved.walls
            assert puzzle.source == solved.source
            assert [t.shape for t in puzzle.grid] == [t.shape for t in solved.grid]

            changed = [
                coord
                for coord, tile in puzzle.grid.indexed()
                if tile.orientation is not solved.grid[coord].orientation
            ]
            assert len(changed) == puzzle.expected_moves
            assert all(puzzle.grid[coord].shape is not Shape.CROSS_INTERSECTION for coord in changed)

    def test_energy_is_computed(self) -> None:
        """The returned puzzle already has its powered flags set."""
        puzzle = Builder(Options(board_size=6), random.Random(3)).build()
        assert puzzle.get_tile(puzzle.source).powered
        expected = puzzle.copy()
        expected.calc_energy()
        assert [t.powered for t in puzzle.grid] == [t.powered for t in expected.grid]

    def test_rotating_back_solves(self) -> None:
        """Restoring every orientation of the solution solves the scrambled puzzle."""
        options = Options(board_size=8, difficulty=Difficulty.HARD, wrapping=True)
        solved = Builder(options, random.Random(11)).build_solved()
        puzzle = Builder(options, random.Random(11)).build()

        for coord, tile in puzzle.grid.indexed():
            while tile.orientation is not solved.grid[coord].orientation:
                puzzle.rotate_tile(coord)
        puzzle.calc_energy()
        assert puzzle.solved()


class TestSpanningTree:
    """Tests for link grid generation."""

    def test_every_cell_linked(self) -> None:
        """Every cell gets at least one link and the links are symmetric."""
        builder = Builder(Options(board_size=5, wrapping=True), random.Random(5))
        links = builder.create_grid_of_links(builder.source)
        for coord, cell in links.indexed():
            cell.to_shape()
            for direction in Direction:
                if cell[direction]:
                    neighbor = links.wrapping_get(coord + direction.to_coord())
                    assert neighbor[-direction]

    def test_no_links_across_edge_without_wrapping(self) -> None:
        """Without wrapping no link points off the board."""
        builder = Builder(Options(board_size=6), random.Random(9))
        links = builder.create_grid_of_links(builder.source)
        for coord, cell in links.indexed():
            for direction in Direction:
                if cell[direction]:
                    assert links.contains_coord(coord + direction.to_coord())


class TestWallsAndRotation:
    """Tests for wall placement and scrambling on hand-built grids."""

    def test_all_sites_eligible_when_mean_is_full(self) -> None:
        """With mean 100% and no spread every eligible edge gets a wall."""
        builder = Builder(Options(board_size=3), random.Random(0))
        tiles = Grid.with_size(3, 3, Tile(Shape.DEAD_END))  # every tile links east only
        walls = builder.create_walls(tiles, mean_percent=1.0, std_dev=0.0)
        # 3 top edges in each of rows 1 and 2, plus 2 left edges in each row
        assert len(walls) == 6 + 6
        assert len(set(walls)) == len(walls)

    def test_no_site_where_tile_links(self) -> None:
        """Edges carrying a link toward them are never eligible."""
        builder = Builder(Options(board_size=3, wrapping=True), random.Random(0))
        tiles = Grid.with_size(3, 3, Tile(Shape.CROSS_INTERSECTION))
        assert builder.create_walls(tiles, mean_percent=1.0, std_dev=0.0) == []

    def test_crosses_are_never_rotated(self) -> None:
        """A board of crosses needs no moves."""
        builder = Builder(Options(board_size=3), random.Random(0))
        tiles = Grid.with_size(3, 3, Tile(Shape.CROSS_INTERSECTION))
        assert builder.rotate_tiles(tiles, mean_percent=1.0, std_dev=0.0) == 0
        assert all(tile.orientation is Orientation.BASIC for tile in tiles)

    def test_every_picked_tile_is_displaced(self) -> None:
        """Each picked tile ends up in a different orientation; straights turn once."""
        builder = Builder(Options(board_size=4), random.Random(2))
        shapes = [Shape.STRAIGHT, Shape.CORNER, Shape.T_INTERSECTION, Shape.DEAD_END]
        tiles = Grid(4, 4, [Tile(shapes[i % 4]) for i in range(16)])

        moves = builder.rotate_tiles(tiles, mean_percent=1.0, std_dev=0.0)

        assert moves == 16
        for tile in tiles:
            assert tile.orientation is not Orientation.BASIC
            if tile.shape is Shape.STRAIGHT:
                assert tile.orientation is Orientation.CCW_90


class TestRandomHelpers:
    """Tests for weighted choice and count sampling."""

    def test_weighted_choice_respects_zero_weights(self) -> None:
        """Items with weight zero are never picked while another weight is positive."""
        rng = random.Random(0)
        picks = {weighted_choice(rng, ["a", "b", "c"], [0, 3, 0]) for _ in range(50)}
        assert picks == {"b"}

    def test_weighted_choice_all_zero_is_uniform(self) -> None:
        """All-zero weights fall back to a uniform choice."""
        rng = random.Random(0)
        picks = {weighted_choice(rng, ["a", "b", "c"], [0, 0, 0]) for _ in range(200)}
        assert picks == {"a", "b", "c"}

    def test_weighted_choice_empty(self) -> None:
        """Choosing from nothing is an error."""
        with pytest.raises(ValueError, match="at least one item"):
            weighted_choice(random.Random(0), [], [])

    def test_sample_count_bounds(self) -> None:
        """Samples are clamped to [0, total]."""
        rng = random.Random(0)
        for _ in range(200):
            assert 0 <= sample_count(rng, 10, 0.9, 1.0) <= 10
        assert sample_count(rng, 0, 0.5, 0.2) == 0

    def test_sample_count_without_spread(self) -> None:
        """With no spread the sample is the mean, truncated."""
        rng = random.Random(0)
        assert sample_count(rng, 10, 0.5, 0.0) == 5
        assert sample_count(rng, 10, 0.06, 0.0) == 0

    def test_weight_tables_cover_every_shape(self) -> None:
        """Each difficulty weighs every shape."""
        for difficulty in Difficulty:
            assert set(DIFFICULTY_WEIGHTS[difficulty]) == set(Shape)


def shape_counts(difficulty: Difficulty) -> Counter[Shape]:
    """Shapes over many solved 9x9 boards of one difficulty."""
    counts: Counter[Shape] = Counter()
    for seed in range(30):
        solved = Builder(Options(board_size=9, difficulty=difficulty), random.Random(seed)).build_solved()
        counts.update(tile.shape for tile in solved.grid)
    return counts


class TestDifficultyWeights:
    """Tests that the shape weights steer generation."""

    def test_crosses_only_on_easy(self) -> None:
        """Crosses weigh zero on medium and hard, so they are rare or absent."""
        easy = shape_counts(Difficulty.EASY)
        assert easy[Shape.CROSS_INTERSECTION] > 20
        for difficulty in (Difficulty.MEDIUM, Difficulty.HARD):
            assert shape_counts(difficulty)[Shape.CROSS_INTERSECTION] * 10 < easy[Shape.CROSS_INTERSECTION]

    def test_hard_avoids_straights(self) -> None:
        """Hard boards have far fewer straights than easy ones."""
        easy = shape_counts(Difficulty.EASY)
        hard = shape_counts(Difficulty.HARD)
        assert hard[Shape.STRAIGHT] * 4 < easy[Shape.STRAIGHT]
