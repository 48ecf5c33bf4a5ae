"""
Dense row-major grid container.

The top-left cell is (0, 0). Off-grid coordinates can be folded back onto the
grid for toroidal boards; folding never allocates new cells.
"""

from __future__ import annotations

import copy
from typing import Callable, Generic, Iterator, TypeVar

from grid_types import Coord, Direction

__all__ = ["Grid"]

T = TypeVar("T")
U = TypeVar("U")


class Grid(Generic[T]):
    """A rows x cols grid of arbitrary values stored in row-major order."""

    def __init__(self, rows: int, cols: int, data: list[T]) -> None:
        if rows * cols != len(data):
            raise ValueError(
                f"Grid data has {len(data)} values but {rows}x{cols} requires {rows * cols}"
            )
        self._rows = rows
        self._cols = cols
        self._data = data

    @classmethod
    def with_size(cls, rows: int, cols: int, init: T) -> Grid[T]:
        """Create a grid with every cell holding its own copy of `init`."""
        return cls(rows, cols, [copy.copy(init) for _ in range(rows * cols)])

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self._rows, self._cols, self._data) == (other._rows, other._cols, other._data)

    def __repr__(self) -> str:
        return f"Grid(rows={self._rows}, cols={self._cols}, data={self._data!r})"

    # =========================================================================
    # Coordinates
    # =========================================================================

    def contains_coord(self, coord: Coord) -> bool:
        return 0 <= coord.x < self._cols and 0 <= coord.y < self._rows

    def normalized_coord(self, coord: Coord) -> Coord:
        """Fold `coord` onto the grid as if the grid were a torus.

        Python's % is floored, so negative coordinates fold correctly.
        """
        return Coord(coord.x % self._cols, coord.y % self._rows)

    def _linear_index(self, coord: Coord) -> int:
        if not self.contains_coord(coord):
            raise IndexError(f"coordinate {coord} is not on the {self._rows}x{self._cols} grid")
        return coord.y * self._cols + coord.x

    # =========================================================================
    # Access
    # =========================================================================

    def get(self, coord: Coord) -> T | None:
        """Return the value at `coord`, or None if `coord` is off-grid.

        Values are returned by reference, so mutable cell values can be
        modified in place.
        """
        if not self.contains_coord(coord):
            return None
        return self._data[coord.y * self._cols + coord.x]

    def wrapping_get(self, coord: Coord) -> T:
        """Return the value at `coord` folded onto the grid. Always succeeds."""
        return self._data[self._linear_index(self.normalized_coord(coord))]

    def __getitem__(self, coord: Coord) -> T:
        return self._data[self._linear_index(coord)]

    def __setitem__(self, coord: Coord, value: T) -> None:
        self._data[self._linear_index(coord)] = value

    # =========================================================================
    # Traversal
    # =========================================================================

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def indices(self) -> Iterator[Coord]:
        for y in range(self._rows):
            for x in range(self._cols):
                yield Coord(x, y)

    def indexed(self) -> Iterator[tuple[Coord, T]]:
        return zip(self.indices(), self._data)

    def neighbors(self, coord: Coord) -> Iterator[tuple[Coord, T]]:
        """Yield the in-bounds neighbors of `coord` in Direction order.

        Not wrap-aware: neighbors across the grid boundary are skipped.
        """
        for direction in Direction:
            neighbor = coord + direction.to_coord()
            if self.contains_coord(neighbor):
                yield neighbor, self[neighbor]

    # =========================================================================
    # Derived grids
    # =========================================================================

    def map(self, fn: Callable[[T], U]) -> Grid[U]:
        return Grid(self._rows, self._cols, [fn(value) for value in self._data])

    def copy(self) -> Grid[T]:
        """Return a new grid holding shallow copies of every value."""
        return self.map(copy.copy)
