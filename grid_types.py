"""
Shared type definitions for the pipe puzzle: coordinates, directions and the
small enums describing tiles and walls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coord:
    """Discrete 2D vector for addressing cells of a square grid.

    x grows to the right (columns), y grows downwards (rows).
    """

    x: int
    y: int

    @classmethod
    def splat(cls, value: int) -> Coord:
        return cls(value, value)

    @classmethod
    def from_tuple(cls, value: tuple[int, int]) -> Coord:
        return cls(value[0], value[1])

    def __add__(self, other: Coord) -> Coord:
        return Coord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coord) -> Coord:
        return Coord(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: int) -> Coord:
        return Coord(self.x * factor, self.y * factor)


class InvalidDirectionError(ValueError):
    """Raised when a vector does not correspond to one of the four directions."""

    def __init__(self, vector: Coord) -> None:
        super().__init__(f"invalid direction from '{vector}'")
        self.vector = vector


class Direction(Enum):
    """Cardinal direction, ordered counter-clockwise starting from the x-axis.

    The value doubles as the link index of a tile.
    """

    E = 0  # Right (increasing x)
    N = 1  # Up (decreasing y)
    W = 2  # Left (decreasing x)
    S = 3  # Down (increasing y)

    def to_coord(self) -> Coord:
        return _UNIT_VECTORS[self]

    def opposite(self) -> Direction:
        return Direction((self.value + 2) % 4)

    def __neg__(self) -> Direction:
        return self.opposite()

    @classmethod
    def from_coord(cls, vector: Coord) -> Direction:
        """Convert a unit vector into a direction.

        Raises:
            InvalidDirectionError: if `vector` is not one of the four unit vectors
        """
        for direction, unit in _UNIT_VECTORS.items():
            if unit == vector:
                return direction
        raise InvalidDirectionError(vector)


_UNIT_VECTORS: dict[Direction, Coord] = {
    Direction.E: Coord(1, 0),
    Direction.N: Coord(0, -1),
    Direction.W: Coord(-1, 0),
    Direction.S: Coord(0, 1),
}


# =============================================================================
# Tile and Wall Enums
# =============================================================================


class Shape(Enum):
    """The shape of the pipes on a tile, independent of its rotation."""

    DEAD_END = "dead_end"
    STRAIGHT = "straight"
    CORNER = "corner"
    T_INTERSECTION = "t_intersection"
    CROSS_INTERSECTION = "cross_intersection"

    @property
    def base_links(self) -> tuple[bool, bool, bool, bool]:
        """Links in the Basic orientation, indexed E, N, W, S."""
        return _BASE_LINKS[self]


_BASE_LINKS: dict[Shape, tuple[bool, bool, bool, bool]] = {
    Shape.DEAD_END: (True, False, False, False),
    Shape.STRAIGHT: (True, False, True, False),
    Shape.CORNER: (True, True, False, False),
    Shape.T_INTERSECTION: (True, True, True, False),
    Shape.CROSS_INTERSECTION: (True, True, True, True),
}


class Orientation(Enum):
    """Rotation of a tile in quarter-turns counter-clockwise."""

    BASIC = 0  # Not rotated, facing right
    CCW_90 = 1  # Facing up
    CCW_180 = 2  # Facing left
    CCW_270 = 3  # Facing down

    def next_ccw(self) -> Orientation:
        return Orientation((self.value + 1) % 4)

    def to_angle(self) -> float:
        """Angle in radians, for presentation only."""
        return self.value * math.pi / 2


class Feature(Enum):
    """A source or a drain sitting on top of a tile."""

    NONE = "none"
    SOURCE = "source"
    DRAIN = "drain"


class Alignment(Enum):
    """Alignment of a wall along a tile edge."""

    HORIZONTAL = "horizontal"  # Along the top edge of its tile
    VERTICAL = "vertical"  # Along the left edge of its tile
