"""
The prototype of a game tile: four links from its center to its four edges.

A Links record does not know its shape (I, L, T, ...) or rotation. Those are
derived from the active links, which is the single mapping between "which
edges carry a pipe stub" during generation and "which shape, rotated how"
during play.
"""

from __future__ import annotations

from grid_types import Direction, Orientation, Shape

__all__ = ["Links"]


class Links:
    """Four boolean links indexed by Direction."""

    __slots__ = ("_links",)

    def __init__(self, east: bool = False, north: bool = False, west: bool = False, south: bool = False) -> None:
        self._links = [east, north, west, south]

    @classmethod
    def of(cls, *directions: Direction) -> Links:
        links = cls()
        for direction in directions:
            links[direction] = True
        return links

    def __getitem__(self, direction: Direction) -> bool:
        return self._links[direction.value]

    def __setitem__(self, direction: Direction, value: bool) -> None:
        self._links[direction.value] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Links):
            return NotImplemented
        return self._links == other._links

    def __repr__(self) -> str:
        active = "".join(d.name for d in Direction if self[d])
        return f"Links({active or '-'})"

    def __copy__(self) -> Links:
        return Links(*self._links)

    def to_shape(self) -> tuple[Shape, Orientation]:
        """Return the shape and orientation represented by the active links.

        Raises:
            ValueError: if no link is active (a generator bug, not a data condition)
        """
        match tuple(self._links):
            # east, north, west, south
            case (True, False, False, False):
                return Shape.DEAD_END, Orientation.BASIC
            case (False, True, False, False):
                return Shape.DEAD_END, Orientation.CCW_90
            case (False, False, True, False):
                return Shape.DEAD_END, Orientation.CCW_180
            case (False, False, False, True):
                return Shape.DEAD_END, Orientation.CCW_270
            case (True, False, True, False):
                return Shape.STRAIGHT, Orientation.BASIC
            case (False, True, False, True):
                return Shape.STRAIGHT, Orientation.CCW_90
            case (True, True, False, False):
                return Shape.CORNER, Orientation.BASIC
            case (False, True, True, False):
                return Shape.CORNER, Orientation.CCW_90
            case (False, False, True, True):
                return Shape.CORNER, Orientation.CCW_180
            case (True, False, False, True):
                return Shape.CORNER, Orientation.CCW_270
            case (True, True, True, False):
                return Shape.T_INTERSECTION, Orientation.BASIC
            case (False, True, True, True):
                return Shape.T_INTERSECTION, Orientation.CCW_90
            case (True, False, True, True):
                return Shape.T_INTERSECTION, Orientation.CCW_180
            case (True, True, False, True):
                return Shape.T_INTERSECTION, Orientation.CCW_270
            case (True, True, True, True):
                return Shape.CROSS_INTERSECTION, Orientation.BASIC
            case _:
                raise ValueError("encountered an empty tile with no links")

    @property
    def shape(self) -> Shape:
        return self.to_shape()[0]
