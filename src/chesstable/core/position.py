"""Board coordinates.

Layout (row 0 is the eighth rank, as seen from White)::

    row 0:  A8 B8 C8 D8 E8 F8 G8 H8
    ...
    row 7:  A1 B1 C1 D1 E1 F1 G1 H1
"""

from __future__ import annotations

import math
from dataclasses import dataclass

_FILES = "ABCDEFGH"
_RANKS = "12345678"


class InvalidCoordinate(ValueError):
    """Raised for out-of-range rows/columns or unparseable square names."""


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable (row, col) pair on the 8x8 board."""

    row: int
    col: int

    def __post_init__(self) -> None:
        for value in (self.row, self.col):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidCoordinate(f"Coordinate must be an int: {value!r}")
        if not (0 <= self.row < 8 and 0 <= self.col < 8):
            raise InvalidCoordinate(
                f"Coordinate out of range: ({self.row}, {self.col})"
            )

    @classmethod
    def from_notation(cls, name: str) -> Position:
        """Parse a square name, e.g. 'E4' -> Position(4, 4)."""
        if not isinstance(name, str) or len(name) != 2:
            raise InvalidCoordinate(f"Invalid square name: {name!r}")
        file_char, rank_char = name[0].upper(), name[1]
        if file_char not in _FILES or rank_char not in _RANKS:
            raise InvalidCoordinate(f"Invalid square name: {name!r}")
        return cls(8 - int(rank_char), _FILES.index(file_char))

    @property
    def notation(self) -> str:
        """Square name, e.g. Position(7, 0) -> 'A1'."""
        return f"{_FILES[self.col]}{8 - self.row}"

    def distance(self, other: Position) -> float:
        """Euclidean distance in cells; zero only for the same cell."""
        return math.hypot(self.row - other.row, self.col - other.col)

    def diff_row(self, other: Position) -> int:
        return abs(self.row - other.row)

    def diff_col(self, other: Position) -> int:
        return abs(self.col - other.col)

    def __str__(self) -> str:
        return self.notation


def as_position(value: Position | str) -> Position:
    """Accept either a :class:`Position` or a square name."""
    if isinstance(value, Position):
        return value
    return Position.from_notation(value)


ALL_POSITIONS: tuple[Position, ...] = tuple(
    Position(row, col) for row in range(8) for col in range(8)
)
