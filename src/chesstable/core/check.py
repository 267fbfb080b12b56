"""Attack and check detection over a board."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesstable.core.enums import Color

if TYPE_CHECKING:
    from chesstable.core.board import Board
    from chesstable.core.pieces import Piece
    from chesstable.core.position import Position


class CheckSystem:
    """Answers "is this square / king attacked?" for one board.

    Nothing is cached: the board may be a short-lived lookahead copy that
    changes between queries.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    def king_is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by any live opposing piece?"""
        king = self._board.king(color)
        if king is None:
            return False
        return self.is_attacked(king.position, color.opposite)

    def is_attacked(self, position: Position, by_color: Color) -> bool:
        """Is *position* controlled by any piece of *by_color*?"""
        return any(piece.attacks(position) for piece in self._board.pieces(by_color))

    def attackers(self, position: Position, by_color: Color) -> list[Piece]:
        """Pieces of *by_color* controlling *position*."""
        return [
            piece for piece in self._board.pieces(by_color) if piece.attacks(position)
        ]
