"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from chesstable.core.board import Board
from chesstable.core.config import RulesConfig
from chesstable.core.enums import Color, PieceKind
from chesstable.core.pieces import Piece

_KINDS: dict[str, PieceKind] = {
    "K": PieceKind.KING,
    "Q": PieceKind.QUEEN,
    "R": PieceKind.ROOK,
    "B": PieceKind.BISHOP,
    "N": PieceKind.KNIGHT,
    "P": PieceKind.PAWN,
}

BoardFactory = Callable[..., Board]


def _place(board: Board, color: Color, layout: str) -> None:
    for token in layout.split():
        piece = Piece.create(_KINDS[token[0]], color, token[1:])
        assert board.add_piece(piece), f"Could not place {token}"


@pytest.fixture
def make_board() -> BoardFactory:
    """Build a board from compact layouts, e.g. ``make_board("Ke1 Ra1", "Ke8")``."""

    def build(
        white: str = "",
        black: str = "",
        turn: Color = Color.WHITE,
        config: RulesConfig | None = None,
    ) -> Board:
        board = Board(config=config)
        _place(board, Color.WHITE, white)
        _place(board, Color.BLACK, black)
        board.set_turn_color(turn)
        return board

    return build
