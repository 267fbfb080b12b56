"""Core domain layer — chess rules with zero external dependencies.

Quick start::

    from chesstable.core import Board, Color

    board = Board.initial()
    for move in board.get_all_possible_moves(Color.WHITE):
        print(move)
"""

from chesstable.core.board import Board
from chesstable.core.check import CheckSystem
from chesstable.core.config import PROMOTION_KINDS, RulesConfig
from chesstable.core.enums import Color, GameResult, MoveFlag, PieceKind
from chesstable.core.move import Move, MoveInfo
from chesstable.core.pieces import (
    Bishop,
    King,
    Knight,
    Pawn,
    Piece,
    Queen,
    Rook,
    standard_layout,
)
from chesstable.core.position import (
    ALL_POSITIONS,
    InvalidCoordinate,
    Position,
    as_position,
)
from chesstable.core.rules import Rules

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceKind",
    # Coordinates
    "ALL_POSITIONS",
    "InvalidCoordinate",
    "Position",
    "as_position",
    # Pieces
    "Bishop",
    "King",
    "Knight",
    "Pawn",
    "Piece",
    "Queen",
    "Rook",
    "standard_layout",
    # Domain objects
    "Board",
    "CheckSystem",
    "Move",
    "MoveInfo",
    "PROMOTION_KINDS",
    "Rules",
    "RulesConfig",
]
