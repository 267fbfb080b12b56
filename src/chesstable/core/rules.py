"""High-level rules: check, checkmate, stalemate and game result."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesstable.core.enums import Color, GameResult, PieceKind

if TYPE_CHECKING:
    from chesstable.core.board import Board

_MINOR_KINDS = (PieceKind.KNIGHT, PieceKind.BISHOP)


class Rules:
    """Static rule-checker for the side to move on a :class:`Board`."""

    @staticmethod
    def is_in_check(board: Board) -> bool:
        return board.check_system.king_is_in_check(board.turn_color)

    @staticmethod
    def is_checkmate(board: Board) -> bool:
        return board.checkmate(board.turn_color)

    @staticmethod
    def is_stalemate(board: Board) -> bool:
        return board.stalemate(board.turn_color)

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+minor vs K, K+B vs K+B (same-colour bishops)."""
        white = [p for p in board.pieces(Color.WHITE) if p.kind != PieceKind.KING]
        black = [p for p in board.pieces(Color.BLACK) if p.kind != PieceKind.KING]
        others = white + black

        if not others:
            return True

        if len(others) == 1:
            return others[0].kind in _MINOR_KINDS

        if len(white) == 1 and len(black) == 1:
            w, b = white[0], black[0]
            if w.kind == PieceKind.BISHOP and b.kind == PieceKind.BISHOP:
                w_shade = (w.position.row + w.position.col) % 2
                b_shade = (b.position.row + b.position.col) % 2
                return w_shade == b_shade

        return False

    @staticmethod
    def game_result(board: Board) -> GameResult:
        """Determine the current game result."""
        side = board.turn_color
        if not board.get_all_possible_moves(side):
            if board.check_system.king_is_in_check(side):
                if side == Color.WHITE:
                    return GameResult.BLACK_WINS
                return GameResult.WHITE_WINS
            return GameResult.DRAW  # stalemate

        if Rules.is_insufficient_material(board):
            return GameResult.DRAW

        return GameResult.IN_PROGRESS
