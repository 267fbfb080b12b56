"""Tests for legal move enumeration, en passant and castling.

Perft reference values: https://www.chessprogramming.org/Perft_Results
"""

from collections.abc import Callable

import pytest

from chesstable.core.board import Board
from chesstable.core.config import RulesConfig
from chesstable.core.enums import Color, MoveFlag, PieceKind
from chesstable.core.pieces import King, Pawn, Rook
from chesstable.core.position import Position

BoardFactory = Callable[..., Board]


def _sq(name: str) -> Position:
    return Position.from_notation(name)


def perft(board: Board, depth: int) -> int:
    """Count leaf nodes at *depth* by replaying moves on copies."""
    if depth == 0:
        return 1
    moves = board.get_all_possible_moves(board.turn_color)
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        child = board.copy()
        assert child.apply_move(move), f"Failed to apply {move}"
        nodes += perft(child, depth - 1)
    return nodes


KIWIPETE_WHITE = "Ra1 Ke1 Rh1 Pa2 Pb2 Pc2 Bd2 Be2 Pf2 Pg2 Ph2 Nc3 Qf3 Pe4 Pd5 Ne5"
KIWIPETE_BLACK = "Ra8 Ke8 Rh8 Pa7 Pc7 Pd7 Qe7 Pf7 Bg7 Ba6 Nb6 Pe6 Nf6 Pg6 Pb4 Ph3"


class TestStartingPosition:
    def test_twenty_moves_each(self) -> None:
        board = Board.initial()
        assert len(board.get_all_possible_moves(Color.WHITE)) == 20
        assert len(board.get_all_possible_moves(Color.BLACK)) == 20

    def test_double_steps_flagged(self) -> None:
        board = Board.initial()
        flags = {
            str(move): move.flag for move in board.get_all_possible_moves(Color.WHITE)
        }
        assert flags["e2e4"] == MoveFlag.DOUBLE_PAWN
        assert flags["e2e3"] == MoveFlag.NORMAL
        assert flags["g1f3"] == MoveFlag.NORMAL

    def test_enumeration_does_not_mutate(self) -> None:
        board = Board.initial()
        before = board.copy()
        board.get_all_possible_moves(Color.WHITE)
        assert board == before

    def test_perft_2(self) -> None:
        assert perft(Board.initial(), 2) == 400

    @pytest.mark.slow
    def test_perft_3(self) -> None:
        assert perft(Board.initial(), 3) == 8_902


class TestKiwipete:
    def test_perft_1(self, make_board: BoardFactory) -> None:
        board = make_board(KIWIPETE_WHITE, KIWIPETE_BLACK)
        assert perft(board, 1) == 48

    @pytest.mark.slow
    def test_perft_2(self, make_board: BoardFactory) -> None:
        board = make_board(KIWIPETE_WHITE, KIWIPETE_BLACK)
        assert perft(board, 2) == 2_039


class TestSelfCheck:
    def test_pinned_rook_stays_on_file(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Re2", "Ka8 Re8")
        rook_moves = [
            move for move in board.get_all_possible_moves(Color.WHITE)
            if move.source == _sq("E2")
        ]
        assert {move.target.notation for move in rook_moves} == {
            "E3", "E4", "E5", "E6", "E7", "E8",
        }

    def test_king_cannot_step_into_attack(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1", "Ka8 Rd8")
        targets = {
            move.target.notation
            for move in board.get_all_possible_moves(Color.WHITE)
        }
        assert targets == {"E2", "F1", "F2"}

    def test_must_answer_check(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Nb1", "Ka8 Re8")
        moves = board.get_all_possible_moves(Color.WHITE)
        assert all(move.piece_id == board.get_piece("E1").id for move in moves)
        assert {move.target.notation for move in moves} == {"D1", "D2", "F1", "F2"}


class TestEnPassant:
    def _after_double_step(self, make_board: BoardFactory) -> Board:
        board = make_board("Ke1 Pd5", "Ke8 Pe7", turn=Color.BLACK)
        assert board.move_piece("E7", "E5")
        return board

    def test_capture_allowed_right_after(self, make_board: BoardFactory) -> None:
        board = self._after_double_step(make_board)
        assert board.turn_color == Color.WHITE
        assert board.can_be_en_passanted(_sq("E5"), Color.WHITE)
        info = board.get_piece("D5").is_valid_move(_sq("E6"))
        assert info.can_move and info.en_passant and info.is_attack

    def test_listed_as_legal(self, make_board: BoardFactory) -> None:
        board = self._after_double_step(make_board)
        en_passant = [
            move for move in board.get_all_possible_moves(Color.WHITE)
            if move.flag == MoveFlag.EN_PASSANT
        ]
        assert [str(move) for move in en_passant] == ["d5e6"]

    def test_capture_removes_passed_pawn(self, make_board: BoardFactory) -> None:
        board = self._after_double_step(make_board)
        victim = board.get_piece("E5")
        assert board.move_piece("D5", "E6")
        assert board.is_empty_cell("E5")
        assert not victim.on_board
        assert isinstance(board.get_piece("E6"), Pawn)
        assert board.last_move.flag == MoveFlag.EN_PASSANT
        assert board.pieces(Color.BLACK) == [board.king(Color.BLACK)]

    def test_rejected_after_intervening_move(self, make_board: BoardFactory) -> None:
        board = self._after_double_step(make_board)
        assert board.move_piece("E1", "E2")
        assert board.move_piece("E8", "D8")
        assert not board.can_be_en_passanted(_sq("E5"), Color.WHITE)
        assert not board.move_piece("D5", "E6")

    def test_single_steps_do_not_qualify(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Pd5", "Ke8 Pe6", turn=Color.BLACK)
        assert board.move_piece("E6", "E5")
        assert not board.can_be_en_passanted(_sq("E5"), Color.WHITE)

    def test_own_pawn_cannot_be_taken(self, make_board: BoardFactory) -> None:
        board = self._after_double_step(make_board)
        assert not board.can_be_en_passanted(_sq("E5"), Color.BLACK)

    def test_disabled_by_config(self, make_board: BoardFactory) -> None:
        board = make_board(
            "Ke1 Pd5", "Ke8 Pe7", turn=Color.BLACK,
            config=RulesConfig(allow_en_passant=False),
        )
        board.move_piece("E7", "E5")
        assert not board.move_piece("D5", "E6")

    def test_lookahead_copy_keeps_eligibility(self, make_board: BoardFactory) -> None:
        board = self._after_double_step(make_board)
        assert board.copy().can_be_en_passanted(_sq("E5"), Color.WHITE)


class TestCastling:
    def test_both_wings_available(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Ra1 Rh1", "Ke8")
        assert board.can_castle(Color.WHITE, kingside=True)
        assert board.can_castle(Color.WHITE, kingside=False)
        flags = {move.flag for move in board.get_all_possible_moves(Color.WHITE)}
        assert MoveFlag.CASTLE_KINGSIDE in flags
        assert MoveFlag.CASTLE_QUEENSIDE in flags

    def test_kingside_through_move_piece(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Ra1 Rh1", "Ke8")
        assert board.move_piece("E1", "G1")
        assert isinstance(board.get_piece("G1"), King)
        assert isinstance(board.get_piece("F1"), Rook)
        assert board.is_empty_cell("H1")
        assert board.last_move.flag == MoveFlag.CASTLE_KINGSIDE
        assert board.turn_color == Color.BLACK

    def test_queenside_black(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1", "Ke8 Ra8", turn=Color.BLACK)
        assert board.castle(Color.BLACK, kingside=False)
        assert isinstance(board.get_piece("C8"), King)
        assert isinstance(board.get_piece("D8"), Rook)

    def test_apply_castling_record(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Rh1", "Ke8")
        castle = next(
            move for move in board.get_all_possible_moves(Color.WHITE)
            if move.is_castling
        )
        assert board.apply_move(castle)
        assert isinstance(board.get_piece("G1"), King)

    def test_path_attacked(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Ra1 Rh1", "Ke8 Rf8")
        assert not board.can_castle(Color.WHITE, kingside=True)
        assert board.can_castle(Color.WHITE, kingside=False)

    def test_not_out_of_check(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Ra1 Rh1", "Ka8 Re5")
        assert not board.can_castle(Color.WHITE, kingside=True)
        assert not board.can_castle(Color.WHITE, kingside=False)

    def test_blocked_path(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Ra1 Nb1 Rh1", "Ke8")
        assert not board.can_castle(Color.WHITE, kingside=False)
        assert not board.move_piece("E1", "C1")

    def test_king_moved(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Rh1", "Ke8")
        board.move_piece("E1", "E2")
        board.move_piece("E2", "E1")
        assert not board.can_castle(Color.WHITE, kingside=True)

    def test_rook_moved(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Rh1", "Ke8")
        board.move_piece("H1", "H2")
        board.move_piece("H2", "H1")
        assert not board.can_castle(Color.WHITE, kingside=True)

    def test_disabled_by_config(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Rh1", "Ke8", config=RulesConfig(allow_castling=False))
        assert not board.castle(Color.WHITE, kingside=True)


class TestPromotionMoves:
    def test_four_choices(self, make_board: BoardFactory) -> None:
        board = make_board("Ke1 Pa7", "Kh8")
        promotions = [
            move for move in board.get_all_possible_moves(Color.WHITE)
            if move.flag == MoveFlag.PROMOTION
        ]
        assert sorted(move.promotion for move in promotions) == [
            PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN,
        ]
        expected = {"a7a8q", "a7a8r", "a7a8b", "a7a8n"}
        assert {str(move) for move in promotions} == expected
