"""Chess pieces: one shared contract, six movement rules.

A piece only decides whether a move has the right *shape* for its kind and
whether its path is clear. It never checks whether the move exposes its own
king; that is the job of :meth:`Board.get_all_possible_moves`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from chesstable.core.enums import Color, PieceKind
from chesstable.core.move import MoveInfo
from chesstable.core.position import Position, as_position

if TYPE_CHECKING:
    from chesstable.core.board import Board

_UNICODE: dict[tuple[Color, PieceKind], str] = {
    (Color.WHITE, PieceKind.PAWN): "♙",
    (Color.WHITE, PieceKind.KNIGHT): "♘",
    (Color.WHITE, PieceKind.BISHOP): "♗",
    (Color.WHITE, PieceKind.ROOK): "♖",
    (Color.WHITE, PieceKind.QUEEN): "♕",
    (Color.WHITE, PieceKind.KING): "♔",
    (Color.BLACK, PieceKind.PAWN): "♟",
    (Color.BLACK, PieceKind.KNIGHT): "♞",
    (Color.BLACK, PieceKind.BISHOP): "♝",
    (Color.BLACK, PieceKind.ROOK): "♜",
    (Color.BLACK, PieceKind.QUEEN): "♛",
    (Color.BLACK, PieceKind.KING): "♚",
}

_LETTERS: dict[PieceKind, str] = {
    PieceKind.PAWN: "P",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}


class Piece(ABC):
    """A piece that may live on one :class:`Board`.

    ``id`` is 0 and ``board`` is ``None`` until the board adopts the piece.
    Those fields (and ``position`` / ``on_board``) are written by the board;
    movement code goes through the board's API.
    """

    kind: ClassVar[PieceKind]
    value: ClassVar[int]

    __slots__ = ("color", "position", "id", "on_board", "board", "has_moved")

    def __init__(self, color: Color, position: Position | str) -> None:
        self.color = color
        self.position = as_position(position)
        self.id = 0
        self.on_board = False
        self.board: Board | None = None
        self.has_moved = False

    @staticmethod
    def create(kind: PieceKind, color: Color, position: Position | str) -> Piece:
        """Build a detached piece of *kind*."""
        try:
            cls = _PIECE_CLASSES[kind]
        except KeyError:
            raise ValueError(f"Invalid piece kind: {kind!r}") from None
        return cls(color, position)

    # ── Presentation ─────────────────────────────────────────────────────

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _UNICODE[(self.color, self.kind)]

    @property
    def letter(self) -> str:
        """FEN letter (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.kind]
        return letter if self.color == Color.WHITE else letter.lower()

    # ── Movement ─────────────────────────────────────────────────────────

    def is_valid_move(self, target: Position) -> MoveInfo:
        """Shape-legality of moving to *target*; never mutates the board."""
        info = MoveInfo(target)
        board = self.board
        if board is None or not self.on_board:
            return info

        source = self.position
        if source.distance(target) == 0:
            return info

        if not board.is_empty_cell(target):
            if board.is_same_color(source, target):
                info.blocked = True
                return info
            info.is_attack = True

        if self._shape_allows(target, info):
            info.can_move = True
        else:
            info.is_attack = False
            info.en_passant = False
        return info

    def move(self, target: Position) -> MoveInfo:
        """Move to *target* if :meth:`is_valid_move` allows it."""
        info = self.is_valid_move(target)
        if info.can_move:
            board = self.board
            assert board is not None
            if info.en_passant:
                board.remove_piece(Position(self.position.row, target.col))
            elif info.is_attack:
                board.remove_piece(target)
            board.relocate_piece(self, target)
        return info

    def attacks(self, target: Position) -> bool:
        """Whether this piece controls *target*."""
        return self.is_valid_move(target).can_move

    @abstractmethod
    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        """Kind-specific geometry and path rules."""

    def _path_is_clear(self, target: Position) -> bool:
        """True when every cell strictly between here and *target* is empty."""
        board = self.board
        assert board is not None
        source = self.position
        step_row = (target.row > source.row) - (target.row < source.row)
        step_col = (target.col > source.col) - (target.col < source.col)
        row, col = source.row + step_row, source.col + step_col
        while (row, col) != (target.row, target.col):
            if board.is_occupied(row, col):
                return False
            row += step_row
            col += step_col
        return True

    # ── Copying / comparison ─────────────────────────────────────────────

    def clone(self) -> Piece:
        """Detached copy keeping id, flags and position."""
        other = type(self)(self.color, self.position)
        other.id = self.id
        other.on_board = self.on_board
        other.has_moved = self.has_moved
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.color == other.color
            and self.position == other.position
            and self.id == other.id
            and self.on_board == other.on_board
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.color!s}, {self.position}, id={self.id})"


class King(Piece):
    kind = PieceKind.KING
    value = 0

    __slots__ = ()

    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        source = self.position
        return max(source.diff_row(target), source.diff_col(target)) == 1


class Queen(Piece):
    kind = PieceKind.QUEEN
    value = 9

    __slots__ = ()

    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        dr = self.position.diff_row(target)
        dc = self.position.diff_col(target)
        straight = (dr == 0) != (dc == 0)
        diagonal = dr == dc
        return (straight or diagonal) and self._path_is_clear(target)


class Rook(Piece):
    kind = PieceKind.ROOK
    value = 5

    __slots__ = ()

    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        dr = self.position.diff_row(target)
        dc = self.position.diff_col(target)
        return (dr == 0) != (dc == 0) and self._path_is_clear(target)


class Bishop(Piece):
    kind = PieceKind.BISHOP
    value = 3

    __slots__ = ()

    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        dr = self.position.diff_row(target)
        return dr == self.position.diff_col(target) and self._path_is_clear(target)


class Knight(Piece):
    kind = PieceKind.KNIGHT
    value = 3

    __slots__ = ()

    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        jump = (self.position.diff_row(target), self.position.diff_col(target))
        return jump in ((2, 1), (1, 2))


class Pawn(Piece):
    """White pawns advance towards row 0, black pawns towards row 7."""

    kind = PieceKind.PAWN
    value = 1

    __slots__ = ()

    @property
    def direction(self) -> int:
        return -1 if self.color == Color.WHITE else 1

    @property
    def start_row(self) -> int:
        return 6 if self.color == Color.WHITE else 1

    @property
    def promotion_row(self) -> int:
        return 0 if self.color == Color.WHITE else 7

    def _shape_allows(self, target: Position, info: MoveInfo) -> bool:
        board = self.board
        assert board is not None
        source = self.position
        forward = (target.row - source.row) * self.direction
        dc = source.diff_col(target)

        if dc == 0:
            if info.is_attack:
                return False
            if forward == 1:
                return True
            if forward == 2 and source.row == self.start_row:
                return not board.is_occupied(source.row + self.direction, source.col)
            return False

        if dc == 1 and forward == 1:
            if info.is_attack:
                return True
            if board.can_be_en_passanted(Position(source.row, target.col), self.color):
                info.en_passant = True
                info.is_attack = True
                return True
        return False

    def attacks(self, target: Position) -> bool:
        # Pawns control their forward diagonals whether or not they are occupied.
        if self.board is None or not self.on_board:
            return False
        source = self.position
        forward = (target.row - source.row) * self.direction
        return forward == 1 and source.diff_col(target) == 1


_PIECE_CLASSES: dict[PieceKind, type[Piece]] = {
    cls.kind: cls for cls in (King, Queen, Rook, Bishop, Knight, Pawn)
}


def standard_layout() -> list[list[Piece]]:
    """Starting pieces as a 2x16 matrix (row 0 White, row 1 Black).

    Per row: king, queen, two rooks, two knights, two bishops, eight pawns.
    """
    layout: list[list[Piece]] = []
    for color, back, front in ((Color.WHITE, 7, 6), (Color.BLACK, 0, 1)):
        row: list[Piece] = [
            King(color, Position(back, 4)),
            Queen(color, Position(back, 3)),
            Rook(color, Position(back, 0)),
            Rook(color, Position(back, 7)),
            Knight(color, Position(back, 1)),
            Knight(color, Position(back, 6)),
            Bishop(color, Position(back, 2)),
            Bishop(color, Position(back, 5)),
        ]
        row.extend(Pawn(color, Position(front, col)) for col in range(8))
        layout.append(row)
    return layout
