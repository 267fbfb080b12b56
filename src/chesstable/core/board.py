"""Board - id grid, piece registry, turn and move history."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from itertools import zip_longest

from chesstable.core.check import CheckSystem
from chesstable.core.config import PROMOTION_KINDS, RulesConfig
from chesstable.core.enums import Color, MoveFlag, PieceKind
from chesstable.core.move import Move, MoveInfo
from chesstable.core.pieces import King, Pawn, Piece, Rook, standard_layout
from chesstable.core.position import ALL_POSITIONS, Position, as_position

_LOGGER = logging.getLogger(__name__)

_SLOTS_PER_COLOR = 16
_KING_HOME_COL = 4

# kingside -> (rook column, king destination column, rook destination column)
_CASTLING_COLS: dict[bool, tuple[int, int, int]] = {
    True: (7, 6, 5),
    False: (0, 2, 3),
}


class Board:
    """Mutable chess position.

    The placement is stored twice: ``_grid[row][col]`` holds the identifier
    of the occupant (0 for empty, positive for White, negative for Black) and
    ``_pieces[color][abs(id) - 1]`` holds the piece object. Both are written
    only through :meth:`_set_cell` and the registry helpers below, so they
    always describe the same placement.

    Identifiers come from a per-color counter that never rewinds; a captured
    piece's slot stays empty for the rest of the game.
    """

    __slots__ = (
        "config",
        "_grid",
        "_pieces",
        "_next_ids",
        "_white_turn",
        "_history",
        "_check_system",
    )

    def __init__(
        self,
        pieces: Sequence[Sequence[Piece | None]] | None = None,
        config: RulesConfig | None = None,
    ) -> None:
        self.config = config if config is not None else RulesConfig()
        self._grid: list[list[int]] = [[0] * 8 for _ in range(8)]
        self._pieces: list[list[Piece | None]] = [
            [None] * _SLOTS_PER_COLOR for _ in range(2)
        ]
        self._next_ids: list[int] = [1, -1]
        self._white_turn = True
        self._history: list[Move] = []
        self._check_system = CheckSystem(self)

        if pieces is not None:
            white, black = pieces
            for white_piece, black_piece in zip_longest(white, black):
                if white_piece is not None:
                    self.add_piece(white_piece)
                if black_piece is not None:
                    self.add_piece(black_piece)

    @classmethod
    def initial(cls, config: RulesConfig | None = None) -> Board:
        """Standard starting position."""
        return cls(standard_layout(), config=config)

    # -- Cell queries -------------------------------------------------------

    def id_of_cell(self, position: Position) -> int:
        return self._grid[position.row][position.col]

    def is_empty_cell(self, position: Position | str) -> bool:
        position = as_position(position)
        return self._grid[position.row][position.col] == 0

    def is_occupied(self, row: int, col: int) -> bool:
        return self._grid[row][col] != 0

    def is_same_color(self, first: Position, second: Position) -> bool:
        """Both cells hold pieces of one color (False if either is empty)."""
        return self.id_of_cell(first) * self.id_of_cell(second) > 0

    def get_piece_by_id(self, piece_id: int) -> Piece | None:
        if piece_id == 0 or abs(piece_id) > _SLOTS_PER_COLOR:
            return None
        color = Color.WHITE if piece_id > 0 else Color.BLACK
        return self._pieces[int(color)][abs(piece_id) - 1]

    def get_piece(self, position: Position | str) -> Piece | None:
        return self.get_piece_by_id(self.id_of_cell(as_position(position)))

    # -- Registry queries ---------------------------------------------------

    def pieces(self, color: Color) -> list[Piece]:
        """Live pieces of *color* in identifier order."""
        return [piece for piece in self._pieces[int(color)] if piece is not None]

    def king(self, color: Color) -> King | None:
        for piece in self._pieces[int(color)]:
            if isinstance(piece, King):
                return piece
        return None

    def material(self, color: Color) -> int:
        """Sum of the material values of *color*'s live pieces."""
        return sum(piece.value for piece in self.pieces(color))

    @property
    def grid(self) -> tuple[tuple[int, ...], ...]:
        """Snapshot of the identifier grid."""
        return tuple(tuple(row) for row in self._grid)

    @property
    def move_history(self) -> tuple[Move, ...]:
        return tuple(self._history)

    @property
    def last_move(self) -> Move | None:
        return self._history[-1] if self._history else None

    @property
    def check_system(self) -> CheckSystem:
        return self._check_system

    # -- Turn ---------------------------------------------------------------

    @property
    def turn_color(self) -> Color:
        return Color.WHITE if self._white_turn else Color.BLACK

    def set_turn_color(self, color: Color) -> None:
        self._white_turn = color == Color.WHITE

    def switch_turn(self) -> None:
        self._white_turn = not self._white_turn

    # -- Piece lifecycle ----------------------------------------------------

    def add_piece(self, piece: Piece) -> bool:
        """Place a detached piece on its own position and give it an id."""
        position = piece.position
        if piece.on_board:
            _LOGGER.debug("Rejected add of %r: already on a board", piece)
            return False
        if not self.is_empty_cell(position):
            _LOGGER.debug("Rejected add of %r: %s is occupied", piece, position)
            return False

        color_idx = int(piece.color)
        piece_id = self._next_ids[color_idx]
        if abs(piece_id) > _SLOTS_PER_COLOR:
            _LOGGER.debug("Rejected add of %r: no %s ids left", piece, piece.color)
            return False
        self._next_ids[color_idx] = piece_id + piece.color.id_sign

        self._pieces[color_idx][abs(piece_id) - 1] = piece
        piece.id = piece_id
        piece.on_board = True
        piece.board = self
        self._set_cell(position, piece_id)
        return True

    def remove_piece(self, target: Position | Piece | str) -> bool:
        """Take a piece off the board; its id is not handed out again."""
        if isinstance(target, Piece):
            position = target.position
            if self.get_piece(position) is not target:
                return False
        else:
            position = as_position(target)

        piece = self.get_piece(position)
        if piece is None:
            return False
        self._pieces[int(piece.color)][abs(piece.id) - 1] = None
        piece.on_board = False
        self._set_cell(position, 0)
        return True

    def relocate_piece(self, piece: Piece, target: Position) -> None:
        """Move *piece* to the empty cell *target* without any rule checks."""
        self._set_cell(piece.position, 0)
        self._set_cell(target, piece.id)
        piece.position = target
        piece.has_moved = True

    def teleport_rook_castle(self, rook: Rook, destination: Position) -> None:
        """Rook half of castling; the caller has already validated the castle."""
        self.relocate_piece(rook, destination)

    def _set_cell(self, position: Position, value: int) -> None:
        self._grid[position.row][position.col] = value

    # -- Moving -------------------------------------------------------------

    def move_piece(
        self,
        source: Position | Piece | str,
        target: Position | str,
        promotion: PieceKind | None = None,
    ) -> bool:
        """Move the piece on *source* (or the given piece) to *target*.

        Only shape-legality is enforced here; whose turn it is and whether
        the move exposes the mover's king are the caller's concern. A king
        stepping two files along its home row castles.
        """
        if promotion is not None and promotion not in PROMOTION_KINDS:
            raise ValueError(f"Invalid promotion kind: {promotion!r}")

        if isinstance(source, Piece):
            piece = source if source.on_board and source.board is self else None
        else:
            piece = self.get_piece(source)
        if piece is None:
            return False

        start = piece.position
        target = as_position(target)

        if (
            isinstance(piece, King)
            and start.diff_row(target) == 0
            and start.diff_col(target) == 2
        ):
            return self.castle(piece.color, kingside=target.col > start.col)

        info = piece.move(target)
        if not info.can_move:
            return False

        flag = self._classify(piece, start, info)
        promoted: PieceKind | None = None
        if isinstance(piece, Pawn) and target.row == piece.promotion_row:
            promoted = promotion or self.config.promotion_kind
            self._promote(piece, promoted)
            flag = MoveFlag.PROMOTION

        self._record(Move(start, target, piece, flag, promoted))
        return True

    def apply_move(self, move: Move) -> bool:
        """Apply a record produced by :meth:`get_all_possible_moves`."""
        if move.is_castling:
            return self.castle(
                move.piece.color, kingside=move.flag == MoveFlag.CASTLE_KINGSIDE
            )
        return self.move_piece(move.source, move.target, promotion=move.promotion)

    def _classify(self, piece: Piece, source: Position, info: MoveInfo) -> MoveFlag:
        if not isinstance(piece, Pawn):
            return MoveFlag.NORMAL
        if info.en_passant:
            return MoveFlag.EN_PASSANT
        if source.diff_row(info.target) == 2:
            return MoveFlag.DOUBLE_PAWN
        return MoveFlag.NORMAL

    def _promote(self, pawn: Pawn, kind: PieceKind) -> None:
        # The new piece takes over the pawn's identifier and registry slot.
        promoted = Piece.create(kind, pawn.color, pawn.position)
        promoted.id = pawn.id
        promoted.on_board = True
        promoted.board = self
        promoted.has_moved = True
        self._pieces[int(pawn.color)][abs(pawn.id) - 1] = promoted
        pawn.on_board = False
        _LOGGER.debug(
            "Promoted %s pawn on %s to %s", pawn.color, pawn.position, kind.name
        )

    def _record(self, move: Move) -> None:
        self._history.append(move)
        self.switch_turn()
        _LOGGER.debug("Applied %s (%s)", move, move.flag.name)

    # -- Castling -----------------------------------------------------------

    def can_castle(self, color: Color, kingside: bool) -> bool:
        return self._castling_pair(color, kingside) is not None

    def castle(self, color: Color, kingside: bool) -> bool:
        """Castle *color* on the given wing if every castling rule holds."""
        pair = self._castling_pair(color, kingside)
        if pair is None:
            return False
        king, rook = pair
        _, king_col, rook_col = _CASTLING_COLS[kingside]
        start = king.position

        target = Position(start.row, king_col)
        self.relocate_piece(king, target)
        self.teleport_rook_castle(rook, Position(start.row, rook_col))

        flag = MoveFlag.CASTLE_KINGSIDE if kingside else MoveFlag.CASTLE_QUEENSIDE
        self._record(Move(start, target, king, flag))
        return True

    def _castling_pair(self, color: Color, kingside: bool) -> tuple[King, Rook] | None:
        """King and rook for a legal castle, or ``None``.

        Requires: king and rook unmoved on their home cells, every cell
        between them empty, the king not in check, and no cell the king
        crosses or lands on attacked.
        """
        if not self.config.allow_castling:
            return None

        home_row = 7 if color == Color.WHITE else 0
        king = self.king(color)
        if (
            king is None
            or king.has_moved
            or king.position != Position(home_row, _KING_HOME_COL)
        ):
            return None

        rook_col, king_col, _ = _CASTLING_COLS[kingside]
        rook = self.get_piece(Position(home_row, rook_col))
        if not isinstance(rook, Rook) or rook.color != color or rook.has_moved:
            return None

        step = 1 if kingside else -1
        for col in range(_KING_HOME_COL + step, rook_col, step):
            if self.is_occupied(home_row, col):
                return None

        if self._check_system.king_is_in_check(color):
            return None
        opponent = color.opposite
        for col in range(_KING_HOME_COL + step, king_col + step, step):
            if self._check_system.is_attacked(Position(home_row, col), opponent):
                return None
        return king, rook

    # -- Legal move generation ----------------------------------------------

    def get_all_possible_moves(self, color: Color) -> list[Move]:
        """Every legal move for *color*.

        Each shape-legal candidate is replayed on an independent
        :meth:`copy`; it is kept only if *color*'s king is not attacked there.
        """
        moves: list[Move] = []
        for piece in self.pieces(color):
            source = piece.position
            for target in ALL_POSITIONS:
                info = piece.is_valid_move(target)
                if not info.can_move:
                    continue
                lookahead = self.copy()
                lookahead.move_piece(source, target)
                if lookahead.check_system.king_is_in_check(color):
                    continue
                moves.extend(self._candidate_moves(piece, source, info))

        for kingside in (True, False):
            pair = self._castling_pair(color, kingside)
            if pair is not None:
                king = pair[0]
                _, king_col, _ = _CASTLING_COLS[kingside]
                flag = (
                    MoveFlag.CASTLE_KINGSIDE if kingside else MoveFlag.CASTLE_QUEENSIDE
                )
                target = Position(king.position.row, king_col)
                moves.append(Move(king.position, target, king, flag))
        return moves

    def _candidate_moves(
        self, piece: Piece, source: Position, info: MoveInfo
    ) -> list[Move]:
        target = info.target
        if isinstance(piece, Pawn) and target.row == piece.promotion_row:
            return [
                Move(source, target, piece, MoveFlag.PROMOTION, kind)
                for kind in PROMOTION_KINDS
            ]
        return [Move(source, target, piece, self._classify(piece, source, info))]

    def can_be_en_passanted(self, position: Position, capturing_color: Color) -> bool:
        """Can a *capturing_color* pawn take the pawn on *position* en passant?

        The pawn there must be an opposing pawn that made the most recent
        move, and that move must have been its double step.
        """
        if not self.config.allow_en_passant or not self._history:
            return False
        other = self.get_piece(position)
        last = self._history[-1]
        return (
            isinstance(other, Pawn)
            and other.color != capturing_color
            and last.piece_id == other.id
            and last.distance == 2
        )

    # -- Game state ---------------------------------------------------------

    def checkmate(self, color: Color) -> bool:
        in_check = self._check_system.king_is_in_check(color)
        return in_check and not self.get_all_possible_moves(color)

    def stalemate(self, color: Color) -> bool:
        in_check = self._check_system.king_is_in_check(color)
        return not in_check and not self.get_all_possible_moves(color)

    # -- Copying ------------------------------------------------------------

    def copy(self) -> Board:
        """Fully independent snapshot used for lookahead."""
        board = Board(config=self.config)
        board._grid = [row.copy() for row in self._grid]
        twins: dict[int, Piece] = {}
        for color_idx, slots in enumerate(self._pieces):
            for slot, piece in enumerate(slots):
                if piece is None:
                    continue
                twin = piece.clone()
                twin.board = board
                board._pieces[color_idx][slot] = twin
                twins[piece.id] = twin
        board._next_ids = self._next_ids.copy()
        board._white_turn = self._white_turn
        board._history = [self._copy_move(move, twins) for move in self._history]
        return board

    @staticmethod
    def _copy_move(move: Move, twins: dict[int, Piece]) -> Move:
        twin = twins.get(move.piece_id)
        if twin is None or twin.kind != move.piece.kind:
            twin = move.piece.clone()
        return replace(move, piece=twin)

    def __deepcopy__(self, memo: dict[int, object]) -> Board:
        return self.copy()

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._grid == other._grid
            and self._pieces == other._pieces
            and self._next_ids == other._next_ids
            and self._white_turn == other._white_turn
            and self._history == other._history
        )

    def __hash__(self) -> int:
        return hash((self.grid, self._white_turn))

    def __str__(self) -> str:
        """The identifier grid, one row per line."""
        return "".join(
            "".join(f"{value:3}" for value in row) + "\n" for row in self._grid
        )

    def render(self) -> str:
        """Boxed board with Unicode glyphs, rank 8 on top."""
        lines: list[str] = []
        for row in range(8):
            cells = []
            for col in range(8):
                piece = self.get_piece_by_id(self._grid[row][col])
                cells.append(f"[{piece.symbol if piece is not None else ' '}]")
            lines.append(f"{8 - row} {''.join(cells)}")
        lines.append("   A  B  C  D  E  F  G  H")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (
            f"Board(turn={self.turn_color!s}, white={len(self.pieces(Color.WHITE))}, "
            f"black={len(self.pieces(Color.BLACK))}, moves={len(self._history)})"
        )
