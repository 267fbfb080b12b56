"""Move history records and legality query results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chesstable.core.enums import MoveFlag, PieceKind
from chesstable.core.position import Position

if TYPE_CHECKING:
    from chesstable.core.pieces import Piece

_PROMO_CHARS: dict[PieceKind, str] = {
    PieceKind.KNIGHT: "n",
    PieceKind.BISHOP: "b",
    PieceKind.ROOK: "r",
    PieceKind.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable log entry for a single move.

    ``piece`` is the mover as it was when the move was recorded. Two moves
    compare equal when they share squares, flag, promotion and mover id.
    """

    source: Position
    target: Position
    piece: Piece = field(compare=False, hash=False)
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceKind | None = None
    piece_id: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "piece_id", self.piece.id)

    @property
    def distance(self) -> float:
        """Distance travelled; exactly 2.0 for a pawn double step."""
        return self.source.distance(self.target)

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    def __str__(self) -> str:
        base = f"{self.source}{self.target}".lower()
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base


@dataclass(slots=True)
class MoveInfo:
    """Outcome of asking a piece whether it may move to ``target``."""

    target: Position
    can_move: bool = False
    is_attack: bool = False
    blocked: bool = False
    en_passant: bool = False

    def __bool__(self) -> bool:
        return self.can_move
