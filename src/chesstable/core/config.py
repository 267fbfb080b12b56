"""Rule switches carried by a board and all of its lookahead copies."""

from __future__ import annotations

from dataclasses import dataclass

from chesstable.core.enums import PieceKind

PROMOTION_KINDS: tuple[PieceKind, ...] = (
    PieceKind.QUEEN,
    PieceKind.ROOK,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
)


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Optional rules and defaults applied by :class:`~chesstable.core.board.Board`."""

    promotion_kind: PieceKind = PieceKind.QUEEN
    allow_castling: bool = True
    allow_en_passant: bool = True

    def __post_init__(self) -> None:
        if self.promotion_kind not in PROMOTION_KINDS:
            raise ValueError(f"Invalid promotion kind: {self.promotion_kind!r}")
