"""Move value object (coordinate-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessvox.core.enums import MoveFlag, PieceType
from chessvox.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    ``promotion`` may be ``None`` on a ``PROMOTION`` move while the choice
    of piece is still pending.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    @property
    def is_promotion(self) -> bool:
        return self.flag == MoveFlag.PROMOTION

    def with_promotion(self, piece_type: PieceType) -> Move:
        """Copy of this move with the promotion piece filled in."""
        return Move(self.from_sq, self.to_sq, self.flag, piece_type)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """Four or five character coordinate notation, e.g. 'e7e8q'."""
        return str(self)
