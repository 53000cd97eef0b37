"""Core enumerations and flags for the rules engine."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveFlag(IntEnum):
    """Special move classification."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5


class CastleSide(IntEnum):
    KINGSIDE = 0
    QUEENSIDE = 1


class CastlingRights(IntFlag):
    """Bitmask of pieces that still have not moved.

    Each colour carries three independent bits: the king, the kingside
    rook and the queenside rook.  Bits are only ever cleared.
    """

    NONE = 0
    WHITE_KING = auto()
    WHITE_KINGSIDE_ROOK = auto()
    WHITE_QUEENSIDE_ROOK = auto()
    BLACK_KING = auto()
    BLACK_KINGSIDE_ROOK = auto()
    BLACK_QUEENSIDE_ROOK = auto()

    WHITE_KINGSIDE = WHITE_KING | WHITE_KINGSIDE_ROOK
    WHITE_QUEENSIDE = WHITE_KING | WHITE_QUEENSIDE_ROOK
    BLACK_KINGSIDE = BLACK_KING | BLACK_KINGSIDE_ROOK
    BLACK_QUEENSIDE = BLACK_KING | BLACK_QUEENSIDE_ROOK

    WHITE_ALL = WHITE_KING | WHITE_KINGSIDE_ROOK | WHITE_QUEENSIDE_ROOK
    BLACK_ALL = BLACK_KING | BLACK_KINGSIDE_ROOK | BLACK_QUEENSIDE_ROOK
    ALL = WHITE_ALL | BLACK_ALL

    @staticmethod
    def for_color(color: Color) -> CastlingRights:
        """All three bits belonging to *color*."""
        return (
            CastlingRights.WHITE_ALL
            if color == Color.WHITE
            else CastlingRights.BLACK_ALL
        )

    @staticmethod
    def required(color: Color, side: CastleSide) -> CastlingRights:
        """Bits that must all be set for *color* to castle on *side*."""
        if color == Color.WHITE:
            if side == CastleSide.KINGSIDE:
                return CastlingRights.WHITE_KINGSIDE
            return CastlingRights.WHITE_QUEENSIDE
        if side == CastleSide.KINGSIDE:
            return CastlingRights.BLACK_KINGSIDE
        return CastlingRights.BLACK_QUEENSIDE

    def allows(self, color: Color, side: CastleSide) -> bool:
        needed = CastlingRights.required(color, side)
        return (self & needed) == needed


class Violation(IntEnum):
    """First failed legality check for a proposed move, in check order."""

    OUT_OF_RANGE = auto()
    NO_PIECE = auto()
    WRONG_SIDE = auto()
    OWN_PIECE_AT_TARGET = auto()
    BAD_GEOMETRY = auto()
    CASTLING_NOT_ALLOWED = auto()
    KING_LEFT_IN_CHECK = auto()

    def describe(self) -> str:
        return _VIOLATION_TEXT[self]


_VIOLATION_TEXT: dict[Violation, str] = {
    Violation.OUT_OF_RANGE: "square is off the board",
    Violation.NO_PIECE: "no piece on the source square",
    Violation.WRONG_SIDE: "piece does not belong to the side to move",
    Violation.OWN_PIECE_AT_TARGET: "destination holds a piece of the same colour",
    Violation.BAD_GEOMETRY: "piece cannot move that way",
    Violation.CASTLING_NOT_ALLOWED: "castling is not allowed",
    Violation.KING_LEFT_IN_CHECK: "move would leave the king in check",
}


class OutcomeKind(IntEnum):
    """How the game stands (or ended)."""

    IN_PROGRESS = 0
    CHECKMATE = 1
    STALEMATE = 2
    FIFTY_MOVE_RULE = 3
    THREEFOLD_REPETITION = 4
