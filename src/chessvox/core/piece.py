"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessvox.core.enums import Color, PieceType

# Upper-case letter per piece type; FEN lower-cases it for black.
_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_TYPES_BY_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}

_UNICODE_WHITE = "♙♘♗♖♕♔"
_UNICODE_BLACK = "♟♞♝♜♛♚"

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


def piece_letter(piece_type: PieceType) -> str:
    """Upper-case SAN letter, e.g. KNIGHT → 'N'."""
    return _LETTERS[piece_type]


def piece_type_from_letter(letter: str) -> PieceType:
    """Piece type for a letter in either case, e.g. 'q' → QUEEN."""
    try:
        return _TYPES_BY_LETTER[letter.upper()]
    except KeyError:
        raise ValueError(f"Invalid piece letter: {letter!r}") from None


def promotion_type_from_letter(letter: str) -> PieceType:
    """Like :func:`piece_type_from_letter` but only for promotion pieces."""
    piece_type = piece_type_from_letter(letter)
    if piece_type not in PROMOTION_TYPES:
        raise ValueError(f"Cannot promote to {letter!r}")
    return piece_type


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        if len(char) != 1 or char.upper() not in _TYPES_BY_LETTER:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, _TYPES_BY_LETTER[char.upper()])

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        table = _UNICODE_WHITE if self.color == Color.WHITE else _UNICODE_BLACK
        return table[int(self.piece_type) - 1]
