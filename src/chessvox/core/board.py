"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from chessvox.core.enums import Color, MoveFlag, PieceType
from chessvox.core.move import Move
from chessvox.core.piece import Piece
from chessvox.core.types import Square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Castling rook columns: (from, to) per flag.
ROOK_CASTLE_COLUMNS: dict[MoveFlag, tuple[int, int]] = {
    MoveFlag.CASTLE_KINGSIDE: (7, 5),
    MoveFlag.CASTLE_QUEENSIDE: (0, 3),
}


class Board:
    """Mutable 8x8 grid of optional pieces with a king-square cache."""

    __slots__ = ("_grid", "_king_squares")

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._grid[sq[0]][sq[1]]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        row, col = sq
        old_piece = self._grid[row][col]
        if (
            old_piece is not None
            and old_piece.piece_type == PieceType.KING
            and self._king_squares[int(old_piece.color)] == (row, col)
        ):
            self._king_squares[int(old_piece.color)] = None

        self._grid[row][col] = piece

        if piece is not None and piece.piece_type == PieceType.KING:
            self._king_squares[int(piece.color)] = Square(row, col)

    def is_empty(self, sq: Square) -> bool:
        return self._grid[sq[0]][sq[1]] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied square, row by row."""
        for row, cells in enumerate(self._grid):
            for col, piece in enumerate(cells):
                if piece is not None:
                    yield Square(row, col), piece

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [
            sq
            for sq, piece in self.occupied()
            if piece.color == color and piece.piece_type == piece_type
        ]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [sq for sq, piece in self.occupied() if piece.color == color]

    def count(self, color: Color, piece_type: PieceType) -> int:
        return len(self.pieces(color, piece_type))

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Mutation / copying -------------------------------------------------

    def execute(self, move: Move) -> Piece | None:
        """Move pieces for *move* without any legality checking.

        Handles the rook slide of castling, removal of an en-passant
        victim and promotion placement.  Returns the captured piece.
        """
        piece = self[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            # The victim sits beside the mover, behind the target square.
            capture_sq = Square(move.from_sq[0], move.to_sq[1])
        captured = self[capture_sq]
        if captured is not None:
            self[capture_sq] = None

        placed = piece
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        self[move.from_sq] = None
        self[move.to_sq] = placed

        if move.flag in ROOK_CASTLE_COLUMNS:
            row = move.from_sq[0]
            rook_from, rook_to = ROOK_CASTLE_COLUMNS[move.flag]
            self[Square(row, rook_to)] = self[Square(row, rook_from)]
            self[Square(row, rook_from)] = None

        return captured

    def copy(self) -> Board:
        """Independent snapshot; pieces are immutable so rows are enough."""
        b = Board()
        b._grid = [row.copy() for row in self._grid]
        b._king_squares = self._king_squares.copy()
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]
        self._king_squares = [None, None]

    # -- Serialisation ------------------------------------------------------

    def placement(self) -> str:
        """FEN piece-placement field, rank 8 first."""
        rows: list[str] = []
        for cells in self._grid:
            empty = 0
            text = ""
            for piece in cells:
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    text += str(empty)
                    empty = 0
                text += str(piece)
            if empty:
                text += str(empty)
            rows.append(text)
        return "/".join(rows)

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b[Square(0, col)] = Piece(Color.BLACK, pt)
            b[Square(1, col)] = Piece(Color.BLACK, PieceType.PAWN)
            b[Square(6, col)] = Piece(Color.WHITE, PieceType.PAWN)
            b[Square(7, col)] = Piece(Color.WHITE, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row, cells in enumerate(self._grid):
            text = " ".join(str(p) if p else "." for p in cells)
            rows.append(f"{8 - row} {text}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
