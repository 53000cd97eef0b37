"""Attack geometry shared by legality checks and check detection.

Nothing here asks whether a move would expose the mover's own king, so
check detection can call it without recursing into the legality
evaluator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessvox.core.enums import Color, PieceType
from chessvox.core.types import Square

if TYPE_CHECKING:
    from chessvox.core.board import Board


def pawn_direction(color: Color) -> int:
    """Row step of a forward pawn move (white moves towards row 0)."""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color == Color.WHITE else 7


def home_row(color: Color) -> int:
    """Row of *color*'s back rank."""
    return 7 if color == Color.WHITE else 0


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def path_clear(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Are all squares strictly between two aligned squares empty?"""
    d_row = _sign(to_sq[0] - from_sq[0])
    d_col = _sign(to_sq[1] - from_sq[1])
    row, col = from_sq[0] + d_row, from_sq[1] + d_col
    while (row, col) != (to_sq[0], to_sq[1]):
        if not board.is_empty(Square(row, col)):
            return False
        row += d_row
        col += d_col
    return True


def attacks(board: Board, from_sq: Square, target: Square) -> bool:
    """Does the piece on *from_sq* attack *target*?

    Pawns attack only their two forward diagonals.  Sliding pieces need a
    clear path; the target square itself may hold anything.
    """
    piece = board[from_sq]
    if piece is None or from_sq == target:
        return False

    d_row = target[0] - from_sq[0]
    d_col = target[1] - from_sq[1]
    abs_row, abs_col = abs(d_row), abs(d_col)
    piece_type = piece.piece_type

    if piece_type == PieceType.PAWN:
        return d_row == pawn_direction(piece.color) and abs_col == 1
    if piece_type == PieceType.KNIGHT:
        return (abs_row, abs_col) in ((1, 2), (2, 1))
    if piece_type == PieceType.KING:
        return max(abs_row, abs_col) == 1

    straight = d_row == 0 or d_col == 0
    diagonal = abs_row == abs_col
    if piece_type == PieceType.ROOK and not straight:
        return False
    if piece_type == PieceType.BISHOP and not diagonal:
        return False
    if piece_type == PieceType.QUEEN and not (straight or diagonal):
        return False
    return path_clear(board, from_sq, target)


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    return any(
        piece.color == by_color and attacks(board, from_sq, sq)
        for from_sq, piece in board.occupied()
    )


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return is_square_attacked(board, board.king_square(color), color.opposite)
