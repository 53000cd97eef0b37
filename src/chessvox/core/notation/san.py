"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

import re

from chessvox.core import geometry
from chessvox.core.enums import MoveFlag, PieceType
from chessvox.core.errors import AmbiguousMoveError, IllegalMoveError, NotationError
from chessvox.core.move import Move
from chessvox.core.move_generator import MoveGenerator
from chessvox.core.piece import (
    piece_letter,
    piece_type_from_letter,
    promotion_type_from_letter,
)
from chessvox.core.position import Position
from chessvox.core.types import Square, file_of, parse_square, rank_of, square_name

_CASTLE_RE = re.compile(r"^(?:O-O-O|0-0-0)$|^(?:O-O|0-0)$", re.IGNORECASE)
_PIECE_RE = re.compile(r"^([NBRQK])([a-h])?([1-8])?x?([a-h][1-8])$")
_PAWN_RE = re.compile(r"^(?:([a-h])x)?([a-h][1-8])(?:=?([NBRQnbrq]))?$")
_EN_PASSANT_SUFFIX = re.compile(r"\s*e\.p\.$")


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    board = position.board
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {square_name(move.from_sq)}")

    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        is_capture = board[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT

        if piece.piece_type == PieceType.PAWN:
            san = square_name(move.from_sq)[0] + "x" if is_capture else ""
        else:
            san = piece_letter(piece.piece_type)
            san += _disambiguation(position, move, piece.piece_type)
            if is_capture:
                san += "x"

        san += square_name(move.to_sq)

        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            san += "=" + piece_letter(move.promotion)

    return san + _check_suffix(position, move)


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    """File, rank or full square of the mover when a twin could also go there."""
    gen = MoveGenerator(position)
    rivals = [
        sq
        for sq in position.board.pieces(position.side_to_move, piece_type)
        if sq != move.from_sq and gen.is_legal(sq, move.to_sq)
    ]
    if not rivals:
        return ""
    if not any(file_of(sq) == file_of(move.from_sq) for sq in rivals):
        return square_name(move.from_sq)[0]
    if not any(rank_of(sq) == rank_of(move.from_sq) for sq in rivals):
        return square_name(move.from_sq)[1]
    return square_name(move.from_sq)


def _check_suffix(position: Position, move: Move) -> str:
    after = position.copy()
    after.make_move(move)
    gen = MoveGenerator(after)
    if not gen.is_in_check(after.side_to_move):
        return ""
    return "+" if gen.has_legal_moves() else "#"


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*.

    Raises :class:`NotationError` for unreadable text,
    :class:`IllegalMoveError` when no piece can legally play it and
    :class:`AmbiguousMoveError` when more than one can.
    """
    clean = _EN_PASSANT_SUFFIX.sub("", san.strip()).rstrip("+#!?")
    gen = MoveGenerator(position)
    color = position.side_to_move

    if _CASTLE_RE.match(clean):
        row = geometry.home_row(color)
        to_col = 2 if clean.count("-") == 2 else 6
        king_sq, to_sq = Square(row, 4), Square(row, to_col)
        violation = gen.first_violation(king_sq, to_sq)
        if violation is not None or gen.castle_side(king_sq, to_sq) is None:
            raise IllegalMoveError(f"Illegal move: {san}", violation)
        return gen.build_move(king_sq, to_sq)

    match = _PIECE_RE.match(clean)
    if match:
        piece_type = piece_type_from_letter(match[1])
        from_file = ord(match[2]) - ord("a") if match[2] else None
        from_rank = int(match[3]) - 1 if match[3] else None
        to_sq = parse_square(match[4])
        promotion = None
    else:
        match = _PAWN_RE.match(clean)
        if not match:
            raise NotationError(f"Unreadable move: {san!r}")
        piece_type = PieceType.PAWN
        to_sq = parse_square(match[2])
        # A pawn without a capture file moves straight up its own file.
        from_file = ord(match[1]) - ord("a") if match[1] else file_of(to_sq)
        from_rank = None
        promotion = promotion_type_from_letter(match[3]) if match[3] else None

    candidates = [
        sq
        for sq in position.board.pieces(color, piece_type)
        if (from_file is None or file_of(sq) == from_file)
        and (from_rank is None or rank_of(sq) == from_rank)
        and gen.is_legal(sq, to_sq)
    ]

    if not candidates:
        raise IllegalMoveError(f"Illegal move: {san}")
    if len(candidates) > 1:
        # A full-square hint names one square, so it can never match twice.
        assert from_file is None or from_rank is None
        names = ", ".join(square_name(sq) for sq in candidates)
        raise AmbiguousMoveError(f"Ambiguous move: {san} ({names})")

    try:
        return gen.build_move(candidates[0], to_sq, promotion)
    except ValueError as exc:
        raise NotationError(f"{exc}: {san!r}") from None
