"""FEN parsing and serialization (the position-exchange string)."""

from __future__ import annotations

from chessvox.core import geometry
from chessvox.core.board import Board
from chessvox.core.enums import CastlingRights, Color, PieceType
from chessvox.core.piece import Piece
from chessvox.core.position import Position, castling_field
from chessvox.core.types import Square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_SIDES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Every field is validated; a position that could not arise in a game
    (wrong king count, the side not to move in check, an en passant
    target no double pawn push explains) raises :class:`ValueError`.
    """
    fields = fen.split()
    if not (4 <= len(fields) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    board = _parse_placement(fields[0])
    side = _SIDES.get(fields[1])
    if side is None:
        raise ValueError(f"Invalid FEN side-to-move field: {fields[1]!r}")
    castling = _parse_castling(fields[2])
    ep = _parse_en_passant(board, side, fields[3])
    halfmove, fullmove = _parse_clocks(fields[4:])

    if geometry.is_in_check(board, side.opposite):
        raise ValueError(f"Invalid FEN: {side.opposite} is in check but not to move")

    return Position(board, side, castling, ep, halfmove, fullmove)


def _parse_placement(placement: str) -> Board:
    """Build the board from the placement field, rank 8 (row 0) first."""
    rows = placement.split("/")
    if len(rows) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {placement!r}")

    board = Board()
    for row, text in enumerate(rows):
        cells: list[Piece | None] = []
        for ch in text:
            if ch in "12345678":
                cells.extend([None] * int(ch))
            else:
                cells.append(Piece.from_char(ch))
        if len(cells) != 8:
            raise ValueError(f"Invalid FEN rank width in {text!r}")
        for col, piece in enumerate(cells):
            if piece is not None:
                board[Square(row, col)] = piece

    for color in Color:
        if board.count(color, PieceType.KING) != 1:
            raise ValueError(f"Invalid FEN: {color} must have exactly one king")
    return board


def _parse_castling(text: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if text == "-":
        return castling
    if len(set(text)) != len(text) or any(ch not in _CASTLING_CHARS for ch in text):
        raise ValueError(f"Invalid FEN castling field: {text!r}")
    for ch in text:
        castling |= _CASTLING_CHARS[ch]
    return castling


def _parse_en_passant(board: Board, side: Color, text: str) -> Square | None:
    """The target must sit behind an enemy pawn that just moved two squares."""
    if text == "-":
        return None
    target = parse_square(text)
    step = geometry.pawn_direction(side)
    # Seen from the mover: the pawn's start square is ahead of the target,
    # the pawn itself one row behind it.
    if target.row != geometry.pawn_start_row(side.opposite) - step:
        raise ValueError(f"Invalid FEN en-passant square for side-to-move: {text!r}")

    start = Square(target.row + step, target.col)
    landed = Square(target.row - step, target.col)
    if (
        board[landed] != Piece(side.opposite, PieceType.PAWN)
        or not board.is_empty(target)
        or not board.is_empty(start)
    ):
        raise ValueError(
            f"Invalid FEN en-passant square, no double pawn push: {text!r}"
        )
    return target


def _parse_clocks(fields: list[str]) -> tuple[int, int]:
    try:
        halfmove = int(fields[0]) if fields else 0
        fullmove = int(fields[1]) if len(fields) > 1 else 1
    except ValueError:
        raise ValueError(f"Invalid FEN clock fields: {' '.join(fields)!r}") from None
    if halfmove < 0:
        raise ValueError(f"Invalid FEN halfmove clock: {halfmove}")
    if fullmove < 1:
        raise ValueError(f"Invalid FEN fullmove number: {fullmove}")
    return halfmove, fullmove


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"
    return (
        f"{pos.board.placement()} {side_str} {castling_field(pos.castling)} "
        f"{ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
    )
