"""Notation package: FEN / SAN / coordinate parsing and serialization."""

from chessvox.core.errors import NotationError
from chessvox.core.move import Move
from chessvox.core.notation.coordinate import is_coordinate, parse_coordinate
from chessvox.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessvox.core.notation.san import move_to_san, parse_san
from chessvox.core.position import Position


def parse_move(position: Position, text: str) -> Move:
    """Read *text* as coordinate notation if it looks like it, else as SAN."""
    if not isinstance(text, str) or not text.strip():
        raise NotationError(f"Empty or non-text move: {text!r}")
    if is_coordinate(text):
        return parse_coordinate(position, text)
    return parse_san(position, text)


__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "is_coordinate",
    "parse_coordinate",
    "parse_move",
]
