"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessvox.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from chessvox.core.board import Board
from chessvox.core.enums import (
    CastleSide,
    CastlingRights,
    Color,
    MoveFlag,
    OutcomeKind,
    PieceType,
    Violation,
)
from chessvox.core.errors import AmbiguousMoveError, IllegalMoveError, NotationError
from chessvox.core.move import Move
from chessvox.core.move_generator import MoveGenerator
from chessvox.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_coordinate,
    parse_move,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chessvox.core.piece import Piece
from chessvox.core.position import Position
from chessvox.core.rules import GameOutcome, Rules
from chessvox.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastleSide",
    "CastlingRights",
    "Color",
    "MoveFlag",
    "OutcomeKind",
    "PieceType",
    "Violation",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "GameOutcome",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Errors
    "AmbiguousMoveError",
    "IllegalMoveError",
    "NotationError",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_coordinate",
    "parse_move",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
