"""Coordinate notation: ``e2e4``, ``e2-e4``, ``e7e8q``.

This is the form external engines reply in, and the shortest thing a
voice front end can spell out square by square.
"""

from __future__ import annotations

import re

from chessvox.core.errors import NotationError
from chessvox.core.move import Move
from chessvox.core.move_generator import MoveGenerator
from chessvox.core.piece import promotion_type_from_letter
from chessvox.core.position import Position
from chessvox.core.types import parse_square

_COORD_RE = re.compile(r"^([a-h][1-8])[-x\s]?([a-h][1-8])([qrbnQRBN])?$")


def is_coordinate(text: str) -> bool:
    """Does *text* look like coordinate notation?"""
    return _COORD_RE.match(text.strip()) is not None


def parse_coordinate(position: Position, text: str) -> Move:
    """Turn coordinate text into a :class:`Move` for *position*.

    Only the shape of the move is read here; legality is left to the
    caller.  A promotion letter on a move that does not promote raises
    :class:`NotationError`.
    """
    match = _COORD_RE.match(text.strip())
    if not match:
        raise NotationError(f"Unreadable coordinate move: {text!r}")

    from_sq = parse_square(match[1])
    to_sq = parse_square(match[2])
    promotion = promotion_type_from_letter(match[3]) if match[3] else None

    try:
        return MoveGenerator(position).build_move(from_sq, to_sq, promotion)
    except ValueError as exc:
        raise NotationError(f"{exc}: {text!r}") from None
