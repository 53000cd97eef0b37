"""Exceptions raised by the notation layer.

All derive from :class:`ValueError`, matching how the FEN and square
helpers report bad input.
"""

from __future__ import annotations

from chessvox.core.enums import Violation


class NotationError(ValueError):
    """Text that cannot be read as a move at all."""


class IllegalMoveError(ValueError):
    """Well-formed move text with no legal reading in the position."""

    def __init__(self, message: str, violation: Violation | None = None) -> None:
        super().__init__(message)
        self.violation = violation


class AmbiguousMoveError(ValueError):
    """Move text that more than one legal move matches."""
