"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessvox.core.enums import Color, OutcomeKind
from chessvox.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessvox.core.position import Position

FIFTY_MOVE_HALFMOVES = 100
REPETITION_LIMIT = 3

_DESCRIPTIONS: dict[OutcomeKind, str] = {
    OutcomeKind.IN_PROGRESS: "game in progress",
    OutcomeKind.CHECKMATE: "checkmate",
    OutcomeKind.STALEMATE: "draw by stalemate",
    OutcomeKind.FIFTY_MOVE_RULE: "draw by the fifty-move rule",
    OutcomeKind.THREEFOLD_REPETITION: "draw by threefold repetition",
}


@dataclass(frozen=True, slots=True)
class GameOutcome:
    """How a game stands.  Anything but ``IN_PROGRESS`` is terminal."""

    kind: OutcomeKind = OutcomeKind.IN_PROGRESS
    winner: Color | None = None

    @classmethod
    def in_progress(cls) -> GameOutcome:
        return cls()

    @classmethod
    def checkmate(cls, winner: Color) -> GameOutcome:
        return cls(OutcomeKind.CHECKMATE, winner)

    @property
    def is_over(self) -> bool:
        return self.kind != OutcomeKind.IN_PROGRESS

    @property
    def is_draw(self) -> bool:
        return self.is_over and self.winner is None

    @property
    def result_token(self) -> str:
        """PGN-style result: ``1-0``, ``0-1``, ``1/2-1/2`` or ``*``."""
        if not self.is_over:
            return "*"
        if self.winner == Color.WHITE:
            return "1-0"
        if self.winner == Color.BLACK:
            return "0-1"
        return "1/2-1/2"

    def __str__(self) -> str:
        text = _DESCRIPTIONS[self.kind]
        if self.winner is not None:
            text += f", {self.winner} wins"
        return text


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return not MoveGenerator(position).has_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return not MoveGenerator(position).has_legal_moves()

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= FIFTY_MOVE_HALFMOVES

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= REPETITION_LIMIT

    @staticmethod
    def outcome(position: Position) -> GameOutcome:
        """Evaluate the position for the side to move.

        Mate and stalemate are decided first; the fifty-move and repetition
        draws apply even when legal moves remain.
        """
        gen = MoveGenerator(position)

        if not gen.has_legal_moves():
            if gen.is_in_check(position.side_to_move):
                return GameOutcome.checkmate(position.side_to_move.opposite)
            return GameOutcome(OutcomeKind.STALEMATE)

        if Rules.is_fifty_move_rule(position):
            return GameOutcome(OutcomeKind.FIFTY_MOVE_RULE)

        if Rules.is_threefold_repetition(position):
            return GameOutcome(OutcomeKind.THREEFOLD_REPETITION)

        return GameOutcome.in_progress()
