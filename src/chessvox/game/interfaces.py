"""Abstract interfaces and result types for the game layer.

Collaborators (UI, speech front end, AI bridge, network relay) depend on
:class:`IGameEngine`, not on the concrete engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chessvox.core.board import Board
    from chessvox.core.enums import Color, PieceType
    from chessvox.core.rules import GameOutcome
    from chessvox.core.types import Square


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    AWAITING_PROMOTION = auto()
    GAME_OVER = auto()


# ── Move results ─────────────────────────────────────────────────────────────


class MoveStatus(IntEnum):
    APPLIED = auto()
    PROMOTION_PENDING = auto()
    REJECTED = auto()


class RejectReason(IntEnum):
    """Why a move request was turned down."""

    MALFORMED = auto()  # unreadable text or off-board squares
    ILLEGAL = auto()
    OUT_OF_SEQUENCE = auto()  # promotion pending or game over
    AMBIGUOUS = auto()


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of a move request.

    ``san`` is set once a move has been applied; ``reason`` and
    ``message`` describe a rejection.
    """

    status: MoveStatus
    san: str | None = None
    reason: RejectReason | None = None
    message: str = ""

    @classmethod
    def applied(cls, san: str) -> MoveResult:
        return cls(MoveStatus.APPLIED, san=san)

    @classmethod
    def promotion_pending(cls) -> MoveResult:
        return cls(MoveStatus.PROMOTION_PENDING)

    @classmethod
    def rejected(cls, reason: RejectReason, message: str) -> MoveResult:
        return cls(MoveStatus.REJECTED, reason=reason, message=message)

    @property
    def ok(self) -> bool:
        """True unless the request was rejected."""
        return self.status != MoveStatus.REJECTED


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IGameEngine(ABC):
    """Interface for the rules engine that owns one game."""

    @abstractmethod
    def new_game(self, fen: str | None = None) -> None:
        """Set up a new game from the start position or *fen*."""

    @abstractmethod
    def propose_move(
        self,
        source: str | Square,
        target: str | Square | None = None,
    ) -> MoveResult:
        """Propose a move as two squares or a single notation string."""

    @abstractmethod
    def resolve_promotion(self, piece: PieceType | str | None = None) -> MoveResult:
        """Finish a pending promotion with the chosen piece."""

    @abstractmethod
    def cancel_promotion(self) -> bool:
        """Drop a pending promotion. Returns True if one was pending."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Undo the last move. Returns True on success."""

    @abstractmethod
    def to_fen(self) -> str:
        """Position-exchange string for an external engine."""

    @property
    @abstractmethod
    def board(self) -> Board: ...

    @property
    @abstractmethod
    def current_side(self) -> Color: ...

    @property
    @abstractmethod
    def move_history(self) -> tuple[str, ...]: ...

    @property
    @abstractmethod
    def outcome(self) -> GameOutcome: ...
