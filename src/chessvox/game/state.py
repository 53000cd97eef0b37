"""Game state machine — tracks phase transitions, history and outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chessvox.core.enums import Color, MoveFlag, PieceType
from chessvox.core.move_generator import MoveGenerator
from chessvox.core.notation import (
    STARTING_FEN,
    move_to_san,
    position_from_fen,
    position_to_fen,
)
from chessvox.core.rules import GameOutcome, Rules
from chessvox.game.interfaces import GamePhase

if TYPE_CHECKING:
    from chessvox.core.move import Move
    from chessvox.core.position import Position
    from chessvox.core.types import Square


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    san: str
    fen_after: str
    was_check: bool = False
    was_capture: bool = False


@dataclass(frozen=True, slots=True)
class PendingPromotion:
    """A pawn move to the last rank waiting for its promotion piece.

    ``requested`` is the piece the move text already named, if any.
    """

    from_sq: Square
    to_sq: Square
    color: Color
    requested: PieceType | None = None


@dataclass
class GameState:
    """Manages game lifecycle: phase, outcome, move history, promotion.

    Holds no callbacks and does no I/O.  Calls made in the wrong
    phase raise :class:`RuntimeError`; the engine checks the
    phase first and turns that into a rejection.
    """

    position: Position = field(init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    outcome: GameOutcome = field(default_factory=GameOutcome.in_progress, init=False)
    pending_promotion: PendingPromotion | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game.

        Raises :class:`ValueError` for a bad FEN before anything changes.
        """
        start_fen = fen or STARTING_FEN
        position = position_from_fen(start_fen)

        self.start_fen = start_fen
        self.position = position
        self.phase = GamePhase.AWAITING_MOVE
        self.outcome = GameOutcome.in_progress()
        self.pending_promotion = None
        self.move_history.clear()

        # A position can already be decided when it is loaded.
        self._check_game_over()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for legality check.
        """
        self._require(GamePhase.AWAITING_MOVE)
        if move.flag == MoveFlag.PROMOTION and move.promotion is None:
            raise ValueError("Promotion move without a promotion piece")
        return self._execute(move)

    def begin_promotion(self, move: Move, requested: PieceType | None = None) -> None:
        """Suspend *move* until its promotion piece is known."""
        self._require(GamePhase.AWAITING_MOVE)
        if move.flag != MoveFlag.PROMOTION:
            raise ValueError(f"{move} is not a promotion")
        self.pending_promotion = PendingPromotion(
            from_sq=move.from_sq,
            to_sq=move.to_sq,
            color=self.position.side_to_move,
            requested=requested if requested is not None else move.promotion,
        )
        self.phase = GamePhase.AWAITING_PROMOTION

    def complete_promotion(self, piece_type: PieceType) -> MoveRecord:
        """Play the pending promotion with *piece_type*."""
        self._require(GamePhase.AWAITING_PROMOTION)
        pending = self.pending_promotion
        assert pending is not None

        move = MoveGenerator(self.position).build_move(
            pending.from_sq, pending.to_sq, piece_type
        )
        self.pending_promotion = None
        self.phase = GamePhase.AWAITING_MOVE
        return self._execute(move)

    def cancel_promotion(self) -> None:
        """Forget the pending promotion; the pawn never left its square."""
        self._require(GamePhase.AWAITING_PROMOTION)
        self.pending_promotion = None
        self.phase = GamePhase.AWAITING_MOVE

    def undo_last_move(self) -> Move | None:
        """Undo the last move. Returns the undone Move, or None if empty."""
        self._require(GamePhase.AWAITING_MOVE)
        if not self.move_history:
            return None

        record = self.move_history.pop()
        self.position.unmake_move(record.move)
        return record.move

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def sans(self) -> tuple[str, ...]:
        return tuple(record.san for record in self.move_history)

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        gen = MoveGenerator(self.position)
        return gen.generate_legal_moves()

    # ── Internal ─────────────────────────────────────────────────────────

    def _execute(self, move: Move) -> MoveRecord:
        board = self.position.board
        was_capture = board[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT

        san = move_to_san(self.position, move)
        self.position.make_move(move)

        record = MoveRecord(
            move=move,
            san=san,
            fen_after=position_to_fen(self.position),
            was_check=san.endswith(("+", "#")),
            was_capture=was_capture,
        )
        self.move_history.append(record)

        self._check_game_over()
        return record

    def _require(self, phase: GamePhase) -> None:
        if self.phase != phase:
            raise RuntimeError(
                f"Expected phase {phase.name}, game is in {self.phase.name}"
            )

    def _check_game_over(self) -> None:
        outcome = Rules.outcome(self.position)
        if outcome.is_over:
            self.outcome = outcome
            self.phase = GamePhase.GAME_OVER
