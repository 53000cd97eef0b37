"""GameEngine — the single entry point collaborators drive a game through.

Coordinates: GameState, MoveGenerator and the notation parsers.
Emits events via simple callbacks so a UI, a speech front end or a
network relay can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessvox.core.board import Board
from chessvox.core.enums import Color, PieceType
from chessvox.core.errors import AmbiguousMoveError, IllegalMoveError, NotationError
from chessvox.core.move import Move
from chessvox.core.move_generator import MoveGenerator
from chessvox.core.notation import is_coordinate, parse_move, position_to_fen
from chessvox.core.piece import PROMOTION_TYPES, Piece, promotion_type_from_letter
from chessvox.core.rules import GameOutcome
from chessvox.core.types import Square, is_valid_square, parse_square, square_name
from chessvox.game.interfaces import (
    GamePhase,
    IGameEngine,
    MoveResult,
    MoveStatus,
    RejectReason,
)
from chessvox.game.state import GameState, MoveRecord, PendingPromotion

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, "GameState"], None]  # move, san, state
GameOverCallback = Callable[[GameOutcome], None]
PhaseCallback = Callable[[GamePhase], None]
PromotionCallback = Callable[[PendingPromotion], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_promotion_pending: list[PromotionCallback] = field(default_factory=list)


SquareLike = str | Square | tuple[int, int]


# ── Engine ───────────────────────────────────────────────────────────────────


class GameEngine(IGameEngine):
    """Owns one game: validates and applies moves, tracks promotion and
    game end, notifies listeners.

    Every move operation answers with a :class:`MoveResult`; bad input
    never raises past this class and never changes the game.  Methods are
    meant to be called from the single thread that owns the game.
    """

    __slots__ = ("_state", "events")

    def __init__(self, fen: str | None = None) -> None:
        self._state = GameState()
        self.events = GameEvents()
        self.new_game(fen)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> Board:
        """A snapshot of the board; changing it does not affect the game."""
        return self._state.position.board.copy()

    @property
    def current_side(self) -> Color:
        return self._state.side_to_move

    @property
    def move_history(self) -> tuple[str, ...]:
        return self._state.sans

    @property
    def outcome(self) -> GameOutcome:
        return self._state.outcome

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def pending_promotion(self) -> PendingPromotion | None:
        return self._state.pending_promotion

    @property
    def halfmove_clock(self) -> int:
        return self._state.position.halfmove_clock

    @property
    def fingerprint(self) -> str:
        return self._state.position.fingerprint()

    def piece_at(self, square: SquareLike) -> Piece | None:
        return self._state.position.board[_to_square(square)]

    def is_in_check(self, color: Color | None = None) -> bool:
        """Is *color* (default: the side to move) in check?"""
        gen = MoveGenerator(self._state.position)
        return gen.is_in_check(self.current_side if color is None else color)

    def is_legal(self, source: SquareLike, target: SquareLike) -> bool:
        """May the side to move play *source* → *target* right now?"""
        if self._state.phase != GamePhase.AWAITING_MOVE:
            return False
        try:
            from_sq, to_sq = _to_square(source), _to_square(target)
        except NotationError:
            return False
        return MoveGenerator(self._state.position).is_legal(from_sq, to_sq)

    def legal_moves(self) -> list[Move]:
        if self._state.phase != GamePhase.AWAITING_MOVE:
            return []
        return self._state.legal_moves()

    def legal_destinations(self, square: SquareLike) -> list[Square]:
        if self._state.phase != GamePhase.AWAITING_MOVE:
            return []
        try:
            from_sq = _to_square(square)
        except NotationError:
            return []
        return MoveGenerator(self._state.position).legal_destinations(from_sq)

    def to_fen(self) -> str:
        return position_to_fen(self._state.position)

    # ── IGameEngine impl ─────────────────────────────────────────────────

    def new_game(self, fen: str | None = None) -> None:
        state = GameState()
        state.setup(fen)
        self._state = state
        _LOGGER.debug("New game from %s", state.start_fen)

        self._emit_phase(state.phase)
        if state.is_game_over:
            self._emit_game_over(state.outcome, phase_sent=True)

    def propose_move(
        self,
        source: SquareLike,
        target: SquareLike | None = None,
    ) -> MoveResult:
        refusal = self._refuse_unless(GamePhase.AWAITING_MOVE)
        if refusal is not None:
            return refusal

        try:
            move = self._read_move(source, target)
        except NotationError as exc:
            return self._reject(RejectReason.MALFORMED, str(exc))
        except AmbiguousMoveError as exc:
            return self._reject(RejectReason.AMBIGUOUS, str(exc))
        except IllegalMoveError as exc:
            return self._reject(RejectReason.ILLEGAL, str(exc))

        if move.is_promotion:
            self._state.begin_promotion(move)
            pending = self._state.pending_promotion
            assert pending is not None
            _LOGGER.debug(
                "Promotion pending: %s -> %s",
                square_name(pending.from_sq),
                square_name(pending.to_sq),
            )
            self._emit_phase(GamePhase.AWAITING_PROMOTION)
            for cb in self.events.on_promotion_pending:
                cb(pending)
            return MoveResult.promotion_pending()

        return self._finish(self._state.apply_move(move))

    def resolve_promotion(self, piece: PieceType | str | None = None) -> MoveResult:
        refusal = self._refuse_unless(GamePhase.AWAITING_PROMOTION)
        if refusal is not None:
            return refusal

        pending = self._state.pending_promotion
        assert pending is not None
        if piece is None:
            if pending.requested is None:
                return self._reject(
                    RejectReason.MALFORMED, "A promotion piece is required"
                )
            piece_type = pending.requested
        else:
            try:
                piece_type = _to_promotion_type(piece)
            except ValueError as exc:
                return self._reject(RejectReason.MALFORMED, str(exc))

        record = self._state.complete_promotion(piece_type)
        if not self._state.is_game_over:
            self._emit_phase(GamePhase.AWAITING_MOVE)
        return self._finish(record)

    def cancel_promotion(self) -> bool:
        if self._state.phase != GamePhase.AWAITING_PROMOTION:
            return False
        self._state.cancel_promotion()
        _LOGGER.debug("Promotion cancelled")
        self._emit_phase(GamePhase.AWAITING_MOVE)
        return True

    def play_uci(self, text: str) -> MoveResult:
        """Play an external engine's reply such as ``e2e4`` or ``e7e8q``.

        A promotion without a letter becomes a queen.
        """
        if not isinstance(text, str) or not is_coordinate(text):
            return self._reject(
                RejectReason.MALFORMED, f"Not a coordinate move: {text!r}"
            )
        result = self.propose_move(text)
        if result.status != MoveStatus.PROMOTION_PENDING:
            return result

        pending = self._state.pending_promotion
        assert pending is not None
        return self.resolve_promotion(pending.requested or PieceType.QUEEN)

    def undo_move(self) -> bool:
        if self._state.phase != GamePhase.AWAITING_MOVE:
            return False
        move = self._state.undo_last_move()
        if move is None:
            return False
        _LOGGER.debug("Undid %s", move)
        self._emit_phase(GamePhase.AWAITING_MOVE)
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _read_move(self, source: SquareLike, target: SquareLike | None) -> Move:
        """Turn caller input into a legal :class:`Move` or raise."""
        position = self._state.position
        if target is None:
            if not isinstance(source, str):
                raise NotationError(f"Expected move text, got {source!r}")
            move = parse_move(position, source)
        else:
            move = MoveGenerator(position).build_move(
                _to_square(source), _to_square(target)
            )

        violation = MoveGenerator(position).first_violation(move.from_sq, move.to_sq)
        if violation is not None:
            raise IllegalMoveError(
                f"Illegal move {square_name(move.from_sq)}"
                f"{square_name(move.to_sq)}: {violation.describe()}",
                violation,
            )
        return move

    def _finish(self, record: MoveRecord) -> MoveResult:
        _LOGGER.debug("Applied %s (%s)", record.san, record.move)
        for cb in self.events.on_move:
            cb(record.move, record.san, self._state)
        if self._state.is_game_over:
            self._emit_game_over(self._state.outcome)
        return MoveResult.applied(record.san)

    def _refuse_unless(self, phase: GamePhase) -> MoveResult | None:
        current = self._state.phase
        if current == phase:
            return None
        if current == GamePhase.GAME_OVER:
            message = f"Game is over: {self._state.outcome}"
        elif current == GamePhase.AWAITING_PROMOTION:
            message = "A promotion is pending; choose a piece first"
        else:
            message = "No promotion is pending"
        return self._reject(RejectReason.OUT_OF_SEQUENCE, message)

    def _reject(self, reason: RejectReason, message: str) -> MoveResult:
        _LOGGER.debug("Rejected (%s): %s", reason.name, message)
        return MoveResult.rejected(reason, message)

    def _emit_game_over(self, outcome: GameOutcome, phase_sent: bool = False) -> None:
        _LOGGER.info("Game over: %s", outcome)
        if not phase_sent:
            self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(outcome)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)


# ── Input coercion ───────────────────────────────────────────────────────────


def _to_square(value: SquareLike) -> Square:
    if isinstance(value, str):
        try:
            return parse_square(value.strip().lower())
        except ValueError as exc:
            raise NotationError(str(exc)) from None
    if not is_valid_square(value):
        raise NotationError(f"Square out of range: {value!r}")
    return Square(*value)


def _to_promotion_type(piece: PieceType | str) -> PieceType:
    """Accept a :class:`PieceType`, a letter (``"q"``) or a name (``"queen"``)."""
    if isinstance(piece, PieceType):
        piece_type = piece
    elif isinstance(piece, str) and len(piece.strip()) == 1:
        return promotion_type_from_letter(piece.strip())
    elif isinstance(piece, str):
        try:
            piece_type = PieceType[piece.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown piece: {piece!r}") from None
    else:
        raise ValueError(f"Unknown piece: {piece!r}")
    if piece_type not in PROMOTION_TYPES:
        raise ValueError(f"Cannot promote to {piece_type.name.lower()}")
    return piece_type
