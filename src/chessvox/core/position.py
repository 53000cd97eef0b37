"""Position — complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from chessvox.core.board import ROOK_CASTLE_COLUMNS, Board
from chessvox.core.enums import CastleSide, CastlingRights, Color, MoveFlag, PieceType
from chessvox.core.move import Move
from chessvox.core.piece import Piece
from chessvox.core.types import Square, square_name


def castling_field(castling: CastlingRights) -> str:
    """``KQkq``-style availability string, ``-`` when nothing is left."""
    text = ""
    if castling.allows(Color.WHITE, CastleSide.KINGSIDE):
        text += "K"
    if castling.allows(Color.WHITE, CastleSide.QUEENSIDE):
        text += "Q"
    if castling.allows(Color.BLACK, CastleSide.KINGSIDE):
        text += "k"
    if castling.allows(Color.BLACK, CastleSide.QUEENSIDE):
        text += "q"
    return text or "-"


@dataclass(slots=True)
class _PositionState:
    """Snapshot saved before each move so we can undo it."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured_piece: Piece | None


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Every executed move appends the new position's fingerprint to an
    append-only history used for repetition detection.  :meth:`make_move`
    does no legality checking; :class:`~chessvox.core.move_generator.MoveGenerator`
    decides what may be played.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_history",
        "_fingerprints",
        "_fingerprint_counts",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._history: list[_PositionState] = []
        key = self.fingerprint()
        self._fingerprints: list[str] = [key]
        self._fingerprint_counts: dict[str, int] = {key: 1}

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move*, pushing undo state onto the history stack."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        saved = _PositionState(
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            captured_piece=None,
        )
        captured = self.board.execute(move)
        saved.captured_piece = captured
        self._history.append(saved)

        # En passant target for the opponent, valid for one ply only
        self.en_passant = None
        if (
            piece.piece_type == PieceType.PAWN
            and abs(move.to_sq[0] - move.from_sq[0]) == 2
        ):
            self.en_passant = Square(
                (move.from_sq[0] + move.to_sq[0]) // 2, move.from_sq[1]
            )

        self._update_castling(move, piece)

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opposite

        key = self.fingerprint()
        self._fingerprints.append(key)
        self._fingerprint_counts[key] = self._fingerprint_counts.get(key, 0) + 1

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`."""
        state = self._history.pop()
        key = self._fingerprints.pop()
        remaining = self._fingerprint_counts[key] - 1
        if remaining:
            self._fingerprint_counts[key] = remaining
        else:
            del self._fingerprint_counts[key]

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        piece = self.board[move.to_sq]
        assert piece is not None

        if move.flag == MoveFlag.PROMOTION:
            piece = Piece(piece.color, PieceType.PAWN)

        self.board[move.from_sq] = piece
        if move.flag == MoveFlag.EN_PASSANT:
            self.board[move.to_sq] = None
            victim_sq = Square(move.from_sq[0], move.to_sq[1])
            self.board[victim_sq] = state.captured_piece
        else:
            self.board[move.to_sq] = state.captured_piece

        if move.flag in ROOK_CASTLE_COLUMNS:
            row = move.from_sq[0]
            rook_from, rook_to = ROOK_CASTLE_COLUMNS[move.flag]
            self.board[Square(row, rook_from)] = self.board[Square(row, rook_to)]
            self.board[Square(row, rook_to)] = None

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock

    # ── Castling bookkeeping ─────────────────────────────────────────────

    _ROOK_CORNERS: dict[Square, CastlingRights] = {
        Square(7, 0): CastlingRights.WHITE_QUEENSIDE_ROOK,
        Square(7, 7): CastlingRights.WHITE_KINGSIDE_ROOK,
        Square(0, 0): CastlingRights.BLACK_QUEENSIDE_ROOK,
        Square(0, 7): CastlingRights.BLACK_KINGSIDE_ROOK,
    }

    def _update_castling(self, move: Move, piece: Piece) -> None:
        if piece.piece_type == PieceType.KING:
            self.castling &= ~CastlingRights.for_color(piece.color)

        # A rook leaving its corner, or anything captured on it.
        for sq in (move.from_sq, move.to_sq):
            bit = self._ROOK_CORNERS.get(sq)
            if bit is not None:
                self.castling &= ~bit

    # ── Utilities ────────────────────────────────────────────────────────

    def fingerprint(self) -> str:
        """Placement, side to move, castling availability and en passant.

        Clocks are left out so equal game-relevant states compare equal.
        """
        side = "w" if self.side_to_move == Color.WHITE else "b"
        ep = square_name(self.en_passant) if self.en_passant is not None else "-"
        return f"{self.board.placement()} {side} {castling_field(self.castling)} {ep}"

    @property
    def fingerprints(self) -> tuple[str, ...]:
        """Fingerprint of every position reached so far, oldest first."""
        return tuple(self._fingerprints)

    def repetition_count(self) -> int:
        """How many times the current position occurred in game history."""
        return self._fingerprint_counts.get(self._fingerprints[-1], 0)

    def copy(self) -> Position:
        """Deep copy without the undo stack."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )
        pos._fingerprints = self._fingerprints.copy()
        pos._fingerprint_counts = self._fingerprint_counts.copy()
        return pos

