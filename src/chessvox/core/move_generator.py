"""Move legality evaluation and legal move enumeration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessvox.core import geometry
from chessvox.core.enums import CastleSide, Color, MoveFlag, PieceType, Violation
from chessvox.core.move import Move
from chessvox.core.piece import PROMOTION_TYPES, Piece
from chessvox.core.types import ALL_SQUARES, Square, is_valid_square

if TYPE_CHECKING:
    from chessvox.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
    # Castling destinations; eligibility is checked separately.
    (0, -2),
    (0, 2),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

# Columns the king crosses or lands on, and the columns that must be empty.
_CASTLE_KING_PATH: dict[CastleSide, tuple[int, ...]] = {
    CastleSide.KINGSIDE: (5, 6),
    CastleSide.QUEENSIDE: (3, 2),
}
_CASTLE_EMPTY_COLS: dict[CastleSide, tuple[int, ...]] = {
    CastleSide.KINGSIDE: (5, 6),
    CastleSide.QUEENSIDE: (1, 2, 3),
}
_CASTLE_ROOK_COL: dict[CastleSide, int] = {
    CastleSide.KINGSIDE: 7,
    CastleSide.QUEENSIDE: 0,
}
_CASTLE_FLAGS: dict[CastleSide, MoveFlag] = {
    CastleSide.KINGSIDE: MoveFlag.CASTLE_KINGSIDE,
    CastleSide.QUEENSIDE: MoveFlag.CASTLE_QUEENSIDE,
}


# -- Precomputed candidate tables ------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for sq in ALL_SQUARES:
        moves: list[Square] = []
        for d_row, d_col in offsets:
            row, col = sq.row + d_row, sq.col + d_col
            if 0 <= row < 8 and 0 <= col < 8:
                moves.append(Square(row, col))
        targets[sq] = tuple(moves)
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    """Every square reachable along *directions* on an empty board."""
    rays: dict[Square, tuple[Square, ...]] = {}
    for sq in ALL_SQUARES:
        reach: list[Square] = []
        for d_row, d_col in directions:
            row, col = sq.row + d_row, sq.col + d_col
            while 0 <= row < 8 and 0 <= col < 8:
                reach.append(Square(row, col))
                row += d_row
                col += d_col
        rays[sq] = tuple(reach)
    return rays


def _build_pawn_targets(color: Color) -> dict[Square, tuple[Square, ...]]:
    step = geometry.pawn_direction(color)
    return _build_targets(((step, -1), (step, 0), (step, 1), (2 * step, 0)))


_CANDIDATES: dict[PieceType, dict[Square, tuple[Square, ...]]] = {
    PieceType.KNIGHT: _build_targets(KNIGHT_OFFSETS),
    PieceType.BISHOP: _build_rays(BISHOP_DIRS),
    PieceType.ROOK: _build_rays(ROOK_DIRS),
    PieceType.QUEEN: _build_rays(QUEEN_DIRS),
    PieceType.KING: _build_targets(KING_OFFSETS),
}
_PAWN_CANDIDATES: tuple[dict[Square, tuple[Square, ...]], ...] = (
    _build_pawn_targets(Color.WHITE),
    _build_pawn_targets(Color.BLACK),
)


class MoveGenerator:
    """Decides move legality for a given :class:`Position`.

    Legality is tested on scratch copies of the board; the position itself
    is never touched.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Legality -----------------------------------------------------------

    def is_legal(self, from_sq: Square, to_sq: Square) -> bool:
        """May the side to move play *from_sq* → *to_sq*?"""
        return self.first_violation(from_sq, to_sq) is None

    def first_violation(self, from_sq: Square, to_sq: Square) -> Violation | None:
        """The first legality check that fails, or ``None`` if the move is legal.

        Checks run in a fixed order and stop at the first failure; the
        check-safety test on a scratch board runs last because it is the
        expensive one.
        """
        if not (is_valid_square(from_sq) and is_valid_square(to_sq)):
            return Violation.OUT_OF_RANGE
        from_sq, to_sq = Square(*from_sq), Square(*to_sq)

        board = self._board
        piece = board[from_sq]
        if piece is None:
            return Violation.NO_PIECE
        if piece.color != self._pos.side_to_move:
            return Violation.WRONG_SIDE
        target = board[to_sq]
        if target is not None and target.color == piece.color:
            return Violation.OWN_PIECE_AT_TARGET

        side = self.castle_side(from_sq, to_sq)
        if side is not None:
            if not self.can_castle(piece.color, side):
                return Violation.CASTLING_NOT_ALLOWED
        elif not self._geometry_allows(piece, from_sq, to_sq):
            return Violation.BAD_GEOMETRY

        if self._leaves_king_in_check(self.build_move(from_sq, to_sq), piece.color):
            return Violation.KING_LEFT_IN_CHECK
        return None

    def _geometry_allows(self, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
        if piece.piece_type != PieceType.PAWN:
            # Castling never reaches here, so the king is plain adjacency.
            return geometry.attacks(self._board, from_sq, to_sq)

        board = self._board
        step = geometry.pawn_direction(piece.color)
        d_row = to_sq.row - from_sq.row
        d_col = to_sq.col - from_sq.col

        if d_col == 0:
            if d_row == step:
                return board.is_empty(to_sq)
            if d_row == 2 * step and from_sq.row == geometry.pawn_start_row(
                piece.color
            ):
                middle = Square(from_sq.row + step, from_sq.col)
                return board.is_empty(middle) and board.is_empty(to_sq)
            return False

        if abs(d_col) == 1 and d_row == step:
            # Same-colour targets were already rejected.
            if board[to_sq] is not None:
                return True
            return self._is_en_passant(piece, from_sq, to_sq)
        return False

    def _is_en_passant(self, pawn: Piece, from_sq: Square, to_sq: Square) -> bool:
        """A diagonal step onto the target with the enemy pawn beside us."""
        if to_sq != self._pos.en_passant or not self._board.is_empty(to_sq):
            return False
        victim = self._board[Square(from_sq.row, to_sq.col)]
        return victim == Piece(pawn.color.opposite, PieceType.PAWN)

    def _leaves_king_in_check(self, move: Move, color: Color) -> bool:
        scratch = self._board.copy()
        scratch.execute(move)
        return geometry.is_in_check(scratch, color)

    # -- Castling -------------------------------------------------------------

    def castle_side(self, from_sq: Square, to_sq: Square) -> CastleSide | None:
        """Which castling a king move from its home square to *to_sq* means."""
        piece = self._board[from_sq]
        if piece is None or piece.piece_type != PieceType.KING:
            return None
        home = geometry.home_row(piece.color)
        if from_sq != (home, 4) or to_sq[0] != home:
            return None
        if to_sq[1] == 6:
            return CastleSide.KINGSIDE
        if to_sq[1] == 2:
            return CastleSide.QUEENSIDE
        return None

    def can_castle(self, color: Color, side: CastleSide) -> bool:
        """Are all castling conditions for *color* on *side* met right now?"""
        if not self._pos.castling.allows(color, side):
            return False

        board = self._board
        row = geometry.home_row(color)
        if board[Square(row, 4)] != Piece(color, PieceType.KING):
            return False
        if board[Square(row, _CASTLE_ROOK_COL[side])] != Piece(color, PieceType.ROOK):
            return False
        if geometry.is_in_check(board, color):
            return False
        if any(not board.is_empty(Square(row, col)) for col in _CASTLE_EMPTY_COLS[side]):
            return False

        opponent = color.opposite
        return not any(
            geometry.is_square_attacked(board, Square(row, col), opponent)
            for col in _CASTLE_KING_PATH[side]
        )

    # -- Move construction ----------------------------------------------------

    def build_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Move:
        """Classify a coordinate pair into a :class:`Move` with the right flag.

        Raises :class:`ValueError` when *promotion* is given for a move that
        does not promote.
        """
        from_sq, to_sq = Square(*from_sq), Square(*to_sq)
        piece = self._board[from_sq]
        flag = MoveFlag.NORMAL

        if piece is not None and piece.piece_type == PieceType.PAWN:
            if abs(to_sq.row - from_sq.row) == 2:
                flag = MoveFlag.DOUBLE_PAWN
            elif to_sq.row == geometry.promotion_row(piece.color):
                flag = MoveFlag.PROMOTION
            elif to_sq.col != from_sq.col and self._is_en_passant(piece, from_sq, to_sq):
                flag = MoveFlag.EN_PASSANT
        elif piece is not None and piece.piece_type == PieceType.KING:
            side = self.castle_side(from_sq, to_sq)
            if side is not None:
                flag = _CASTLE_FLAGS[side]

        if promotion is not None:
            if flag != MoveFlag.PROMOTION:
                raise ValueError("Promotion piece given for a non-promotion move")
            if promotion not in PROMOTION_TYPES:
                raise ValueError(f"Cannot promote to {promotion.name.lower()}")
        return Move(from_sq, to_sq, flag, promotion)

    # -- Enumeration ----------------------------------------------------------

    def candidate_targets(self, from_sq: Square) -> tuple[Square, ...]:
        """Squares the piece on *from_sq* could reach on an empty board."""
        piece = self._board[from_sq]
        if piece is None:
            return ()
        if piece.piece_type == PieceType.PAWN:
            return _PAWN_CANDIDATES[int(piece.color)][from_sq]
        return _CANDIDATES[piece.piece_type][from_sq]

    def legal_destinations(self, from_sq: Square) -> list[Square]:
        """Every square the piece on *from_sq* may legally move to."""
        if not is_valid_square(from_sq):
            return []
        from_sq = Square(*from_sq)
        return [
            to_sq
            for to_sq in self.candidate_targets(from_sq)
            if self.is_legal(from_sq, to_sq)
        ]

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move.

        A promotion is listed once per promotion piece.
        """
        legal: list[Move] = []
        for from_sq in self._board.all_pieces(self._pos.side_to_move):
            for to_sq in self.legal_destinations(from_sq):
                move = self.build_move(from_sq, to_sq)
                if move.flag == MoveFlag.PROMOTION:
                    legal.extend(move.with_promotion(pt) for pt in PROMOTION_TYPES)
                else:
                    legal.append(move)
        return legal

    def has_legal_moves(self) -> bool:
        """Whether the side to move has at least one legal move."""
        return any(
            self.is_legal(from_sq, to_sq)
            for from_sq in self._board.all_pieces(self._pos.side_to_move)
            for to_sq in self.candidate_targets(from_sq)
        )

    # -- Attack detection -----------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return geometry.is_in_check(self._board, color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        return geometry.is_square_attacked(self._board, sq, by_color)
