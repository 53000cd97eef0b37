"""Perft tests — the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from chessvox.core.enums import CastleSide, Color, MoveFlag, PieceType, Violation
from chessvox.core.move_generator import MoveGenerator
from chessvox.core.notation import STARTING_FEN, position_from_fen
from chessvox.core.piece import Piece
from chessvox.core.position import Position
from chessvox.core.types import (
    B1, C1, D1, D5, D6, E1, E2, E3, E4, E5, E7, E8, F1, G1,
    Square,
    parse_square,
)


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* using make/unmake."""
    if depth == 0:
        return 1
    gen = MoveGenerator(position)
    moves = gen.generate_legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        position.make_move(move)
        nodes += perft(position, depth - 1)
        position.unmake_move(move)
    return nodes


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 1) == 20

    def test_depth_2(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 2) == 400

    def test_depth_3(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 4) == 197_281


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 1) == 48

    def test_depth_2(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 3) == 97_862


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 1) == 14

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 2) == 191

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 3) == 2_812


# ── Position 4: promotions and castling through check ───────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 1) == 6

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 2) == 264


# ── Ordered legality checks ──────────────────────────────────────────────────


class TestViolations:
    def test_out_of_range(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.first_violation(Square(6, 4), (8, 4)) == Violation.OUT_OF_RANGE
        assert gen.first_violation((-1, 0), E4) == Violation.OUT_OF_RANGE

    def test_no_piece(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.first_violation(E4, E5) == Violation.NO_PIECE

    def test_wrong_side(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.first_violation(E7, parse_square("e5")) == Violation.WRONG_SIDE

    def test_own_piece_at_target(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.first_violation(D1, E1) == Violation.OWN_PIECE_AT_TARGET

    def test_bad_geometry(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.first_violation(E2, E5) == Violation.BAD_GEOMETRY
        assert gen.first_violation(C1, E3) == Violation.BAD_GEOMETRY  # d2 blocks

    def test_pinned_piece(self) -> None:
        # The e2 knight shields its king from the e8 rook.
        pos = position_from_fen("4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.first_violation(E2, parse_square("c3")) == Violation.KING_LEFT_IN_CHECK

    def test_king_cannot_step_into_check(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/5r2/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert not gen.is_legal(E1, parse_square("e2"))
        assert gen.is_legal(E1, parse_square("f2"))  # captures the rook

    def test_legal_move_has_no_violation(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.first_violation(E2, E4) is None


class TestPawnGeometry:
    def test_double_push_needs_both_squares_empty(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert not gen.is_legal(E2, E3)
        assert not gen.is_legal(E2, E4)

    def test_double_push_only_from_start(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/4P3/8/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.is_legal(E3, E4)
        assert not gen.is_legal(E3, E5)

    def test_diagonal_needs_enemy(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert not gen.is_legal(E2, parse_square("d3"))

    def test_black_moves_down_the_rows(self) -> None:
        pos = position_from_fen("4k3/4p3/8/8/8/8/8/4K3 b - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.is_legal(E7, parse_square("e5"))
        assert not gen.is_legal(E7, parse_square("f6"))


class TestEnPassant:
    FEN = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"

    def test_capture_onto_target(self) -> None:
        gen = MoveGenerator(position_from_fen(self.FEN))
        assert gen.is_legal(E5, D6)
        assert gen.build_move(E5, D6).flag == MoveFlag.EN_PASSANT

    def test_only_on_following_ply(self) -> None:
        pos = position_from_fen(self.FEN)
        pos.make_move(MoveGenerator(pos).build_move(E1, parse_square("f1")))
        pos.make_move(MoveGenerator(pos).build_move(E8, parse_square("f8")))
        assert pos.en_passant is None
        assert not MoveGenerator(pos).is_legal(E5, D6)

    def test_exposing_king_on_rank_is_illegal(self) -> None:
        # Removing both pawns from rank 5 would open the h5 rook onto a5.
        pos = position_from_fen("8/8/8/K2pP2r/8/8/8/4k3 w - d6 0 1")
        gen = MoveGenerator(pos)
        assert gen.first_violation(E5, D6) == Violation.KING_LEFT_IN_CHECK
        assert gen.is_legal(E5, parse_square("e6"))

    def test_removes_pawn_behind_target(self) -> None:
        pos = position_from_fen(self.FEN)
        pos.make_move(MoveGenerator(pos).build_move(E5, D6))
        assert pos.board[D5] is None
        assert pos.board[D6] is not None

    def test_target_needs_enemy_pawn_beside(self) -> None:
        pos = position_from_fen(self.FEN)
        pos.board[D5] = Piece(Color.BLACK, PieceType.KNIGHT)
        gen = MoveGenerator(pos)
        assert gen.first_violation(E5, D6) == Violation.BAD_GEOMETRY
        assert gen.build_move(E5, D6).flag == MoveFlag.NORMAL
        assert D6 not in gen.legal_destinations(E5)


class TestCastling:
    FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"

    def test_both_sides_available(self) -> None:
        gen = MoveGenerator(position_from_fen(self.FEN))
        assert gen.is_legal(E1, G1)
        assert gen.is_legal(E1, C1)
        assert gen.build_move(E1, G1).flag == MoveFlag.CASTLE_KINGSIDE
        assert gen.build_move(E1, C1).flag == MoveFlag.CASTLE_QUEENSIDE

    def test_no_rights(self) -> None:
        gen = MoveGenerator(position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w kq - 0 1"))
        assert gen.first_violation(E1, G1) == Violation.CASTLING_NOT_ALLOWED

    def test_in_check(self) -> None:
        gen = MoveGenerator(position_from_fen("r3k2r/8/8/8/4r3/8/8/R3K2R w KQ - 0 1"))
        assert not gen.can_castle(Color.WHITE, CastleSide.KINGSIDE)
        assert not gen.is_legal(E1, G1)

    def test_transit_square_attacked(self) -> None:
        gen = MoveGenerator(position_from_fen("4k3/8/8/8/8/8/5r2/R3K2R w KQ - 0 1"))
        assert not gen.is_legal(E1, G1)  # f1 is covered
        assert gen.is_legal(E1, C1)

    def test_b_file_attack_does_not_block_queenside(self) -> None:
        gen = MoveGenerator(position_from_fen("1r2k3/8/8/8/8/8/8/R3K3 w Q - 0 1"))
        assert gen.is_legal(E1, C1)

    def test_blocked_by_piece(self) -> None:
        gen = MoveGenerator(position_from_fen("4k3/8/8/8/8/8/8/RN2K2R w KQ - 0 1"))
        assert not gen.is_legal(E1, C1)
        assert gen.is_legal(E1, G1)

    def test_rook_missing(self) -> None:
        gen = MoveGenerator(position_from_fen("4k3/8/8/8/8/8/8/4K2R w KQ - 0 1"))
        assert not gen.is_legal(E1, C1)

    def test_castling_destinations_listed(self) -> None:
        gen = MoveGenerator(position_from_fen(self.FEN))
        dests = set(gen.legal_destinations(E1))
        assert {G1, C1, D1, F1} <= dests


class TestGeneration:
    def test_promotions_listed_per_piece(self) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/8/k6K w - - 0 1")
        moves = [m for m in MoveGenerator(pos).generate_legal_moves() if m.from_sq == E7]
        assert {m.promotion for m in moves} == {
            PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT,
        }

    def test_build_move_rejects_stray_promotion(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        with pytest.raises(ValueError, match="non-promotion"):
            gen.build_move(E2, E4, PieceType.QUEEN)

    def test_build_move_rejects_king_promotion(self) -> None:
        gen = MoveGenerator(position_from_fen("8/4P3/8/8/8/8/8/k6K w - - 0 1"))
        with pytest.raises(ValueError, match="Cannot promote"):
            gen.build_move(E7, E8, PieceType.KING)

    def test_never_leaves_king_in_check(self) -> None:
        pos = position_from_fen(KIWIPETE)
        for move in MoveGenerator(pos).generate_legal_moves():
            pos.make_move(move)
            assert not MoveGenerator(pos).is_in_check(pos.side_to_move.opposite)
            pos.unmake_move(move)

    def test_has_legal_moves(self) -> None:
        assert MoveGenerator(position_from_fen(STARTING_FEN)).has_legal_moves()
        stalemate = position_from_fen("7k/8/6Q1/8/8/8/8/K7 b - - 0 1")
        assert not MoveGenerator(stalemate).has_legal_moves()

    def test_empty_square_has_no_destinations(self) -> None:
        gen = MoveGenerator(position_from_fen(STARTING_FEN))
        assert gen.legal_destinations(E4) == []
        assert gen.legal_destinations((9, 9)) == []
        assert set(gen.legal_destinations(B1)) == {parse_square("a3"), parse_square("c3")}
