"""Random games cross-checked against python-chess.

Both implementations play the same seeded random moves; after every ply
the legal move sets, SAN, FEN and mate/stalemate detection must agree.
"""

import random

import chess
import pytest

from chessvox.core.move_generator import MoveGenerator
from chessvox.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chessvox.core.rules import Rules

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


def play_random_game(fen: str, seed: int, max_plies: int) -> int:
    """Play until the game ends or *max_plies*; returns plies played."""
    rng = random.Random(seed)
    ours = position_from_fen(fen)
    theirs = chess.Board(fen)

    for ply in range(max_plies):
        gen = MoveGenerator(ours)
        legal = {move.uci: move for move in gen.generate_legal_moves()}
        expected = {move.uci() for move in theirs.legal_moves}
        assert set(legal) == expected, f"ply {ply}: {position_to_fen(ours)}"

        assert Rules.is_checkmate(ours) == theirs.is_checkmate()
        assert Rules.is_stalemate(ours) == theirs.is_stalemate()
        if not legal:
            return ply

        uci = rng.choice(sorted(legal))
        move = legal[uci]
        reference = chess.Move.from_uci(uci)

        san = move_to_san(ours, move)
        assert san == theirs.san(reference), f"{uci} in {position_to_fen(ours)}"
        assert parse_san(ours, san) == move

        ours.make_move(move)
        theirs.push(reference)
        assert position_to_fen(ours) == theirs.fen(en_passant="fen")

    return max_plies


class TestAgainstReference:
    @pytest.mark.parametrize("seed", range(4))
    def test_from_start(self, seed: int) -> None:
        play_random_game(STARTING_FEN, seed, max_plies=80)

    @pytest.mark.parametrize("fen", [KIWIPETE, POS4])
    def test_from_tactical_positions(self, fen: str) -> None:
        play_random_game(fen, seed=7, max_plies=60)

    @pytest.mark.slow
    @pytest.mark.parametrize("seed", range(4, 40))
    def test_long_games(self, seed: int) -> None:
        play_random_game(STARTING_FEN, seed, max_plies=300)
