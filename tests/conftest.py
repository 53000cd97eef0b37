"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessvox.core.notation import STARTING_FEN, position_from_fen
from chessvox.core.position import Position
from chessvox.game.controller import GameEngine


@pytest.fixture
def start_position() -> Position:
    """A fresh standard starting position."""
    return position_from_fen(STARTING_FEN)


@pytest.fixture
def engine() -> GameEngine:
    """An engine with a new game from the start position."""
    return GameEngine()
