"""Game management layer — engine facade, state machine, results.

Quick start::

    from chessvox.game import GameEngine

    engine = GameEngine()
    engine.propose_move("e4")
    engine.propose_move("e7", "e5")
    print(engine.move_history, engine.to_fen())
"""

from chessvox.game.controller import GameEngine, GameEvents
from chessvox.game.interfaces import (
    GamePhase,
    IGameEngine,
    MoveResult,
    MoveStatus,
    RejectReason,
)
from chessvox.game.state import GameState, MoveRecord, PendingPromotion

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameEngine",
    "MoveResult",
    "MoveStatus",
    "RejectReason",
    # Concrete
    "GameEngine",
    "GameEvents",
    "GameState",
    "MoveRecord",
    "PendingPromotion",
]
