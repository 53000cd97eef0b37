"""chessvox — a chess rules engine for voice, click and engine-driven play."""

from chessvox.core import Color, PieceType, Square
from chessvox.game import GameEngine, GamePhase, MoveResult, MoveStatus, RejectReason

__version__ = "0.1.0"

__all__ = [
    "Color",
    "GameEngine",
    "GamePhase",
    "MoveResult",
    "MoveStatus",
    "PieceType",
    "RejectReason",
    "Square",
    "__version__",
]
