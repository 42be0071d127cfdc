from backend.engine.gameplay.clock import SessionClock
from backend.engine.gameplay.game import GameMode, GamePlay
from backend.engine.gameplay.history import MoveHistory

__all__ = ["GameMode", "GamePlay", "MoveHistory", "SessionClock"]
