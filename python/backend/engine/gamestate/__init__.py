from backend.engine.gamestate.gaps import GapManager
from backend.engine.gamestate.moves import MoveEngine
from backend.engine.gamestate.state import PuzzleState
from backend.engine.gamestate.win import is_solved, misplaced

__all__ = ["GapManager", "MoveEngine", "PuzzleState", "is_solved", "misplaced"]
