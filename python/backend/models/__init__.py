from backend.models.board import (
    BoardConfig,
    GridCell,
    InvalidBoardConfig,
    Piece,
    Role,
    Side,
)
from backend.models.boards import BOARD_HASHES, BOARDS, board_hash, get_board
from backend.models.challenge import Challenge, random_seed
from backend.models.move import Move, MoveError, MoveKind, MoveResult

__all__ = [
    "BOARDS",
    "BOARD_HASHES",
    "BoardConfig",
    "Challenge",
    "GridCell",
    "InvalidBoardConfig",
    "Move",
    "MoveError",
    "MoveKind",
    "MoveResult",
    "Piece",
    "Role",
    "Side",
    "board_hash",
    "get_board",
    "random_seed",
]
