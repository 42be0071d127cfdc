"""Game session: the boundary a frontend talks to.

A :class:`GamePlay` owns one puzzle state together with the engines that
mutate it, plus the session bookkeeping around it (move counter, clock,
undo/redo, challenge mode). Frontends never touch the engines directly.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Callable

from backend.engine.gamegenerator import SeededRandom, ShuffleEngine, ShuffleResult
from backend.engine.gamegenerator.generator import Checkpoint
from backend.engine.gameplay.clock import SessionClock
from backend.engine.gameplay.history import MoveHistory
from backend.engine.gamestate import GapManager, MoveEngine, PuzzleState, is_solved
from backend.models.board import BoardConfig, GridCell, Piece, Side
from backend.models.boards import board_hash, get_board
from backend.models.challenge import Challenge
from backend.models.move import Move, MoveError, MoveResult

logger = logging.getLogger(__name__)


class GameMode(StrEnum):
    FREE_PLAY = "free_play"
    CHALLENGE = "challenge"


class GamePlay:
    """Orchestrates a single game session on one board."""

    def __init__(self, config: BoardConfig, board_hash: int = 0, slug: str | None = None) -> None:
        self.config = config
        self.board_hash = board_hash
        self.slug = slug

        self.mode = GameMode.FREE_PLAY
        self.challenge: Challenge | None = None
        self.challenge_solved = False
        self.moves: int = 0
        self.clock = SessionClock(running=False)
        self.history = MoveHistory()

        self.on_move: list[Callable[[Move], None]] = []
        self.on_win: list[Callable[[GamePlay], None]] = []

        self._shuffling = False
        self._replaying = False
        self._attach(PuzzleState.solved(config))

    def _attach(self, state: PuzzleState) -> None:
        self.state = state
        self.engine = MoveEngine(state)
        self.gaps = GapManager(state, self.engine)
        self.shuffler = ShuffleEngine(state, self.engine, self.gaps)
        self.engine.subscribe(self._piece_moved)

    # -- construction helpers -------------------------------------------------

    @classmethod
    def load_board(cls, config: BoardConfig, board_hash: int = 0) -> GamePlay:
        """Start a session on *config* in its solved state.

        Raises ``InvalidBoardConfig`` if the layout is inconsistent.
        """
        return cls(config, board_hash=board_hash)

    @classmethod
    def from_slug(cls, slug: str) -> GamePlay:
        return cls(get_board(slug), board_hash=board_hash(slug), slug=slug)

    # -- snapshots ------------------------------------------------------------

    def get_pieces(self) -> list[Piece]:
        return [p.copy() for p in self.state.pieces]

    def get_grid(self) -> tuple[GridCell | None, ...]:
        return self.state.grid_snapshot()

    def is_solved(self) -> bool:
        return is_solved(self.state.pieces)

    @property
    def locked(self) -> bool:
        """Challenges refuse input once solved or while the clock is paused."""
        return self.mode is GameMode.CHALLENGE and (
            self.challenge_solved or not self.clock.running
        )

    # -- gap selection --------------------------------------------------------

    def select_gap(self, gap_id: str) -> MoveResult:
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        return self.gaps.select(gap_id)

    def cycle_gap_selection(self) -> MoveResult:
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        self.gaps.cycle_selection()
        return MoveResult.success()

    # -- movement -------------------------------------------------------------

    def attempt_move(self, side: Side) -> MoveResult:
        """Pull the neighbour on *side* of the selected gap into it."""
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        gap = self.state.selected_gap
        if gap is None:
            return MoveResult.failure(MoveError.NO_GAP_SELECTED)
        return self.engine.slide_into_gap(gap, side)

    def resolve_gap_click(self, gap_id: str) -> MoveResult:
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        return self.gaps.resolve_swap_intent(gap_id)

    def undo(self) -> MoveResult:
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        move = self.history.pop_undo()
        if move is None:
            return MoveResult.failure(MoveError.NOTHING_TO_UNDO)
        return self._replay(move.inverse())

    def redo(self) -> MoveResult:
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        move = self.history.pop_redo()
        if move is None:
            return MoveResult.failure(MoveError.NOTHING_TO_UNDO)
        return self._replay(move)

    def _replay(self, move: Move) -> MoveResult:
        gap = self.state.piece(move.gap_id)
        self.state.select(gap)
        self._replaying = True
        try:
            return self.engine.apply(move)
        finally:
            self._replaying = False

    def _piece_moved(self, move: Move) -> None:
        if self._shuffling:
            return
        self.moves += 1
        if not self._replaying:
            self.history.record(move)
        for callback in self.on_move:
            callback(move)

        if self.is_solved():
            if self.mode is GameMode.CHALLENGE:
                self.challenge_solved = True
                self.clock.pause()
                logger.info(
                    "Challenge solved in %d moves (%.1fs)", self.moves, self.clock.elapsed_time
                )
            for callback in self.on_win:
                callback(self)

    # -- bulk operations ------------------------------------------------------

    def reset(self) -> None:
        """Return to the solved layout in free play."""
        self._attach(PuzzleState.solved(self.config))
        self.mode = GameMode.FREE_PLAY
        self.challenge = None
        self.challenge_solved = False
        self.moves = 0
        self.history.clear()
        self.clock = SessionClock(running=False)

    def shuffle(
        self,
        steps: int,
        seed: int,
        board_hash: int | None = None,
        randomize_gaps: bool = False,
        checkpoint: Checkpoint | None = None,
    ) -> ShuffleResult:
        """Scramble the current state; deterministic for identical arguments."""
        if board_hash is None:
            board_hash = self.board_hash
        self._shuffling = True
        try:
            result = self.shuffler.shuffle(steps, seed, board_hash, randomize_gaps, checkpoint)
        finally:
            self._shuffling = False
        self.moves = 0
        self.history.clear()
        return result

    def randomize_gaps(self, count: int | None, seed: int) -> MoveResult:
        """Reassign which single-cell pieces are gaps, seeded by *seed*.

        Raises ``ValueError`` if *count* exceeds the single-cell pieces.
        """
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        self.gaps.randomize_gap_assignment(SeededRandom(seed), count)
        self.moves = 0
        self.history.clear()
        return MoveResult.success()

    def reset_gaps(self) -> MoveResult:
        """Give the gap role back to the pieces that started as gaps."""
        if self.locked:
            return MoveResult.failure(MoveError.LOCKED)
        self.gaps.reset_gap_assignment()
        self.moves = 0
        self.history.clear()
        return MoveResult.success()

    # -- challenge mode -------------------------------------------------------

    def start_challenge(self, challenge: Challenge, checkpoint: Checkpoint | None = None) -> ShuffleResult:
        """Switch to *challenge*'s board, scramble it and start the clock."""
        if challenge.board != self.slug:
            self.config = get_board(challenge.board)
            self.board_hash = board_hash(challenge.board)
            self.slug = challenge.board
        self.reset()
        result = self.shuffle(
            challenge.steps,
            challenge.seed,
            randomize_gaps=challenge.randomize_gaps,
            checkpoint=checkpoint,
        )
        self.mode = GameMode.CHALLENGE
        self.challenge = challenge
        self.clock.restart()
        logger.info("Challenge started: %s", challenge.to_query())
        return result

    def restart_challenge(self, checkpoint: Checkpoint | None = None) -> ShuffleResult | None:
        if self.challenge is None:
            return None
        return self.start_challenge(self.challenge, checkpoint)

    def give_up(self) -> None:
        """Leave challenge mode, keeping the board as it is."""
        self.mode = GameMode.FREE_PLAY
        self.challenge = None
        self.challenge_solved = False
        self.clock = SessionClock(running=False)

    def pause(self) -> None:
        self.clock.pause()

    def resume(self) -> None:
        if not self.challenge_solved:
            self.clock.resume()
