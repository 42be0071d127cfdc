"""Generates reproducible scrambles by random-walking from the solved state.

Every step is drawn from the moves that are legal at that moment, so the
result is always solvable (replaying the inverses in reverse order undoes
it). Moves are weighted so that large pieces keep moving: the longer none
has moved, the higher the *urgency*, which boosts large-piece moves and
small moves that pull the gaps together (two aligned gaps are what a large
piece needs).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Callable, Iterator

from backend.engine.gamegenerator.rng import UINT32_MASK, SeededRandom
from backend.engine.gamestate.gaps import GapManager
from backend.engine.gamestate.moves import MoveEngine
from backend.engine.gamestate.state import PuzzleState
from backend.models.board import Piece
from backend.models.move import Move, MoveKind

logger = logging.getLogger(__name__)

URGENCY_BUILDUP_RATE = 50
BIG_PIECE_BASE_WEIGHT = 10.0
URGENCY_BIG_PIECE_BONUS = 20.0
SMALL_PIECE_BASE_WEIGHT = 1.0
ADAPTIVE_INFLUENCE = 1.0
DISTANCE_INFLUENCE = 0.5
DISTANCE_WEIGHT_CLOSER = 1.5
DISTANCE_WEIGHT_FURTHER = 0.7
GAP_SWAP_SHARE = 0.1

RANDOMIZE_GAPS_BIT = 1 << 12

Checkpoint = Callable[[int, Move], None]


@dataclass(frozen=True)
class ShuffleTuning:
    urgency_buildup_rate: float = URGENCY_BUILDUP_RATE
    big_piece_base_weight: float = BIG_PIECE_BASE_WEIGHT
    urgency_big_piece_bonus: float = URGENCY_BIG_PIECE_BONUS
    small_piece_base_weight: float = SMALL_PIECE_BASE_WEIGHT
    adaptive_influence: float = ADAPTIVE_INFLUENCE
    distance_influence: float = DISTANCE_INFLUENCE
    distance_weight_closer: float = DISTANCE_WEIGHT_CLOSER
    distance_weight_further: float = DISTANCE_WEIGHT_FURTHER
    gap_swap_share: float = GAP_SWAP_SHARE


@dataclass
class ShuffleResult:
    combined_seed: int
    moves: list[Move] = field(default_factory=list)
    score: int = 0


# -- helpers ------------------------------------------------------------------


def combine_seed(seed: int, steps: int, board_hash: int, randomize_gaps: bool = False) -> int:
    """Mix seed, step count and board into one 32-bit seed.

    Changing any one input yields a different walk.
    """
    combined = seed ^ (steps << 16) ^ (board_hash << 24)
    if randomize_gaps:
        combined ^= RANDOMIZE_GAPS_BIT
    return combined & UINT32_MASK


def gap_distance(positions: list[tuple[int, int]]) -> int:
    """Sum of pairwise Manhattan distances between gap positions."""
    return sum(abs(ax - bx) + abs(ay - by) for (ax, ay), (bx, by) in combinations(positions, 2))


def shuffle_score(state: PuzzleState) -> int:
    """How scrambled the board looks: large-piece distance from home."""
    return sum(
        abs(p.x - p.home_x) + abs(p.y - p.home_y) for p in state.pieces if p.is_large
    )


# -- engine -------------------------------------------------------------------


class ShuffleEngine:
    """Drives a :class:`MoveEngine` through a weighted random walk."""

    def __init__(
        self,
        state: PuzzleState,
        engine: MoveEngine | None = None,
        gaps: GapManager | None = None,
        tuning: ShuffleTuning | None = None,
    ) -> None:
        self.state = state
        self.engine = engine or MoveEngine(state)
        self.gaps = gaps or GapManager(state, self.engine)
        self.tuning = tuning or ShuffleTuning()

    def shuffle(
        self,
        steps: int,
        seed: int,
        board_hash: int = 0,
        randomize_gaps: bool = False,
        checkpoint: Checkpoint | None = None,
    ) -> ShuffleResult:
        """Scramble the state in place; identical arguments give identical results."""
        combined = combine_seed(seed, steps, board_hash, randomize_gaps)
        result = ShuffleResult(combined_seed=combined)
        if steps <= 0:
            result.score = shuffle_score(self.state)
            return result

        rng = SeededRandom(combined)
        if randomize_gaps:
            self.gaps.randomize_gap_assignment(rng)

        for i, move in enumerate(self.walk(rng, steps)):
            result.moves.append(move)
            if checkpoint is not None:
                checkpoint(i, move)

        # Hide which gap moved last.
        gaps = self.state.gaps
        if gaps:
            self.state.select(gaps[rng.next_int(len(gaps))])

        self.state.rebuild_grid()
        result.score = shuffle_score(self.state)
        logger.info(
            "Shuffle complete: %d/%d moves, seed %d, score %d",
            len(result.moves), steps, combined, result.score,
        )
        return result

    def walk(self, rng: SeededRandom, steps: int) -> Iterator[Move]:
        """Apply up to *steps* weighted random moves, yielding each one.

        Stops early only when no move is legal. Consuming the generator
        lazily never changes which moves are drawn.
        """
        last_inverse: Move | None = None
        since_large = 0

        for _ in range(steps):
            moves = self.engine.valid_moves()
            if not moves:
                logger.warning("No legal moves left; shuffle stopped early.")
                return

            if last_inverse is not None:
                rest = [m for m in moves if m != last_inverse]
                if rest:
                    moves = rest

            urgency = min(since_large / self.tuning.urgency_buildup_rate, 1.0)
            weights = self.weights(moves, urgency)
            move = moves[_draw(rng, weights)]

            self.state.select(self.state.piece(move.gap_id))
            self.engine.apply(move)
            last_inverse = move.inverse()
            since_large = 0 if move.kind is MoveKind.LARGE else since_large + 1
            yield move

    # -- weighting ------------------------------------------------------------

    def weights(self, moves: list[Move], urgency: float) -> list[float]:
        t = self.tuning
        gaps = self.state.gaps
        weights: list[float] = []
        for move in moves:
            if move.kind is MoveKind.LARGE:
                weights.append(t.big_piece_base_weight + urgency * t.urgency_big_piece_bonus)
            elif move.kind is MoveKind.SMALL:
                weights.append(
                    t.small_piece_base_weight
                    * self._distance_factor(move, urgency, gaps)
                    * (1 + urgency * t.adaptive_influence)
                )
            else:
                weights.append(0.0)

        others = [w for m, w in zip(moves, weights) if m.kind is not MoveKind.GAP_SWAP]
        swap_weight = t.gap_swap_share * sum(others) if others else 1.0
        return [
            swap_weight if m.kind is MoveKind.GAP_SWAP else w
            for m, w in zip(moves, weights)
        ]

    def _distance_factor(self, move: Move, urgency: float, gaps: list[Piece]) -> float:
        if len(gaps) < 2:
            return 1.0
        t = self.tuning
        dx, dy = move.side.offset
        before = [(g.x, g.y) for g in gaps]
        after = [(g.x + dx, g.y + dy) if g.id == move.gap_id else (g.x, g.y) for g in gaps]
        old, new = gap_distance(before), gap_distance(after)

        if new < old:
            return 1.0 + (t.distance_weight_closer - 1.0) * urgency * t.distance_influence
        if new > old:
            return 1.0 - (1.0 - t.distance_weight_further) * urgency * t.distance_influence
        return 1.0


def _draw(rng: SeededRandom, weights: list[float]) -> int:
    """Pick an index with probability proportional to its weight."""
    total = sum(weights)
    r = rng.next_float() * total
    acc = 0.0
    for i, w in enumerate(weights):
        acc += w
        if r < acc:
            return i
    return len(weights) - 1


def shuffle(
    state: PuzzleState,
    steps: int,
    seed: int,
    board_hash: int = 0,
    randomize_gaps: bool = False,
) -> ShuffleResult:
    """Scramble *state* with a throwaway engine."""
    return ShuffleEngine(state).shuffle(steps, seed, board_hash, randomize_gaps)
