"""Move validation and application.

Every move is phrased from a gap's point of view: ``slide_into_gap(gap,
side)`` pulls whatever sits on ``side`` of the gap into it. Three cases
exist, decided by the piece found there:

* another gap: the two gaps swap places,
* a small piece: piece and gap swap places,
* a large piece: the 2×2 piece shifts one cell toward the gap, which is
  only possible when both cells on that face are gaps. Those two gaps
  reappear on the far face, each keeping its row (horizontal move) or
  column (vertical move).
"""

from __future__ import annotations

import logging
from typing import Callable

from backend.engine.gamestate.state import PuzzleState
from backend.models.board import Piece, Side, block
from backend.models.move import Move, MoveError, MoveKind, MoveResult

logger = logging.getLogger(__name__)

MoveObserver = Callable[[Move], None]

# A planned move: its kind and the new top-left position of each moved piece.
_Plan = tuple[MoveKind, list[tuple[Piece, int, int]]]


class MoveEngine:
    """Validates and applies single-step moves against a :class:`PuzzleState`."""

    def __init__(self, state: PuzzleState) -> None:
        self.state = state
        self.observers: list[MoveObserver] = []

    def subscribe(self, observer: MoveObserver) -> None:
        """Call *observer* with every successfully applied move."""
        self.observers.append(observer)

    # -- public API -----------------------------------------------------------

    def check(self, gap: Piece, side: Side) -> MoveResult:
        """Dry-run :meth:`slide_into_gap` without touching the state."""
        plan = self._plan(gap, side)
        if isinstance(plan, MoveError):
            return MoveResult.failure(plan)
        return MoveResult.success(Move(gap.id, side, plan[0]))

    def slide_into_gap(self, gap: Piece, side: Side) -> MoveResult:
        """Slide the neighbour on *side* of *gap* into it.

        All-or-nothing: on failure the state is untouched.
        """
        plan = self._plan(gap, side)
        if isinstance(plan, MoveError):
            logger.debug("Rejected %s side %s: %s", gap.id, side, plan)
            return MoveResult.failure(plan)

        kind, relocations = plan
        for piece, x, y in relocations:
            piece.x, piece.y = x, y
        self.state.apply_cell_update(piece for piece, _, _ in relocations)

        move = Move(gap.id, side, kind)
        for observer in self.observers:
            observer(move)
        return MoveResult.success(move)

    def apply(self, move: Move) -> MoveResult:
        return self.slide_into_gap(self.state.piece(move.gap_id), move.side)

    def valid_moves(self) -> list[Move]:
        """Every legal move, gaps in piece order and sides in N, E, S, W order."""
        moves: list[Move] = []
        for gap in self.state.gaps:
            for side in Side:
                plan = self._plan(gap, side)
                if not isinstance(plan, MoveError):
                    moves.append(Move(gap.id, side, plan[0]))
        return moves

    # -- planning -------------------------------------------------------------

    def _plan(self, gap: Piece, side: Side) -> _Plan | MoveError:
        if not gap.is_gap:
            return MoveError.NOT_A_GAP

        state = self.state
        dx, dy = side.offset
        sx, sy = gap.x + dx, gap.y + dy
        if not state.in_bounds(sx, sy):
            return MoveError.OUT_OF_BOUNDS

        source = state.piece_at(sx, sy)
        if source.is_gap:
            return MoveKind.GAP_SWAP, [(gap, sx, sy), (source, gap.x, gap.y)]
        if not source.is_large:
            return MoveKind.SMALL, [(source, gap.x, gap.y), (gap, sx, sy)]
        return self._plan_large(source, dx, dy)

    def _plan_large(self, piece: Piece, dx: int, dy: int) -> _Plan | MoveError:
        # The piece moves against the side offset, i.e. toward the gap.
        state = self.state
        nx, ny = piece.x - dx, piece.y - dy
        old = block(piece.x, piece.y)
        new = block(nx, ny)
        face = [c for c in new if c not in old]
        freed = [c for c in old if c not in new]

        relocations: list[tuple[Piece, int, int]] = [(piece, nx, ny)]
        for fx, fy in face:
            if not state.in_bounds(fx, fy):
                return MoveError.OUT_OF_BOUNDS
            occupant = state.piece_at(fx, fy)
            if not occupant.is_gap:
                return MoveError.MISALIGNED_LARGE_MOVE
            if dx != 0:
                tx, ty = next(c for c in freed if c[1] == fy)
            else:
                tx, ty = next(c for c in freed if c[0] == fx)
            relocations.append((occupant, tx, ty))
        return MoveKind.LARGE, relocations
