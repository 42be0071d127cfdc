"""Move descriptions and move outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from backend.models.board import Side


class MoveKind(StrEnum):
    SMALL = "small"
    LARGE = "large"
    GAP_SWAP = "gap_swap"


class MoveError(StrEnum):
    """Why a move or gap action was refused. State is never changed."""

    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_ADJACENT_GAP = "not_adjacent_gap"
    MISALIGNED_LARGE_MOVE = "misaligned_large_move"
    AMBIGUOUS_GAP_SWAP = "ambiguous_gap_swap"
    NOT_A_GAP = "not_a_gap"
    NO_GAP_SELECTED = "no_gap_selected"
    LOCKED = "locked"
    NOTHING_TO_UNDO = "nothing_to_undo"


@dataclass(frozen=True)
class Move:
    """One step: ``side`` of gap ``gap_id`` slides into the gap."""

    gap_id: str
    side: Side
    kind: MoveKind

    def inverse(self) -> Move:
        # The acting gap always ends up adjacent to what it displaced, on the
        # opposite side.
        return Move(self.gap_id, self.side.opposite, self.kind)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a mutating call; truthy on success."""

    move: Move | None = None
    error: MoveError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, move: Move | None = None) -> MoveResult:
        return cls(move=move)

    @classmethod
    def failure(cls, error: MoveError) -> MoveResult:
        return cls(error=error)
