"""Gap selection, click-to-swap resolution and gap reassignment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from backend.engine.gamestate.moves import MoveEngine
from backend.engine.gamestate.state import PuzzleState
from backend.models.board import Piece, Role, Side
from backend.models.move import MoveError, MoveResult

if TYPE_CHECKING:
    from backend.engine.gamegenerator.rng import SeededRandom

logger = logging.getLogger(__name__)


class GapManager:
    def __init__(self, state: PuzzleState, engine: MoveEngine) -> None:
        self.state = state
        self.engine = engine

    # -- selection ------------------------------------------------------------

    def select(self, gap_id: str) -> MoveResult:
        gap = self.state.find(gap_id)
        if gap is None or not gap.is_gap:
            return MoveResult.failure(MoveError.NOT_A_GAP)
        self.state.select(gap)
        return MoveResult.success()

    def cycle_selection(self) -> None:
        """Select the gap after the current one, wrapping around."""
        gaps = self.state.gaps
        if len(gaps) < 2:
            return
        current = self.state.selected_gap
        idx = gaps.index(current) if current is not None else -1
        self.state.select(gaps[(idx + 1) % len(gaps)])

    # -- click-to-swap --------------------------------------------------------

    def adjacent_gaps(self, gap: Piece) -> list[tuple[Piece, Side]]:
        """Gaps orthogonally next to *gap*, with the side they sit on."""
        found: list[tuple[Piece, Side]] = []
        for side in Side:
            dx, dy = side.offset
            x, y = gap.x + dx, gap.y + dy
            if self.state.in_bounds(x, y):
                neighbour = self.state.piece_at(x, y)
                if neighbour.is_gap:
                    found.append((neighbour, side))
        return found

    def resolve_swap_intent(self, gap_id: str) -> MoveResult:
        """Handle a click on a gap.

        An unselected gap becomes selected. Clicking the selected gap swaps it
        with its neighbouring gap, but only when exactly one neighbour is a
        gap; with none or several the click does nothing.
        """
        gap = self.state.find(gap_id)
        if gap is None or not gap.is_gap:
            return MoveResult.failure(MoveError.NOT_A_GAP)
        if not gap.selected:
            self.state.select(gap)
            return MoveResult.success()

        neighbours = self.adjacent_gaps(gap)
        if not neighbours:
            return MoveResult.failure(MoveError.NOT_ADJACENT_GAP)
        if len(neighbours) > 1:
            return MoveResult.failure(MoveError.AMBIGUOUS_GAP_SWAP)
        _, side = neighbours[0]
        return self.engine.slide_into_gap(gap, side)

    # -- reassignment ---------------------------------------------------------

    def randomize_gap_assignment(self, rng: SeededRandom, count: int | None = None) -> list[Piece]:
        """Choose which single-cell pieces act as gaps.

        Positions and identities are untouched; only roles flip. Returns the
        new gaps, the first of which is selected.
        """
        candidates = [p for p in self.state.pieces if not p.is_large]
        if count is None:
            count = len(self.state.gaps)
        if not 0 <= count <= len(candidates):
            raise ValueError(
                f"Cannot make {count} gaps from {len(candidates)} single-cell pieces."
            )

        shuffled = list(candidates)
        for i in range(len(shuffled) - 1, 0, -1):
            j = rng.next_int(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        chosen = shuffled[:count]

        for piece in candidates:
            piece.role = Role.SMALL
            piece.selected = False
        for piece in chosen:
            piece.role = Role.GAP
        if chosen:
            chosen[0].selected = True

        self.state.rebuild_grid()
        logger.debug("Gap pieces are now %s", ", ".join(p.id for p in chosen))
        return chosen

    def reset_gap_assignment(self) -> list[Piece]:
        """Make the pieces whose home is a configured gap cell the gaps again.

        Undoes :meth:`randomize_gap_assignment`; positions are untouched.
        """
        identities = self.state.config.gap_identities
        candidates = [p for p in self.state.pieces if not p.is_large]
        for piece in candidates:
            piece.role = Role.GAP if (piece.home_x, piece.home_y) in identities else Role.SMALL
            piece.selected = False

        gaps = self.state.gaps
        if gaps:
            gaps[0].selected = True
        self.state.rebuild_grid()
        logger.debug("Gap pieces reset to %s", ", ".join(p.id for p in gaps))
        return gaps
