"""MoveEngine: small slides, gap swaps and aligned 2×2 moves."""

from __future__ import annotations

import pytest

from backend.engine.gamestate import MoveEngine, PuzzleState
from backend.models.board import BoardConfig, Side
from backend.models.boards import DEFAULT_BOARD
from backend.models.move import Move, MoveError, MoveKind


@pytest.fixture
def state() -> PuzzleState:
    return PuzzleState.solved(DEFAULT_BOARD)


@pytest.fixture
def engine(state: PuzzleState) -> MoveEngine:
    return MoveEngine(state)


def _pos(state: PuzzleState, piece_id: str) -> tuple[int, int]:
    piece = state.piece(piece_id)
    return piece.x, piece.y


# -- single-cell moves --------------------------------------------------------


def test_small_piece_slides_into_gap(state: PuzzleState, engine: MoveEngine) -> None:
    result = engine.slide_into_gap(state.piece("G0"), Side.N)

    assert result.ok
    assert result.move == Move("G0", Side.N, MoveKind.SMALL)
    assert _pos(state, "S23") == (7, 6)
    assert _pos(state, "G0") == (7, 5)
    state.check_consistency()


def test_gap_swap(state: PuzzleState, engine: MoveEngine) -> None:
    result = engine.slide_into_gap(state.piece("G0"), Side.S)

    assert result.move == Move("G0", Side.S, MoveKind.GAP_SWAP)
    assert _pos(state, "G0") == (7, 7)
    assert _pos(state, "G1") == (7, 6)
    state.check_consistency()


@pytest.mark.parametrize(
    ("gap_id", "side"),
    [("G0", Side.E), ("G1", Side.E), ("G1", Side.S)],
)
def test_out_of_bounds(state: PuzzleState, engine: MoveEngine, gap_id: str, side: Side) -> None:
    before = state.positions()
    result = engine.slide_into_gap(state.piece(gap_id), side)

    assert not result
    assert result.error is MoveError.OUT_OF_BOUNDS
    assert state.positions() == before


def test_non_gap_cannot_act(state: PuzzleState, engine: MoveEngine) -> None:
    result = engine.slide_into_gap(state.piece("S0"), Side.E)
    assert result.error is MoveError.NOT_A_GAP


# -- large moves --------------------------------------------------------------


def test_large_piece_moves_toward_aligned_gaps(state: PuzzleState, engine: MoveEngine) -> None:
    result = engine.slide_into_gap(state.piece("G0"), Side.W)

    assert result.move == Move("G0", Side.W, MoveKind.LARGE)
    assert _pos(state, "B7") == (6, 6)
    # Each gap keeps its row.
    assert _pos(state, "G0") == (5, 6)
    assert _pos(state, "G1") == (5, 7)
    state.check_consistency()


def test_large_move_from_either_face_gap(state: PuzzleState, engine: MoveEngine) -> None:
    result = engine.slide_into_gap(state.piece("G1"), Side.W)

    assert result.move == Move("G1", Side.W, MoveKind.LARGE)
    assert _pos(state, "B7") == (6, 6)
    assert _pos(state, "G0") == (5, 6)
    assert _pos(state, "G1") == (5, 7)


def test_large_move_needs_both_face_cells_free(state: PuzzleState, engine: MoveEngine) -> None:
    engine.slide_into_gap(state.piece("G0"), Side.N)
    before = state.positions()

    result = engine.slide_into_gap(state.piece("G1"), Side.W)

    assert result.error is MoveError.MISALIGNED_LARGE_MOVE
    assert state.positions() == before
    state.check_consistency()


def test_vertical_large_move_keeps_columns() -> None:
    state = PuzzleState.solved(
        BoardConfig(2, 3, gap_identities=[(0, 2), (1, 2)], large_pieces=[(0, 0)])
    )
    engine = MoveEngine(state)

    result = engine.slide_into_gap(state.piece("G0"), Side.N)

    assert result.move == Move("G0", Side.N, MoveKind.LARGE)
    assert _pos(state, "B0") == (0, 1)
    assert _pos(state, "G0") == (0, 0)
    assert _pos(state, "G1") == (1, 0)
    state.check_consistency()


def test_single_gap_cannot_move_large_piece() -> None:
    state = PuzzleState.solved(
        BoardConfig(3, 2, gap_identities=[(2, 0)], large_pieces=[(0, 0)])
    )
    engine = MoveEngine(state)

    result = engine.slide_into_gap(state.piece("G0"), Side.W)
    assert result.error is MoveError.MISALIGNED_LARGE_MOVE


# -- inverses and enumeration -------------------------------------------------


@pytest.mark.parametrize("side", [Side.N, Side.S, Side.W])
def test_inverse_restores_layout(state: PuzzleState, engine: MoveEngine, side: Side) -> None:
    before = state.positions()
    move = engine.slide_into_gap(state.piece("G0"), side).move
    assert move is not None

    assert engine.apply(move.inverse()).ok
    assert state.positions() == before
    state.check_consistency()


def test_valid_moves_from_solved_default(engine: MoveEngine) -> None:
    assert engine.valid_moves() == [
        Move("G0", Side.N, MoveKind.SMALL),
        Move("G0", Side.S, MoveKind.GAP_SWAP),
        Move("G0", Side.W, MoveKind.LARGE),
        Move("G1", Side.N, MoveKind.GAP_SWAP),
        Move("G1", Side.W, MoveKind.LARGE),
    ]


def test_check_is_a_dry_run(state: PuzzleState, engine: MoveEngine) -> None:
    before = state.positions()
    result = engine.check(state.piece("G0"), Side.W)

    assert result.move == Move("G0", Side.W, MoveKind.LARGE)
    assert state.positions() == before


def test_observers_see_applied_moves_only(state: PuzzleState, engine: MoveEngine) -> None:
    seen: list[Move] = []
    engine.subscribe(seen.append)

    engine.slide_into_gap(state.piece("G1"), Side.S)
    engine.slide_into_gap(state.piece("G0"), Side.N)

    assert seen == [Move("G0", Side.N, MoveKind.SMALL)]


def test_grid_stays_consistent_over_many_moves(state: PuzzleState, engine: MoveEngine) -> None:
    for i in range(200):
        moves = engine.valid_moves()
        if not moves:
            break
        engine.apply(moves[(i * 7) % len(moves)])
        state.check_consistency()
