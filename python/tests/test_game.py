"""GamePlay session: moves, undo/redo, callbacks and challenge mode."""

from __future__ import annotations

import pytest

from backend.engine.gameplay import GameMode, GamePlay, MoveHistory, SessionClock
from backend.engine.gameplay import clock as clock_module
from backend.models.board import BoardConfig, InvalidBoardConfig, Side
from backend.models.boards import VERTICAL_BOARD
from backend.models.challenge import Challenge
from backend.models.move import Move, MoveError, MoveKind


@pytest.fixture
def game() -> GamePlay:
    return GamePlay.from_slug("default")


def _solve(game: GamePlay, moves: list[Move]) -> None:
    for move in reversed(moves):
        game.engine.apply(move.inverse())


# -- free play ----------------------------------------------------------------


def test_new_game_is_solved_free_play(game: GamePlay) -> None:
    assert game.is_solved()
    assert game.mode is GameMode.FREE_PLAY
    assert game.moves == 0
    assert not game.locked


def test_load_board_validates() -> None:
    with pytest.raises(InvalidBoardConfig):
        GamePlay.load_board(BoardConfig(3, 3, large_pieces=[(2, 2)]))


def test_snapshots_are_copies(game: GamePlay) -> None:
    pieces = game.get_pieces()
    pieces[0].x = 99
    assert game.state.pieces[0].x == 0
    assert len(game.get_grid()) == 64


def test_attempt_move_counts(game: GamePlay) -> None:
    result = game.attempt_move(Side.N)

    assert result.move == Move("G0", Side.N, MoveKind.SMALL)
    assert game.moves == 1
    assert not game.is_solved()


def test_failed_move_is_not_counted(game: GamePlay) -> None:
    assert game.attempt_move(Side.E).error is MoveError.OUT_OF_BOUNDS
    assert game.moves == 0
    assert not game.history.can_undo


def test_attempt_move_without_selection() -> None:
    game = GamePlay.load_board(BoardConfig(2, 2))
    assert game.attempt_move(Side.N).error is MoveError.NO_GAP_SELECTED


def test_gap_selection_routes_moves(game: GamePlay) -> None:
    game.cycle_gap_selection()
    assert game.state.selected_gap.id == "G1"
    assert game.attempt_move(Side.W).move == Move("G1", Side.W, MoveKind.LARGE)

    assert game.select_gap("G0").ok
    assert game.select_gap("S0").error is MoveError.NOT_A_GAP


def test_gap_click_swaps(game: GamePlay) -> None:
    result = game.resolve_gap_click("G0")
    assert result.move.kind is MoveKind.GAP_SWAP
    assert game.moves == 1


# -- undo / redo --------------------------------------------------------------


def test_undo_and_redo(game: GamePlay) -> None:
    game.attempt_move(Side.W)
    after_move = game.state.positions()

    assert game.undo().ok
    assert game.is_solved()
    assert game.redo().ok
    assert game.state.positions() == after_move
    assert game.moves == 3


def test_undo_reselects_acting_gap(game: GamePlay) -> None:
    game.cycle_gap_selection()
    game.attempt_move(Side.N)
    game.select_gap("G0")

    game.undo()
    assert game.state.selected_gap.id == "G1"
    assert game.is_solved()


def test_new_move_clears_redo(game: GamePlay) -> None:
    game.attempt_move(Side.N)
    game.undo()
    game.attempt_move(Side.W)
    assert game.redo().error is MoveError.NOTHING_TO_UNDO


def test_undo_on_empty_history(game: GamePlay) -> None:
    assert game.undo().error is MoveError.NOTHING_TO_UNDO


# -- callbacks ----------------------------------------------------------------


def test_on_move_and_on_win(game: GamePlay) -> None:
    moved: list[Move] = []
    wins: list[GamePlay] = []
    game.on_move.append(moved.append)
    game.on_win.append(wins.append)

    game.attempt_move(Side.N)
    assert wins == []
    game.attempt_move(Side.S)

    assert [m.side for m in moved] == [Side.N, Side.S]
    assert wins == [game]
    # Free play never locks.
    assert not game.locked


def test_shuffle_does_not_fire_callbacks(game: GamePlay) -> None:
    moved: list[Move] = []
    game.on_move.append(moved.append)

    result = game.shuffle(50, 3)

    assert result.moves
    assert moved == []
    assert game.moves == 0
    assert not game.history.can_undo


def test_reset(game: GamePlay) -> None:
    game.shuffle(50, 3)
    game.reset()
    assert game.is_solved()
    assert game.mode is GameMode.FREE_PLAY


def test_randomize_gaps(game: GamePlay) -> None:
    game.attempt_move(Side.N)
    assert game.randomize_gaps(4, seed=9).ok

    assert len(game.state.gaps) == 4
    assert game.state.selected_gap is not None
    assert game.moves == 0
    assert not game.history.can_undo


def test_reset_gaps_restores_configured_gaps(game: GamePlay) -> None:
    game.randomize_gaps(5, seed=9)
    assert game.reset_gaps().ok

    assert [g.id for g in game.state.gaps] == ["G0", "G1"]
    assert game.state.selected_gap.id == "G0"
    assert game.is_solved()


@pytest.mark.parametrize("gap_id", ["nope", "B0", "S0"])
def test_unknown_or_non_gap_ids_fail_softly(game: GamePlay, gap_id: str) -> None:
    assert game.select_gap(gap_id).error is MoveError.NOT_A_GAP
    assert game.resolve_gap_click(gap_id).error is MoveError.NOT_A_GAP
    assert game.state.selected_gap.id == "G0"


# -- challenge mode -----------------------------------------------------------


def test_start_challenge(game: GamePlay) -> None:
    result = game.start_challenge(Challenge(seed=12345))

    assert game.mode is GameMode.CHALLENGE
    assert game.challenge == Challenge(seed=12345)
    assert result.moves
    assert not game.is_solved()
    assert game.clock.running
    assert game.moves == 0


def test_challenge_is_reproducible(game: GamePlay) -> None:
    game.start_challenge(Challenge(seed=777, steps=120))
    first = game.state.positions()

    other = GamePlay.from_slug("default")
    other.start_challenge(Challenge(seed=777, steps=120))
    assert other.state.positions() == first

    game.attempt_move(Side.N)
    game.restart_challenge()
    assert game.state.positions() == first


def test_challenge_switches_board(game: GamePlay) -> None:
    game.start_challenge(Challenge(seed=1, steps=40, board="vertical"))
    assert game.config is VERTICAL_BOARD
    assert game.slug == "vertical"
    assert game.board_hash == 2


def test_pause_locks_challenge(game: GamePlay) -> None:
    game.start_challenge(Challenge(seed=5, steps=60))
    game.pause()

    assert game.locked
    assert game.attempt_move(Side.N).error is MoveError.LOCKED
    assert game.undo().error is MoveError.LOCKED

    game.resume()
    assert not game.locked


def test_gap_reassignment_refused_while_locked(game: GamePlay) -> None:
    game.start_challenge(Challenge(seed=1, steps=0))
    game.pause()
    before = game.state.positions()

    assert game.randomize_gaps(None, seed=7).error is MoveError.LOCKED
    assert game.reset_gaps().error is MoveError.LOCKED
    assert game.state.positions() == before


def test_solving_challenge_locks_and_stops_clock(game: GamePlay) -> None:
    wins: list[GamePlay] = []
    game.on_win.append(wins.append)
    result = game.start_challenge(Challenge(seed=12345, steps=80))

    _solve(game, result.moves)

    assert game.is_solved()
    assert game.challenge_solved
    assert not game.clock.running
    assert wins
    assert game.attempt_move(Side.N).error is MoveError.LOCKED

    game.resume()
    assert game.locked


def test_give_up_keeps_board(game: GamePlay) -> None:
    game.start_challenge(Challenge(seed=12345, steps=80))
    scrambled = game.state.positions()

    game.give_up()

    assert game.mode is GameMode.FREE_PLAY
    assert game.challenge is None
    assert game.state.positions() == scrambled
    assert game.restart_challenge() is None
    assert not game.locked


# -- history and clock --------------------------------------------------------


def test_move_history_stacks() -> None:
    history = MoveHistory()
    a = Move("G0", Side.N, MoveKind.SMALL)
    b = Move("G0", Side.W, MoveKind.SMALL)
    history.record(a)
    history.record(b)

    assert history.pop_undo() == b
    assert history.can_redo
    assert history.pop_redo() == b
    assert len(history) == 2

    history.clear()
    assert history.pop_undo() is None
    assert history.pop_redo() is None


class _FakeTime:
    def __init__(self) -> None:
        self.now = 1000.0

    def time(self) -> float:
        return self.now


def test_session_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeTime()
    monkeypatch.setattr(clock_module, "time", fake)

    clock = SessionClock()
    fake.now += 10
    clock.pause()
    fake.now += 100
    assert clock.elapsed_time == pytest.approx(10)

    clock.resume()
    fake.now += 5
    assert clock.elapsed_time == pytest.approx(15)

    clock.restart()
    fake.now += 2
    assert clock.elapsed_time == pytest.approx(2)
    assert clock.running
