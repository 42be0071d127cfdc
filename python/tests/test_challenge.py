"""Challenge codes shared between players."""

from __future__ import annotations

import pytest

from backend.models.challenge import DEFAULT_STEPS, Challenge


def test_to_query() -> None:
    assert Challenge(seed=42).to_query() == "seed=42&steps=250&board=default"


def test_to_query_with_random_gaps() -> None:
    code = Challenge(seed=1, steps=10, board="vertical", randomize_gaps=True).to_query()
    assert code == "seed=1&steps=10&board=vertical&randomizeGaps=true"


@pytest.mark.parametrize(
    "code",
    [
        "seed=9&steps=30&board=horizontal",
        "?seed=9&steps=30&board=horizontal",
        "https://example.org/play?seed=9&steps=30&board=horizontal",
    ],
    ids=["bare", "leading-question-mark", "full-url"],
)
def test_from_query(code: str) -> None:
    assert Challenge.from_query(code) == Challenge(seed=9, steps=30, board="horizontal")


def test_from_query_reads_random_gaps() -> None:
    assert Challenge.from_query("seed=1&steps=2&randomizeGaps=true").randomize_gaps
    assert not Challenge.from_query("seed=1&steps=2&randomizeGaps=no").randomize_gaps


def test_unknown_board_falls_back_to_default() -> None:
    assert Challenge.from_query("seed=1&steps=2&board=spiral").board == "default"
    assert Challenge.from_query("seed=1&steps=2").board == "default"


def test_seed_is_reduced_to_32_bits() -> None:
    assert Challenge.from_query("seed=-1&steps=5").seed == 0xFFFFFFFF


@pytest.mark.parametrize(
    "code",
    ["steps=5", "seed=5", "seed=abc&steps=5", "seed=5&steps=1.5", ""],
    ids=["no-seed", "no-steps", "seed-not-int", "steps-not-int", "empty"],
)
def test_from_query_rejects(code: str) -> None:
    with pytest.raises(ValueError):
        Challenge.from_query(code)


def test_random_challenge() -> None:
    challenge = Challenge.random()
    assert 0 <= challenge.seed <= 0xFFFFFFFF
    assert challenge.steps == DEFAULT_STEPS
    assert challenge.board == "default"
