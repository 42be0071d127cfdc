#!/usr/bin/env python3
"""Gap Slide puzzle.

Usage::

    python main.py                                  # interactive menu
    python main.py -b horizontal                    # free play on a board
    python main.py --seed 12345 --steps 250         # start a challenge
    python main.py --challenge "seed=1&steps=250&board=vertical"
    python main.py --seed 12345 --print             # render once and exit
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from backend.engine.gameplay import GamePlay
from backend.models.board import BoardConfig, InvalidBoardConfig
from backend.models.boards import BOARDS
from backend.models.challenge import DEFAULT_STEPS, Challenge


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _load_board_file(path: Path) -> BoardConfig:
    try:
        config = BoardConfig.from_dict(json.loads(path.read_text()))
        config.validate()
    except (OSError, json.JSONDecodeError, InvalidBoardConfig) as exc:
        raise typer.BadParameter(str(exc), param_hint="--board-file") from exc
    return config


def _build_game(board: str, board_file: Optional[Path]) -> GamePlay:
    if board_file is not None:
        return GamePlay.load_board(_load_board_file(board_file))
    if board not in BOARDS:
        raise typer.BadParameter(
            f"expected one of {', '.join(BOARDS)}", param_hint="--board"
        )
    return GamePlay.from_slug(board)


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    board: str = typer.Option(
        "default", "-b", "--board",
        help=f"Built-in board: {', '.join(BOARDS)}.",
    ),
    board_file: Optional[Path] = typer.Option(
        None, "--board-file",
        exists=True, dir_okay=False,
        help="JSON board description (width, height, gapIdentities, largePieces).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Shuffle seed; starts a challenge on a built-in board.",
    ),
    steps: int = typer.Option(
        DEFAULT_STEPS, "-n", "--steps",
        min=0,
        help="Number of shuffle moves.",
    ),
    randomize_gaps: bool = typer.Option(
        False, "--randomize-gaps",
        help="Pick new gap pieces before shuffling.",
    ),
    challenge: Optional[str] = typer.Option(
        None, "-c", "--challenge",
        help="Challenge code, e.g. 'seed=1&steps=250&board=default'.",
    ),
    print_only: bool = typer.Option(
        False, "--print",
        help="Render the board once and exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log engine activity.",
    ),
) -> None:
    """Gap Slide puzzle."""
    _configure_logging(verbose)
    from frontend.cli.rich import app as rich_app

    if challenge is not None and board_file is not None:
        # Challenge codes name a built-in board.
        raise typer.BadParameter(
            "cannot be combined with --board-file", param_hint="--challenge"
        )

    picked: Optional[Challenge] = None
    if challenge is not None:
        try:
            picked = Challenge.from_query(challenge)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--challenge") from exc
        board = picked.board
    elif seed is not None and board_file is None:
        picked = Challenge(seed=seed, steps=steps, board=board, randomize_gaps=randomize_gaps)

    game = _build_game(board, board_file)

    if print_only:
        if picked is not None:
            game.start_challenge(picked)
        elif seed is not None:
            game.shuffle(steps, seed, randomize_gaps=randomize_gaps)
        rich_app.print_board(game)
        return

    interactive = (
        board != "default" or board_file is not None or picked is not None or seed is not None
    )
    if not interactive:
        rich_app.run()
    elif picked is not None:
        rich_app.run(game, picked)
    else:
        if seed is not None:
            game.shuffle(steps, seed, randomize_gaps=randomize_gaps)
        rich_app.run(game)


if __name__ == "__main__":
    app()
