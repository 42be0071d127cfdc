"""Rich terminal frontend — styled board, panels and a shuffle progress bar.

Uses the ``rich`` library for output and the shared single-key input
handler. All puzzle logic lives in :class:`GamePlay`; this module only
draws its snapshots and turns keys into calls.
"""

from __future__ import annotations

import sys
from typing import Callable

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from backend.engine.gameplay import GameMode, GamePlay
from backend.engine.gamegenerator import ShuffleResult
from backend.engine.gamegenerator.generator import Checkpoint
from backend.engine.gamestate import misplaced
from backend.models.board import Piece
from backend.models.boards import BOARDS
from backend.models.challenge import DEFAULT_STEPS, Challenge, random_seed
from backend.models.move import Move, MoveError, MoveResult
from frontend.cli.input_handler import (
    gap_index_for_action,
    get_key,
    get_key_timeout,
    side_for_action,
)

console = Console()

_PALETTE = (
    "magenta", "cyan", "yellow", "blue",
    "red", "bright_green", "bright_magenta", "bright_cyan",
)

_ERROR_TEXT: dict[MoveError, str] = {
    MoveError.OUT_OF_BOUNDS: "[yellow]Nothing on that side of the gap.[/yellow]",
    MoveError.MISALIGNED_LARGE_MOVE: "[yellow]A large piece needs two aligned gaps.[/yellow]",
    MoveError.NOT_ADJACENT_GAP: "[yellow]No gap next to this one to swap with.[/yellow]",
    MoveError.AMBIGUOUS_GAP_SWAP: "[yellow]Several gaps are adjacent; move instead.[/yellow]",
    MoveError.LOCKED: "[dim]Board is locked.[/dim]",
    MoveError.NOTHING_TO_UNDO: "[dim]Nothing to undo.[/dim]",
}


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _status_for(result: MoveResult) -> str:
    if result.ok or result.error is None:
        return ""
    return _ERROR_TEXT.get(result.error, f"[yellow]{result.error.value}[/yellow]")


# -- board rendering ----------------------------------------------------------


def _cell_markup(game: GamePlay, piece: Piece, ox: int, oy: int, width: int) -> str:
    if piece.is_gap:
        mark = "■" if piece.selected else "·"
        if piece.selected:
            style = "bold reverse green"
        else:
            style = "dim green" if piece.is_home else "dim"
        return f"[{style}]{mark:^{width}}[/{style}]"

    if piece.is_large:
        colour = _PALETTE[int(piece.id[1:]) % len(_PALETTE)]
        label = piece.id if (ox, oy) == (0, 0) else "█" * width
        style = f"bold {colour}" if piece.is_home else colour
        return f"[{style}]{label:^{width}}[/{style}]"

    number = piece.home_y * game.config.width + piece.home_x
    style = "bold green" if piece.is_home else "bold white"
    return f"[{style}]{number:>{width}}[/{style}]"


def _render_board(game: GamePlay) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    state = game.state
    width = max(3, len(str(state.config.cell_count - 1)))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 0),
    )
    for _ in range(state.width):
        table.add_column(width=width, justify="center")

    for y in range(state.height):
        row: list[str] = []
        for x in range(state.width):
            cell = state.cell(x, y)
            row.append(_cell_markup(game, state.piece(cell.piece_id), cell.ox, cell.oy, width))
        table.add_row(*row)
    return table


def _shuffle_with_progress(
    action: Callable[[Checkpoint], ShuffleResult | None],
    total: int,
) -> ShuffleResult | None:
    """Run a shuffle callable, showing a transient progress bar."""
    with Progress(
        TextColumn("[bold cyan]Shuffling"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("shuffle", total=max(total, 1))

        def _checkpoint(step: int, move: Move) -> None:
            progress.update(task, completed=step + 1)

        return action(_checkpoint)


# -- menu screen --------------------------------------------------------------


def _draw_menu(slugs: list[str], sel: int) -> None:
    console.clear()

    boards = Text()
    for i, slug in enumerate(slugs):
        if i:
            boards.append("  ")
        config = BOARDS[slug]
        label = f" {slug} {config.width}×{config.height} "
        if i == sel:
            boards.append(label, style="bold green on #313244")
        else:
            boards.append(label, style="dim")

    nav = Text("  ← →  change board", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Free play    ")
    opts.append("2", style="bold yellow")
    opts.append("  Challenge    ")
    opts.append("3", style="bold yellow")
    opts.append("  Enter code    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(boards),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )
    panel = Panel(
        body,
        title="[bold]G A P   S L I D E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


# -- game screens -------------------------------------------------------------


def _controls(game: GamePlay) -> Text:
    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append("/", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append(" move  ", style="dim")
    controls.append("Space", style="bold cyan")
    controls.append(" next gap  ", style="dim")
    controls.append("1-9", style="bold cyan")
    controls.append(" click gap  ", style="dim")
    controls.append("U/Y", style="bold cyan")
    controls.append(" undo/redo  ", style="dim")
    if game.mode is GameMode.CHALLENGE:
        controls.append("P", style="bold cyan")
        controls.append(" pause  ", style="dim")
        controls.append("R", style="bold cyan")
        controls.append(" restart  ", style="dim")
        controls.append("G", style="bold cyan")
        controls.append(" give up  ", style="dim")
    else:
        controls.append("X", style="bold yellow")
        controls.append(" shuffle  ", style="dim")
        controls.append("N/B", style="bold yellow")
        controls.append(" new/original gaps  ", style="dim")
        controls.append("R", style="bold cyan")
        controls.append(" reset  ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append(" back", style="dim")
    return controls


def _draw_game(game: GamePlay, status: str = "") -> None:
    console.clear()
    name = game.slug or "custom"
    board_table = _render_board(game)

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.moves), style="bold yellow")
    stats.append("    Misplaced: ", style="dim")
    stats.append(str(len(misplaced(game.state.pieces))), style="bold yellow")
    if game.mode is GameMode.CHALLENGE and game.challenge is not None:
        stats.append("    Time: ", style="dim")
        stats.append(_format_time(game.clock.elapsed_time), style="bold yellow")
        stats.append("    Code: ", style="dim")
        stats.append(game.challenge.to_query(), style="cyan")
        title = f"[bold yellow]Challenge  {name}[/bold yellow]"
        border = "yellow"
    else:
        title = f"[bold cyan]Free Play  {name}[/bold cyan]"
        border = "bright_blue"

    if game.mode is GameMode.CHALLENGE and not game.clock.running and not game.challenge_solved:
        body = Align.center(Text("\n  PAUSED, press P to resume\n", style="bold yellow"))
    else:
        body = Align.center(board_table)

    panel = Panel(body, title=title, border_style=border, padding=(1, 2))
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls(game)))


def _draw_win(game: GamePlay) -> None:
    console.clear()

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("CONGRATULATIONS!", style="bold green")
    congrats.append("  You solved the challenge!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(game.clock.elapsed_time), style="bold yellow")

    panel = Panel(
        Group(Align.center(_render_board(game)), Align.center(congrats), Align.center(stats)),
        title=f"[bold green]Challenge  {game.slug or 'custom'}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


# -- game loop ----------------------------------------------------------------


def _handle_common(game: GamePlay, key: str) -> str:
    """Keys shared by both modes; returns a status line."""
    side = side_for_action(key)
    if side is not None:
        return _status_for(game.attempt_move(side))

    index = gap_index_for_action(key)
    if index is not None:
        gaps = game.state.gaps
        if index >= len(gaps):
            return f"[dim]There is no gap {index + 1}.[/dim]"
        return _status_for(game.resolve_gap_click(gaps[index].id))

    if key == "cycle":
        return _status_for(game.cycle_gap_selection())
    if key == "undo":
        return _status_for(game.undo())
    if key == "redo":
        return _status_for(game.redo())
    if key == "help":
        return (
            "[dim]Arrows move a tile into the selected gap. A large piece moves "
            "only when both cells in front of it are gaps.[/dim]"
        )
    return ""


def play(game: GamePlay) -> None:
    """Run the interactive loop on *game* until the player backs out."""
    status = ""
    while True:
        _draw_game(game, status)
        status = ""

        if game.mode is GameMode.CHALLENGE and game.clock.running:
            # Short timeout so the clock keeps ticking on screen.
            key = get_key_timeout(1.0)
            if key is None:
                continue
        else:
            key = get_key()

        if key == "quit":
            return

        if game.mode is GameMode.CHALLENGE:
            if key == "pause":
                if game.clock.running:
                    game.pause()
                else:
                    game.resume()
                continue
            if key == "give_up":
                game.give_up()
                status = "[yellow]Challenge abandoned, back to free play.[/yellow]"
                continue
            if key == "restart":
                _shuffle_with_progress(
                    lambda cp: game.restart_challenge(cp), game.challenge.steps
                )
                status = "[yellow]Challenge restarted.[/yellow]"
                continue
        else:
            if key == "shuffle":
                seed = random_seed()
                _shuffle_with_progress(
                    lambda cp: game.shuffle(DEFAULT_STEPS, seed, checkpoint=cp), DEFAULT_STEPS
                )
                status = f"[yellow]Shuffled (seed {seed}).[/yellow]"
                continue
            if key == "randomize_gaps":
                seed = random_seed()
                status = _status_for(game.randomize_gaps(None, seed)) or (
                    f"[yellow]New gaps (seed {seed}).[/yellow]"
                )
                continue
            if key == "reset_gaps":
                status = _status_for(game.reset_gaps()) or "[green]Gaps restored.[/green]"
                continue
            if key == "restart":
                game.reset()
                status = "[green]Reset to solved.[/green]"
                continue

        status = _handle_common(game, key)

        if game.mode is GameMode.CHALLENGE and game.challenge_solved:
            _draw_win(game)
            console.print(
                Align.center(Text("\n  Press any key to continue in free play.\n", style="dim"))
            )
            get_key()
            game.give_up()


def start_challenge(game: GamePlay, challenge: Challenge) -> None:
    _shuffle_with_progress(
        lambda cp: game.start_challenge(challenge, cp), challenge.steps
    )
    play(game)


# -- menu loop ----------------------------------------------------------------


def _menu_loop() -> None:
    slugs = list(BOARDS)
    sel = 0

    while True:
        _draw_menu(slugs, sel)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel = max(0, sel - 1)
        elif key == "right":
            sel = min(len(slugs) - 1, sel + 1)
        elif key in ("1", "enter"):
            play(GamePlay.from_slug(slugs[sel]))
        elif key == "2":
            game = GamePlay.from_slug(slugs[sel])
            start_challenge(game, Challenge.random(board=slugs[sel]))
        elif key == "3":
            code = Prompt.ask("  Challenge code", console=console)
            try:
                challenge = Challenge.from_query(code)
            except ValueError as exc:
                console.print(f"  [red]{exc}[/red]")
                get_key()
                continue
            start_challenge(GamePlay.from_slug(challenge.board), challenge)


# -- public entry points ------------------------------------------------------


def print_board(game: GamePlay) -> None:
    """Render *game* once, without interaction."""
    console.print(_render_board(game))
    solved = "[green]solved[/green]" if game.is_solved() else "[yellow]scrambled[/yellow]"
    console.print(f"  {game.slug or 'custom'} board, {solved}")
    sys.stdout.flush()


def run(game: GamePlay | None = None, challenge: Challenge | None = None) -> None:
    """Launch the Rich CLI: straight into a game when given one, else the menu."""
    if game is None:
        _menu_loop()
    elif challenge is not None:
        start_challenge(game, challenge)
    else:
        play(game)
