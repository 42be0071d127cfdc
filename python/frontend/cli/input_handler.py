"""Single-keypress reader and key bindings for the terminal frontend.

Handles arrow keys, WASD, and special keys without requiring Enter.
Works on macOS / Linux (tty+termios) and Windows (msvcrt).

Movement keys name the direction the *tile* travels, the way players
think about it. The engine instead asks which neighbour of the gap slides
in, so the mapping to :class:`Side` is inverted here, in one place:
pressing "up" pulls the tile *below* the gap (``Side.S``) up into it.
"""

from __future__ import annotations

import os
import sys

from backend.models.board import Side


# -- low-level character readers -----------------------------------------------


def _getch_unix() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return ch


def _getch_windows() -> str:
    import msvcrt  # type: ignore[import-not-found]

    return msvcrt.getch().decode("utf-8", errors="ignore")


_getch = _getch_windows if os.name == "nt" else _getch_unix


# -- shared key mapping --------------------------------------------------------

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "W": "up",
    "s": "down",
    "S": "down",
    "a": "left",
    "A": "left",
    "d": "right",
    "D": "right",
    " ": "cycle",
    "\t": "cycle",
    "u": "undo",
    "U": "undo",
    "y": "redo",
    "Y": "redo",
    "x": "shuffle",
    "X": "shuffle",
    "g": "give_up",
    "G": "give_up",
    "p": "pause",
    "P": "pause",
    "q": "quit",
    "Q": "quit",
    "\x03": "quit",  # Ctrl-C
    "n": "randomize_gaps",
    "N": "randomize_gaps",
    "b": "reset_gaps",
    "B": "reset_gaps",
    "r": "restart",
    "R": "restart",
    "h": "help",
    "?": "help",
    "\r": "enter",
    "\n": "enter",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}

# Tile travel direction -> side of the gap the tile comes from.
ACTION_SIDES: dict[str, Side] = {
    "up": Side.S,
    "down": Side.N,
    "left": Side.E,
    "right": Side.W,
}


def _resolve(ch: str) -> str:
    """Map a raw character to its action string."""
    return _KEY_MAP.get(ch, ch if ch.isprintable() else "")


def side_for_action(action: str | None) -> Side | None:
    """Return the engine side for a movement action, else ``None``."""
    if action is None:
        return None
    return ACTION_SIDES.get(action)


def gap_index_for_action(action: str | None) -> int | None:
    """Digit keys ``1``-``9`` click the n-th gap; returns a 0-based index."""
    if action and len(action) == 1 and action in "123456789":
        return int(action) - 1
    return None


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Read a single keypress and return a normalised action string.

    Blocks until a key is pressed.

    Possible return values:
        "up", "down", "left", "right"  — tile movement
        "cycle"                        — space / tab (next gap)
        "undo", "redo"                 — u / y
        "shuffle"                      — x
        "give_up"                      — g
        "randomize_gaps", "reset_gaps" — n / b
        "pause"                        — p
        "quit"                         — q / Ctrl-C / Escape
        "restart"                      — r
        "help"                         — h / ?
        "enter"                        — Enter / Return
        "<char>"                       — unmapped printable char (digits click gaps)
        ""                             — unrecognised key
    """
    ch = _getch()

    # Arrow keys (Unix escape sequences: ESC [ A/B/C/D)
    if ch == "\x1b":
        ch2 = _getch()
        if ch2 == "[":
            ch3 = _getch()
            return _ARROW_MAP.get(ch3, "")
        return "quit"  # bare Escape

    return _resolve(ch)


def get_key_timeout(timeout: float) -> str | None:
    """Read a single keypress with a timeout.

    Returns the normalised action string (same as ``get_key``) or
    ``None`` if no key was pressed within *timeout* seconds.

    Uses ``os.read`` (unbuffered) so that ``select`` accurately
    reflects pending bytes of multi-byte escape sequences.
    """
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found]
        import time as _time

        end = _time.monotonic() + timeout
        while _time.monotonic() < end:
            if msvcrt.kbhit():
                return get_key()
            _time.sleep(0.02)
        return None

    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None

        ch = os.read(fd, 1).decode("utf-8", errors="ignore")

        # Arrow keys: ESC [ A/B/C/D
        if ch == "\x1b":
            r2, _, _ = select.select([fd], [], [], 0.1)
            if r2:
                ch2 = os.read(fd, 1).decode("utf-8", errors="ignore")
                if ch2 == "[":
                    r3, _, _ = select.select([fd], [], [], 0.1)
                    if r3:
                        ch3 = os.read(fd, 1).decode("utf-8", errors="ignore")
                        return _ARROW_MAP.get(ch3, "")
                    return ""
                return "quit"
            return "quit"  # bare Escape

        return _resolve(ch)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
